#!/usr/bin/env python3
"""FastAPI server runner."""

import uvicorn
import structlog

from archimedes.api.app import create_app
from archimedes.config.loader import load_config
from archimedes.logging.setup import setup_logging

logger = structlog.get_logger()


def main():
    """Run the FastAPI server."""
    config = load_config()
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        service=config.service_name,
        env=config.env_label,
    )
    app = create_app(config)

    logger.info(
        "Starting FastAPI server",
        host=config.server.host,
        port=config.server.port,
        env=config.env_label,
        backend=config.persistence.backend,
    )

    try:
        uvicorn.run(
            app,
            host=config.server.host,
            port=config.server.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()

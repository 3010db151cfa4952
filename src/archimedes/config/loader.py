"""Config loader — reads YAML, applies ARCHIMEDES_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from archimedes.config.schema import AppConfig

# env var -> (section, key); section None means top level
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "ARCHIMEDES_DATABASE_URL": ("database", "url"),
    "ARCHIMEDES_PERSISTENCE": ("persistence", "backend"),
    "ARCHIMEDES_ENVIRONMENT": (None, "environment"),
    "ARCHIMEDES_APP_ENV": (None, "app_env"),
    "ARCHIMEDES_LOG_LEVEL": ("logging", "level"),
    "ARCHIMEDES_LOG_FORMAT": ("logging", "format"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None, ``ARCHIMEDES_CONFIG`` is consulted. A missing file
    yields defaults.

    Environment variable overrides:
        ARCHIMEDES_DATABASE_URL   -> database.url
        ARCHIMEDES_PERSISTENCE    -> persistence.backend
        ARCHIMEDES_ENVIRONMENT    -> environment
        ARCHIMEDES_APP_ENV        -> app_env
        ARCHIMEDES_LOG_LEVEL      -> logging.level
        ARCHIMEDES_LOG_FORMAT     -> logging.format

    Raises ``pydantic.ValidationError`` on invalid values so a bad
    deployment fails at startup.
    """
    if path is None:
        path = os.environ.get("ARCHIMEDES_CONFIG")

    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if not value:
            continue
        if section is None:
            data[key] = value
        else:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)

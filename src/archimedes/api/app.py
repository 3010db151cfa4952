"""FastAPI application for the Archimedes market and watchlist API.

No app is built at import time. Serve with ``archimedes-api`` or
``uvicorn --factory archimedes.api.app:create_app``.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Annotated, Any, Literal, Union

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, RootModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from archimedes import __version__
from archimedes.api.middleware import RequestContextMiddleware
from archimedes.api.response import error, ok
from archimedes.config.loader import load_config
from archimedes.config.schema import AppConfig
from archimedes.errors import ArchimedesError
from archimedes.markets.data import utc_now_iso
from archimedes.markets.service import MarketService
from archimedes.models.watchlist import (
    AddMarketInput,
    AddTokenInput,
    CreateWatchlistInput,
    RemoveItemInput,
    UpdateWatchlistInput,
    Watchlist,
)
from archimedes.watchlists.cache import PriceCache
from archimedes.watchlists.enrichment import WatchlistEnricher
from archimedes.watchlists.repository import WatchlistRepository, build_repository

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════
# PATCH /api/watchlists/{id} actions
# ═══════════════════════════════════════════════════════════════


class UpdateMetadataAction(BaseModel):
    action: Literal["update-metadata"]
    data: UpdateWatchlistInput


class AddTokenAction(BaseModel):
    action: Literal["add-token"]
    data: AddTokenInput


class AddMarketAction(BaseModel):
    action: Literal["add-market"]
    data: AddMarketInput


class RemoveItemAction(BaseModel):
    action: Literal["remove-item"]
    data: RemoveItemInput


PatchAction = Annotated[
    Union[UpdateMetadataAction, AddTokenAction, AddMarketAction, RemoveItemAction],
    Field(discriminator="action"),
]


class PatchWatchlistRequest(RootModel[PatchAction]):
    """Body of PATCH /api/watchlists/{id}, discriminated on ``action``."""


# ═══════════════════════════════════════════════════════════════
# Dependencies
# ═══════════════════════════════════════════════════════════════


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_market_service(request: Request) -> MarketService:
    return request.app.state.market_service


def get_repository(request: Request) -> WatchlistRepository:
    return request.app.state.repository


def get_enricher(request: Request) -> WatchlistEnricher:
    return request.app.state.enricher


router = APIRouter(prefix="/api")


# ═══════════════════════════════════════════════════════════════
# System
# ═══════════════════════════════════════════════════════════════


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return ok({"status": "ok", "timestamp": utc_now_iso()})


@router.get("/system/info")
async def system_info(config: AppConfig = Depends(get_config)):
    return ok({"service": config.service_name, "env": config.env_label, "ts": utc_now_iso()})


# ═══════════════════════════════════════════════════════════════
# Markets & tokens
# ═══════════════════════════════════════════════════════════════


@router.get("/markets")
async def list_markets(markets: MarketService = Depends(get_market_service)):
    """List all markets joined with their base and quote tokens."""
    return ok({"markets": [m.to_api() for m in markets.list_markets()]})


@router.get("/markets/{market_id}")
async def get_market(market_id: str, markets: MarketService = Depends(get_market_service)):
    """One market plus its latest price feed."""
    market = markets.get_market_by_id(market_id)
    if market is None:
        return error("Market not found", 404)

    feed = markets.get_latest_price_feed_for_market(market_id)
    return ok({
        "market": market.to_api(),
        "latestPriceFeed": feed.to_api() if feed is not None else None,
    })


@router.get("/tokens")
async def list_tokens(markets: MarketService = Depends(get_market_service)):
    return ok({"tokens": [t.to_api() for t in markets.list_tokens()]})


# ═══════════════════════════════════════════════════════════════
# Watchlists
# ═══════════════════════════════════════════════════════════════


@router.get("/watchlists")
async def list_watchlists(
    repository: WatchlistRepository = Depends(get_repository),
    enricher: WatchlistEnricher = Depends(get_enricher),
):
    """List all watchlists with enriched items."""
    watchlists = enricher.enrich_watchlists(await repository.list_watchlists())
    return ok({"watchlists": [wl.to_api() for wl in watchlists]})


@router.post("/watchlists")
async def create_watchlist(
    req: CreateWatchlistInput,
    repository: WatchlistRepository = Depends(get_repository),
):
    """Create an empty watchlist."""
    watchlist = await repository.create_watchlist(req)
    logger.info("watchlist_created", watchlist_id=watchlist.id)
    return ok({"watchlist": watchlist.to_api()}, status_code=201)


@router.get("/watchlists/{watchlist_id}")
async def get_watchlist(
    watchlist_id: str,
    repository: WatchlistRepository = Depends(get_repository),
    enricher: WatchlistEnricher = Depends(get_enricher),
):
    watchlist = await repository.get_watchlist_by_id(watchlist_id)
    if watchlist is None:
        return error("Watchlist not found", 404)
    return ok({"watchlist": enricher.enrich_watchlist(watchlist).to_api()})


@router.patch("/watchlists/{watchlist_id}")
async def patch_watchlist(
    watchlist_id: str,
    req: PatchWatchlistRequest,
    repository: WatchlistRepository = Depends(get_repository),
):
    """Update metadata, or add/remove a single item."""
    watchlist = await _apply_patch(repository, watchlist_id, req.root)
    if watchlist is None:
        return error("Watchlist not found", 404)

    logger.info("watchlist_patched", watchlist_id=watchlist_id, action=req.root.action)
    return ok({"watchlist": watchlist.to_api()})


@router.delete("/watchlists/{watchlist_id}")
async def delete_watchlist(
    watchlist_id: str,
    repository: WatchlistRepository = Depends(get_repository),
):
    await repository.delete_watchlist(watchlist_id)
    logger.info("watchlist_deleted", watchlist_id=watchlist_id)
    return ok({"success": True})


async def _apply_patch(
    repository: WatchlistRepository,
    watchlist_id: str,
    action: PatchAction,
) -> Watchlist | None:
    if isinstance(action, UpdateMetadataAction):
        return await repository.update_watchlist(watchlist_id, action.data)
    if isinstance(action, AddTokenAction):
        return await repository.add_token_to_watchlist(watchlist_id, action.data.token_id)
    if isinstance(action, AddMarketAction):
        return await repository.add_market_to_watchlist(watchlist_id, action.data.market_id)
    return await repository.remove_item_from_watchlist(watchlist_id, action.data.item_id)


# ═══════════════════════════════════════════════════════════════
# Error envelopes
# ═══════════════════════════════════════════════════════════════


def _field_errors(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Collapse pydantic error locations to ``{field: [messages]}``."""
    fields: dict[str, list[str]] = defaultdict(list)
    for err in errors:
        err_type = err.get("type", "")
        if err_type.startswith("union_tag"):
            field = "action"
        elif err_type == "json_invalid":
            field = "body"
        else:
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            field = loc[-1] if loc else "body"
        fields[field].append(err.get("msg", "Invalid value"))
    return dict(fields)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    return error("Invalid input", 400, errors=_field_errors(exc.errors()))


async def _archimedes_error_handler(request: Request, exc: ArchimedesError):
    if exc.status_code >= 500:
        logger.error("request_error", error=str(exc), path=request.url.path)
    return error(str(exc), exc.status_code)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return error(str(exc.detail), exc.status_code)


# ═══════════════════════════════════════════════════════════════
# Application factory
# ═══════════════════════════════════════════════════════════════


def create_app(
    config: AppConfig | None = None,
    repository: WatchlistRepository | None = None,
    market_service: MarketService | None = None,
) -> FastAPI:
    """Build the API with its services wired onto ``app.state``.

    The market catalog is validated here, so a market pointing at an
    unknown token stops the process before it serves traffic. Without a
    *config*, one is loaded from ``ARCHIMEDES_CONFIG`` and the environment.
    """
    config = config or load_config()
    market_service = market_service or MarketService()
    market_service.validate()
    if repository is None:
        repository = build_repository(config)

    app = FastAPI(
        title="Archimedes API",
        description="Crypto markets, tokens and watchlists",
        version=__version__,
    )
    app.state.config = config
    app.state.market_service = market_service
    app.state.repository = repository
    app.state.enricher = WatchlistEnricher(
        market_service,
        PriceCache(ttl_seconds=config.cache.price_ttl_seconds),
    )

    # CORS middleware - adjust origins in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(ArchimedesError, _archimedes_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    app.include_router(router)
    return app


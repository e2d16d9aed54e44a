"""ticketStub FastAPI application entry point.

Wires together the listing provider, services, the ticket session and
routes via dependency injection.  Loads configuration from ``.env`` and
``config/config.yaml`` and configures structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import APP_VERSION
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.models.ticket import default_ticket
from src.providers.listing.setlistfm_provider import SetlistFmProvider
from src.services.concert_details import ConcertDetailService
from src.services.concert_search import ConcertSearchService
from src.services.ticket_exporter import TicketExporter
from src.services.ticket_renderer import TicketRenderer
from src.services.ticket_session import TicketSession
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Endpoint, timeout and export geometry come from the merged ``listing``
    and ``export`` sections of *app_config* (see :func:`load_config`); only
    the credential is read from *app_settings*.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    listing_config = app_config["listing"]
    export_config = app_config["export"]

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=listing_config["timeout"])

    # -- Listing provider (credential passed explicitly, never looked up later) --
    listing_provider = SetlistFmProvider(
        http_client=http_client,
        api_key=app_settings.setlist_fm_key,
        base_url=listing_config["base_url"],
    )

    # -- Services --
    search_service = ConcertSearchService(provider=listing_provider)
    detail_service = ConcertDetailService(provider=listing_provider)
    renderer = TicketRenderer(
        width_mm=export_config["ticket_width_mm"],
        height_mm=export_config["ticket_height_mm"],
    )
    exporter = TicketExporter(renderer=renderer, dpi=export_config["dpi"])

    # -- The single ticket being designed --
    ticket_session = TicketSession(
        ticket=default_ticket(app_config.get("ticket_defaults")),
        detail_service=detail_service,
        exporter=exporter,
    )

    provider_registry: dict[str, Any] = {
        "listing": listing_provider.is_available(),
        "listing_provider": listing_provider.get_provider_name(),
        "export_dpi": exporter.dpi,
    }

    return {
        "http_client": http_client,
        "listing_provider": listing_provider,
        "search_service": search_service,
        "detail_service": detail_service,
        "renderer": renderer,
        "exporter": exporter,
        "ticket_session": ticket_session,
        "preview_config": dict(app_config.get("preview") or {}),
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=APP_VERSION,
        environment=settings.app_env,
        listing_available=components["provider_registry"]["listing"],
        configured_providers=settings.get_available_providers(),
        export_dpi=components["exporter"].dpi,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="ticketStub API",
        version=APP_VERSION,
        description=(
            "Design a souvenir concert ticket: look up the show on setlist.fm, "
            "fill in the details, and export a print-ready PNG with correct "
            "DPI metadata."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )

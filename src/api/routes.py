"""FastAPI API routes for ticketStub.

Provides REST endpoints for concert search, concert details, ticket reads
and updates, search selection, live preview, DPI-correct export, the
data-URI density rewrite helper, and health checks.  Service dependencies
are resolved from ``app.state`` via FastAPI's ``Depends`` using the
``Annotated`` pattern.

# ─── API ROUTE MAP (Junior Developer Guide) ───────────────────────────
#
# Endpoint                       Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/health                 GET     Health check + provider status
# /api/v1/concerts/search        GET     Search setlist.fm for candidate shows
# /api/v1/concerts/details       GET     Supporting acts for a venue/date
# /api/v1/ticket                 GET     Current ticket record
# /api/v1/ticket                 PATCH   Field-level updates (partial body)
# /api/v1/ticket/select          POST    Apply a search result + detail lookup
# /api/v1/ticket/preview         GET     Scaled PNG preview (no DPI stamp)
# /api/v1/ticket/export          POST    Print-ready PNG download
# /api/v1/images/dpi             POST    Rewrite density of a data-URI image
#
# DEPENDENCY INJECTION PATTERN:
# Each route function declares its dependencies as type-annotated params.
# FastAPI resolves these via Depends() which calls helper functions that
# read from app.state (populated at startup in main.py's _build_all).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Annotated, Any
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse

from src.api.schemas import (
    ConcertDetailsResponse,
    ConcertSearchResponse,
    DpiMetadataRequest,
    DpiMetadataResponse,
    ErrorResponse,
    HealthResponse,
    SelectConcertResponse,
    TicketResponse,
    TicketUpdateRequest,
)
from src.models.concert import ConcertSearchQuery, ConcertSearchResult
from src.models.export import ExportStatus
from src.services.concert_details import ConcertDetailService
from src.services.concert_search import ConcertSearchService
from src.services.ticket_renderer import TicketRenderer, preview_scale
from src.services.ticket_session import TicketSession
from src.utils.errors import ImageMetadataError, TicketFieldError
from src.utils.image_metadata import add_dpi_metadata
from src.utils.logging import get_logger
from src.utils.text_normalizer import ascii_filename

_logger: structlog.BoundLogger = get_logger(__name__)

APP_VERSION = "0.1.0"

# All routes in this file are prefixed with /api/v1.
# Example: @router.get("/ticket") → GET /api/v1/ticket
router = APIRouter(prefix="/api/v1")

# Fallback preview tuning when config.yaml has no "preview" section.
_DEFAULT_PREVIEW: dict[str, float] = {
    "ticket_width_mm": 148.5,
    "padding_px": 64,
    "max_scale": 1.5,
}


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------
# JUNIOR DEV NOTE -- FastAPI Dependency Injection
# -----------------------------------------------
# FastAPI uses Depends() to inject services into route handlers.
# The pattern:
#   1. Write a helper function that extracts a service from app.state
#   2. Create an Annotated type alias: XDep = Annotated[XType, Depends(helper)]
#   3. Declare XDep as a route param → FastAPI calls helper() automatically
#
# Tests build a bare FastAPI() app, include this router, and assign mocks
# to app.state; no lifespan is needed.
# ---------------------------------------------------------------------------


def _get_search_service(request: Request) -> ConcertSearchService:
    """Return the concert search service from application state."""
    return request.app.state.search_service


def _get_detail_service(request: Request) -> ConcertDetailService:
    """Return the concert detail service from application state."""
    return request.app.state.detail_service


def _get_session(request: Request) -> TicketSession:
    """Return the process-wide ticket session from application state."""
    return request.app.state.ticket_session


def _get_renderer(request: Request) -> TicketRenderer:
    """Return the ticket renderer from application state."""
    return request.app.state.renderer


SearchServiceDep = Annotated[ConcertSearchService, Depends(_get_search_service)]
DetailServiceDep = Annotated[ConcertDetailService, Depends(_get_detail_service)]
SessionDep = Annotated[TicketSession, Depends(_get_session)]
RendererDep = Annotated[TicketRenderer, Depends(_get_renderer)]


def _ticket_response(session: TicketSession) -> TicketResponse:
    ticket = session.ticket
    return TicketResponse(
        ticket=ticket,
        display_date=ticket.display_date(),
        display_time=ticket.display_time(),
        exporting=session.exporting,
    )


def _content_disposition(filename: str) -> str:
    """Attachment header naming *filename*.

    Header values travel as latin-1, so the plain ``filename`` parameter
    carries an ASCII form and ``filename*`` (RFC 6266 / RFC 5987) carries
    the UTF-8 name when the two differ.
    """
    fallback = ascii_filename(filename)
    value = f'attachment; filename="{fallback}"'
    if fallback != filename:
        value += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return value


# ---------------------------------------------------------------------------
# Concert listing endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/concerts/search",
    response_model=ConcertSearchResponse,
    summary="Search setlist listings for candidate concerts",
)
async def search_concerts(
    search_service: SearchServiceDep,
    artist_name: str = Query(default=""),
    city_name: str = Query(default=""),
    event_date: date | None = Query(default=None),
) -> ConcertSearchResponse:
    """Search for concerts matching any combination of artist, city and date.

    All-blank queries return ``status="empty"`` without contacting the
    listing service.
    """
    query = ConcertSearchQuery(artist_name=artist_name, city_name=city_name, event_date=event_date)
    outcome = await search_service.search(query)
    return ConcertSearchResponse(status=outcome.status, results=outcome.results, reason=outcome.reason)


@router.get(
    "/concerts/details",
    response_model=ConcertDetailsResponse,
    summary="Resolve supporting acts for a venue and date",
)
async def concert_details(
    detail_service: DetailServiceDep,
    venue_id: str = Query(..., min_length=1),
    date_str: str = Query(..., min_length=1, description="DD-MM-YYYY, as returned by search"),
    headliner_id: str = Query(default=""),
) -> ConcertDetailsResponse:
    """Return the non-headliner acts recorded at *venue_id* on *date_str*."""
    outcome = await detail_service.lookup(venue_id=venue_id, date_str=date_str, headliner_id=headliner_id)
    return ConcertDetailsResponse(status=outcome.status, openers=outcome.openers, reason=outcome.reason)


# ---------------------------------------------------------------------------
# Ticket record endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/ticket",
    response_model=TicketResponse,
    summary="Get the current ticket",
)
async def get_ticket(session: SessionDep) -> TicketResponse:
    """Return the ticket record and its derived display strings."""
    return _ticket_response(session)


@router.patch(
    "/ticket",
    response_model=TicketResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Update ticket fields",
)
async def update_ticket(body: TicketUpdateRequest, session: SessionDep) -> TicketResponse:
    """Apply the fields present in the body; omitted fields are untouched.

    Toggling ``display_placement`` never clears section/row/seat, so turning
    it back on restores the previous values.
    """
    try:
        session.update_fields(body.field_updates())
        if body.date_text is not None:
            session.set_date_text(body.date_text)
    except TicketFieldError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    return _ticket_response(session)


@router.post(
    "/ticket/select",
    response_model=SelectConcertResponse,
    summary="Populate the ticket from a search result",
)
async def select_concert(concert: ConcertSearchResult, session: SessionDep) -> SelectConcertResponse:
    """Copy the chosen result into the ticket, then look up its openers."""
    selection = await session.apply_concert(concert)
    return SelectConcertResponse(
        ticket=selection.ticket,
        details_status=selection.details.status,
        openers=selection.details.openers,
        details_reason=selection.details.reason,
    )


# ---------------------------------------------------------------------------
# Rendering endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/ticket/preview",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
    summary="Render a scaled preview of the ticket",
)
async def preview_ticket(
    request: Request,
    session: SessionDep,
    renderer: RendererDep,
    container_width: float = Query(default=1280, gt=0),
) -> Response:
    """Render the ticket fitted to a container of *container_width* CSS pixels."""
    tuning = {**_DEFAULT_PREVIEW, **getattr(request.app.state, "preview_config", {})}
    scale = preview_scale(
        container_width,
        ticket_width_mm=tuning["ticket_width_mm"],
        padding_px=tuning["padding_px"],
        max_scale=tuning["max_scale"],
    )
    width_px = max(1, round(renderer.css_width_px * scale))
    png = await asyncio.to_thread(renderer.render_png, session.ticket.model_copy(), width_px)
    return Response(
        content=png,
        media_type="image/png",
        headers={"X-Preview-Scale": f"{scale:.4f}"},
    )


@router.post(
    "/ticket/export",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}},
        204: {"description": "Nothing to capture"},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Export a print-ready PNG of the ticket",
)
async def export_ticket(
    session: SessionDep,
    measured_width: float | None = Query(default=None, allow_inf_nan=False),
    dpi: int | None = Query(default=None, gt=0, le=2400),
) -> Response:
    """Render at a DPI-correct pixel ratio and return the stamped PNG.

    ``measured_width`` is the ticket element's on-screen width in CSS pixels;
    a value of zero or less means there is nothing to capture.  ``nan`` and
    ``inf`` are rejected with a 422.
    """
    outcome = await session.export(measured_width_px=measured_width, dpi=dpi)

    if outcome.status == ExportStatus.BUSY:
        body = ErrorResponse(error="ExportBusy", detail=outcome.reason)
        return JSONResponse(status_code=409, content=body.model_dump())
    if outcome.status == ExportStatus.SKIPPED:
        return Response(status_code=204)
    if outcome.status == ExportStatus.FAILED or outcome.export is None:
        body = ErrorResponse(error="ExportFailed", detail=outcome.reason)
        return JSONResponse(status_code=500, content=body.model_dump())

    export = outcome.export
    return Response(
        content=export.content,
        media_type="image/png",
        headers={
            "Content-Disposition": _content_disposition(export.filename),
            "X-Ticket-Dpi": str(export.dpi),
            "X-Pixel-Ratio": f"{export.pixel_ratio:.4f}",
        },
    )


@router.post(
    "/images/dpi",
    response_model=DpiMetadataResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Rewrite the density metadata of a data-URI image",
)
async def rewrite_image_dpi(body: DpiMetadataRequest) -> DpiMetadataResponse:
    """Return the same image re-encoded with ``dpi`` written into its header."""
    try:
        image_uri = await asyncio.to_thread(add_dpi_metadata, body.image_uri, body.dpi)
    except ImageMetadataError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    return DpiMetadataResponse(image_uri=image_uri, dpi=body.dpi)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability.

    The ticket editor and exporter work offline, so a missing listing
    credential degrades the app rather than marking it unhealthy.
    """
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    status = "healthy" if providers.get("listing", False) else "degraded"
    return HealthResponse(status=status, version=APP_VERSION, providers=providers)

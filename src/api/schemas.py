"""Pydantic request/response schemas for the ticketStub API.

Defines the public contract for all REST endpoints -- concert search and
details, ticket reads and updates, search selection, export, the DPI
rewrite helper, and health.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# FastAPI uses these models for:
#   1. **Validation** -- invalid bodies/queries get a 422 with details.
#   2. **Serialization** -- responses are dumped through response_model.
#   3. **Documentation** -- the OpenAPI docs at /docs are generated here.
#
# Convention: request schemas end with "Request", response schemas end
# with "Response".  Domain models (TicketData, ConcertSearchResult) are
# reused directly where the wire shape equals the domain shape.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.concert import ConcertSearchResult, LookupStatus
from src.models.ticket import HourSuffix, PlaceType, TicketData


class ConcertSearchResponse(BaseModel):
    """Candidates for a concert search, with the outcome status."""

    status: LookupStatus
    results: list[ConcertSearchResult] = Field(default_factory=list)
    reason: str | None = None


class ConcertDetailsResponse(BaseModel):
    """Supporting acts for one venue/date, with the outcome status."""

    status: LookupStatus
    openers: list[str] = Field(default_factory=list)
    reason: str | None = None


class TicketUpdateRequest(BaseModel):
    """Partial ticket update -- only the fields present are applied.

    ``date_text`` accepts the form's ``DD/MM/YYYY`` echo; it is parsed and
    only the parsed date is stored.
    """

    model_config = ConfigDict(extra="forbid")

    artist: str | None = None
    date: dt.date | None = None
    date_text: str | None = None
    venue: str | None = None
    city: str | None = None
    supporting_artists: str | None = None
    starting_hour: str | None = None
    starting_hour_suffix: HourSuffix | None = None
    place_type: PlaceType | None = None
    section: str | None = None
    row: str | None = None
    seat_number: str | None = None
    ticket_type: str | None = None
    price: str | None = None
    display_placement: bool | None = None
    url: str | None = None

    def field_updates(self) -> dict[str, Any]:
        """Return the explicitly-set ticket fields, excluding ``date_text``."""
        updates = self.model_dump(exclude_unset=True)
        updates.pop("date_text", None)
        return updates


class TicketResponse(BaseModel):
    """The current ticket plus derived display strings."""

    ticket: TicketData
    display_date: str
    display_time: str
    exporting: bool = False


class SelectConcertResponse(BaseModel):
    """Ticket after applying a search result, and the detail lookup outcome."""

    ticket: TicketData
    details_status: LookupStatus
    openers: list[str] = Field(default_factory=list)
    details_reason: str | None = None


class DpiMetadataRequest(BaseModel):
    """A data-URI (or bare base64) image whose density should be rewritten."""

    image_uri: str = Field(..., min_length=1)
    dpi: int = Field(default=300, gt=0, le=2400)


class DpiMetadataResponse(BaseModel):
    """The re-encoded image as a data URI."""

    image_uri: str
    dpi: int


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None

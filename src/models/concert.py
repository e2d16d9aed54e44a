"""Concert search and detail models for the setlist listing integration.

Defines Pydantic v2 models for search queries, normalized search results,
and the typed outcomes returned by the search gateway and detail lookup.

Flow:
    1. The user submits artist/city/date          → ConcertSearchQuery
    2. The gateway normalizes upstream setlists   → ConcertSearchResult (0..15)
    3. The user selects one; the detail lookup    → DetailOutcome (openers)
       resolves the rest of the bill

Outcomes never raise: every failure is reported through ``status`` and
``reason`` so the API layer can decide whether to show a notice.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LookupStatus(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Result class of a listing call.

    ``EMPTY`` means "the upstream had nothing" (blank query, 404, zero rows).
    ``FAILED`` means "we could not ask or could not understand the answer"
    (missing credential, HTTP error, network error, malformed payload).
    """

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


# Reason string used whenever a listing component has no credential.
NOT_CONFIGURED = "not_configured"


# ---------------------------------------------------------------------------
# ConcertSearchQuery -- free-text inputs of the search form.
# ---------------------------------------------------------------------------
class ConcertSearchQuery(BaseModel):
    """User-supplied search criteria; any subset may be blank."""

    model_config = ConfigDict(frozen=True)

    artist_name: str | None = None
    city_name: str | None = None
    # A calendar date, a datetime, or an ISO-8601 string from a date picker.
    event_date: date | datetime | str | None = None

    def is_blank(self) -> bool:
        """Return True when every criterion is missing or whitespace."""
        return not any(
            _clean(value)
            for value in (self.artist_name, self.city_name, self._event_date_text())
        )

    def _event_date_text(self) -> str | None:
        if self.event_date is None or isinstance(self.event_date, str):
            return self.event_date
        return self.event_date.isoformat()


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


# ---------------------------------------------------------------------------
# ConcertSearchResult -- one candidate event produced by the gateway.
# ---------------------------------------------------------------------------
class ConcertSearchResult(BaseModel):
    """A candidate concert deduplicated from upstream setlist rows.

    ``date_str`` keeps the upstream ``DD-MM-YYYY`` string next to the parsed
    ``date`` because the detail lookup must echo it back verbatim.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    artist: str
    # MusicBrainz identifier of the performing artist (upstream ``artist.mbid``).
    artist_id: str
    # Anchored at 12:00 UTC -- see src.utils.dates.parse_listing_date.
    date: datetime
    venue: str
    venue_id: str
    date_str: str
    city: str = ""
    # Always empty at search time; openers come from the detail lookup.
    openers: list[str] = Field(default_factory=list)
    url: str | None = None


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------
class SearchOutcome(BaseModel):
    """Typed result of a concert search."""

    model_config = ConfigDict(frozen=True)

    status: LookupStatus
    results: list[ConcertSearchResult] = Field(default_factory=list)
    reason: str | None = None


class DetailOutcome(BaseModel):
    """Typed result of a concert detail lookup.

    ``status == OK`` with ``openers == []`` means "known bill, no support";
    ``status == EMPTY`` means the upstream had no data for the venue/date.
    """

    model_config = ConfigDict(frozen=True)

    status: LookupStatus
    openers: list[str] = Field(default_factory=list)
    reason: str | None = None

"""Shared pytest fixtures for the ticketStub test suite."""

from __future__ import annotations

import io
from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from src.interfaces.listing_provider import IListingProvider
from src.models.ticket import TicketData, default_ticket

# ---------------------------------------------------------------------------
# Paths and config
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal mock configuration for testing."""
    return {
        "ticket_defaults": {
            "artist": "Artist Name",
            "venue": "Venue",
            "city": "City",
            "supporting_artists": "Supporting Artist",
        },
        "preview": {
            "ticket_width_mm": 148.5,
            "padding_px": 64,
            "max_scale": 1.5,
        },
    }


# ---------------------------------------------------------------------------
# setlist.fm row builders
# ---------------------------------------------------------------------------


def make_setlist_row(
    setlist_id: str = "63de4613",
    artist: str = "Harry Styles",
    mbid: str = "7eb1ce54-a355-41f9-8d68-e018b096d427",
    event_date: str | None = "05-03-2024",
    venue_id: str | None = "6bd6ca6e",
    venue_name: str = "Madison Square Garden",
    city: str | None = "New York",
) -> dict[str, Any]:
    """Build one row in the shape of setlist.fm's ``setlist`` array."""
    row: dict[str, Any] = {
        "id": setlist_id,
        "artist": {"mbid": mbid, "name": artist},
        "url": f"https://www.setlist.fm/setlist/{setlist_id}.html",
    }
    if event_date is not None:
        row["eventDate"] = event_date
    if venue_id is not None:
        venue: dict[str, Any] = {"id": venue_id, "name": venue_name}
        if city is not None:
            venue["city"] = {"name": city, "country": {"code": "US"}}
        row["venue"] = venue
    return row


@pytest.fixture
def setlist_row() -> dict[str, Any]:
    """A single well-formed setlist.fm row."""
    return make_setlist_row()


# ---------------------------------------------------------------------------
# Mock provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_listing_provider() -> IListingProvider:
    """Mock IListingProvider returning one Harry Styles row.

    Override with mock_listing_provider.search_setlists.return_value = [...]
    or .side_effect = ListingProviderError(...) for specific tests.
    """
    mock = MagicMock(spec=IListingProvider)
    mock.get_provider_name.return_value = "mock-setlistfm"
    mock.is_available.return_value = True
    mock.search_setlists = AsyncMock(return_value=[make_setlist_row()])
    return mock


@pytest.fixture
def unconfigured_listing_provider() -> IListingProvider:
    """Mock IListingProvider without credentials."""
    mock = MagicMock(spec=IListingProvider)
    mock.get_provider_name.return_value = "mock-setlistfm"
    mock.is_available.return_value = False
    mock.search_setlists = AsyncMock(return_value=[])
    return mock


# ---------------------------------------------------------------------------
# Ticket fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ticket() -> TicketData:
    """The placeholder ticket pinned to a fixed date."""
    return default_ticket(today=date(2024, 3, 5))


@pytest.fixture
def seated_ticket() -> TicketData:
    """A filled-in seated ticket."""
    return TicketData(
        artist="Harry Styles",
        date=date(2024, 3, 5),
        venue="Madison Square Garden",
        city="New York",
        supporting_artists="Wet Leg",
        starting_hour="07:30",
        place_type="seat",
        section="112",
        row="C",
        seat_number="14",
        ticket_type="Reserved",
        price="$120.00",
    )


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny PNG without density metadata."""
    buf = io.BytesIO()
    Image.new("RGB", (20, 10), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A tiny JPEG, which density stamping rejects."""
    buf = io.BytesIO()
    Image.new("RGB", (20, 10), (30, 30, 200)).save(buf, format="JPEG", dpi=(72, 72))
    return buf.getvalue()


@pytest.fixture
def make_row():
    """Factory fixture for setlist.fm rows; see :func:`make_setlist_row`."""
    return make_setlist_row

"""Ticket record model -- the single source of truth for form and preview.

Unlike the frozen listing models, :class:`TicketData` is mutable: the
session owns exactly one instance and changes it field by field through
:meth:`TicketData.update_field`.  ``validate_assignment=True`` makes every
update go through the same validation as construction, so a PATCH with a
bad ``place_type`` fails instead of corrupting the record.

Rendering rules (shared by preview and export) live here as small view
helpers so the renderer only draws what these helpers return:

    display_placement = False  →  placement_view() is None (nothing drawn);
                                  seat values stay stored for later
    place_type = floor         →  "Floor" only; section/row/seat ignored
    place_type = seat          →  "Seated" plus each non-empty seat part
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.utils.dates import display_date as format_display_date
from src.utils.errors import TicketFieldError

ARTIST_FALLBACK = "ARTIST NAME"
STUB_ARTIST_FALLBACK = "ARTIST"
DATE_FALLBACK = "DATE TBD"


class PlaceType(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Where the ticket holder stands or sits."""

    SEAT = "seat"
    FLOOR = "floor"


class HourSuffix(str, Enum):  # noqa: UP042
    """How the starting hour is qualified on the ticket."""

    AM = "AM"
    PM = "PM"
    H24 = "24h"


@dataclass(frozen=True)
class PlacementView:
    """What the stub's placement block shows.

    ``parts`` holds ``(label, value)`` pairs for the seat grid, already
    filtered to non-empty values.
    """

    label: str
    parts: tuple[tuple[str, str], ...] = ()


class TicketData(BaseModel):
    """One concert ticket as the user is designing it."""

    model_config = ConfigDict(validate_assignment=True, use_enum_values=False)

    artist: str = ""
    date: dt.date | None = None
    venue: str = ""
    city: str = ""
    # Free text, comma-joined when filled from the detail lookup.
    supporting_artists: str = ""
    starting_hour: str = ""
    starting_hour_suffix: HourSuffix = HourSuffix.PM
    place_type: PlaceType = PlaceType.FLOOR
    section: str = ""
    row: str = ""
    seat_number: str = ""
    # Free text on purpose ("$45.00", "Comp", "¥8,800"); never parsed.
    ticket_type: str = ""
    price: str = ""
    display_placement: bool = True
    # Link back to the setlist listing; only set when populated via search.
    url: str | None = Field(default=None)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update_field(self, field: str, value: Any) -> None:
        """Set one field, validating it like construction would.

        Raises:
            TicketFieldError: If *field* is unknown or *value* is invalid.
        """
        if field not in type(self).model_fields:
            raise TicketFieldError(f"Unknown ticket field: {field}")
        try:
            setattr(self, field, value)
        except ValidationError as exc:
            first = exc.errors()[0]
            raise TicketFieldError(f"Invalid value for {field}: {first['msg']}") from exc

    # ------------------------------------------------------------------
    # View helpers
    # ------------------------------------------------------------------

    def display_artist(self) -> str:
        return self.artist or ARTIST_FALLBACK

    def display_stub_artist(self) -> str:
        return self.artist or STUB_ARTIST_FALLBACK

    def display_date(self) -> str:
        return format_display_date(self.date) or DATE_FALLBACK

    def display_time(self) -> str:
        """Starting hour with its suffix; ``24h`` prints no suffix."""
        if self.starting_hour_suffix == HourSuffix.H24:
            return self.starting_hour.strip()
        return f"{self.starting_hour} {self.starting_hour_suffix.value}".strip()

    def placement_view(self) -> PlacementView | None:
        """Return the placement block to draw, or None when it is hidden."""
        if not self.display_placement:
            return None
        if self.place_type == PlaceType.FLOOR:
            return PlacementView(label="Floor")
        parts = tuple(
            (label, value)
            for label, value in (
                ("Section", self.section),
                ("Row", self.row),
                ("Seat", self.seat_number),
            )
            if value
        )
        return PlacementView(label="Seated", parts=parts)


def default_ticket(overrides: dict[str, Any] | None = None, today: dt.date | None = None) -> TicketData:
    """Build the placeholder ticket shown at application start.

    *overrides* normally comes from ``config.yaml``'s ``ticket_defaults``.
    """
    values: dict[str, Any] = {
        "artist": "Artist Name",
        "date": today or dt.date.today(),
        "venue": "Venue",
        "city": "City",
        "supporting_artists": "Supporting Artist",
        "starting_hour": "08:00",
        "starting_hour_suffix": HourSuffix.PM,
        "place_type": PlaceType.FLOOR,
        "section": "",
        "row": "",
        "seat_number": "",
        "price": "$45.00",
        "ticket_type": "General Admission",
        "display_placement": True,
    }
    values.update(overrides or {})
    return TicketData(**values)

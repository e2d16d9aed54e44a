"""ticketStub domain models -- re-exports all public model classes.

The models are organized across three submodules by concern:
    - concert.py -- setlist search queries, results and lookup outcomes
    - ticket.py  -- the mutable ticket record and its rendering view helpers
    - export.py  -- the exported PNG artifact and export outcome
"""

from __future__ import annotations

from src.models.concert import (
    NOT_CONFIGURED,
    ConcertSearchQuery,
    ConcertSearchResult,
    DetailOutcome,
    LookupStatus,
    SearchOutcome,
)
from src.models.export import ExportOutcome, ExportStatus, TicketExport
from src.models.ticket import (
    HourSuffix,
    PlacementView,
    PlaceType,
    TicketData,
    default_ticket,
)

__all__ = [
    "NOT_CONFIGURED",
    "ConcertSearchQuery",
    "ConcertSearchResult",
    "DetailOutcome",
    "ExportOutcome",
    "ExportStatus",
    "HourSuffix",
    "LookupStatus",
    "PlaceType",
    "PlacementView",
    "SearchOutcome",
    "TicketData",
    "TicketExport",
    "default_ticket",
]

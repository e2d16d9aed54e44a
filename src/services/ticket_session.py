"""The running ticket session: one record, its writers, and the export guard.

There is exactly one writer (the user, serialized through the event loop)
and one :class:`TicketData` per process, so no locking is needed.  The
session is the "caller" of the listing and export components and owns
their side effects:

* :meth:`apply_concert` copies a selected search result into the ticket,
  then asks the detail lookup for the rest of the bill:

      ok, openers ["A", "B"]  →  supporting_artists = "A, B"
      ok, no openers          →  supporting_artists = ""
      empty / failed          →  supporting_artists untouched (logged)

* :meth:`export` holds a busy flag for the duration of an export so a
  second click cannot start a duplicate render.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.models.concert import ConcertSearchResult, DetailOutcome, LookupStatus
from src.models.export import ExportOutcome, ExportStatus
from src.models.ticket import TicketData
from src.services.concert_details import ConcertDetailService
from src.services.ticket_exporter import TicketExporter
from src.utils.dates import parse_form_date
from src.utils.logging import get_logger
from src.utils.text_normalizer import join_artist_names


@dataclass(frozen=True)
class SelectionResult:
    """What happened when a search result was applied to the ticket."""

    ticket: TicketData
    details: DetailOutcome


class TicketSession:
    """Owns the ticket record for the lifetime of the application."""

    def __init__(
        self,
        ticket: TicketData,
        detail_service: ConcertDetailService,
        exporter: TicketExporter,
    ) -> None:
        self._ticket = ticket
        self._details = detail_service
        self._exporter = exporter
        self._exporting = False
        self._logger = get_logger(__name__)

    @property
    def ticket(self) -> TicketData:
        return self._ticket

    @property
    def exporting(self) -> bool:
        """True while an export is running; UIs disable the export control."""
        return self._exporting

    # ------------------------------------------------------------------
    # Field-level updates
    # ------------------------------------------------------------------

    def update_field(self, field: str, value: Any) -> TicketData:
        """Set one ticket field (validated); see :meth:`TicketData.update_field`."""
        self._ticket.update_field(field, value)
        self._logger.debug("ticket_field_updated", field=field)
        return self._ticket

    def update_fields(self, values: dict[str, Any]) -> TicketData:
        """Apply several field updates in order; stops at the first invalid one."""
        for field, value in values.items():
            self.update_field(field, value)
        return self._ticket

    def set_date_text(self, text: str) -> TicketData:
        """Apply the date form's ``DD/MM/YYYY`` text.

        The parsed date is authoritative; the text itself is not stored.
        Empty text clears the date, incomplete or invalid text keeps it.
        """
        if not text.strip():
            self._ticket.update_field("date", None)
            return self._ticket
        parsed = parse_form_date(text)
        if parsed is not None:
            self._ticket.update_field("date", parsed)
        return self._ticket

    # ------------------------------------------------------------------
    # Search selection
    # ------------------------------------------------------------------

    async def apply_concert(self, concert: ConcertSearchResult) -> SelectionResult:
        """Populate the ticket from *concert* and resolve its supporting acts."""
        self.update_fields(
            {
                "artist": concert.artist,
                "venue": concert.venue,
                "city": concert.city,
                # Midday-UTC anchor → its UTC calendar day is the event day.
                "date": concert.date.date(),
                "url": concert.url,
            }
        )
        self._logger.info(
            "ticket_populated_from_search",
            setlist_id=concert.id,
            artist=concert.artist,
            venue=concert.venue,
            date=concert.date_str,
        )

        details = await self._details.lookup(
            venue_id=concert.venue_id,
            date_str=concert.date_str,
            headliner_id=concert.artist_id,
        )
        if details.status == LookupStatus.OK:
            self._ticket.update_field("supporting_artists", join_artist_names(details.openers))
        else:
            self._logger.info(
                "supporting_artists_unchanged",
                status=details.status.value,
                reason=details.reason,
            )
        return SelectionResult(ticket=self._ticket, details=details)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def export(self, measured_width_px: float | None = None, dpi: int | None = None) -> ExportOutcome:
        """Export the current ticket unless an export is already running."""
        if self._exporting:
            self._logger.warning("ticket_export_rejected_busy")
            return ExportOutcome(status=ExportStatus.BUSY, reason="An export is already in progress")

        self._exporting = True
        try:
            return await self._exporter.export(self._ticket, measured_width_px=measured_width_px, dpi=dpi)
        finally:
            self._exporting = False

"""Image export pipeline: DPI-correct rasterization plus density stamping.

Steps for one export:

    1. Resolve the element's measured on-screen width (default: the ticket's
       CSS width at 96 px/inch).  A non-positive or non-finite width means
       there is no laid-out ticket to capture → ``skipped``.
    2. ratio = (width_mm / 25.4 * dpi) / measured_width
       output width = round(measured_width * ratio)
       e.g. 200mm at 300 DPI measured at 561px → ratio ≈ 4.21 → 2362px.
    3. Render the layout at that width (Pillow, off the event loop).
    4. Stamp the density header with the target DPI and re-encode as PNG.
    5. Name the file ``ticket-<artist-slug>-<date>.png``.

Any RenderError/ImageMetadataError becomes a ``failed`` outcome; there is
no automatic retry.
"""

from __future__ import annotations

import asyncio
import math

from src.models.export import ExportOutcome, ExportStatus, TicketExport
from src.models.ticket import TicketData
from src.services.ticket_renderer import TicketRenderer, compute_pixel_ratio
from src.utils.dates import display_date
from src.utils.errors import ImageMetadataError, RenderError
from src.utils.image_metadata import stamp_dpi
from src.utils.logging import get_logger
from src.utils.text_normalizer import slugify

DEFAULT_EXPORT_DPI = 300


def export_filename(ticket: TicketData) -> str:
    """Return ``ticket-<slug(artist)>-<date>.png``.

    The date is the ticket's display date with ``/`` swapped for ``-`` so
    the name stays a single path segment (``3/5/2024`` → ``3-5-2024``).
    """
    date_part = (display_date(ticket.date) or "undated").replace("/", "-")
    artist_part = slugify(ticket.artist) or "untitled"
    return f"ticket-{artist_part}-{date_part}.png"


class TicketExporter:
    """Produces print-ready PNG exports of a ticket.

    Stateless apart from its configuration; the busy flag that prevents
    duplicate concurrent exports belongs to the caller
    (:class:`src.services.ticket_session.TicketSession`).
    """

    def __init__(self, renderer: TicketRenderer, dpi: int = DEFAULT_EXPORT_DPI) -> None:
        self._renderer = renderer
        self._dpi = dpi
        self._logger = get_logger(__name__)

    @property
    def dpi(self) -> int:
        return self._dpi

    async def export(
        self,
        ticket: TicketData,
        measured_width_px: float | None = None,
        dpi: int | None = None,
    ) -> ExportOutcome:
        """Export *ticket* at *dpi* (defaults to the configured target).

        Parameters
        ----------
        ticket:
            The record to draw.  A snapshot is taken before rendering so
            later field updates do not leak into an export in progress.
        measured_width_px:
            Live on-screen width of the ticket element.
        dpi:
            Target print density; also written into the PNG header.
        """
        target_dpi = dpi or self._dpi
        measured = self._renderer.css_width_px if measured_width_px is None else measured_width_px

        if not math.isfinite(measured) or measured <= 0:
            self._logger.info("ticket_export_skipped", measured_width_px=measured)
            return ExportOutcome(status=ExportStatus.SKIPPED, reason="No ticket element to capture")

        snapshot = ticket.model_copy()
        ratio = compute_pixel_ratio(self._renderer.width_mm, target_dpi, measured)
        width_px = round(measured * ratio)

        try:
            png = await asyncio.to_thread(self._renderer.render_png, snapshot, width_px)
            stamped = await asyncio.to_thread(stamp_dpi, png, target_dpi)
        except (RenderError, ImageMetadataError) as exc:
            self._logger.error(
                "ticket_export_failed",
                error_type=type(exc).__name__,
                error=exc.message,
                width_px=width_px,
                dpi=target_dpi,
            )
            return ExportOutcome(status=ExportStatus.FAILED, reason=exc.message)

        _, height_px = self._renderer.size_for_width(width_px)
        export = TicketExport(
            filename=export_filename(snapshot),
            content=stamped,
            dpi=target_dpi,
            pixel_ratio=ratio,
            width_px=width_px,
            height_px=height_px,
        )
        self._logger.info(
            "ticket_export_complete",
            filename=export.filename,
            width_px=width_px,
            height_px=height_px,
            pixel_ratio=round(ratio, 4),
            dpi=target_dpi,
            size_bytes=len(stamped),
        )
        return ExportOutcome(status=ExportStatus.OK, export=export)

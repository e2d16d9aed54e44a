"""Export pipeline models: the produced artifact and the typed outcome."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExportStatus(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Result class of one export attempt.

    ``SKIPPED`` -- there was nothing to rasterize (no measurable ticket).
    ``BUSY``    -- another export held the session's busy flag.
    ``FAILED``  -- rendering or the density rewrite raised.
    """

    OK = "ok"
    SKIPPED = "skipped"
    BUSY = "busy"
    FAILED = "failed"


class TicketExport(BaseModel):
    """A finished PNG ready to be offered as a download."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes = Field(repr=False)
    dpi: int
    pixel_ratio: float
    width_px: int
    height_px: int


class ExportOutcome(BaseModel):
    """Typed result of :meth:`TicketExporter.export`."""

    model_config = ConfigDict(frozen=True)

    status: ExportStatus
    export: TicketExport | None = None
    reason: str | None = None

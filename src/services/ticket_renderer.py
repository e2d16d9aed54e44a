"""Ticket layout renderer -- draws a TicketData record with Pillow.

The ticket is specified in physical units: 200mm × 56.6mm, split into a
main body (75%) and a tear-off stub (25%) by a dashed perforation.  All
coordinates below are millimetres; :class:`_Canvas` converts them to
pixels for whatever output width the caller asks for, so the same layout
serves the on-screen preview (≈756px) and the 300 DPI export (≈2362px).

Layout (mm):

    ┌───────────────────────────────────────────── top bar 2.7 ─┐
    │                ARTIST (11)                 ┆ TYPE (3.4)    │
    │           WITH SUPPORT (4)                 ┆ PRICE (4)     │
    │                                            ┆ ARTIST (5.4)  │
    │                                            ┆ DATE (3.4)    │
    │ DATE • TIME (4)          VENUE • CITY (4)  ┆ ── PLACE ──   │
    └────────────────────────────────────────────┴───────────────┘

What gets drawn is decided by TicketData's view helpers, never here.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from src.models.ticket import TicketData
from src.utils.errors import RenderError

# CSS reference density: 96 px per inch.
CSS_PX_PER_MM = 96 / 25.4
MM_PER_INCH = 25.4

DEFAULT_WIDTH_MM = 200.0
DEFAULT_HEIGHT_MM = 56.6

# Tailwind neutral palette, matching the web preview.
_NEUTRAL_900 = (23, 23, 23, 255)
_NEUTRAL_800 = (38, 38, 38, 255)
_NEUTRAL_600 = (82, 82, 82, 255)
_NEUTRAL_500 = (115, 115, 115, 255)
_NEUTRAL_300 = (212, 212, 212, 255)
_NEUTRAL_200 = (229, 229, 229, 255)
_NEUTRAL_50 = (250, 250, 250, 255)
_WHITE = (255, 255, 255, 255)

_TOP_BAR_MM = 2.7
_PADDING_MM = 5.4
_CORNER_RADIUS_MM = 3.2
_BODY_SHARE = 0.75
_SEPARATOR_MM = 0.7
_DASH_MM = 2.0

# Bold faces tried in order before falling back to Pillow's bundled font.
_BOLD_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")

# Distinct pixel sizes kept loaded across renders.
_FONT_CACHE_SIZE = 64


def compute_pixel_ratio(width_mm: float, dpi: int, measured_width_px: float) -> float:
    """Return the ratio that rasterizes a *measured_width_px* element at *dpi*.

    The target pixel width of a *width_mm* wide print at *dpi* is
    ``width_mm / 25.4 * dpi``; dividing by the element's measured on-screen
    width makes the export independent of browser zoom or display scale.

    Raises:
        ValueError: If *measured_width_px* is not positive.
    """
    if measured_width_px <= 0:
        raise ValueError(f"measured_width_px must be positive, got {measured_width_px}")
    return (width_mm / MM_PER_INCH * dpi) / measured_width_px


def preview_scale(
    container_width_px: float,
    ticket_width_mm: float = 148.5,
    padding_px: float = 64,
    max_scale: float = 1.5,
    min_scale: float = 0.1,
) -> float:
    """Fit the ticket into a preview container, capped at *max_scale*."""
    ticket_px = ticket_width_mm * CSS_PX_PER_MM
    scale = min(max_scale, (container_width_px - padding_px) / ticket_px)
    return max(min_scale, scale)


@dataclass
class _Canvas:
    """Millimetre-addressed drawing surface."""

    draw: ImageDraw.ImageDraw
    px_per_mm: float

    def px(self, mm: float) -> int:
        return round(mm * self.px_per_mm)

    def box(self, x0: float, y0: float, x1: float, y1: float) -> tuple[int, int, int, int]:
        return (self.px(x0), self.px(y0), self.px(x1), self.px(y1))


class TicketRenderer:
    """Rasterizes tickets at an arbitrary output width.

    Parameters
    ----------
    width_mm, height_mm:
        Physical ticket size.  The aspect ratio of every render follows it.
    """

    def __init__(
        self,
        width_mm: float = DEFAULT_WIDTH_MM,
        height_mm: float = DEFAULT_HEIGHT_MM,
    ) -> None:
        self._width_mm = width_mm
        self._height_mm = height_mm

    @property
    def width_mm(self) -> float:
        return self._width_mm

    @property
    def height_mm(self) -> float:
        return self._height_mm

    @property
    def css_width_px(self) -> int:
        """On-screen width of the ticket at 96 px/inch, e.g. 756 for 200mm."""
        return round(self._width_mm * CSS_PX_PER_MM)

    def size_for_width(self, width_px: int) -> tuple[int, int]:
        return width_px, max(1, round(width_px * self._height_mm / self._width_mm))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, ticket: TicketData, width_px: int) -> Image.Image:
        """Draw *ticket* into a new RGBA image *width_px* pixels wide.

        Raises:
            RenderError: If *width_px* is not positive or Pillow fails.
        """
        if width_px <= 0:
            raise RenderError(f"Output width must be positive, got {width_px}")

        size = self.size_for_width(width_px)
        try:
            image = Image.new("RGBA", size, (0, 0, 0, 0))
            canvas = _Canvas(ImageDraw.Draw(image), px_per_mm=width_px / self._width_mm)
            self._draw_frame(canvas)
            self._draw_body(canvas, ticket)
            self._draw_separator(canvas)
            self._draw_stub(canvas, ticket)
        except (OSError, ValueError) as exc:
            raise RenderError(f"Could not draw ticket: {exc}", provider_name="pillow") from exc
        return image

    def render_png(self, ticket: TicketData, width_px: int) -> bytes:
        """Render *ticket* and encode it as PNG bytes (no density stamp)."""
        image = self.render(ticket, width_px)
        buf = io.BytesIO()
        try:
            image.save(buf, format="PNG")
        except OSError as exc:
            raise RenderError(f"Could not encode ticket PNG: {exc}", provider_name="pillow") from exc
        return buf.getvalue()

    # ------------------------------------------------------------------
    # Layout sections
    # ------------------------------------------------------------------

    def _draw_frame(self, c: _Canvas) -> None:
        w, h = self._width_mm, self._height_mm
        radius = c.px(_CORNER_RADIUS_MM)
        c.draw.rounded_rectangle(c.box(0, 0, w, h), radius=radius, fill=_WHITE)

        stub_x = w * _BODY_SHARE + _SEPARATOR_MM
        # Stub background keeps the right-hand corners rounded.
        c.draw.rounded_rectangle(c.box(stub_x, 0, w, h), radius=radius, fill=_NEUTRAL_50)
        c.draw.rectangle(c.box(stub_x, 0, stub_x + _CORNER_RADIUS_MM, h), fill=_NEUTRAL_50)

        c.draw.rounded_rectangle(
            c.box(0, 0, w, _TOP_BAR_MM + 2 * _CORNER_RADIUS_MM),
            radius=radius,
            fill=_NEUTRAL_900,
        )
        # Square off the bar's lower edge.
        c.draw.rectangle(
            c.box(0, _TOP_BAR_MM, w, _TOP_BAR_MM + 2 * _CORNER_RADIUS_MM),
            fill=_WHITE,
        )
        c.draw.rectangle(
            c.box(stub_x, _TOP_BAR_MM, w, _TOP_BAR_MM + 2 * _CORNER_RADIUS_MM),
            fill=_NEUTRAL_50,
        )

    def _draw_body(self, c: _Canvas, ticket: TicketData) -> None:
        left = _PADDING_MM
        right = self._width_mm * _BODY_SHARE - _PADDING_MM
        width = right - left
        center_x = (left + right) / 2

        footer_size = 4.0
        footer_y = self._height_mm - _PADDING_MM - 4.7

        # Headline block: artist plus optional "with ..." line, centred in
        # the space between the top bar and the footer row.
        artist_font = self._fit_font(c, ticket.display_artist().upper(), width, 11.0)
        lines: list[tuple[str, ImageFont.ImageFont | ImageFont.FreeTypeFont, tuple, float]] = [
            (ticket.display_artist().upper(), artist_font, _NEUTRAL_900, 11.0),
        ]
        if ticket.supporting_artists:
            support = f"WITH {ticket.supporting_artists.upper()}"
            lines.append((support, self._fit_font(c, support, width, 4.0), _NEUTRAL_600, 5.4))

        gap = 4.0 if len(lines) > 1 else 0.0
        block_h = sum(line_h for *_, line_h in lines) + gap
        top = _TOP_BAR_MM + (footer_y - _TOP_BAR_MM - block_h) / 2
        for text, font, color, line_h in lines:
            self._text_centered(c, text, font, color, center_x, top + line_h / 2)
            top += line_h + gap

        # Footer: "DATE • TIME" left, "VENUE • CITY" right.
        when = " • ".join(part for part in (ticket.display_date(), ticket.display_time()) if part)
        where = " • ".join(part for part in (ticket.venue, ticket.city) if part)
        font = self._font(c, footer_size)
        half = width / 2 - 1.35
        c.draw.text(
            (c.px(left), c.px(footer_y)),
            self._truncate(c, when.upper(), font, half),
            font=font,
            fill=_NEUTRAL_800,
        )
        where_text = self._truncate(c, where.upper(), font, half)
        where_w = c.draw.textlength(where_text, font=font)
        c.draw.text(
            (c.px(right) - where_w, c.px(footer_y)),
            where_text,
            font=font,
            fill=_NEUTRAL_800,
        )

    def _draw_separator(self, c: _Canvas) -> None:
        x = self._width_mm * _BODY_SHARE + _SEPARATOR_MM / 2
        y = _TOP_BAR_MM + 2.6
        while y < self._height_mm:
            y_end = min(y + _DASH_MM, self._height_mm)
            c.draw.line(
                [(c.px(x), c.px(y)), (c.px(x), c.px(y_end))],
                fill=_NEUTRAL_300,
                width=max(1, c.px(_SEPARATOR_MM)),
            )
            y += _DASH_MM * 2

    def _draw_stub(self, c: _Canvas, ticket: TicketData) -> None:
        left = self._width_mm * _BODY_SHARE + _SEPARATOR_MM + _PADDING_MM
        right = self._width_mm - _PADDING_MM
        width = right - left
        center_x = (left + right) / 2
        y = _TOP_BAR_MM + _PADDING_MM / 2

        def line(text: str, size: float, line_h: float, color: tuple, spacing: float = 0.0) -> None:
            nonlocal y
            y += spacing
            font = self._fit_font(c, text, width, size)
            self._text_centered(c, text, font, color, center_x, y + line_h / 2)
            y += line_h

        if ticket.ticket_type:
            line(ticket.ticket_type.upper(), 3.4, 4.0, _NEUTRAL_600)
        if ticket.price:
            line(ticket.price, 4.0, 4.7, _NEUTRAL_900, spacing=1.3)
        line(ticket.display_stub_artist().upper(), 5.4, 6.1, _NEUTRAL_900, spacing=1.3)
        line(ticket.display_date(), 3.4, 4.0, _NEUTRAL_500, spacing=0.7)

        placement = ticket.placement_view()
        if placement is None:
            return

        y += 1.3
        c.draw.rectangle(c.box(left, y, right, y + 0.3), fill=_NEUTRAL_200)
        y += 1.3
        line("PLACE", 2.7, 3.4, _NEUTRAL_500)
        line(placement.label.upper(), 4.7, 5.4, _NEUTRAL_900)

        if placement.parts:
            column_w = width / 3
            for index, (label, value) in enumerate(placement.parts):
                col_center = left + column_w * index + column_w / 2
                label_font = self._fit_font(c, label.upper(), column_w, 2.7)
                value_font = self._fit_font(c, value, column_w, 4.0)
                self._text_centered(c, label.upper(), label_font, _NEUTRAL_500, col_center, y + 1.3 + 1.7)
                self._text_centered(c, value, value_font, _NEUTRAL_900, col_center, y + 1.3 + 3.4 + 2.35)

    # ------------------------------------------------------------------
    # Text helpers
    # ------------------------------------------------------------------

    def _font(self, c: _Canvas, size_mm: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        return _load_font(max(1, c.px(size_mm)))

    def _fit_font(
        self,
        c: _Canvas,
        text: str,
        max_width_mm: float,
        size_mm: float,
        min_size_mm: float = 2.0,
    ) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        """Largest font up to *size_mm* that fits *text* into *max_width_mm*."""
        size = size_mm
        font = self._font(c, size)
        while size > min_size_mm and c.draw.textlength(text, font=font) > c.px(max_width_mm):
            size -= 0.5
            font = self._font(c, size)
        return font

    @staticmethod
    def _truncate(c: _Canvas, text: str, font, max_width_mm: float) -> str:
        limit = c.px(max_width_mm)
        if c.draw.textlength(text, font=font) <= limit:
            return text
        while text and c.draw.textlength(text + "…", font=font) > limit:
            text = text[:-1]
        return text + "…" if text else ""

    @staticmethod
    def _text_centered(c: _Canvas, text: str, font, color: tuple, cx_mm: float, cy_mm: float) -> None:
        c.draw.text((c.px(cx_mm), c.px(cy_mm)), text, font=font, fill=color, anchor="mm")


@lru_cache(maxsize=_FONT_CACHE_SIZE)
def _load_font(size_px: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a bold TrueType face at *size_px*, else Pillow's bundled font."""
    for candidate in _BOLD_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size_px)
        except OSError:
            continue
    return ImageFont.load_default(size=size_px)

"""Unit tests for ticket rasterization and sizing math."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from src.models.ticket import TicketData
from src.services.ticket_renderer import (
    _FONT_CACHE_SIZE,
    TicketRenderer,
    _load_font,
    compute_pixel_ratio,
    preview_scale,
)
from src.utils.errors import RenderError


class TestPixelRatio:
    def test_print_ratio_for_measured_width(self) -> None:
        ratio = compute_pixel_ratio(200, 300, 561)

        assert ratio == pytest.approx(4.2105, abs=1e-3)
        assert round(561 * ratio) == 2362

    def test_output_width_is_independent_of_measured_width(self) -> None:
        for measured in (400, 561, 756, 1200):
            assert round(measured * compute_pixel_ratio(200, 300, measured)) == 2362

    def test_non_positive_measured_width_raises(self) -> None:
        with pytest.raises(ValueError):
            compute_pixel_ratio(200, 300, 0)


class TestPreviewScale:
    def test_capped(self) -> None:
        assert preview_scale(4000) == 1.5

    def test_fits_container(self) -> None:
        # (600 - 64) / (148.5 * 96 / 25.4)
        assert preview_scale(600) == pytest.approx(0.9550, abs=1e-3)

    def test_wide_container_hits_cap(self) -> None:
        assert preview_scale(1024) == 1.5

    def test_floor(self) -> None:
        assert preview_scale(10) == pytest.approx(0.1)


class TestTicketRenderer:
    def test_css_width(self) -> None:
        assert TicketRenderer(200, 56.6).css_width_px == 756

    def test_size_follows_aspect_ratio(self) -> None:
        assert TicketRenderer(200, 56.6).size_for_width(2362) == (2362, 668)

    def test_render_dimensions(self, seated_ticket: TicketData) -> None:
        image = TicketRenderer().render(seated_ticket, 756)

        assert image.mode == "RGBA"
        assert image.size == (756, 214)

    def test_render_png_decodes(self, ticket: TicketData) -> None:
        png = TicketRenderer().render_png(ticket, 400)

        with Image.open(io.BytesIO(png)) as img:
            assert img.format == "PNG"
            assert img.width == 400

    def test_render_draws_something(self, seated_ticket: TicketData) -> None:
        image = TicketRenderer().render(seated_ticket, 756)
        # Opaque ticket body on a transparent canvas.
        assert image.getpixel((378, 107))[3] == 255

    def test_blank_ticket_renders_fallbacks(self) -> None:
        image = TicketRenderer().render(TicketData(), 300)
        assert image.width == 300

    def test_non_positive_width_raises(self, ticket: TicketData) -> None:
        with pytest.raises(RenderError):
            TicketRenderer().render(ticket, 0)

    def test_font_cache_is_bounded(self, ticket: TicketData) -> None:
        renderer = TicketRenderer()
        for width in range(200, 200 + 40 * 25, 25):
            renderer.render(ticket, width)

        info = _load_font.cache_info()
        assert info.maxsize == _FONT_CACHE_SIZE
        assert info.currsize <= _FONT_CACHE_SIZE

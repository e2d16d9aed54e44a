"""Unit tests for density (DPI) metadata helpers."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from src.utils.errors import ImageMetadataError
from src.utils.image_metadata import (
    add_dpi_metadata,
    decode_data_uri,
    encode_data_uri,
    read_dpi,
    stamp_dpi,
)


class TestStampDpi:
    def test_png_density(self, png_bytes: bytes) -> None:
        assert read_dpi(png_bytes) is None

        stamped = stamp_dpi(png_bytes, 300)

        x_dpi, y_dpi = read_dpi(stamped)
        assert x_dpi == pytest.approx(300, abs=0.5)
        assert y_dpi == pytest.approx(300, abs=0.5)

    def test_pixels_unchanged(self, png_bytes: bytes) -> None:
        stamped = stamp_dpi(png_bytes, 300)

        with Image.open(io.BytesIO(png_bytes)) as before, Image.open(io.BytesIO(stamped)) as after:
            assert after.format == "PNG"
            assert after.size == before.size
            assert list(after.getdata()) == list(before.getdata())

    def test_non_positive_dpi(self, png_bytes: bytes) -> None:
        with pytest.raises(ImageMetadataError):
            stamp_dpi(png_bytes, 0)

    def test_not_an_image(self) -> None:
        with pytest.raises(ImageMetadataError):
            stamp_dpi(b"definitely not a png", 300)

    def test_only_png(self, jpeg_bytes: bytes) -> None:
        with pytest.raises(ImageMetadataError):
            stamp_dpi(jpeg_bytes, 300)


class TestDataUri:
    def test_decode_strips_prefix(self, png_bytes: bytes) -> None:
        uri = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
        assert decode_data_uri(uri) == png_bytes

    def test_decode_bare_base64(self, png_bytes: bytes) -> None:
        assert decode_data_uri(base64.b64encode(png_bytes).decode()) == png_bytes

    def test_decode_invalid(self) -> None:
        with pytest.raises(ImageMetadataError):
            decode_data_uri("data:image/png;base64,@@not-base64@@")

    def test_encode_round_trip(self, png_bytes: bytes) -> None:
        uri = encode_data_uri(png_bytes)
        assert uri.startswith("data:image/png;base64,")
        assert decode_data_uri(uri) == png_bytes

    def test_add_dpi_metadata(self, png_bytes: bytes) -> None:
        uri = "data:image/png;base64," + base64.b64encode(png_bytes).decode()

        result = add_dpi_metadata(uri, 300)

        assert result.startswith("data:image/png;base64,")
        x_dpi, _ = read_dpi(decode_data_uri(result))
        assert x_dpi == pytest.approx(300, abs=0.5)

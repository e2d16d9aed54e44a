"""Raster density (DPI) metadata rewriting with Pillow.

Print software sizes an image from its density header, not its pixel count:
a 2362px-wide PNG stamped at 300 DPI opens as exactly 200mm wide.  This
module decodes a PNG, writes its ``pHYs`` density chunk and re-encodes
it as PNG.  Pixel data is untouched.

Also handles the ``data:image/...;base64,`` round trip used by browser
clients that post canvas output directly.
"""

import base64
import binascii
import io
import re

from PIL import Image, UnidentifiedImageError

from src.utils.errors import ImageMetadataError

_DATA_URI_PREFIX_RE = re.compile(r"^data:image/\w+;base64,")

_PNG_MIME = "image/png"


def stamp_dpi(image_data: bytes, dpi: int) -> bytes:
    """Return *image_data* re-encoded with a density of *dpi* on both axes.

    Raises:
        ImageMetadataError: If *dpi* is not positive or the bytes are not
            a decodable PNG.
    """
    if dpi <= 0:
        raise ImageMetadataError(f"DPI must be positive, got {dpi}", provider_name="pillow")

    try:
        with Image.open(io.BytesIO(image_data)) as img:
            if img.format != "PNG":
                raise ImageMetadataError(
                    f"Expected a PNG image, got {img.format}",
                    provider_name="pillow",
                )
            buf = io.BytesIO()
            img.save(buf, format="PNG", dpi=(dpi, dpi))
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageMetadataError(f"Could not rewrite image density: {exc}", provider_name="pillow") from exc

    return buf.getvalue()


def read_dpi(image_data: bytes) -> tuple[float, float] | None:
    """Return the stored ``(x, y)`` density, or ``None`` when absent.

    Pillow converts PNG's pixels-per-metre back to inches, so values come
    back as floats close to, not exactly, the stamped integer.
    """
    try:
        with Image.open(io.BytesIO(image_data)) as img:
            dpi = img.info.get("dpi")
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageMetadataError(f"Could not read image: {exc}", provider_name="pillow") from exc
    if dpi is None:
        return None
    return float(dpi[0]), float(dpi[1])


def decode_data_uri(image_uri: str) -> bytes:
    """Strip an optional ``data:image/*;base64,`` prefix and decode the payload."""
    payload = _DATA_URI_PREFIX_RE.sub("", image_uri.strip(), count=1)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageMetadataError(f"Invalid base64 image payload: {exc}") from exc


def encode_data_uri(image_data: bytes) -> str:
    """Encode PNG bytes as a ``data:image/png;base64,`` URI."""
    return f"data:{_PNG_MIME};base64,{base64.b64encode(image_data).decode('ascii')}"


def add_dpi_metadata(image_uri: str, dpi: int) -> str:
    """Rewrite the density of a data-URI image and return a new data URI."""
    stamped = stamp_dpi(decode_data_uri(image_uri), dpi)
    return encode_data_uri(stamped)

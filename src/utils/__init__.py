"""Utility modules for ticketStub.

Available utility modules (all re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at TicketStubError;
  each layer raises its own subclass so callers can handle failures
  granularly without broad ``except Exception`` blocks.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **dates** -- The listing API's ``DD-MM-YYYY`` wire format, the form's
  ``DD/MM/YYYY`` echo, and the ticket's ``M/D/YYYY`` display date.
- **text_normalizer** -- Filename slugs, ASCII header filenames and
  comma-joined artist lists.
- **image_metadata** -- PNG density (DPI) stamping and data-URI helpers.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ConfigurationError,
    ImageMetadataError,
    ListingProviderError,
    RenderError,
    TicketFieldError,
    TicketStubError,
)

# -- Date formats -----------------------------------------------------------
from src.utils.dates import display_date, format_listing_date, parse_form_date, parse_listing_date

# -- Image density metadata -------------------------------------------------
from src.utils.image_metadata import add_dpi_metadata, read_dpi, stamp_dpi

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

# -- Text normalization (slugs, artist lists) -------------------------------
from src.utils.text_normalizer import ascii_filename, join_artist_names, slugify

__all__ = [
    "ConfigurationError",
    "ImageMetadataError",
    "ListingProviderError",
    "RenderError",
    "TicketFieldError",
    "TicketStubError",
    "add_dpi_metadata",
    "ascii_filename",
    "configure_logging",
    "display_date",
    "format_listing_date",
    "get_logger",
    "join_artist_names",
    "parse_form_date",
    "parse_listing_date",
    "read_dpi",
    "slugify",
    "stamp_dpi",
]

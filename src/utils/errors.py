"""Custom exception hierarchy for ticketStub.

All application exceptions inherit from :class:`TicketStubError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "setlistfm", "pillow") caused the failure.

The hierarchy is organized by concern:

    TicketStubError  (base -- catch-all for any ticketStub error)
    +-- ConfigurationError     (startup / missing config)
    +-- ListingProviderError   (setlist listing API failure)
    +-- TicketFieldError       (unknown or invalid ticket field update)
    +-- RenderError            (ticket layout rasterization)
    +-- ImageMetadataError     (PNG decode / density rewrite)

Services catch provider and rendering errors at their own boundary and
turn them into typed outcomes (see ``src.models.concert`` and
``src.models.export``), so in practice only ``TicketFieldError`` and
``ImageMetadataError`` reach the API layer.
"""


class TicketStubError(Exception):
    """Base exception for all ticketStub errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[setlistfm] HTTP 503``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(TicketStubError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External listing API
# ---------------------------------------------------------------------------

class ListingProviderError(TicketStubError):
    """Raised when the setlist listing API returns an unusable response.

    Covers non-404 error statuses, transport failures and malformed JSON.
    A 404 is *not* an error: providers translate it into an empty row list.
    """

    def __init__(
        self,
        message: str = "Listing provider request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


# ---------------------------------------------------------------------------
# Ticket record
# ---------------------------------------------------------------------------

class TicketFieldError(TicketStubError):
    """Raised when a field update names an unknown field or fails validation."""

    def __init__(
        self,
        message: str = "Invalid ticket field update",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Image pipeline
# ---------------------------------------------------------------------------

class RenderError(TicketStubError):
    """Raised when the ticket layout cannot be drawn or encoded."""

    def __init__(
        self,
        message: str = "Ticket rendering failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ImageMetadataError(TicketStubError):
    """Raised when a raster cannot be decoded or its density rewritten."""

    def __init__(
        self,
        message: str = "Image metadata rewrite failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

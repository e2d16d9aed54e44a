"""ticketStub API layer -- routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    ConcertDetailsResponse,
    ConcertSearchResponse,
    DpiMetadataRequest,
    DpiMetadataResponse,
    ErrorResponse,
    HealthResponse,
    SelectConcertResponse,
    TicketResponse,
    TicketUpdateRequest,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ConcertDetailsResponse",
    "ConcertSearchResponse",
    "DpiMetadataRequest",
    "DpiMetadataResponse",
    "ErrorResponse",
    "HealthResponse",
    "SelectConcertResponse",
    "TicketResponse",
    "TicketUpdateRequest",
]

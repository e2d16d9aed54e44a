"""Abstract base class for setlist-listing service providers.

Defines the contract for querying an external concert listing (setlist.fm
today) for raw setlist rows.  Providers only speak HTTP and JSON; the
search gateway and detail lookup services own normalization, deduplication
and error-to-outcome translation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IListingProvider(ABC):
    """Contract for setlist listing services.

    A *row* is one artist's setlist at one event, as returned by the
    upstream API (``{"id", "eventDate", "artist": {...}, "venue": {...},
    "url"}``).  One concert with openers therefore yields several rows
    sharing a venue and date.
    """

    @abstractmethod
    async def search_setlists(self, params: dict[str, str]) -> list[dict[str, Any]]:
        """Run a setlist search with already-normalized query parameters.

        Parameters
        ----------
        params:
            Upstream query parameters, e.g. ``{"artistName": "Harry Styles",
            "date": "05-03-2024"}`` or ``{"venueId": "...", "date": "..."}``.

        Returns
        -------
        list[dict]
            Raw setlist rows in upstream order.  An upstream 404 ("nothing
            matched") is returned as an empty list.

        Raises
        ------
        src.utils.errors.ListingProviderError
            On any other non-2xx status, transport failure, or a payload
            that is not the expected JSON shape.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"setlistfm"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has the credentials it needs.

        Implementations must answer from construction-time state only,
        without performing a request.
        """

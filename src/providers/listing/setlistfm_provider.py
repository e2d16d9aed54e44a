"""setlist.fm REST provider implementing IListingProvider.

Issues ``GET {base}/search/setlists`` requests with the ``x-api-key``
header and returns the raw ``setlist`` rows.  The API key is handed in at
construction; an empty key makes :meth:`is_available` return ``False`` and
the services built on top degrade to ``failed(not_configured)`` without
ever calling this class.

Status handling:
    200       → ``payload["setlist"]`` (missing key → ``[]``)
    404       → ``[]``  (setlist.fm answers 404 when nothing matched)
    other     → :class:`ListingProviderError` carrying the status code

The ``httpx.AsyncClient`` is injected for testability and connection
pooling; its timeout is configured once in main.py.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.interfaces.listing_provider import IListingProvider
from src.utils.errors import ListingProviderError
from src.utils.logging import get_logger

_DEFAULT_BASE_URL = "https://api.setlist.fm/rest/1.0"
_SEARCH_PATH = "/search/setlists"
_PROVIDER_NAME = "setlistfm"


class SetlistFmProvider(IListingProvider):
    """Listing provider backed by the setlist.fm REST API 1.0.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``.
    api_key:
        setlist.fm API key.  Empty means "not configured".
    base_url:
        API root, overridable for staging or a local stub server.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        base_url: str = _DEFAULT_BASE_URL,
    ) -> None:
        self._http = http_client
        self._api_key = api_key.strip()
        self._search_url = base_url.rstrip("/") + _SEARCH_PATH
        self._logger = get_logger(__name__)

    # -- IListingProvider implementation ---------------------------------------

    async def search_setlists(self, params: dict[str, str]) -> list[dict[str, Any]]:
        if not self._api_key:
            raise ListingProviderError(
                "setlist.fm API key is not configured",
                provider_name=_PROVIDER_NAME,
            )

        headers = {
            "x-api-key": self._api_key,
            "Accept": "application/json",
        }

        try:
            response = await self._http.get(self._search_url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise ListingProviderError(
                f"Request failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if response.status_code == 404:
            self._logger.info("setlistfm_not_found", params=params)
            return []

        if not 200 <= response.status_code < 300:
            raise ListingProviderError(
                f"setlist.fm API error: {response.status_code}",
                provider_name=_PROVIDER_NAME,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ListingProviderError(
                "setlist.fm returned a non-JSON body",
                provider_name=_PROVIDER_NAME,
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise ListingProviderError(
                "setlist.fm returned an unexpected payload",
                provider_name=_PROVIDER_NAME,
                status_code=response.status_code,
            )

        rows = payload.get("setlist") or []
        if not isinstance(rows, list):
            raise ListingProviderError(
                "setlist.fm 'setlist' field is not a list",
                provider_name=_PROVIDER_NAME,
                status_code=response.status_code,
            )

        self._logger.debug("setlistfm_rows_fetched", params=params, rows=len(rows))
        return rows

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        return bool(self._api_key)

"""Unit tests for the setlist.fm listing provider."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.providers.listing.setlistfm_provider import SetlistFmProvider
from src.utils.errors import ListingProviderError


def _mock_response(status_code: int = 200, payload: object = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json = MagicMock(return_value=payload)
    return response


def _provider(mock_client: AsyncMock, api_key: str = "test-key") -> SetlistFmProvider:
    return SetlistFmProvider(
        http_client=mock_client,
        api_key=api_key,
        base_url="https://api.setlist.fm/rest/1.0/",
    )


class TestSetlistFmProvider:
    def test_get_provider_name(self) -> None:
        assert _provider(AsyncMock()).get_provider_name() == "setlistfm"

    def test_is_available_with_key(self) -> None:
        assert _provider(AsyncMock()).is_available() is True

    def test_is_available_without_key(self) -> None:
        assert _provider(AsyncMock(), api_key="  ").is_available() is False

    @pytest.mark.asyncio
    async def test_search_sends_key_and_params(self, setlist_row) -> None:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_mock_response(200, {"setlist": [setlist_row]}))

        rows = await _provider(mock_client).search_setlists({"artistName": "Harry Styles"})

        assert rows == [setlist_row]
        args, kwargs = mock_client.get.call_args
        assert args[0] == "https://api.setlist.fm/rest/1.0/search/setlists"
        assert kwargs["params"] == {"artistName": "Harry Styles"}
        assert kwargs["headers"]["x-api-key"] == "test-key"
        assert kwargs["headers"]["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_missing_setlist_key_is_empty(self) -> None:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_mock_response(200, {"total": 0}))

        assert await _provider(mock_client).search_setlists({"cityName": "Leeds"}) == []

    @pytest.mark.asyncio
    async def test_404_is_empty(self) -> None:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_mock_response(404, {"code": 404}))

        assert await _provider(mock_client).search_setlists({"artistName": "Nobody"}) == []

    @pytest.mark.asyncio
    async def test_server_error_raises_with_status(self) -> None:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_mock_response(503))

        with pytest.raises(ListingProviderError) as exc_info:
            await _provider(mock_client).search_setlists({"artistName": "Harry Styles"})

        assert exc_info.value.status_code == 503
        assert exc_info.value.provider_name == "setlistfm"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))

        with pytest.raises(ListingProviderError):
            await _provider(mock_client).search_setlists({"artistName": "Harry Styles"})

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self) -> None:
        response = _mock_response(200)
        response.json = MagicMock(side_effect=ValueError("not json"))
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=response)

        with pytest.raises(ListingProviderError):
            await _provider(mock_client).search_setlists({"artistName": "Harry Styles"})

    @pytest.mark.asyncio
    async def test_without_key_never_calls_upstream(self) -> None:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock()

        with pytest.raises(ListingProviderError):
            await _provider(mock_client, api_key="").search_setlists({"artistName": "Harry Styles"})

        mock_client.get.assert_not_called()

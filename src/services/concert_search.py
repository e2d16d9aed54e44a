"""Concert search gateway: free-text criteria in, candidate concerts out.

The listing API returns one row per *artist performance*, so a single
concert with two openers comes back as three rows sharing a venue and a
date.  This service turns those rows into one candidate per event:

    1. Skip rows that are not objects or lack an ``eventDate`` or a
       ``venue``, and rows whose fields do not validate.
    2. Key each row by ``(venue.id, eventDate)``; the first row seen per key
       wins (the headliner's row usually comes first, and openers are
       resolved later by ConcertDetailService anyway).
    3. Parse ``DD-MM-YYYY`` into a datetime anchored at 12:00 UTC.
    4. Keep upstream order and truncate to 15 candidates.

The service fails closed.  Blank criteria, a missing credential, an
upstream 404 and any provider error all produce a :class:`SearchOutcome`
with an empty result list; nothing is raised to the caller.
"""

from __future__ import annotations

from typing import Any

from src.interfaces.listing_provider import IListingProvider
from src.models.concert import (
    NOT_CONFIGURED,
    ConcertSearchQuery,
    ConcertSearchResult,
    LookupStatus,
    SearchOutcome,
)
from src.utils.dates import format_listing_date, parse_listing_date
from src.utils.errors import ListingProviderError
from src.utils.logging import get_logger

MAX_SEARCH_RESULTS = 15

_logger = get_logger(__name__)


def build_search_params(query: ConcertSearchQuery) -> dict[str, str]:
    """Map a query onto upstream parameters, forwarding only non-blank values.

    Raises:
        ValueError: If ``event_date`` is a string that is not ISO-8601.
    """
    params: dict[str, str] = {}
    if query.artist_name and query.artist_name.strip():
        params["artistName"] = query.artist_name.strip()
    if query.city_name and query.city_name.strip():
        params["cityName"] = query.city_name.strip()
    event_date = query.event_date
    if isinstance(event_date, str):
        event_date = event_date.strip() or None
    if event_date is not None:
        params["date"] = format_listing_date(event_date)
    return params


def normalize_setlists(
    rows: list[Any],
    limit: int = MAX_SEARCH_RESULTS,
) -> list[ConcertSearchResult]:
    """Deduplicate setlist rows into at most *limit* concert candidates.

    Rows that are not objects, lack a venue or an event date, or cannot be
    turned into a :class:`ConcertSearchResult` are skipped one at a time;
    the remaining rows still produce candidates.

    Raises:
        TypeError: If *rows* itself is not iterable.
    """
    results: dict[tuple[Any, str], ConcertSearchResult] = {}

    for row in rows:
        if not isinstance(row, dict):
            _logger.warning("setlist_row_skipped", reason="not an object")
            continue
        event_date = row.get("eventDate")
        venue = row.get("venue")
        if not event_date or not isinstance(venue, dict):
            continue

        key = (venue.get("id"), event_date)
        if key in results:
            continue

        try:
            results[key] = _to_result(row, venue, event_date)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            _logger.warning("setlist_row_skipped", row_id=row.get("id"), error=repr(exc))

    # dicts preserve insertion order, so this is first-seen order.
    return list(results.values())[:limit]


def _to_result(row: dict[str, Any], venue: dict[str, Any], event_date: str) -> ConcertSearchResult:
    artist = row.get("artist")
    if not isinstance(artist, dict):
        raise TypeError(f"artist must be an object, got {type(artist).__name__}")
    city = venue.get("city")
    city_name = city.get("name") if isinstance(city, dict) else None
    return ConcertSearchResult(
        id=row["id"],
        artist=artist["name"],
        artist_id=artist.get("mbid", ""),
        date=parse_listing_date(event_date),
        venue=venue["name"],
        venue_id=venue["id"],
        date_str=event_date,
        city=city_name or "",
        openers=[],
        url=row.get("url"),
    )


class ConcertSearchService:
    """Searches the listing provider and normalizes the rows it returns.

    Whether the provider is usable is decided once, here in the
    constructor; a provider without credentials never receives a request.
    """

    def __init__(self, provider: IListingProvider) -> None:
        self._provider = provider
        self._enabled = provider.is_available()
        self._logger = get_logger(__name__)
        if not self._enabled:
            self._logger.warning(
                "concert_search_disabled",
                provider=provider.get_provider_name(),
                reason=NOT_CONFIGURED,
            )

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def search(self, query: ConcertSearchQuery) -> SearchOutcome:
        """Search for concerts matching *query*.

        Returns
        -------
        SearchOutcome
            ``ok`` with 1..15 results, ``empty`` for blank criteria or no
            upstream match, ``failed`` (with ``reason``) otherwise.
        """
        if query.is_blank():
            return SearchOutcome(status=LookupStatus.EMPTY)

        if not self._enabled:
            self._logger.warning("concert_search_skipped", reason=NOT_CONFIGURED)
            return SearchOutcome(status=LookupStatus.FAILED, reason=NOT_CONFIGURED)

        try:
            params = build_search_params(query)
            rows = await self._provider.search_setlists(params)
            results = normalize_setlists(rows)
        except ListingProviderError as exc:
            self._logger.error(
                "concert_search_failed",
                provider=exc.provider_name,
                status=exc.status_code,
                error=exc.message,
            )
            return SearchOutcome(status=LookupStatus.FAILED, reason=exc.message)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            self._logger.error(
                "concert_search_failed",
                provider=self._provider.get_provider_name(),
                error=repr(exc),
            )
            return SearchOutcome(status=LookupStatus.FAILED, reason=f"Malformed listing data: {exc!r}")

        self._logger.info(
            "concert_search_complete",
            params=params,
            rows=len(rows),
            results=len(results),
        )
        if not results:
            return SearchOutcome(status=LookupStatus.EMPTY)
        return SearchOutcome(status=LookupStatus.OK, results=results)

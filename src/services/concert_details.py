"""Concert detail lookup: who else played the selected show.

Queries the listing provider by venue and the *native* ``DD-MM-YYYY``
date string (no artist filter), which yields every setlist recorded at
that venue on that day, i.e. the whole bill.  Every row whose artist
``mbid`` differs from the headliner's is an opener.

Opener names keep upstream order and are not deduplicated: an act with two
setlist rows appears twice.
"""

from __future__ import annotations

from typing import Any

from src.interfaces.listing_provider import IListingProvider
from src.models.concert import NOT_CONFIGURED, DetailOutcome, LookupStatus
from src.utils.errors import ListingProviderError
from src.utils.logging import get_logger


def extract_openers(rows: list[Any], headliner_id: str) -> list[str]:
    """Return the names of every row not performed by *headliner_id*.

    Rows that are not objects, or whose ``artist`` is not an object, name
    no act and are skipped.

    Raises:
        KeyError: If an artist object lacks ``name``.
    """
    openers: list[str] = []
    for row in rows:
        artist = row.get("artist") if isinstance(row, dict) else None
        if not isinstance(artist, dict):
            continue
        if artist.get("mbid") != headliner_id:
            openers.append(artist["name"])
    return openers


class ConcertDetailService:
    """Resolves the supporting acts of one event.

    A missing credential degrades to ``failed(not_configured)`` exactly like
    the search gateway; the decision is taken at construction.
    """

    def __init__(self, provider: IListingProvider) -> None:
        self._provider = provider
        self._enabled = provider.is_available()
        self._logger = get_logger(__name__)

    async def lookup(self, venue_id: str, date_str: str, headliner_id: str) -> DetailOutcome:
        """Look up openers for the event at *venue_id* on *date_str*.

        Parameters
        ----------
        venue_id:
            Upstream venue identifier (``ConcertSearchResult.venue_id``).
        date_str:
            Upstream ``DD-MM-YYYY`` string, passed through verbatim.
        headliner_id:
            ``mbid`` of the selected artist; their rows are excluded.

        Returns
        -------
        DetailOutcome
            ``ok`` with the opener list (possibly empty), ``empty`` when
            upstream had no rows (404 or zero rows), ``failed`` otherwise.
        """
        if not self._enabled:
            self._logger.warning("concert_details_skipped", reason=NOT_CONFIGURED)
            return DetailOutcome(status=LookupStatus.FAILED, reason=NOT_CONFIGURED)

        params = {"venueId": venue_id, "date": date_str}
        try:
            rows = await self._provider.search_setlists(params)
            if not rows:
                self._logger.info("concert_details_empty", venue_id=venue_id, date=date_str)
                return DetailOutcome(status=LookupStatus.EMPTY)
            openers = extract_openers(rows, headliner_id)
        except ListingProviderError as exc:
            self._logger.error(
                "concert_details_failed",
                provider=exc.provider_name,
                status=exc.status_code,
                error=exc.message,
            )
            return DetailOutcome(status=LookupStatus.FAILED, reason=exc.message)
        except (AttributeError, KeyError, TypeError) as exc:
            self._logger.error(
                "concert_details_failed",
                provider=self._provider.get_provider_name(),
                error=repr(exc),
            )
            return DetailOutcome(status=LookupStatus.FAILED, reason=f"Malformed listing data: {exc!r}")

        self._logger.info(
            "concert_details_complete",
            venue_id=venue_id,
            date=date_str,
            rows=len(rows),
            openers=len(openers),
        )
        return DetailOutcome(status=LookupStatus.OK, openers=openers)

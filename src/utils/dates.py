"""Date helpers shared by the listing gateway, the ticket model and export.

The setlist API speaks ``DD-MM-YYYY`` both ways.  Outbound dates are built
from the value's own calendar fields (never via a locale formatter or a
timezone conversion), and inbound dates are anchored at 12:00 UTC so that
rendering the value in any local offset between -12h and +12h still lands
on the same calendar day.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

_LISTING_DATE_FORMAT = "%d-%m-%Y"
_FORM_DATE_FORMAT = "%d/%m/%Y"

# Hour used to anchor parsed listing dates.
_MIDDAY_UTC_HOUR = 12


def format_listing_date(value: date | datetime | str) -> str:
    """Format *value* as the listing API's ``DD-MM-YYYY`` date.

    Accepts a ``date``, a ``datetime`` (its own calendar fields are used,
    whatever its tzinfo) or an ISO-8601 string such as ``"2024-03-05"``,
    ``"2024-03-05T00:00:00Z"`` or ``"2024-03-05T00:00:00.000Z"``.

    Raises:
        ValueError: If a string cannot be parsed as ISO-8601.
    """
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat only accepts a "Z" suffix from Python 3.11 on.
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def parse_listing_date(value: str) -> datetime:
    """Parse a native ``DD-MM-YYYY`` string into a midday-UTC datetime.

    Raises:
        ValueError: If *value* is not a valid ``DD-MM-YYYY`` date.
    """
    parsed = datetime.strptime(value.strip(), _LISTING_DATE_FORMAT)
    return parsed.replace(hour=_MIDDAY_UTC_HOUR, tzinfo=timezone.utc)  # noqa: UP017


def parse_form_date(text: str) -> date | None:
    """Parse the ticket form's ``DD/MM/YYYY`` text.

    Returns ``None`` while the text is incomplete (fewer than 10 characters)
    or invalid; callers keep their previous value in that case.  An empty
    string is handled by the caller as "clear the date".
    """
    text = text.strip()
    if len(text) < 10:
        return None
    try:
        return datetime.strptime(text, _FORM_DATE_FORMAT).date()
    except ValueError:
        return None


def display_date(value: date | datetime | None) -> str | None:
    """Return the en-US short display form ``M/D/YYYY`` or ``None``."""
    if value is None:
        return None
    return f"{value.month}/{value.day}/{value.year}"

"""
Timestamp formatting and parsing for the post XML format.

Timestamps are written in a round-trip form
(``2017-11-19T08:30:00.123456+00:00``).  Reading tries an ordered list of
strategies; every strategy returns a :class:`~datetime.datetime` or ``None``
and the caller decides what the final fallback is.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Iterable, Optional

import dateparser

DateStrategy = Callable[[str], Optional[datetime]]

_ROUND_TRIP = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"\.(?P<fraction>\d{6,7})"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})?$"
)

# Month first, naive values in UTC, and day, month and year all required
_DATEPARSER_SETTINGS = {
    "RETURN_AS_TIMEZONE_AWARE": True,
    "TIMEZONE": "UTC",
    "TO_TIMEZONE": "UTC",
    "DATE_ORDER": "MDY",
    "STRICT_PARSING": True,
    "PARSERS": ["custom-formats", "absolute-time"],
}


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_round_trip(value: datetime) -> str:
    """Render ``value`` with microseconds and its UTC offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="microseconds")


def parse_round_trip(text: str) -> Optional[datetime]:
    """Strict parse of the format written by :func:`format_round_trip`.

    Seven fractional digits (the legacy writer's precision) are truncated to
    microseconds.  A missing offset means UTC; the result is always in UTC.
    """
    match = _ROUND_TRIP.match(text.strip())
    if match is None:
        return None
    offset = match.group("offset") or ""
    if offset == "Z":
        offset = "+00:00"
    candidate = f"{match.group('base')}.{match.group('fraction')[:6]}{offset}"
    try:
        return _to_utc(datetime.fromisoformat(candidate))
    except ValueError:
        return None


def _parse_iso(text: str) -> Optional[datetime]:
    try:
        return _to_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def _parse_rfc2822(text: str) -> Optional[datetime]:
    try:
        return _to_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        return None


def _parse_natural(text: str) -> Optional[datetime]:
    # Absolute dates only: relative phrases and bare numbers are not dates here
    parsed = dateparser.parse(text, languages=["en"], settings=_DATEPARSER_SETTINGS)
    if parsed is None:
        return None
    return _to_utc(parsed)


GENERAL_STRATEGIES: tuple[DateStrategy, ...] = (_parse_iso, _parse_rfc2822, _parse_natural)
STRICT_THEN_GENERAL: tuple[DateStrategy, ...] = (parse_round_trip,) + GENERAL_STRATEGIES


def parse_with(text: str, strategies: Iterable[DateStrategy]) -> Optional[datetime]:
    """Return the first successful result of ``strategies`` applied to ``text``."""
    value = re.sub(r"\s+", " ", (text or "").strip())
    if not value:
        return None
    for strategy in strategies:
        parsed = strategy(value)
        if parsed is not None:
            return parsed
    return None


def parse_general(text: str) -> Optional[datetime]:
    """Lenient parse used for comment dates and as the second tier for posts."""
    return parse_with(text, GENERAL_STRATEGIES)

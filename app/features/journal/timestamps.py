"""Timestamp parsing and local-calendar helpers shared by the journal features."""

from datetime import date, datetime, timezone, tzinfo
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Best-effort conversion of a stored or caller-supplied timestamp.

    Accepts datetimes and ISO-8601 strings (a trailing ``Z`` is read as UTC).
    Anything else, including malformed strings, yields None.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None

    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def to_local(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express ``moment`` as a naive wall-clock time in ``tz``.

    Naive datetimes are taken to be local already. Aware ones are converted
    to ``tz``, or to the server's local zone when ``tz`` is None.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz).replace(tzinfo=None)


def local_now(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """The reference instant as naive local time; defaults to the clock."""
    if now is None:
        now = datetime.now(timezone.utc)
    return to_local(now, tz)


def local_time_of(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse ``value`` and convert it to naive local time, or None."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    try:
        return to_local(parsed, tz)
    except (OverflowError, ValueError, OSError):
        return None


"""Timestamp parsing and timezone utilities."""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil import tz as dateutil_tz


def parse_timestamp(value: Any, relative: bool = True) -> datetime:
    """Parse a timestamp from any of the shapes stored records carry.

    Supports:
    - datetime objects (returned unchanged)
    - date objects (midnight of that day)
    - int/float POSIX seconds (interpreted as UTC)
    - objects exposing a numeric ``seconds`` attribute (document-store timestamps)
    - strings: ISO 8601 and anything dateutil understands, plus
      "now", "today" and "yesterday" when relative is True

    Args:
        value: Raw timestamp value
        relative: Whether "now", "today" and "yesterday" are accepted. These
            read the wall clock, so stored records are parsed without them.

    Returns:
        datetime, naive or aware depending on the input

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None:
        raise ValueError("Missing timestamp")

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, bool):
        raise ValueError(f"Could not parse timestamp {value!r}")

    if isinstance(value, (int, float)):
        return _from_epoch(value)

    seconds = getattr(value, "seconds", None)
    if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
        return _from_epoch(seconds)

    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            raise ValueError("Empty timestamp string")

        if text in ("now", "today", "yesterday"):
            if not relative:
                raise ValueError(f"Relative timestamp '{value}' is not allowed here")
            now = datetime.now()
            words = {
                "now": now,
                "today": datetime.combine(now.date(), time.min),
                "yesterday": datetime.combine(now.date() - timedelta(days=1), time.min),
            }
            return words[text]

        try:
            return date_parser.parse(value.strip())
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Could not parse timestamp '{value}': {e}")

    raise ValueError(f"Could not parse timestamp {value!r}")


def _from_epoch(seconds: float) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=dateutil_tz.UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Timestamp {seconds} is out of range: {e}")


def to_local(moment: datetime, tz: tzinfo) -> datetime:
    """Express a datetime in the given timezone.

    Naive datetimes are taken to already be local wall-clock time.
    """
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def local_timestamp(value: Any, tz: tzinfo) -> Optional[datetime]:
    """Parse and localise a stored timestamp, returning None if it is unusable.

    Relative words such as "yesterday" count as unusable here.
    """
    try:
        return to_local(parse_timestamp(value, relative=False), tz)
    except ValueError:
        return None


def resolve_timezone(name: Optional[str] = None) -> tzinfo:
    """Resolve a timezone name such as "Asia/Kolkata" or "UTC".

    Args:
        name: IANA timezone name, or None for the machine's local timezone

    Returns:
        tzinfo instance

    Raises:
        ValueError: If the name is not a known timezone
    """
    if name is None:
        return dateutil_tz.tzlocal()

    zone = dateutil_tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: '{name}'")
    return zone


def to_utc(moment: datetime) -> datetime:
    """Convert a datetime to aware UTC, treating naive values as local time."""
    return to_local(moment, dateutil_tz.tzlocal()).astimezone(dateutil_tz.UTC)


def from_storage(moment: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from the database."""
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=dateutil_tz.UTC)

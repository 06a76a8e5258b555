from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import ISO_DATE_FORMAT, TIME_OF_DAY_FORMAT
from ..core.exceptions import InvalidDateError, ValidationError


def parse_iso_date(value: object) -> date:
    """Parse a YYYY-MM-DD string into a date.

    ``date`` values pass through; ``datetime`` values are rejected because the
    time-of-day would be silently dropped.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or len(value.strip()) != 10:
        raise InvalidDateError(value)
    try:
        return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateError(value)


def parse_optional_date(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    return parse_iso_date(value)


def to_local_naive(value: datetime) -> datetime:
    """Convert an offset-aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_datetime(value: object, field_name: str) -> datetime:
    """Accept a datetime, a date (midnight) or an ISO-8601 string.

    The result is always naive local time, the same convention as
    ``now_local``. Offsets such as ``Z`` or ``+05:30`` are converted.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            return to_local_naive(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise ValidationError(f"{field_name} is not a valid date/time: {value!r}")


def parse_time_of_day(value: str, field_name: str) -> str:
    """Validate an HH:MM string and return it zero padded."""
    try:
        parsed = datetime.strptime((value or "").strip(), TIME_OF_DAY_FORMAT).time()
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM")
    return parsed.strftime(TIME_OF_DAY_FORMAT)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()

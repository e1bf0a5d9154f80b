from __future__ import annotations

from datetime import date, datetime, time

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str, *, field_name: str = "date") -> datetime:
    """Parse an ISO date or datetime string.

    A bare date becomes midnight of that day. Values carrying an offset (or a
    trailing ``Z``) are converted to local time first; the result is always
    naive local wall-clock, matching stored timestamps.
    """
    raw = (value or "").strip()
    if not raw:
        raise ValidationError(f"{field_name} is required")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"{field_name} is invalid: {value!r}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def now_local() -> datetime:
    """Current local time.

    Wrapped so tests can patch it.
    """
    return datetime.now()

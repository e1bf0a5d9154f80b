from __future__ import annotations

from typing import Optional

from ..core.exceptions import InvalidFilterError

_TRUE_FLAGS = {"1", "true"}


def optional_filter(value: Optional[str]) -> Optional[str]:
    """Normalize a filter value: blank and ``all`` mean no filter."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "all":
        return None
    return value


def is_flag_set(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_FLAGS


def require_int(value: str, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidFilterError(f"{field_name} must be an integer") from e


def clamp_limit(value: Optional[str], *, default: int, maximum: int) -> int:
    if value is None or not value.strip():
        return default
    return max(1, min(maximum, require_int(value, "limit")))


def optional_int_filter(value: Optional[str], field_name: str) -> Optional[str]:
    """Like ``optional_filter`` but the value, when present, must be an integer id."""
    value = optional_filter(value)
    if value is not None and not value.lstrip("-").isdigit():
        raise InvalidFilterError(f"{field_name} must be an integer")
    return value

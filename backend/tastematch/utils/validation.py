from __future__ import annotations

from typing import Iterable, Mapping

TIME_RANGES = ("short_term", "medium_term", "long_term")
DEFAULT_TIME_RANGE = "medium_term"


class ValidationError(ValueError):
    """Raised when the incoming request payload is invalid."""


class InvalidInputError(ValueError):
    """Raised when a scoring helper receives structurally incompatible input."""


def require_fields(payload: Mapping[str, object], fields: Iterable[str]) -> None:
    missing = [field for field in fields if not payload.get(field)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def parse_time_range(value: object | None) -> str:
    if value is None or value == "":
        return DEFAULT_TIME_RANGE
    time_range = str(value).strip().lower()
    if time_range not in TIME_RANGES:
        raise ValidationError(f"timeRange must be one of: {', '.join(TIME_RANGES)}")
    return time_range

# backend/roomtracker/api/validation.py
"""
Request field checks shared by the JSON routes.

Each helper returns an error message, or None when the value is fine, so a
route can stop at the first problem and report it in the error envelope.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional, Tuple

from roomtracker.core.clock import parse_timestamp


def validate_required(data: Mapping[str, Any], fields: Iterable[str]) -> Optional[str]:
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    return None


def validate_positive_number(value: Any, field_name: str) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"{field_name} must be a number"
    if not math.isfinite(value):
        return f"{field_name} must be a finite number"
    if value <= 0:
        return f"{field_name} must be positive"
    return None


def validate_date_range(start: str, end: str) -> Optional[str]:
    try:
        start_dt = parse_timestamp(start)
        end_dt = parse_timestamp(end)
    except (TypeError, ValueError):
        return "Invalid date format"

    if start_dt >= end_dt:
        return "Start date must be before end date"
    return None


def _plural(n: int) -> str:
    return "" if n == 1 else "s"


def validate_string_length(
    value: Any, field_name: str, min_length: int = 0, max_length: int = 255
) -> Optional[str]:
    if not isinstance(value, str):
        return f"{field_name} must be a string"
    if len(value) < min_length:
        return f"{field_name} must be at least {min_length} character{_plural(min_length)}"
    if len(value) > max_length:
        return f"{field_name} must be at most {max_length} character{_plural(max_length)}"
    return None


def validate_timestamp(value: Any, field_name: str) -> Optional[str]:
    try:
        parse_timestamp(value)
    except (TypeError, ValueError, AttributeError):
        return f"{field_name} must be an ISO-8601 timestamp"
    return None


def parse_limit(value: Optional[str], default: int) -> Tuple[int, Optional[str]]:
    """Parse a ``limit`` query parameter; an empty value means ``default``."""
    if not value:
        return default, None
    try:
        limit = int(value)
    except ValueError:
        return default, "limit must be a number"
    return limit, validate_positive_number(limit, "limit")

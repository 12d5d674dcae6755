"""
Null-tolerant field readers for rows returned by the data service.

Missing or malformed values never reach the arithmetic in the engine:
counters fall back to a default and timestamps to None.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from smashboard.utils.exceptions import ShapeMismatch

logger = logging.getLogger(__name__)


def require_id(row: Mapping[str, Any], field: str = "id") -> int:
    """Read an identifier; rows without one cannot be keyed and are rejected."""
    value = row.get(field)
    if isinstance(value, bool):
        raise ShapeMismatch(field, value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ShapeMismatch(field, value)


def optional_int(row: Mapping[str, Any], field: str) -> Optional[int]:
    value = row.get(field)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Coercing malformed '{field}'={value!r} to None")
        return None


def int_or_zero(row: Mapping[str, Any], field: str) -> int:
    value = optional_int(row, field)
    return value if value is not None else 0


def optional_str(row: Mapping[str, Any], field: str) -> Optional[str]:
    value = row.get(field)
    if value is None or value == "":
        return None
    return str(value)


def flag(row: Mapping[str, Any], field: str) -> bool:
    value = row.get(field)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def timestamp(row: Mapping[str, Any], field: str = "created_at") -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting the trailing 'Z' form."""
    value = row.get(field)
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparsable timestamp '{field}'={value!r}")
        return None

"""Parsing and normalization helpers for configuration values."""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_float(value: Any, default: float, name: str, minimum: Optional[float] = None) -> float:
    """Parse *value* as float, logging and returning *default* when invalid."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; using %s", name, value, default)
        return default
    if minimum is not None and parsed < minimum:
        logger.warning("%s must be >= %s (got %s); using %s", name, minimum, parsed, default)
        return default
    return parsed


def _parse_int(value: Any, default: int, name: str, minimum: Optional[int] = None) -> int:
    """Parse *value* as int, logging and returning *default* when invalid."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; using %s", name, value, default)
        return default
    if minimum is not None and parsed < minimum:
        logger.warning("%s must be >= %s (got %s); using %s", name, minimum, parsed, default)
        return default
    return parsed


def _normalize_choice(value: Any, valid: set[str], default: str, name: str) -> str:
    normalized = str(value).strip().lower()
    if normalized not in valid:
        logger.warning(
            "Invalid %s '%s'. Falling back to '%s'. Valid options: %s",
            name,
            value,
            default,
            ", ".join(sorted(valid)),
        )
        return default
    return normalized

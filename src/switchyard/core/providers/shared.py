"""Small option-handling helpers shared by the provider implementations."""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def option_limit(
    options: Mapping[str, Any],
    default: int = DEFAULT_LIMIT,
    maximum: int = MAX_LIMIT,
) -> int:
    """Read ``options["limit"]`` as a positive int clamped to *maximum*."""
    raw = options.get("limit")
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer limit %r; using %d", raw, default)
        return default
    return max(1, min(value, maximum))


def option_str(options: Mapping[str, Any], key: str, default: str) -> str:
    value = options.get(key)
    if value is None or value == "":
        return default
    return str(value)


def path_segment(value: str) -> str:
    """Percent-encode *value* for use as a single URL path segment."""
    return quote(value.strip(), safe="")


def normalize_symbol(query: str) -> str:
    """Ticker symbols are sent upper-cased with surrounding whitespace removed."""
    return query.strip().upper()


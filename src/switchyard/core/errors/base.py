"""Error-to-response mapping registry.

Provides a centralized mapping from exception types to (ErrorCode, ErrorType)
tuples so the CLI and any embedding host render failures consistently.

Usage:
    from switchyard.core.errors.base import error_to_response

    try:
        await client.execute(target, query)
    except Exception as e:
        result = error_to_response(e)
        if result is not None:
            return result
        raise  # Unknown error, re-raise
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from switchyard.core.errors.common import RequestCancelledError, SwitchyardError
from switchyard.core.errors.configuration import (
    CatalogError,
    ConfigurationError,
    FallbackCycleError,
    ProviderNotFoundError,
)
from switchyard.core.errors.orchestration import (
    AllProvidersFailedError,
    NoAvailableProviderError,
)
from switchyard.core.errors.transport import (
    AuthenticationError,
    HttpStatusError,
    NetworkError,
    ProviderError,
    ProxyUnavailableError,
    TransportTimeoutError,
)


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    UNAVAILABLE = "UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    CANCELLED = "CANCELLED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorType(str, Enum):
    """Coarse error categories."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    UNAVAILABLE = "unavailable"
    UPSTREAM = "upstream"
    CANCELLED = "cancelled"
    INTERNAL = "internal"


ERROR_MAPPINGS: Dict[Type[Exception], Tuple[ErrorCode, ErrorType]] = {
    # --- Configuration errors ---
    ProviderNotFoundError: (ErrorCode.NOT_FOUND, ErrorType.NOT_FOUND),
    FallbackCycleError: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    CatalogError: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    ConfigurationError: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    # --- Provider / transport errors ---
    AuthenticationError: (ErrorCode.UNAUTHORIZED, ErrorType.AUTHENTICATION),
    TransportTimeoutError: (ErrorCode.TIMEOUT, ErrorType.UNAVAILABLE),
    NetworkError: (ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
    ProxyUnavailableError: (ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
    HttpStatusError: (ErrorCode.UPSTREAM_ERROR, ErrorType.UPSTREAM),
    ProviderError: (ErrorCode.UPSTREAM_ERROR, ErrorType.UPSTREAM),
    # --- Orchestration errors ---
    AllProvidersFailedError: (ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
    NoAvailableProviderError: (ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
    # --- Control flow ---
    RequestCancelledError: (ErrorCode.CANCELLED, ErrorType.CANCELLED),
    SwitchyardError: (ErrorCode.INTERNAL_ERROR, ErrorType.INTERNAL),
}


def _lookup(exc: BaseException) -> Optional[Tuple[ErrorCode, ErrorType]]:
    for klass in type(exc).__mro__:
        mapping = ERROR_MAPPINGS.get(klass)
        if mapping is not None:
            return mapping
    return None


def error_to_response(exc: BaseException) -> Optional[dict]:
    """Convert a known exception to an error envelope dict, or None if unknown.

    Walks the exception's MRO so subclasses inherit their parent's mapping.
    A 429 ``HttpStatusError`` is reported as a rate limit.

    Args:
        exc: The exception to convert.

    Returns:
        ``{"success": False, "data": None, "error": ..., "code": ...,
        "error_type": ..., "details": {...}}`` or None when the exception
        is not a switchyard error.
    """
    mapping = _lookup(exc)
    if mapping is None:
        return None

    code, error_type = mapping
    details: Dict[str, Any] = {}
    if isinstance(exc, ProviderError):
        details["provider"] = exc.provider
        details["retryable"] = exc.retryable
    if isinstance(exc, HttpStatusError):
        details["status"] = exc.status
        if exc.status == 429:
            code = ErrorCode.RATE_LIMIT_EXCEEDED
    if isinstance(exc, AllProvidersFailedError):
        details["provider_id"] = exc.provider_id
        details["errors"] = exc.errors
    if isinstance(exc, NoAvailableProviderError):
        details["intent"] = exc.intent
    if isinstance(exc, ProviderNotFoundError):
        details["provider_id"] = exc.provider_id

    return {
        "success": False,
        "data": None,
        "error": str(exc),
        "code": code.value,
        "error_type": error_type.value,
        "details": details,
    }

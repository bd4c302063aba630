"""Provider and transport error classes.

``ProviderError`` is the only family the orchestrator absorbs: anything in
it advances the fallback chain, everything else propagates to the caller.
"""

from typing import Any, Optional

from switchyard.core.errors.common import SwitchyardError

# HTTP statuses that indicate a transient upstream condition
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class ProviderError(SwitchyardError):
    """Base exception for failures attributable to one provider call.

    Attributes:
        provider: Id of the provider (or host) the call was made for
        message: Human-readable error description
        retryable: Whether the error is potentially transient
        original_error: The underlying exception if available
        attempts: Failed AttemptResult records collected by the transport
    """

    def __init__(
        self,
        provider: str,
        message: str,
        retryable: bool = False,
        original_error: Optional[BaseException] = None,
    ):
        self.provider = provider
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        self.attempts: tuple[Any, ...] = ()
        super().__init__(f"[{provider}] {message}")


class AuthenticationError(ProviderError):
    """A required credential is missing or malformed.

    Raised before any network I/O and never retried: the credential has to
    be supplied before the provider can be used.
    """

    def __init__(
        self,
        provider: str,
        message: str = "Authentication failed",
        credential_key: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.credential_key = credential_key
        super().__init__(
            provider=provider,
            message=message,
            retryable=False,
            original_error=original_error,
        )


class TransportError(ProviderError):
    """Base class for failures of a single network exchange."""


class NetworkError(TransportError):
    """Connection-level failure (DNS, refused connection, reset, TLS)."""

    def __init__(
        self,
        provider: str,
        message: str = "Network error",
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(
            provider=provider,
            message=message,
            retryable=True,
            original_error=original_error,
        )


class TransportTimeoutError(TransportError):
    """An attempt did not complete within its per-attempt timeout.

    Attributes:
        timeout_seconds: The timeout that was exceeded
    """

    def __init__(
        self,
        provider: str,
        timeout_seconds: Optional[float] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.timeout_seconds = timeout_seconds
        message = "Request timed out"
        if timeout_seconds is not None:
            message += f" after {timeout_seconds:g}s"
        super().__init__(
            provider=provider,
            message=message,
            retryable=True,
            original_error=original_error,
        )


class HttpStatusError(TransportError):
    """The upstream answered with a non-2xx status.

    Attributes:
        status: HTTP status code
        body: Response body text (truncated, secrets redacted)
    """

    def __init__(
        self,
        provider: str,
        status: int,
        body: str = "",
        message: Optional[str] = None,
    ):
        self.status = status
        self.body = body
        detail = f"HTTP {status}"
        if message:
            detail += f": {message}"
        super().__init__(
            provider=provider,
            message=detail,
            retryable=status in RETRYABLE_STATUS_CODES,
        )


class ProxyUnavailableError(TransportError):
    """Proxy mode was required but no intermediary is configured or reachable."""

    def __init__(
        self,
        provider: str,
        message: str = "Proxy intermediary unavailable",
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(
            provider=provider,
            message=message,
            retryable=False,
            original_error=original_error,
        )

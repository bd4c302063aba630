"""Data classes for the resilient transport layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Optional

if TYPE_CHECKING:
    from switchyard.core.errors import ProviderError
    from switchyard.core.registry.models import AuthConfig

# Type alias for injectable sleep functions (for testing)
SleepFunc = Callable[[float], Awaitable[None]]

# Caller-supplied retry hook: (error, attempt_number) -> retry?
RetryPredicate = Callable[[BaseException, int], bool]

DEFAULT_TIMEOUT = 15.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0
DEFAULT_BATCH_CONCURRENCY = 3


@dataclass
class RequestContext:
    """Everything needed to issue one logical request.

    Created fresh per call; auth injection returns a modified copy rather
    than mutating the caller's instance.

    Attributes:
        url: Target URL without credential-bearing query parameters
        method: HTTP method
        headers: Request headers
        params: Query parameters, merged into the URL at send time
        body: JSON-serializable body, or raw str/bytes
        timeout: Per-attempt timeout in seconds
        max_retries: Total attempt budget (the first attempt included)
        base_delay: Backoff base in seconds
        skip_rate_limit: Bypass the global start-time limiter
        retry_predicate: Extra retry rule OR-ed with the built-in one
        use_proxy: Send every attempt through the proxy intermediary
    """

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    skip_rate_limit: bool = False
    retry_predicate: Optional[RetryPredicate] = None
    use_proxy: bool = False


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of a single attempt within one ``call``."""

    attempt_number: int
    success: bool
    via_proxy: bool = False
    duration_ms: float = 0.0
    data: Any = None
    error_kind: Optional[str] = None
    http_status: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def failed(
        cls,
        attempt_number: int,
        error: BaseException,
        *,
        via_proxy: bool,
        duration_ms: float,
    ) -> "AttemptResult":
        return cls(
            attempt_number=attempt_number,
            success=False,
            via_proxy=via_proxy,
            duration_ms=duration_ms,
            error_kind=type(error).__name__,
            http_status=getattr(error, "status", None),
            message=str(error),
        )


@dataclass(frozen=True)
class TransportResponse:
    """Successful result of ``ResilientTransport.call``.

    Attributes:
        data: Body parsed by content type (JSON, then text, else bytes)
        status_code: HTTP status of the successful attempt
        headers: Response headers
        duration_ms: Duration of the successful attempt
        attempt_number: Which attempt succeeded (1-based)
        via_proxy: Whether the response came through the proxy intermediary
        request_id: Id shared by all attempts of this call
    """

    data: Any
    status_code: int
    headers: Mapping[str, str]
    duration_ms: float
    attempt_number: int
    via_proxy: bool
    request_id: str


@dataclass(frozen=True)
class BatchRequest:
    """One entry of ``ResilientTransport.batch``: a context plus how to authenticate it."""

    context: RequestContext
    auth_config: Optional[AuthConfig] = None
    provider_hint: Optional[str] = None


@dataclass(frozen=True)
class BatchOutcome:
    """Settled result of one batch entry; exactly one of response/error is set."""

    index: int
    response: Optional[TransportResponse] = None
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

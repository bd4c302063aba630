"""Resilient transport layer.

Exports:
    ResilientTransport: Rate-limited, authenticated, retrying HTTP caller
    RequestContext / AttemptResult / TransportResponse: Call data model
    BatchRequest / BatchOutcome: Concurrency-bounded batch entries and results
    MinIntervalRateLimiter, get_rate_limiter, reset_rate_limiter_for_testing
    CancellationToken: Cooperative cancellation
    ProxyClient, RelayProxyClient, EgressProxyClient: Cross-origin recovery
    compute_backoff_delay, is_retryable_error, should_retry, is_origin_block,
    is_origin_restricted
"""

from switchyard.core.transport.auth import apply_auth, format_credential
from switchyard.core.transport.cancellation import CancellationToken
from switchyard.core.transport.client import ResilientTransport
from switchyard.core.transport.http import (
    DEFAULT_USER_AGENT,
    extract_error_message,
    parse_response_body,
)
from switchyard.core.transport.models import (
    AttemptResult,
    BatchOutcome,
    BatchRequest,
    RequestContext,
    RetryPredicate,
    SleepFunc,
    TransportResponse,
)
from switchyard.core.transport.proxy import (
    EgressProxyClient,
    ProxyClient,
    ProxyRequest,
    ProxyResponse,
    RelayProxyClient,
)
from switchyard.core.transport.rate_limit import (
    MinIntervalRateLimiter,
    get_rate_limiter,
    reset_rate_limiter_for_testing,
)
from switchyard.core.transport.retry import (
    ORIGIN_BLOCK_MARKERS,
    ORIGIN_RESTRICTED_DOMAINS,
    compute_backoff_delay,
    is_origin_block,
    is_origin_restricted,
    is_retryable_error,
    should_retry,
)

__all__ = [
    "ResilientTransport",
    "RequestContext",
    "AttemptResult",
    "BatchRequest",
    "BatchOutcome",
    "TransportResponse",
    "RetryPredicate",
    "SleepFunc",
    "CancellationToken",
    "MinIntervalRateLimiter",
    "get_rate_limiter",
    "reset_rate_limiter_for_testing",
    "ProxyClient",
    "ProxyRequest",
    "ProxyResponse",
    "RelayProxyClient",
    "EgressProxyClient",
    "ORIGIN_BLOCK_MARKERS",
    "ORIGIN_RESTRICTED_DOMAINS",
    "compute_backoff_delay",
    "is_origin_block",
    "is_origin_restricted",
    "is_retryable_error",
    "should_retry",
    "apply_auth",
    "format_credential",
    "DEFAULT_USER_AGENT",
    "extract_error_message",
    "parse_response_body",
]

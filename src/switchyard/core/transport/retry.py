"""Retry classification and exponential backoff with jitter.

Backoff before attempt ``n`` (n >= 2) is ``base * 2**(n-2)`` plus a uniform
jitter in ``[0, base)``; the first attempt has no delay.
"""

import random
from typing import Iterable, Optional
from urllib.parse import urlsplit

from switchyard.core.errors import (
    RETRYABLE_STATUS_CODES,
    HttpStatusError,
    NetworkError,
    TransportTimeoutError,
)
from switchyard.core.transport.models import RetryPredicate

# Substrings that identify an origin/access-policy block
ORIGIN_BLOCK_MARKERS = (
    "CORS",
    "Cross-Origin Request Blocked",
    "Access-Control-Allow-Origin",
)

# Hosts known to reject direct cross-origin calls; subdomains match too
ORIGIN_RESTRICTED_DOMAINS = (
    "api.salesforce.com",
    "login.salesforce.com",
    "api.hubapi.com",
    "api.zoho.com",
    "www.zohoapis.com",
    "api.powerbi.com",
    "api.tableau.com",
    "api.monday.com",
    "api.pipedrive.com",
    "api.slack.com",
    "api.atlassian.com",
    "jira.atlassian.com",
)


def compute_backoff_delay(
    attempt: int,
    base_delay: float = 1.0,
    rng: Optional[random.Random] = None,
) -> float:
    """Return the delay to wait before *attempt* (1-based).

    Args:
        attempt: The attempt about to be made
        base_delay: Backoff base in seconds
        rng: Injectable Random instance for deterministic testing
    """
    if attempt <= 1:
        return 0.0
    _rng = rng or random.Random()
    return base_delay * (2 ** (attempt - 2)) + _rng.random() * base_delay


def is_retryable_error(error: BaseException) -> bool:
    """Built-in retry rule: network failures, timeouts, transient HTTP statuses."""
    if isinstance(error, (NetworkError, TransportTimeoutError)):
        return True
    if isinstance(error, HttpStatusError):
        return error.status in RETRYABLE_STATUS_CODES
    return False


def should_retry(
    error: BaseException,
    attempt: int,
    predicate: Optional[RetryPredicate] = None,
) -> bool:
    """Combine the built-in rule with the caller's predicate (logical OR)."""
    if is_retryable_error(error):
        return True
    if predicate is not None:
        return bool(predicate(error, attempt))
    return False


def is_origin_block(error: BaseException) -> bool:
    """Whether *error* looks like a cross-origin/access-policy rejection."""
    text = str(error)
    body = getattr(error, "body", None)
    if isinstance(body, str):
        text = f"{text}\n{body}"
    return any(marker in text for marker in ORIGIN_BLOCK_MARKERS)


def is_origin_restricted(url: str, domains: Iterable[str] = ORIGIN_RESTRICTED_DOMAINS) -> bool:
    """Whether *url* targets a host (or subdomain of a host) in *domains*."""
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)

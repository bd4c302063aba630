"""Resilient transport: the single choke point for outbound provider calls.

Every call goes through, in order:

1. The process-wide start-time rate limiter (unless ``skip_rate_limit``)
2. Credential injection (missing credential fails before any I/O)
3. An attempt loop bounded by ``max_retries``, each attempt bounded by
   ``timeout``, with exponential backoff and jitter between attempts
4. Cross-origin recovery: if the *first* attempt is rejected by an
   origin/access policy, the request is re-issued through the proxy
   intermediary immediately (no backoff, but it spends one attempt) and the
   rest of the call stays in proxy mode. Calls with ``use_proxy`` set, or
   aimed at a known origin-restricted host while a proxy is configured,
   start in proxy mode.

Cancellation is honoured at every suspension point.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Any, Iterable, Optional, Union
from urllib.parse import urlsplit

import httpx
from ulid import ULID

from switchyard.core.credentials import CredentialStore
from switchyard.core.errors import (
    HttpStatusError,
    NetworkError,
    ProviderError,
    ProxyUnavailableError,
    TransportError,
    TransportTimeoutError,
)
from switchyard.core.observability import (
    audit_log,
    redact_headers,
    redact_params,
    redact_secrets,
    redact_url,
)
from switchyard.core.registry.models import AuthConfig
from switchyard.core.transport.auth import apply_auth
from switchyard.core.transport.cancellation import CancellationToken
from switchyard.core.transport.http import (
    DEFAULT_USER_AGENT,
    error_body,
    extract_error_message,
    parse_response_body,
)
from switchyard.core.transport.models import (
    DEFAULT_BASE_DELAY,
    DEFAULT_BATCH_CONCURRENCY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    AttemptResult,
    BatchOutcome,
    BatchRequest,
    RequestContext,
    SleepFunc,
    TransportResponse,
)
from switchyard.core.transport.proxy import ProxyClient, ProxyRequest
from switchyard.core.transport.rate_limit import MinIntervalRateLimiter, get_rate_limiter
from switchyard.core.transport.retry import (
    compute_backoff_delay,
    is_origin_block,
    is_origin_restricted,
    should_retry,
)

logger = logging.getLogger(__name__)


class ResilientTransport:
    """Wraps an ``httpx.AsyncClient`` with rate limiting, auth, retry and proxy recovery.

    Args:
        credentials: Store consulted for auth injection
        rate_limiter: Start-time limiter; defaults to the process-wide one
        proxy_client: Intermediary for cross-origin recovery, if any
        http_client: Pre-built client (tests pass one with ``MockTransport``)
        timeout: Default per-attempt timeout for ``build_context``
        max_retries: Default attempt budget for ``build_context``
        base_delay: Default backoff base for ``build_context``
        user_agent: Sent unless the request sets its own
        rng: Injectable Random instance for deterministic jitter
        sleep_func: Injectable sleep for backoff waits
    """

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        rate_limiter: Optional[MinIntervalRateLimiter] = None,
        proxy_client: Optional[ProxyClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        user_agent: str = DEFAULT_USER_AGENT,
        rng: Optional[random.Random] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self._credentials = credentials
        self._rate_limiter = rate_limiter or get_rate_limiter()
        self._proxy = proxy_client
        self._client = http_client
        self._owns_client = http_client is None
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.user_agent = user_agent
        self._rng = rng or random.Random()
        self._sleep = sleep_func or asyncio.sleep

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def rate_limiter(self) -> MinIntervalRateLimiter:
        return self._rate_limiter

    @property
    def proxy_client(self) -> Optional[ProxyClient]:
        return self._proxy

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        if self._proxy is not None:
            await self._proxy.aclose()

    async def __aenter__(self) -> "ResilientTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def build_context(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
        **overrides: Any,
    ) -> RequestContext:
        """Create a ``RequestContext`` seeded with this transport's defaults."""
        settings: dict[str, Any] = {
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "base_delay": self.base_delay,
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return RequestContext(
            url=url,
            method=method,
            params=dict(params or {}),
            headers=dict(headers or {}),
            body=body,
            **settings,
        )

    async def call(
        self,
        context: RequestContext,
        auth_config: Optional[AuthConfig] = None,
        provider_hint: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TransportResponse:
        """Issue *context* with rate limiting, auth, retry and proxy recovery.

        Raises:
            AuthenticationError: Credential missing or malformed (no I/O made)
            TransportTimeoutError: Last attempt timed out
            NetworkError: Last attempt failed at the connection level
            HttpStatusError: Last attempt returned a non-2xx status
            ProxyUnavailableError: Proxy mode required but unavailable
            RequestCancelledError: *cancel_token* fired
        """
        provider = provider_hint or urlsplit(context.url).netloc or "unknown"
        request_id = f"req-{ULID()}"

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if context.use_proxy and self._proxy is None:
            raise ProxyUnavailableError(provider, "Proxy mode requested but no proxy is configured")

        if not context.skip_rate_limit:
            await self._rate_limiter.await_slot(cancel_token)

        context = await apply_auth(context, auth_config, self._credentials, provider)

        max_attempts = max(1, context.max_retries)
        attempts: list[AttemptResult] = []
        via_proxy = context.use_proxy or (
            self._proxy is not None and is_origin_restricted(context.url)
        )
        if via_proxy:
            logger.debug("%s: request %s starts in proxy mode", provider, request_id)
        attempt = 1

        while True:
            started = time.monotonic()
            try:
                response = await self._attempt(context, provider, via_proxy, cancel_token)
            except TransportError as exc:
                duration_ms = (time.monotonic() - started) * 1000
                attempts.append(
                    AttemptResult.failed(attempt, exc, via_proxy=via_proxy, duration_ms=duration_ms)
                )

                if attempt == 1 and not via_proxy and is_origin_block(exc):
                    if self._proxy is None:
                        error = ProxyUnavailableError(
                            provider,
                            "Request blocked by origin policy and no proxy is configured",
                            original_error=exc,
                        )
                        error.attempts = tuple(attempts)
                        raise error from exc
                    if attempt >= max_attempts:
                        exc.attempts = tuple(attempts)
                        raise
                    via_proxy = True
                    attempt += 1
                    logger.info("%s: origin policy rejected request %s, switching to proxy", provider, request_id)
                    audit_log("proxy_mode_enabled", provider=provider, request_id=request_id)
                    continue

                if attempt >= max_attempts or not should_retry(exc, attempt, context.retry_predicate):
                    logger.warning(
                        "%s: request %s failed after %d attempt(s): %s",
                        provider,
                        request_id,
                        attempt,
                        exc,
                    )
                    exc.attempts = tuple(attempts)
                    raise

                attempt += 1
                delay = compute_backoff_delay(attempt, context.base_delay, self._rng)
                logger.debug(
                    "%s: retrying request %s (attempt %d/%d) in %.2fs: %s",
                    provider,
                    request_id,
                    attempt,
                    max_attempts,
                    delay,
                    exc,
                )
                audit_log(
                    "retry_attempt",
                    provider=provider,
                    request_id=request_id,
                    attempt=attempt,
                    delay_seconds=round(delay, 3),
                    error_type=type(exc).__name__,
                )
                if cancel_token is not None:
                    await cancel_token.guard(self._sleep(delay))
                else:
                    await self._sleep(delay)
                continue

            data, status_code, headers = response
            duration_ms = (time.monotonic() - started) * 1000
            logger.debug(
                "%s: request %s succeeded on attempt %d in %.1fms%s",
                provider,
                request_id,
                attempt,
                duration_ms,
                " via proxy" if via_proxy else "",
            )
            return TransportResponse(
                data=data,
                status_code=status_code,
                headers=headers,
                duration_ms=duration_ms,
                attempt_number=attempt,
                via_proxy=via_proxy,
                request_id=request_id,
            )

    async def batch(
        self,
        requests: Iterable[Union[RequestContext, BatchRequest]],
        max_concurrency: int = DEFAULT_BATCH_CONCURRENCY,
        cancel_token: Optional[CancellationToken] = None,
    ) -> list[BatchOutcome]:
        """Run several calls with at most *max_concurrency* in flight.

        Every entry settles independently: a provider failure is recorded in
        its ``BatchOutcome`` and never affects its siblings. Outcomes come back
        in input order. Cancellation propagates.
        """
        entries = [r if isinstance(r, BatchRequest) else BatchRequest(context=r) for r in requests]
        semaphore = asyncio.Semaphore(max(1, max_concurrency))

        async def _run(index: int, entry: BatchRequest) -> BatchOutcome:
            async with semaphore:
                try:
                    response = await self.call(
                        entry.context,
                        auth_config=entry.auth_config,
                        provider_hint=entry.provider_hint,
                        cancel_token=cancel_token,
                    )
                except ProviderError as exc:
                    return BatchOutcome(index=index, error=exc)
                return BatchOutcome(index=index, response=response)

        logger.debug("Running batch of %d request(s), concurrency %d", len(entries), max_concurrency)
        return list(await asyncio.gather(*(_run(i, e) for i, e in enumerate(entries))))

    async def _attempt(
        self,
        context: RequestContext,
        provider: str,
        via_proxy: bool,
        cancel_token: Optional[CancellationToken],
    ) -> tuple[Any, int, dict[str, str]]:
        send = self._send_via_proxy(context, provider) if via_proxy else self._send_direct(context, provider)
        bounded = asyncio.wait_for(send, timeout=context.timeout)
        try:
            if cancel_token is not None:
                return await cancel_token.guard(bounded)
            return await bounded
        except asyncio.TimeoutError as e:
            raise TransportTimeoutError(provider, context.timeout, original_error=e) from e

    async def _send_direct(
        self,
        context: RequestContext,
        provider: str,
    ) -> tuple[Any, int, dict[str, str]]:
        headers = {"User-Agent": self.user_agent, **context.headers}
        kwargs: dict[str, Any] = {"headers": headers, "timeout": context.timeout}
        if context.params:
            kwargs["params"] = context.params
        if isinstance(context.body, (dict, list)):
            kwargs["json"] = context.body
        elif context.body is not None:
            kwargs["content"] = context.body

        logger.debug(
            "%s %s params=%s headers=%s",
            context.method,
            redact_url(context.url),
            redact_params(context.params or {}),
            redact_headers(headers),
        )
        try:
            response = await self._get_client().request(context.method, context.url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(provider, context.timeout, original_error=e) from e
        except httpx.RequestError as e:
            raise NetworkError(
                provider,
                redact_secrets(str(e)) or type(e).__name__,
                original_error=e,
            ) from e

        if not response.is_success:
            raise HttpStatusError(
                provider,
                response.status_code,
                body=error_body(response),
                message=extract_error_message(response),
            )
        return parse_response_body(response), response.status_code, dict(response.headers)

    async def _send_via_proxy(
        self,
        context: RequestContext,
        provider: str,
    ) -> tuple[Any, int, dict[str, str]]:
        if self._proxy is None:
            raise ProxyUnavailableError(provider, "Proxy mode requested but no proxy is configured")

        url = httpx.URL(context.url)
        if context.params:
            url = url.copy_merge_params(context.params)
        request = ProxyRequest(
            original_url=str(url),
            method=context.method,
            headers={"User-Agent": self.user_agent, **context.headers},
            body=context.body,
            timeout=context.timeout,
        )
        reply = await self._proxy.forward(request)
        if not reply.ok:
            if reply.status_code is not None and reply.status_code >= 400:
                raise HttpStatusError(provider, reply.status_code, body=reply.error or "", message=reply.error)
            raise NetworkError(provider, f"Proxy relay error: {redact_secrets(reply.error or '')}")
        return reply.data, reply.status_code or 200, dict(reply.headers)

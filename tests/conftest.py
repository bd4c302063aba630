"""Shared fixtures for switchyard tests.

Provides a deterministic clock, an in-memory credential store and a factory
for ``ResilientTransport`` instances backed by ``httpx.MockTransport``.
"""

import random
from typing import Any, Callable, Optional

import httpx
import pytest

from switchyard.core.credentials import CredentialStore, InMemoryCredentialStore
from switchyard.core.providers.base import Provider
from switchyard.core.registry import Priority, ProviderCategory, ProviderDescriptor
from switchyard.core.transport import (
    MinIntervalRateLimiter,
    ProxyClient,
    ResilientTransport,
    reset_rate_limiter_for_testing,
)


@pytest.fixture(autouse=True)
def _reset_global_rate_limiter():
    reset_rate_limiter_for_testing()
    yield
    reset_rate_limiter_for_testing()


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return InMemoryCredentialStore()


@pytest.fixture
def sleeps():
    """Backoff delays recorded by transports built with ``make_transport``."""
    return []


@pytest.fixture
def make_transport(memory_store, sleeps):
    """Build a transport whose network is the given MockTransport handler."""

    async def _record_sleep(delay: float) -> None:
        sleeps.append(delay)

    def _make(
        handler: Callable[[httpx.Request], Any],
        *,
        credentials: Optional[CredentialStore] = None,
        proxy_client: Optional[ProxyClient] = None,
        **kwargs: Any,
    ) -> ResilientTransport:
        return ResilientTransport(
            credentials if credentials is not None else memory_store,
            rate_limiter=MinIntervalRateLimiter(0.0),
            proxy_client=proxy_client,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            rng=random.Random(1234),
            sleep_func=_record_sleep,
            **kwargs,
        )

    return _make


def _unexpected_request(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected network call: {request.method} {request.url}")


@pytest.fixture
def offline_transport(make_transport):
    """A transport that fails the test if anything reaches the network."""
    return make_transport(_unexpected_request)


class ScriptedProvider(Provider):
    """Provider that replays scripted outcomes and records each call.

    Each outcome is either a payload to return or an exception to raise; the
    last outcome repeats once the script is exhausted.
    """

    def __init__(self, name: str, outcomes: list[Any], log: Optional[list[str]] = None):
        self.provider_name = name
        self.outcomes = list(outcomes)
        self.calls: list[str] = []
        self.log = log if log is not None else []

    async def invoke(self, query, options, ctx):
        self.calls.append(query)
        self.log.append(self.provider_name)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def make_descriptor(
    provider_id: str,
    provider: Provider,
    *,
    category: ProviderCategory = ProviderCategory.SEARCH,
    priority: Priority = Priority.MEDIUM,
    fallbacks: tuple[str, ...] = (),
    credential: Optional[str] = None,
) -> ProviderDescriptor:
    return ProviderDescriptor(
        id=provider_id,
        display_name=provider_id.title(),
        category=category,
        priority=priority,
        provider=provider,
        requires_credential=credential is not None,
        credential_type=credential,
        fallback_chain=fallbacks,
    )


@pytest.fixture
def scripted():
    """The ``ScriptedProvider`` class."""
    return ScriptedProvider


@pytest.fixture
def descriptor():
    """Factory for in-memory provider descriptors."""
    return make_descriptor

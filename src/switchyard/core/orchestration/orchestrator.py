"""Fallback and fan-out orchestration across providers.

Two contracts:

``execute_with_fallback(provider_id, query)``
    Walks ``[provider_id] + fallback_chain`` in order. A candidate whose
    required credential is missing is skipped without touching the network.
    The first success wins; if every candidate fails the *last* failure is
    surfaced inside ``AllProvidersFailedError``.

``execute_for_intent(query)``
    Classifies the query, selects available providers for the intent and
    either fans out to several of them concurrently (low confidence or
    ``use_multiple``) or runs the single best one.

Only ``ProviderError`` advances a chain. Configuration errors and
cancellation propagate immediately. In a fan-out every other failure of a
branch is reported as that branch's result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from typing import Optional, Union

from switchyard.core.context import correlation_context
from switchyard.core.credentials import CredentialStore
from switchyard.core.errors import (
    AllProvidersFailedError,
    AuthenticationError,
    ConfigurationError,
    NoAvailableProviderError,
    ProviderError,
    RequestCancelledError,
)
from switchyard.core.intent import IntentClassifier, IntentResult
from switchyard.core.observability import audit_log
from switchyard.core.orchestration.models import ExecuteOptions, OrchestrationResult
from switchyard.core.providers.base import InvocationContext
from switchyard.core.registry import ProviderDescriptor, ProviderRegistry
from switchyard.core.registry.models import IntentMapping
from switchyard.core.transport.client import ResilientTransport

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROVIDERS = 2
DEFAULT_CONFIDENCE_THRESHOLD = 0.5


class Orchestrator:
    """Routes requests to providers with fallback and optional fan-out.

    Args:
        registry: Provider registry (also the source of intent mappings)
        transport: Resilient transport handed to providers
        credentials: Store used for the pre-flight availability check
        classifier: Intent classifier; built from the registry when omitted
        max_providers: Default fan-out width
        confidence_threshold: Below this, ``execute_for_intent`` fans out
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        transport: ResilientTransport,
        credentials: CredentialStore,
        classifier: Optional[IntentClassifier] = None,
        *,
        max_providers: int = DEFAULT_MAX_PROVIDERS,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ):
        self.registry = registry
        self.transport = transport
        self.credentials = credentials
        self.classifier = classifier or IntentClassifier(registry.intents)
        self.max_providers = max_providers
        self.confidence_threshold = confidence_threshold

    async def is_available(self, descriptor: ProviderDescriptor) -> bool:
        """Cheap availability check: credential present when one is required."""
        if not descriptor.requires_credential:
            return True
        if not descriptor.credential_type:
            return False
        return await self.credentials.has(descriptor.credential_type)

    # =========================================================================
    # Contract A: single provider with fallback chain
    # =========================================================================

    async def execute_with_fallback(
        self,
        provider_id: str,
        query: str,
        options: Optional[ExecuteOptions] = None,
    ) -> OrchestrationResult:
        """Run *provider_id*, then its fallbacks in order, until one succeeds.

        Raises:
            ProviderNotFoundError: If any id in the chain is unknown
            AllProvidersFailedError: If every candidate failed
            RequestCancelledError: If the caller cancelled
        """
        options = options or ExecuteOptions()
        chain = self.registry.fallback_chain(provider_id)
        head = chain[0]
        errors: dict[str, str] = {}
        last_error: Optional[BaseException] = None
        started = time.monotonic()

        with correlation_context():
            for index, candidate in enumerate(chain):
                if options.cancel_token is not None:
                    options.cancel_token.raise_if_cancelled()

                if not await self.is_available(candidate):
                    last_error = AuthenticationError(
                        candidate.id,
                        f"Provider requires credential '{candidate.credential_type}' but none found",
                        credential_key=candidate.credential_type,
                    )
                    errors[candidate.id] = str(last_error)
                    logger.info("Skipping %s: missing credential %s", candidate.id, candidate.credential_type)
                    audit_log(
                        "provider_skipped",
                        provider=candidate.id,
                        reason="missing_credential",
                        credential_type=candidate.credential_type,
                    )
                    continue

                if index > 0:
                    audit_log(
                        "fallback_engaged",
                        requested=provider_id,
                        provider=candidate.id,
                        position=index,
                    )

                ctx = InvocationContext(
                    transport=self.transport,
                    provider_id=candidate.id,
                    auth=candidate.auth,
                    cancel_token=options.cancel_token,
                    timeout=options.timeout,
                    max_retries=options.max_retries,
                )
                logger.debug("Trying provider %s for %r", candidate.id, query)
                try:
                    data = await candidate.invoke(query, options.provider_options, ctx)
                except ProviderError as exc:
                    last_error = exc
                    errors[candidate.id] = str(exc)
                    logger.warning("Provider %s failed: %s", candidate.display_name, exc)
                    audit_log(
                        "provider_failed",
                        provider=candidate.id,
                        error_type=type(exc).__name__,
                        retryable=exc.retryable,
                    )
                    continue

                return OrchestrationResult(
                    success=True,
                    provider_id=candidate.id,
                    provider_name=candidate.display_name,
                    data=data,
                    was_fallback=candidate.id != provider_id,
                    errors=errors,
                    duration_ms=(time.monotonic() - started) * 1000,
                )

        logger.warning("All %d provider(s) failed for %s", len(chain), head.id)
        raise AllProvidersFailedError(provider_id, last_error, errors)

    # =========================================================================
    # Contract B: intent-driven selection
    # =========================================================================

    def classify(self, query: str) -> IntentResult:
        return self.classifier.classify(query)

    def _mapping_for(self, intent: str) -> Optional[IntentMapping]:
        return self.registry.intent(intent) or self.registry.intent(self.classifier.default_intent)

    async def select_providers(
        self,
        intent: str,
        include_unavailable: bool = False,
    ) -> list[ProviderDescriptor]:
        """Candidate providers for *intent*, sorted by priority.

        Available primary providers are used when there are any; otherwise
        available fallback providers. With *include_unavailable* both sets
        are returned without the availability filter.
        """
        mapping = self._mapping_for(intent)
        if mapping is None:
            return []

        selected: list[ProviderDescriptor] = []
        for pid in mapping.primary:
            descriptor = self.registry.lookup(pid)
            if include_unavailable or await self.is_available(descriptor):
                selected.append(descriptor)

        if not selected or include_unavailable:
            for pid in mapping.fallback:
                descriptor = self.registry.lookup(pid)
                if descriptor in selected:
                    continue
                if include_unavailable or await self.is_available(descriptor):
                    selected.append(descriptor)

        return sorted(selected, key=lambda d: d.priority)

    async def execute_for_intent(
        self,
        query: str,
        options: Optional[ExecuteOptions] = None,
    ) -> list[OrchestrationResult]:
        """Classify *query* and run the best provider(s) for its intent.

        Raises:
            NoAvailableProviderError: If no provider can serve the intent
            AllProvidersFailedError: Single-provider path only, when its chain fails
            RequestCancelledError: If the caller cancelled
        """
        options = options or ExecuteOptions()

        with correlation_context():
            if options.intent:
                intent_result = IntentResult(options.intent, 1.0)
            else:
                intent_result = self.classify(query)
            audit_log(
                "intent_classified",
                intent=intent_result.intent,
                confidence=round(intent_result.confidence, 3),
                forced=bool(options.intent),
            )

            candidates = await self.select_providers(intent_result.intent, options.include_unavailable)
            if not candidates:
                raise NoAvailableProviderError(intent_result.intent)

            logger.info(
                "Intent %s (confidence %.2f): candidates %s",
                intent_result.intent,
                intent_result.confidence,
                [d.id for d in candidates],
            )

            if options.use_multiple or intent_result.confidence < self.confidence_threshold:
                width = options.max_providers or self.max_providers
                selected = candidates[: max(1, width)]
                return list(
                    await asyncio.gather(*(self._execute_isolated(d.id, query, options) for d in selected))
                )

            return [await self.execute_with_fallback(candidates[0].id, query, options)]

    async def _execute_isolated(
        self,
        provider_id: str,
        query: str,
        options: ExecuteOptions,
    ) -> OrchestrationResult:
        """Fan-out branch: any failure becomes a failure result so siblings always report.

        Cancellation and configuration errors still propagate.
        """
        try:
            return await self.execute_with_fallback(provider_id, query, options)
        except AllProvidersFailedError as exc:
            descriptor = self.registry.lookup(provider_id)
            return OrchestrationResult(
                success=False,
                provider_id=provider_id,
                provider_name=descriptor.display_name,
                error=str(exc.last_error) if exc.last_error is not None else str(exc),
                errors=exc.errors,
            )
        except (RequestCancelledError, ConfigurationError):
            raise
        except Exception as exc:
            logger.exception("Fan-out branch for %s failed unexpectedly", provider_id)
            descriptor = self.registry.lookup(provider_id)
            return OrchestrationResult(
                success=False,
                provider_id=provider_id,
                provider_name=descriptor.display_name,
                error=f"{type(exc).__name__}: {exc}",
                errors={provider_id: str(exc)},
            )

    # =========================================================================
    # Unified entry point
    # =========================================================================

    async def execute(
        self,
        target: str,
        query: Optional[str] = None,
        options: Optional[ExecuteOptions] = None,
    ) -> Union[OrchestrationResult, list[OrchestrationResult]]:
        """Dispatch on *target*.

        - A registered provider id runs ``execute_with_fallback`` (one result)
        - An intent name runs ``execute_for_intent`` with that intent forced
        - Anything else is treated as free text and classified

        When *query* is omitted, *target* itself is the query text.
        """
        options = options or ExecuteOptions()
        if target in self.registry:
            return await self.execute_with_fallback(target, query if query is not None else "", options)
        if query is not None and self.registry.intent(target) is not None:
            options = replace(options, intent=target)
            return await self.execute_for_intent(query, options)
        text = target if query is None else f"{target} {query}"
        return await self.execute_for_intent(text, options)

"""Orchestration error classes."""

from typing import Mapping, Optional

from switchyard.core.errors.common import SwitchyardError


class OrchestrationError(SwitchyardError):
    """Base class for errors surfaced by the orchestrator."""


class AllProvidersFailedError(OrchestrationError):
    """Every candidate in a fallback chain failed.

    Attributes:
        provider_id: The provider the chain started from
        last_error: Failure of the last candidate tried
        errors: Mapping of provider id to its failure message, in try order
    """

    def __init__(
        self,
        provider_id: str,
        last_error: Optional[BaseException],
        errors: Optional[Mapping[str, str]] = None,
    ):
        self.provider_id = provider_id
        self.last_error = last_error
        self.errors = dict(errors or {})
        detail = str(last_error) if last_error is not None else "Unknown error"
        super().__init__(f"All providers failed for {provider_id}. Last error: {detail}")


class NoAvailableProviderError(OrchestrationError):
    """No provider is available for the classified intent.

    Attributes:
        intent: The intent no provider could serve
    """

    def __init__(self, intent: str):
        self.intent = intent
        super().__init__(f"No available providers for intent: {intent}")

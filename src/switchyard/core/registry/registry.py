"""Static provider registry.

The registry is populated once from a declarative catalog and offers no
mutation API afterwards. ``validate()`` runs at construction time so a
registry that exists is always free of dangling references and fallback
cycles.
"""

import logging
from typing import Iterable, Iterator, Optional

from switchyard.core.errors import (
    ConfigurationError,
    FallbackCycleError,
    ProviderNotFoundError,
)
from switchyard.core.registry.models import (
    IntentMapping,
    ProviderCategory,
    ProviderDescriptor,
)

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Lookup table of provider descriptors and intent mappings."""

    def __init__(
        self,
        descriptors: Iterable[ProviderDescriptor],
        intents: Iterable[IntentMapping] = (),
    ):
        self._providers: dict[str, ProviderDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in self._providers:
                raise ConfigurationError(f"Duplicate provider id: {descriptor.id}")
            self._providers[descriptor.id] = descriptor

        self._intents: dict[str, IntentMapping] = {}
        for mapping in intents:
            if mapping.intent in self._intents:
                raise ConfigurationError(f"Duplicate intent: {mapping.intent}")
            self._intents[mapping.intent] = mapping

        self.validate()
        logger.debug(
            "Provider registry loaded: %d providers, %d intents",
            len(self._providers),
            len(self._intents),
        )

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[ProviderDescriptor]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)

    def ids(self) -> list[str]:
        return list(self._providers)

    def lookup(self, provider_id: str) -> ProviderDescriptor:
        """Return the descriptor for *provider_id*.

        Raises:
            ProviderNotFoundError: If the id is not registered
        """
        try:
            return self._providers[provider_id]
        except KeyError:
            raise ProviderNotFoundError(provider_id) from None

    def by_category(self, category: ProviderCategory) -> list[ProviderDescriptor]:
        """Descriptors in *category*, sorted by priority then declaration order."""
        category = ProviderCategory(category)
        matches = [d for d in self._providers.values() if d.category is category]
        return sorted(matches, key=lambda d: d.priority)

    def fallback_chain(self, provider_id: str) -> list[ProviderDescriptor]:
        """Resolve ``[provider_id] + fallback_chain`` to descriptors, in order."""
        head = self.lookup(provider_id)
        return [head] + [self.lookup(fid) for fid in head.fallback_chain]

    @property
    def intents(self) -> list[IntentMapping]:
        """Intent mappings in declaration order."""
        return list(self._intents.values())

    def intent(self, name: str) -> Optional[IntentMapping]:
        return self._intents.get(name)

    def validate(self) -> None:
        """Check references and fallback graph.

        Raises:
            ProviderNotFoundError: On a fallback or intent id that is not registered
            FallbackCycleError: If any fallback chain can reach its own id
        """
        for descriptor in self._providers.values():
            for fid in descriptor.fallback_chain:
                if fid not in self._providers:
                    raise ProviderNotFoundError(fid, referenced_by=descriptor.id)

        for mapping in self._intents.values():
            for pid in mapping.primary + mapping.fallback:
                if pid not in self._providers:
                    raise ProviderNotFoundError(pid, referenced_by=f"intent {mapping.intent}")

        for provider_id in self._providers:
            cycle = self._find_cycle(provider_id)
            if cycle:
                raise FallbackCycleError(cycle)

    def _find_cycle(self, start: str) -> Optional[list[str]]:
        # Depth-first walk over fallback edges; a node seen on the current
        # path means a cycle.
        stack: list[tuple[str, Iterator[str]]] = [
            (start, iter(self._providers[start].fallback_chain))
        ]
        path = [start]
        on_path = {start}
        done: set[str] = set()

        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.pop()
                on_path.discard(node)
                done.add(node)
                continue
            if child in on_path:
                return path[path.index(child):] + [child]
            if child in done:
                continue
            stack.append((child, iter(self._providers[child].fallback_chain)))
            path.append(child)
            on_path.add(child)
        return None

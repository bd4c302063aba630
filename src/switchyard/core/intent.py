"""Keyword-scored intent classification.

Each intent's score is the total length of its keywords that occur as
substrings of the lower-cased query, so longer (more specific) keywords
weigh more. Confidence is the winning score divided by the query length.
Ties go to the intent declared first in the catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from switchyard.core.registry.models import IntentMapping

logger = logging.getLogger(__name__)

DEFAULT_INTENT = "search"
DEFAULT_CONFIDENCE = 0.1


@dataclass(frozen=True)
class IntentScore:
    """An intent with its normalized confidence."""

    intent: str
    confidence: float


@dataclass(frozen=True)
class IntentResult:
    """Classification outcome.

    Attributes:
        intent: Winning intent
        confidence: Winning score / query length
        alternatives: Other intents that scored above zero, best first
    """

    intent: str
    confidence: float
    alternatives: tuple[IntentScore, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent": self.intent,
            "confidence": self.confidence,
            "alternatives": [
                {"intent": alt.intent, "confidence": alt.confidence} for alt in self.alternatives
            ],
        }


class IntentClassifier:
    """Scores queries against the keyword lists of a set of intent mappings."""

    def __init__(
        self,
        mappings: Iterable[IntentMapping],
        *,
        default_intent: str = DEFAULT_INTENT,
        default_confidence: float = DEFAULT_CONFIDENCE,
    ):
        self._mappings = tuple(mappings)
        self.default_intent = default_intent
        self.default_confidence = default_confidence

    @property
    def intents(self) -> list[str]:
        return [m.intent for m in self._mappings]

    def score(self, query: str) -> list[tuple[str, int]]:
        """Raw per-intent scores in declaration order."""
        text = query.lower()
        return [
            (mapping.intent, sum(len(keyword) for keyword in mapping.keywords if keyword in text))
            for mapping in self._mappings
        ]

    def classify(self, query: str) -> IntentResult:
        """Classify *query*; falls back to the default intent when nothing matches."""
        length = len(query)
        # sorted() is stable, so equal scores keep declaration order
        ranked = sorted(
            ((intent, score) for intent, score in self.score(query) if score > 0),
            key=lambda item: item[1],
            reverse=True,
        )
        if not ranked or length == 0:
            return IntentResult(self.default_intent, self.default_confidence)

        best_intent, best_score = ranked[0]
        result = IntentResult(
            intent=best_intent,
            confidence=best_score / length,
            alternatives=tuple(IntentScore(intent, score / length) for intent, score in ranked[1:]),
        )
        logger.debug("Classified %r as %s (confidence %.2f)", query, result.intent, result.confidence)
        return result

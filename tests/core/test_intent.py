"""Tests for keyword-scored intent classification."""

import pytest

from switchyard.core.intent import DEFAULT_CONFIDENCE, DEFAULT_INTENT, IntentClassifier
from switchyard.core.registry import IntentMapping, load_catalog


@pytest.fixture
def classifier():
    return IntentClassifier(load_catalog().intents)


class TestClassify:
    """Classification against the bundled intent keywords."""

    def test_news_query(self, classifier):
        """Both latest and news match: (6 + 4) / 14."""
        result = classifier.classify("latest AI news")
        assert result.intent == "news"
        assert result.confidence == pytest.approx(10 / 14)
        assert result.alternatives == ()

    def test_case_insensitive(self, classifier):
        assert classifier.classify("LATEST AI NEWS").intent == "news"

    def test_alternatives_ranked(self, classifier):
        """Runners-up are reported best first with their own confidence."""
        result = classifier.classify("stock market news")
        assert result.intent == "stocks"
        assert result.confidence == pytest.approx(11 / 17)
        assert [(a.intent, a.confidence) for a in result.alternatives] == [("news", pytest.approx(4 / 17))]

    def test_low_confidence_weather(self, classifier):
        result = classifier.classify("weather in Paris")
        assert result.intent == "weather"
        assert result.confidence == pytest.approx(7 / 16)

    def test_no_match_defaults_to_search(self, classifier):
        result = classifier.classify("zxqv")
        assert result.intent == DEFAULT_INTENT == "search"
        assert result.confidence == DEFAULT_CONFIDENCE == 0.1
        assert result.alternatives == ()

    def test_empty_query(self, classifier):
        result = classifier.classify("")
        assert (result.intent, result.confidence) == ("search", 0.1)

    def test_to_dict(self, classifier):
        data = classifier.classify("stock market news").to_dict()
        assert data["intent"] == "stocks"
        assert data["alternatives"][0]["intent"] == "news"


class TestTieBreaking:
    """Equal scores resolve to the intent declared first."""

    def test_declaration_order_wins(self):
        classifier = IntentClassifier(
            [
                IntentMapping("alpha", keywords=("abcd",)),
                IntentMapping("beta", keywords=("wxyz",)),
            ]
        )
        result = classifier.classify("wxyz abcd")
        assert result.intent == "alpha"
        assert [a.intent for a in result.alternatives] == ["beta"]

        reversed_classifier = IntentClassifier(
            [
                IntentMapping("beta", keywords=("wxyz",)),
                IntentMapping("alpha", keywords=("abcd",)),
            ]
        )
        assert reversed_classifier.classify("wxyz abcd").intent == "beta"

    def test_custom_default(self):
        classifier = IntentClassifier([], default_intent="general", default_confidence=0.0)
        result = classifier.classify("anything")
        assert (result.intent, result.confidence) == ("general", 0.0)

    def test_score_is_keyword_length(self):
        classifier = IntentClassifier([IntentMapping("x", keywords=("ab", "abc", "zz"))])
        assert classifier.score("abc") == [("x", 5)]

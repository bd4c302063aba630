"""Sensitive data redaction utilities.

Credentials are injected into headers and query strings at call time, so
anything that reaches a log line or an error message (URLs, header maps,
upstream error bodies) is passed through these helpers first.
"""

import re
from typing import Final, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

REDACTED: Final = "****"

# Regex to detect potential API keys / bearer tokens in free text
_SECRET_PATTERN = re.compile(
    r"(?i)"
    r"(?:"
    r"(?:api[_-]?key|apikey|appid|token|bearer|authorization|secret|password|credential)"
    r"[\s:=]+"
    r")"
    r"['\"]?([^\s'\"&]{8,})['\"]?",
)

# Headers that should never appear in logs/errors
_SENSITIVE_HEADERS: Final = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "x-api-key",
        "x-rapidapi-key",
        "api-key",
        "apikey",
        "cookie",
        "set-cookie",
    }
)

# Query parameters that carry credentials
_SENSITIVE_PARAMS: Final = frozenset(
    {
        "api_key",
        "apikey",
        "appid",
        "key",
        "token",
        "access_token",
        "client_secret",
    }
)


def redact_secrets(text: str) -> str:
    """Remove API keys and sensitive tokens from a text string.

    Scans for patterns like ``api_key=...``, ``Bearer ...``, ``token: ...``
    and replaces the secret portion with ``"****"``.
    """
    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        full = match.group(0)
        return full.replace(match.group(1), REDACTED)

    return _SECRET_PATTERN.sub(_replace, text)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of *headers* with sensitive values redacted."""
    return {
        key: (REDACTED if key.lower() in _SENSITIVE_HEADERS else value)
        for key, value in headers.items()
    }


def redact_params(params: Mapping[str, object]) -> dict[str, object]:
    """Return a copy of query *params* with credential values redacted."""
    return {
        key: (REDACTED if key.lower() in _SENSITIVE_PARAMS else value)
        for key, value in params.items()
    }


def redact_url(url: str) -> str:
    """Redact credential-bearing query parameters from *url*."""
    if not url or "?" not in url:
        return url
    parts = urlsplit(url)
    pairs = [
        (key, REDACTED if key.lower() in _SENSITIVE_PARAMS else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(pairs, safe="*")))

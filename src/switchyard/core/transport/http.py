"""HTTP response helpers shared by the transport and proxy clients.

SECURITY: error text extracted from upstream bodies is always run through
``redact_secrets`` since some APIs echo the request (and its key) back.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from switchyard.core.observability import redact_secrets

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "switchyard/0.1 (+https://pypi.org/project/switchyard/)"

_MAX_ERROR_BODY = 500


def parse_response_body(response: httpx.Response) -> Any:
    """Parse a body by content type: JSON, then text, else raw bytes.

    A body labelled JSON that fails to parse is returned as text.
    """
    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.debug("Body labelled %s is not valid JSON; returning text", content_type)
            return response.text
    if content_type.startswith("text/") or "xml" in content_type:
        return response.text
    return response.content


def extract_error_message(response: httpx.Response) -> str:
    """Extract and redact an error message from an HTTP error response.

    Tries the standard ``{"error": ...}`` / ``{"message": ...}`` JSON shapes
    (including ``{"error": {"message": ...}}``) before falling back to the
    first characters of the raw body.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error_field = data.get("error")
        if isinstance(error_field, dict):
            msg = error_field.get("message", str(error_field))
        elif isinstance(error_field, str):
            msg = error_field
        else:
            msg = data.get("message") or data.get("Error") or response.text[:200]
        return redact_secrets(str(msg))

    text = response.text[:200] if response.text else response.reason_phrase or "Unknown error"
    return redact_secrets(text)


def error_body(response: httpx.Response) -> str:
    """Truncated, redacted body text for diagnostics."""
    try:
        text = response.text
    except UnicodeDecodeError:
        return ""
    return redact_secrets(text[:_MAX_ERROR_BODY])

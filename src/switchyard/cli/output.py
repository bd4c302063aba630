"""JSON envelope output for CLI commands.

Every command prints exactly one JSON document on stdout:

    {"success": true, "data": {...}, "error": null}
    {"success": false, "data": {"error_code": ..., ...}, "error": "message"}
"""

import json
import sys
from typing import Any, Dict, NoReturn, Optional

import click

from switchyard.core.errors import SwitchyardError, error_to_response

_REMEDIATIONS = {
    "UNAUTHORIZED": "Store the credential with `switchyard credentials set NAME VALUE`",
    "NOT_FOUND": "Run `switchyard providers` to list registered provider ids",
    "VALIDATION_ERROR": "Check the catalog and configuration files",
    "RATE_LIMIT_EXCEEDED": "Wait for the provider quota window to reset",
}


def _emit(payload: Dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def emit_success(data: Any) -> None:
    """Print a success envelope."""
    _emit({"success": True, "data": data, "error": None})


def emit_error(
    message: str,
    code: str = "INTERNAL_ERROR",
    error_type: str = "internal",
    remediation: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    """Print an error envelope and exit with status 1."""
    data: Dict[str, Any] = {"error_code": code, "error_type": error_type}
    if remediation:
        data["remediation"] = remediation
    if details:
        data["details"] = details
    _emit({"success": False, "data": data, "error": message})
    sys.exit(1)


def emit_exception(exc: SwitchyardError) -> NoReturn:
    """Render a switchyard exception through the shared error mapping."""
    response = error_to_response(exc) or {}
    code = response.get("code", "INTERNAL_ERROR")
    emit_error(
        response.get("error", str(exc)),
        code=code,
        error_type=response.get("error_type", "internal"),
        remediation=_REMEDIATIONS.get(code),
        details=response.get("details") or None,
    )

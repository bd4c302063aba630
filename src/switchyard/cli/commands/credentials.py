"""Credential store management commands."""

import click

from switchyard.cli.logging import cli_command
from switchyard.cli.output import emit_error, emit_success
from switchyard.cli.registry import get_context, run_with_client
from switchyard.client import Switchyard
from switchyard.core.observability import REDACTED


@click.group("credentials")
def credentials() -> None:
    """Read and write provider credentials."""
    pass


@credentials.command("set")
@click.argument("name")
@click.argument("value")
@click.pass_context
@cli_command("credentials-set")
def set_cmd(ctx: click.Context, name: str, value: str) -> None:
    """Store VALUE under credential NAME (e.g. ``serpapi``)."""

    async def _set(client: Switchyard):
        return await client.set_credential(name, value)

    if not run_with_client(get_context(ctx), _set):
        emit_error(
            f"Credential '{name}' was not stored",
            code="CREDENTIAL_STORE_READ_ONLY",
            error_type="validation",
            remediation="Use the file or chained credentials backend",
            details={"name": name},
        )
    emit_success({"name": name, "stored": True})


@credentials.command("get")
@click.argument("name")
@click.option("--reveal", is_flag=True, help="Print the secret instead of a mask.")
@click.pass_context
@cli_command("credentials-get")
def get_cmd(ctx: click.Context, name: str, reveal: bool) -> None:
    """Show whether credential NAME is set."""

    async def _get(client: Switchyard):
        return await client.get_credential(name)

    secret = run_with_client(get_context(ctx), _get)
    if secret is None:
        emit_error(
            f"Credential '{name}' not found",
            code="NOT_FOUND",
            error_type="not_found",
            remediation=f"Run `switchyard credentials set {name} VALUE`",
            details={"name": name},
        )
    emit_success({"name": name, "found": True, "value": secret if reveal else REDACTED})

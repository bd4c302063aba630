"""Execute a request against a provider, an intent or free text."""

from typing import Any, Dict, Optional

import click

from switchyard.cli.logging import cli_command, get_cli_logger
from switchyard.cli.output import emit_success
from switchyard.cli.registry import get_context, run_with_client
from switchyard.client import Switchyard

logger = get_cli_logger()


@click.command("execute")
@click.argument("target")
@click.argument("query", required=False)
@click.option("--multiple", "use_multiple", is_flag=True, help="Fan out to several providers.")
@click.option("--max-providers", type=click.IntRange(min=1), help="Fan-out width.")
@click.option("--limit", type=click.IntRange(min=1), help="Result limit passed to providers.")
@click.option("--include-unavailable", is_flag=True, help="Consider providers without credentials.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Per-attempt timeout in seconds.")
@click.pass_context
@cli_command("execute")
def execute_cmd(
    ctx: click.Context,
    target: str,
    query: Optional[str],
    use_multiple: bool,
    max_providers: Optional[int],
    limit: Optional[int],
    include_unavailable: bool,
    timeout: Optional[float],
) -> None:
    """Run TARGET with QUERY.

    TARGET is a provider id (runs its fallback chain), an intent name such
    as ``news`` (requires QUERY), or free text that is classified.

    Examples:
        switchyard execute wikipedia_search "alan turing"
        switchyard execute news "rust 2024 edition"
        switchyard execute "weather in Paris"
    """
    provider_options: Dict[str, Any] = {}
    if limit is not None:
        provider_options["limit"] = limit

    async def _execute(client: Switchyard):
        return await client.execute(
            target,
            query,
            use_multiple=use_multiple,
            max_providers=max_providers,
            include_unavailable=include_unavailable,
            provider_options=provider_options,
            timeout=timeout,
        )

    outcome = run_with_client(get_context(ctx), _execute)
    if isinstance(outcome, list):
        emit_success(
            {
                "results": [item.to_dict() for item in outcome],
                "count": len(outcome),
                "succeeded": sum(1 for item in outcome if item.success),
            }
        )
    else:
        emit_success(outcome.to_dict())

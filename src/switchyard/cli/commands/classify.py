"""Show how a query would be classified."""

import click

from switchyard.cli.logging import cli_command
from switchyard.cli.output import emit_success
from switchyard.cli.registry import get_context, run_with_client
from switchyard.client import Switchyard


@click.command("classify")
@click.argument("query")
@click.pass_context
@cli_command("classify")
def classify_cmd(ctx: click.Context, query: str) -> None:
    """Classify QUERY into an intent with a confidence score."""

    async def _classify(client: Switchyard):
        return client.classify(query)

    result = run_with_client(get_context(ctx), _classify)
    emit_success({"query": query, **result.to_dict()})

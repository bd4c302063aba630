"""List registered providers."""

from typing import Optional

import click

from switchyard.cli.logging import cli_command
from switchyard.cli.output import emit_success
from switchyard.cli.registry import get_context, run_with_client
from switchyard.client import Switchyard
from switchyard.core.registry import ProviderCategory


@click.command("providers")
@click.option(
    "--category",
    type=click.Choice([c.value for c in ProviderCategory]),
    help="Only list providers in this category.",
)
@click.pass_context
@cli_command("providers")
def providers_cmd(ctx: click.Context, category: Optional[str]) -> None:
    """List providers in priority order."""

    async def _list(client: Switchyard):
        return client.providers(category)

    descriptors = run_with_client(get_context(ctx), _list)
    emit_success({"count": len(descriptors), "providers": [d.to_dict() for d in descriptors]})

"""Provider availability checks."""

from typing import Optional

import click

from switchyard.cli.logging import cli_command
from switchyard.cli.output import emit_success
from switchyard.cli.registry import get_context, run_with_client
from switchyard.client import Switchyard
from switchyard.core.health import DEFAULT_LIVE_TIMEOUT


@click.command("probe")
@click.option("--live", "live_provider", metavar="PROVIDER_ID", help="Also make one live request to this provider.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_LIVE_TIMEOUT,
    show_default=True,
    help="Timeout for the live request.",
)
@click.pass_context
@cli_command("probe")
def probe_cmd(ctx: click.Context, live_provider: Optional[str], timeout: float) -> None:
    """Report which providers are usable.

    Without --live only credentials are checked and no network calls are made.
    """
    cli_ctx = get_context(ctx)

    if live_provider:

        async def _probe_one(client: Switchyard):
            return await client.probe_live(live_provider, timeout=timeout)

        health = run_with_client(cli_ctx, _probe_one)
        emit_success({"provider_id": live_provider, **health.to_dict()})
        return

    async def _probe_all(client: Switchyard):
        return await client.probe_all()

    report = run_with_client(cli_ctx, _probe_all)
    emit_success(
        {
            "providers": {pid: health.to_dict() for pid, health in report.items()},
            "available": sorted(pid for pid, health in report.items() if health.available),
            "unavailable": sorted(pid for pid, health in report.items() if not health.available),
        }
    )

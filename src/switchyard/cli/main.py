"""switchyard command line entry point."""

from pathlib import Path
from typing import Optional

import click

from switchyard import __version__
from switchyard.cli.commands import classify_cmd, credentials, execute_cmd, probe_cmd, providers_cmd
from switchyard.cli.logging import configure_logging
from switchyard.cli.output import emit_exception
from switchyard.cli.registry import get_context
from switchyard.config import SwitchyardConfig
from switchyard.core.errors import ConfigurationError

_LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Load configuration from this TOML file only (default: layered lookup).",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Override the configured log level.",
)
@click.version_option(__version__, prog_name="switchyard")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], log_level: Optional[str]) -> None:
    """Route requests across external data providers with fallback."""
    cli_ctx = get_context(ctx)
    if cli_ctx.config is None:
        try:
            cli_ctx.config = SwitchyardConfig.from_env(config_file=str(config_file) if config_file else None)
        except ConfigurationError as e:
            emit_exception(e)

    configure_logging(log_level or cli_ctx.config.logging.level, audit=cli_ctx.config.logging.audit)


cli.add_command(execute_cmd)
cli.add_command(classify_cmd)
cli.add_command(probe_cmd)
cli.add_command(providers_cmd)
cli.add_command(credentials)


if __name__ == "__main__":
    cli()

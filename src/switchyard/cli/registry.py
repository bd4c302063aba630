"""Per-invocation CLI state shared through ``click.Context.obj``."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

import click

from switchyard.cli.output import emit_exception
from switchyard.client import Switchyard
from switchyard.config import SwitchyardConfig
from switchyard.core.errors import SwitchyardError

T = TypeVar("T")


@dataclass
class CliContext:
    """Configuration plus the factory used to build the client.

    Tests pass a ``CliContext`` as ``obj`` to inject a preloaded config and
    a factory that wires fake credentials or HTTP transports.
    """

    config: Optional[SwitchyardConfig] = None
    client_factory: Callable[[SwitchyardConfig], Switchyard] = field(default=Switchyard)


def get_context(ctx: click.Context) -> CliContext:
    return ctx.ensure_object(CliContext)


def run_with_client(cli_ctx: CliContext, action: Callable[[Switchyard], Awaitable[T]]) -> T:
    """Build a client, run *action* on it, close it.

    Switchyard errors are rendered as an error envelope (exit status 1).
    """
    config = cli_ctx.config or SwitchyardConfig.from_env()

    async def _run() -> T:
        async with cli_ctx.client_factory(config) as client:
            return await action(client)

    try:
        return asyncio.run(_run())
    except SwitchyardError as e:
        emit_exception(e)

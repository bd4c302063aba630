"""CLI commands."""

from switchyard.cli.commands.classify import classify_cmd
from switchyard.cli.commands.credentials import credentials
from switchyard.cli.commands.execute import execute_cmd
from switchyard.cli.commands.probe import probe_cmd
from switchyard.cli.commands.providers import providers_cmd

__all__ = [
    "classify_cmd",
    "credentials",
    "execute_cmd",
    "probe_cmd",
    "providers_cmd",
]

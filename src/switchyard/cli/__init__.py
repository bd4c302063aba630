"""Command line interface for switchyard."""

from switchyard.cli.main import cli

__all__ = ["cli"]

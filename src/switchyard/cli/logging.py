"""Logging setup for CLI invocations."""

import functools
import logging
import sys
import time
from typing import Any, Callable, TypeVar

from switchyard.cli.output import emit_error
from switchyard.core.context import correlation_context, generate_correlation_id
from switchyard.core.observability import AUDIT_LOGGER_NAME

F = TypeVar("F", bound=Callable[..., Any])

ROOT_LOGGER_NAME = "switchyard"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_cli_logger() -> logging.Logger:
    return logging.getLogger("switchyard.cli")


logger = get_cli_logger()


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def configure_logging(level: str = "warning", audit: bool = True) -> None:
    """Route switchyard logs to stderr at *level*; *audit* toggles audit events."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())
    if not any(isinstance(h, _StderrHandler) for h in root.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    logging.getLogger(AUDIT_LOGGER_NAME).disabled = not audit


def cli_command(name: str) -> Callable[[F], F]:
    """Bind a correlation id around a command and log its duration."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            logger.debug("Command %s started", name)
            try:
                with correlation_context(generate_correlation_id("cli")):
                    return func(*args, **kwargs)
            except KeyboardInterrupt:
                emit_error("Interrupted", code="CANCELLED", error_type="cancelled")
            finally:
                logger.debug("Command %s finished in %.1fms", name, (time.perf_counter() - started) * 1000)

        return wrapper  # type: ignore[return-value]

    return decorator

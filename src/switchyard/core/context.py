"""Request-scoped context for correlating log and audit records.

A correlation id is bound once per top-level ``execute`` call and inherited
by every task spawned beneath it, so parallel provider calls made for the
same request share one id.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from ulid import ULID

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id(prefix: str = "corr") -> str:
    """Return a new sortable correlation id."""
    return f"{prefix}-{ULID()}"


def get_correlation_id() -> str:
    """Return the correlation id bound to the current context ("" if none)."""
    return correlation_id.get()


@contextmanager
def correlation_context(value: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block.

    An id already bound by an outer scope is reused unless *value* is given.
    """
    current = correlation_id.get()
    bound = value or current or generate_correlation_id()
    token = correlation_id.set(bound)
    try:
        yield bound
    finally:
        correlation_id.reset(token)

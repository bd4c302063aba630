"""Root error classes shared by every switchyard component."""

from typing import Optional


class SwitchyardError(Exception):
    """Base class for all errors raised by switchyard."""


class RequestCancelledError(SwitchyardError):
    """Raised when a caller cancels an in-flight request.

    Cancellation is honoured at every suspension point (rate-limit wait,
    network call, backoff sleep) and stops a fallback chain outright.

    Attributes:
        reason: Optional caller-supplied reason for the cancellation
    """

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        message = "Request cancelled"
        if reason:
            message += f": {reason}"
        super().__init__(message)

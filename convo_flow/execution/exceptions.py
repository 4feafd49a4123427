"""
Execution Layer Exceptions

Fatal flow configuration errors. These are never retried or recovered: they
propagate out of the turn, which then ends without calling ``done()``.
"""

from typing import Any, Sequence


class FlowError(Exception):
    """Base class for flow configuration errors."""
    pass


class InvalidStreamReferenceError(FlowError):
    """Raised when a stream element or pointer names no defined stream."""

    def __init__(self, token: Any):
        self.token = token
        super().__init__(f"{token!r} is not a valid stream")


class CyclicStreamError(FlowError):
    """Raised when stream pointers form a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(f"Stream pointers form a cycle: {' -> '.join(self.cycle)}")

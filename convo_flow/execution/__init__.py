"""
Execution Layer - Stream Traversal and Step Execution

Defines the StepRunner (recursive step execution), the next-step resolver,
the InfoExtractor and the load-time stream validation.
"""

from convo_flow.execution.exceptions import (
    CyclicStreamError,
    FlowError,
    InvalidStreamReferenceError,
)
from convo_flow.execution.extractor import InfoExtractor
from convo_flow.execution.runner import Continuation, StepRunner
from convo_flow.execution.streams import get_active_step, is_stream, stream_length
from convo_flow.execution.transitions import CursorTransition, compute_next_cursor
from convo_flow.execution.validation import validate_streams


__all__ = [
    "CyclicStreamError",
    "FlowError",
    "InvalidStreamReferenceError",
    "InfoExtractor",
    "Continuation",
    "StepRunner",
    "get_active_step",
    "is_stream",
    "stream_length",
    "CursorTransition",
    "compute_next_cursor",
    "validate_streams",
]

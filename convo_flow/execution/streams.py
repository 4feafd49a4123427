"""
Stream lookups shared by the resolver, runner and extractor.
"""

from typing import Any, Mapping, Optional

from ..domain.models import Stream
from ..state.models import Cursor


def is_stream(streams: Mapping[str, Stream], name: Any) -> bool:
    """True iff ``name`` is a string naming a defined stream."""
    return isinstance(name, str) and isinstance(streams, Mapping) and name in streams


def stream_length(stream: Optional[Stream]) -> int:
    if stream is None:
        return 0
    if isinstance(stream, list):
        return len(stream)
    # A single step or a pointer occupies one slot
    return 1


def get_active_step(stream: Optional[Stream], cursor: Cursor):
    """
    Resolve the element in focus: a Step, a pointer name, or None.

    Range checking for single steps and pointers is left to the caller.
    """
    if isinstance(stream, list):
        if 0 <= cursor.step_index < len(stream):
            return stream[cursor.step_index]
        return None
    return stream

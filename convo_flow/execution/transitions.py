"""
Next Step Resolution.

Computes the cursor that follows a satisfied (or proceeding) step. Moves
within a stream advance the index; moves across streams push a return frame
on descent and pop it once the entered stream is exhausted.
"""

import logging
from enum import Enum, auto
from typing import Mapping

from ..domain.constants import TERMINAL_STREAM
from ..domain.models import Step, Stream
from ..state.models import Cursor
from .exceptions import InvalidStreamReferenceError
from .streams import get_active_step, is_stream, stream_length

logger = logging.getLogger(__name__)


class CursorTransition(Enum):
    """What happened to the cursor while resolving the next step."""

    ADVANCE = auto()  # Index moved within the current stream
    PUSH = auto()  # A return frame was pushed and a sub-stream entered
    POP = auto()  # A return frame was popped after a stream was exhausted
    TERMINATE = auto()  # Nothing left to return to; routed to the terminal stream


def compute_next_cursor(step: Step, streams: Mapping[str, Stream], cursor: Cursor) -> Cursor:
    """
    Resolve the cursor after ``step``.

    A ``next()`` naming the current stream is a plain advance and never grows
    the stack. A ``next()`` naming another stream descends into it, returning
    to the step after this one once it is exhausted.

    Raises:
        InvalidStreamReferenceError: if the resolved position holds nothing or
            a name that is not a defined stream.
    """
    target = step.next()

    if is_stream(streams, target) and target != cursor.stream_name:
        candidate = cursor.descend(target, cursor.step_index + 1)
        _log_transition(CursorTransition.PUSH, cursor, candidate)
    else:
        candidate = cursor.advance()
        _log_transition(CursorTransition.ADVANCE, cursor, candidate)

    return _settle(candidate, streams)


def _settle(cursor: Cursor, streams: Mapping[str, Stream]) -> Cursor:
    """
    Bounds-check the candidate. An exhausted stream returns to the top frame
    (resuming at its index as-is) or, with nothing to return to, routes to the
    start of the terminal stream. Pointer elements are descended into.
    """
    while True:
        stream = streams.get(cursor.stream_name)

        if cursor.step_index >= stream_length(stream):
            if cursor.stream_stack:
                # The runner goes idle if the resumed position is itself exhausted
                resumed = cursor.ascend()
                _log_transition(CursorTransition.POP, cursor, resumed)
                return resumed

            if cursor.stream_name == TERMINAL_STREAM:
                # Nothing to return to from the terminal stream itself
                return cursor

            if TERMINAL_STREAM not in streams:
                logger.warning(f"No '{TERMINAL_STREAM}' stream to route to from {cursor.describe()}")
                return cursor

            terminal = cursor.descend(TERMINAL_STREAM, cursor.step_index)
            _log_transition(CursorTransition.TERMINATE, cursor, terminal)
            return terminal

        element = get_active_step(stream, cursor)

        if is_stream(streams, element):
            previous, cursor = cursor, cursor.descend(element, cursor.step_index + 1)
            _log_transition(CursorTransition.PUSH, previous, cursor)
            continue

        if not element or isinstance(element, str):
            logger.error(f"Invalid stream reference {element!r} at {cursor.describe()}")
            raise InvalidStreamReferenceError(element)

        return cursor


def _log_transition(transition: CursorTransition, before: Cursor, after: Cursor):
    logger.debug(f"{transition.name}: {before.describe()} -> {after.describe()}")

"""
Runner - Recursive Step Execution

The StepRunner walks the stream graph from a cursor until it reaches a step
that needs input, then either extracts (first pass), runs the step's
fallback, or prompts.
-----------------------------------------------

Prompts come in two declared forms:
1. SYNC prompts return their continuation signal directly; it is handled
   before ``run`` returns.
2. SUSPENDING prompts receive a Continuation and call it exactly once, either
   before returning or later from asynchronous work. The engine does not
   wait: ``run`` returns as soon as the prompt function does.

Signals:
- "init.proceed": advance past the prompting step and keep running.
- a stream name: restart at the beginning of that stream.
- anything else (or nothing): the step has taken over the turn.
"""

import logging
from typing import Any, Mapping, Optional

from ..client.interface import FlowClient
from ..domain.constants import PROCEED_SIGNAL
from ..domain.models import Step, Stream
from ..state.models import Cursor
from .exceptions import InvalidStreamReferenceError
from .streams import get_active_step, is_stream, stream_length
from .transitions import compute_next_cursor

logger = logging.getLogger(__name__)


class Continuation:
    """
    Callable handed to a suspending prompt. Calling it resumes the engine
    from the step that prompted.
    """

    def __init__(self, runner: "StepRunner", step: Step, cursor: Cursor):
        self._runner = runner
        self.step = step
        self.cursor = cursor
        self.called = False
        self.result: Optional[Cursor] = None

    def __call__(self, signal: Optional[str] = None) -> Cursor:
        self.called = True
        self.result = self._runner.handle_signal(self.step, self.cursor, signal)
        return self.result


class StepRunner:
    def __init__(self, streams: Mapping[str, Stream], client: FlowClient):
        self.streams = streams
        self.client = client

    def run(self, cursor: Cursor) -> Cursor:
        """
        Run from ``cursor`` and return the cursor the walk stopped at.
        """
        stream = self.streams.get(cursor.stream_name)
        active = None
        if cursor.step_index < stream_length(stream):
            active = get_active_step(stream, cursor)

        if active is None:
            return cursor

        self.client.set_stream_name(cursor.stream_name)
        self.client.set_stream_stack(cursor.stream_stack)

        # A pointer restarts at the beginning of the stream it names
        if isinstance(active, str):
            if not is_stream(self.streams, active):
                logger.error(f"Invalid stream pointer {active!r} at {cursor.describe()}")
                raise InvalidStreamReferenceError(active)
            return self.run(cursor.jump(active))

        if active.satisfied():
            return self.run(compute_next_cursor(active, self.streams, cursor))

        if cursor.is_first_run:
            active.extract_info(self.client.get_message_part())
            return cursor.with_changes(currently_active_step=active)

        if cursor.run_fallback:
            if active.fallback is None:
                logger.warning(f"No fallback defined for step at {cursor.describe()}")
                return cursor
            active.fallback()
            return cursor.with_changes(ran_fallback=True)

        return self.run_prompt(active, cursor)

    def run_prompt(self, step: Step, cursor: Cursor) -> Cursor:
        """
        Invoke ``step``'s prompt and follow whatever signal it produces.
        """
        prompt = step.prompt

        if prompt.is_suspending:
            continuation = Continuation(self, step, cursor)
            prompt.fn(continuation)
            if continuation.called:
                return continuation.result
            logger.debug(f"Prompt at {cursor.describe()} suspended")
            return cursor

        return self.handle_signal(step, cursor, prompt.fn())

    def handle_signal(self, step: Step, cursor: Cursor, signal: Any) -> Cursor:
        if signal == PROCEED_SIGNAL:
            logger.info(f"Received {PROCEED_SIGNAL} from {cursor.describe()}")
            return self.run(compute_next_cursor(step, self.streams, cursor))

        if not signal:
            logger.info(f"Prompt at {cursor.describe()} did not return next instructions")
            return cursor

        if is_stream(self.streams, signal):
            logger.info(f"Prompt at {cursor.describe()} routed to stream '{signal}'")
            return self.run(cursor.jump(signal))

        logger.warning(f"Prompt at {cursor.describe()} routed to INVALID stream {signal!r}")
        return cursor

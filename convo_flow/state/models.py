"""
State Layer - Turn-Scoped Runtime Models

This module defines the runtime values the engine threads through a single
message turn. The Cursor implements a Call Stack pattern so a stream can
descend into a sub-stream and later resume where it left off. Every model is
frozen: each transition returns a new value instead of mutating in place.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..domain.constants import MAIN_STREAM


class Frame(BaseModel):
    """
    A suspended return address on the stream stack.
    """

    model_config = ConfigDict(frozen=True)

    stream_name: str
    step_index: int = Field(0, ge=0)


class Cursor(BaseModel):
    """
    The engine's position within the stream graph for the current turn.
    """

    model_config = ConfigDict(frozen=True)

    stream_name: str
    step_index: int = Field(0, ge=0)
    is_first_run: bool = True

    # Step left waiting for input by the first pass (a Step, kept by identity)
    currently_active_step: Any = None

    stream_stack: Tuple[Frame, ...] = ()

    # Fallback routing hints for an unmatched expectation
    run_fallback: bool = False
    ran_fallback: bool = False

    @classmethod
    def initial(cls) -> "Cursor":
        return cls(stream_name=MAIN_STREAM)

    def with_changes(self, **changes) -> "Cursor":
        return self.model_copy(update=changes)

    def advance(self) -> "Cursor":
        """Move to the next step in the current stream."""
        return self.with_changes(step_index=self.step_index + 1)

    def jump(self, stream_name: str) -> "Cursor":
        """Move to the start of another stream without touching the stack."""
        return self.with_changes(stream_name=stream_name, step_index=0)

    def descend(self, stream_name: str, return_index: int) -> "Cursor":
        """
        Push a return frame for the current stream and enter another stream.

        Args:
            stream_name: The stream to enter at index 0.
            return_index: Index in the current stream to resume at once the
                entered stream is exhausted.
        """
        return_frame = Frame(stream_name=self.stream_name, step_index=return_index)
        return self.with_changes(
            stream_name=stream_name,
            step_index=0,
            stream_stack=self.stream_stack + (return_frame,),
        )

    def ascend(self) -> "Cursor":
        """Pop the top return frame and resume there."""
        if not self.stream_stack:
            raise ValueError("Stream stack is empty.")
        top = self.stream_stack[-1]
        return self.with_changes(
            stream_name=top.stream_name,
            step_index=top.step_index,
            stream_stack=self.stream_stack[:-1],
        )

    def describe(self) -> str:
        depth = len(self.stream_stack)
        return f"{self.stream_name}[{self.step_index}] (stack depth {depth})"


class Expectations(BaseModel):
    """
    A one-turn-ahead routing hint recorded by a previous ``expect()`` call.

    Conversation state stores it as ``{stream_name: [classification, ...]}``;
    here it is flattened into a classification -> stream lookup table.
    """

    model_config = ConfigDict(frozen=True)

    stream: Optional[str] = None
    classifications: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_conversation_state(cls, state: Dict[str, Any]) -> "Expectations":
        current = (state or {}).get("currentExpectations")
        if not current:
            return cls()

        # Only the first recorded stream is honoured
        stream = next(iter(current))
        classifications = {
            classification: stream for classification in (current[stream] or [])
        }
        return cls(stream=stream, classifications=classifications)

    @property
    def is_empty(self) -> bool:
        return self.stream is None

    def to_archive(self) -> Dict[str, Any]:
        return self.model_dump()


def frames_from_state(raw_stack: Any) -> Tuple[Frame, ...]:
    """Rebuild a stream stack persisted in conversation state."""
    if not raw_stack:
        return ()
    return tuple(
        frame if isinstance(frame, Frame) else Frame.model_validate(frame)
        for frame in raw_stack
    )


def frames_to_state(stack: Tuple[Frame, ...]) -> list:
    """Serialize a stream stack for conversation state."""
    return [frame.model_dump() for frame in stack]

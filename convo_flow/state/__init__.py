"""
State Layer - Runtime Data Models

Defines the turn-scoped values that track the engine's position in the
stream graph, including the stream stack and persisted expectations.
"""

from convo_flow.state.models import (
    Cursor,
    Expectations,
    Frame,
    frames_from_state,
    frames_to_state,
)

__all__ = [
    "Cursor",
    "Expectations",
    "Frame",
    "frames_from_state",
    "frames_to_state",
]

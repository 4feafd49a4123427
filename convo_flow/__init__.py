"""
Conversation Flow Engine

Routes each inbound message turn through named streams of conversational
steps, tracking a cursor with sub-stream call/return semantics and deciding
per turn whether to advance, prompt, fall back or terminate.
"""

from convo_flow.domain import (
    FlowDefinition,
    MessageType,
    ParticipantRole,
    Prompt,
    PromptMode,
    Step,
    create_step,
    suspending,
)
from convo_flow.state import (
    Cursor,
    Expectations,
    Frame,
)
from convo_flow.schemas import ClassificationKeys, MessageContext, TurnResult
from convo_flow.execution import (
    CyclicStreamError,
    FlowError,
    InfoExtractor,
    InvalidStreamReferenceError,
    StepRunner,
    compute_next_cursor,
    get_active_step,
    is_stream,
)
from convo_flow.client import FlowClient, InMemoryClient
from convo_flow.services import (
    AutoResponder,
    AutoResponseEffect,
    FlowController,
    Route,
    run_flow,
)

__all__ = [
    # Domain Layer
    "FlowDefinition",
    "MessageType",
    "ParticipantRole",
    "Prompt",
    "PromptMode",
    "Step",
    "create_step",
    "suspending",
    # State Layer
    "Cursor",
    "Expectations",
    "Frame",
    # Schemas
    "ClassificationKeys",
    "MessageContext",
    "TurnResult",
    # Execution Layer
    "CyclicStreamError",
    "FlowError",
    "InfoExtractor",
    "InvalidStreamReferenceError",
    "StepRunner",
    "compute_next_cursor",
    "get_active_step",
    "is_stream",
    # Client
    "FlowClient",
    "InMemoryClient",
    # Services
    "AutoResponder",
    "AutoResponseEffect",
    "FlowController",
    "Route",
    "run_flow",
]

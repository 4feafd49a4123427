"""
Domain Layer - Static Flow Models

Defines the static structure of a conversation flow: Steps, Prompts,
auto-response rules, the FlowDefinition, and shared constants.
"""

from convo_flow.domain.constants import (
    MAIN_STREAM,
    PROCEED_SIGNAL,
    TERMINAL_STREAM,
    MessageType,
    ParticipantRole,
    ResponseType,
)
from convo_flow.domain.models import (
    AutoResponseRule,
    FlowDefinition,
    Prompt,
    PromptMode,
    Step,
    Stream,
    create_step,
    suspending,
)

__all__ = [
    "MAIN_STREAM",
    "PROCEED_SIGNAL",
    "TERMINAL_STREAM",
    "MessageType",
    "ParticipantRole",
    "ResponseType",
    "AutoResponseRule",
    "FlowDefinition",
    "Prompt",
    "PromptMode",
    "Step",
    "Stream",
    "create_step",
    "suspending",
]

"""
Schemas - Payload Models

Defines the Pydantic models for the message context of a turn, the result
a turn flushes back, and the classification projections used for routing.
"""

from convo_flow.schemas.classification import (
    ClassificationKeys,
    classification_base_type,
    classification_display,
    classification_without_style,
)
from convo_flow.schemas.messages import (
    Classification,
    Conversation,
    Facet,
    Message,
    MessageContext,
    MessagePart,
    OutboundPart,
    PredictedResponse,
    Prediction,
    TurnResult,
)

__all__ = [
    "ClassificationKeys",
    "classification_base_type",
    "classification_display",
    "classification_without_style",
    "Classification",
    "Conversation",
    "Facet",
    "Message",
    "MessageContext",
    "MessagePart",
    "OutboundPart",
    "PredictedResponse",
    "Prediction",
    "TurnResult",
]

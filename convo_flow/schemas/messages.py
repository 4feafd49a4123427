"""
Schemas - Inbound and Outbound Payload Models

This module defines the Pydantic models for the message context a turn is
invoked with and the result a turn hands back. The engine reads these
through the client collaborator; it never parses raw payloads itself.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.constants import IdType, ResponseType


class Facet(BaseModel):
    """A single classified value with the classifier's confidence in it."""

    value: str = ""
    confidence: Optional[float] = None


class Classification(BaseModel):
    """
    The inferred intent of an inbound message. Opaque to the engine apart from
    the string projections derived from it.
    """

    base_type: Facet
    sub_type: Optional[Facet] = None
    style: Optional[Facet] = None
    overall_confidence: Optional[float] = None


class PredictedResponse(BaseModel):
    auto_fill_capable: bool = False


class Prediction(BaseModel):
    """
    The classifier's guess about the next message in the conversation.
    direction is "input" when another user message is expected and "output"
    when the app is expected to reply.
    """

    direction: Facet
    base_type: Facet
    sub_type: Optional[Facet] = None
    overall_confidence: float = 0.0
    predicted_response: Optional[PredictedResponse] = None


class MessagePart(BaseModel):
    # Kept open so parts the engine does not route still parse; see MessageType
    content_type: str
    content: Any = None
    classification: Optional[Classification] = None
    predicted_next_message: Optional[Prediction] = None
    slots: Dict[str, Any] = Field(default_factory=dict)
    sender: Optional[Dict[str, Any]] = None


class Message(BaseModel):
    sender_role: Optional[str] = None
    parts: List[MessagePart]


class Conversation(BaseModel):
    messages: List[Message]
    state: Dict[str, Any] = Field(default_factory=dict)
    conversation_message_index_to_process: int = 0


class MessageContext(BaseModel):
    """
    The payload a turn is invoked with.
    """

    current_conversation: Conversation
    users: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    execution_data: Dict[str, Any] = Field(default_factory=dict)


class OutboundPart(BaseModel):
    content_type: ResponseType
    content: Any
    to: Optional[str] = None
    to_type: IdType = IdType.APP_USER_ID


class TurnResult(BaseModel):
    """
    Everything a finished turn flushes back to the caller.
    """

    version: Optional[str] = None
    execution_id: Optional[str] = None
    conversation_state: Dict[str, Any] = Field(default_factory=dict)
    reset_users: List[str] = Field(default_factory=list)
    messages: List[OutboundPart] = Field(default_factory=list)
    stream_name: Optional[str] = None

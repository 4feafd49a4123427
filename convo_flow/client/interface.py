import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..domain.constants import MessageType
from ..schemas.messages import Message, MessagePart
from ..state.models import Frame, frames_to_state

logger = logging.getLogger(__name__)


class FlowClient(ABC):
    """
    Abstract Base Class interface that defines the contract between the flow
    engine and the SDK client that owns the message turn (message parsing,
    the response queue, conversation state and the final flush).
    """

    def __init__(self):
        self._stream_name: Optional[str] = None
        self._stream_stack: Tuple[Frame, ...] = ()

    @abstractmethod
    def get_message(self) -> Message:
        """The inbound message being processed this turn."""
        pass

    @abstractmethod
    def get_message_part(self) -> MessagePart:
        """The current message part. Idempotent within a turn."""
        pass

    @abstractmethod
    def get_conversation_state(self) -> Dict[str, Any]:
        """A copy of the persisted conversation state."""
        pass

    @abstractmethod
    def update_conversation_state(self, key_or_object: Any, value: Any = None) -> Dict[str, Any]:
        """Deep-merge a mapping, or write ``value`` at a key / key path."""
        pass

    @abstractmethod
    def reset_user(self, user_id: Optional[str] = None):
        """Queue a reset of one user, or of every user when no id is given."""
        pass

    @abstractmethod
    def add_response(self, response_name: str, response_data: Optional[Dict[str, Any]] = None):
        """Queue a prepared outbound response."""
        pass

    @abstractmethod
    def done(self):
        """Terminate the turn and flush every queued effect to the caller."""
        pass

    # The engine records where it is so steps can query it

    def set_stream_name(self, stream_name: str):
        self._stream_name = stream_name

    def get_stream_name(self) -> Optional[str]:
        return self._stream_name

    def set_stream_stack(self, stream_stack: Sequence[Frame]):
        self._stream_stack = tuple(stream_stack)

    def get_stream_stack(self) -> Tuple[Frame, ...]:
        return self._stream_stack

    def expect(self, stream_name: str, classifications: List[str]):
        """
        Route the next inbound message to ``stream_name`` when it carries one
        of ``classifications``.
        """
        logger.info(
            f"Recording expectation of stream '{stream_name}' to receive classifications: {classifications}"
        )
        # Key writes replace any earlier expectation instead of merging into it
        self.update_conversation_state(
            "currentExpectations", {stream_name: list(classifications)}
        )
        self.update_conversation_state(
            "currentExpectationsStreamStack", frames_to_state(self.get_stream_stack())
        )

    def get_message_text(self) -> Optional[str]:
        part = self.get_message_part()
        if part.content_type == MessageType.TEXT:
            return part.content
        if part.content_type == MessageType.POSTBACK and isinstance(part.content, dict):
            return part.content.get("text")
        return None

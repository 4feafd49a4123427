"""
In-memory client collaborator.

Holds one turn's message context, conversation state and response queue in
plain Python objects. Used by tests and by embedders that persist the
resulting TurnResult themselves.
"""

import copy
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..config import settings
from ..domain.constants import RESPONSE_NAME_PREFIX, ResponseType
from ..schemas.messages import Message, MessageContext, MessagePart, OutboundPart, TurnResult
from .interface import FlowClient

logger = logging.getLogger(__name__)


def deep_merge(base: Dict[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``update`` into a copy of ``base``, recursing into nested mappings."""
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class InMemoryClient(FlowClient):
    """
    Uses in-memory structures for one message turn.
    """

    def __init__(
        self,
        message_context: Union[MessageContext, Dict[str, Any]],
        on_done: Optional[Callable[[TurnResult], None]] = None,
    ):
        super().__init__()
        if not isinstance(message_context, MessageContext):
            message_context = MessageContext.model_validate(message_context)

        self._context = message_context
        self._state: Dict[str, Any] = copy.deepcopy(message_context.current_conversation.state)
        self._responses: List[OutboundPart] = []
        self._users_to_reset: List[str] = []
        self._on_done = on_done
        self.result: Optional[TurnResult] = None

    @property
    def is_done(self) -> bool:
        return self.result is not None

    @property
    def responses(self) -> List[OutboundPart]:
        return list(self._responses)

    @property
    def users_to_reset(self) -> List[str]:
        return list(self._users_to_reset)

    def get_message(self) -> Message:
        conversation = self._context.current_conversation
        return conversation.messages[conversation.conversation_message_index_to_process]

    def get_message_part(self) -> MessagePart:
        return self.get_message().parts[0]

    def get_conversation_state(self) -> Dict[str, Any]:
        return copy.deepcopy(self._state)

    def update_conversation_state(self, key_or_object: Any, value: Any = None) -> Dict[str, Any]:
        if isinstance(key_or_object, Mapping):
            self._state = deep_merge(self._state, key_or_object)
            return self.get_conversation_state()

        path = list(key_or_object) if isinstance(key_or_object, (list, tuple)) else [key_or_object]
        target = self._state
        for key in path[:-1]:
            if not isinstance(target.get(key), dict):
                target[key] = {}
            target = target[key]
        target[path[-1]] = copy.deepcopy(value)
        return self.get_conversation_state()

    def reset_user(self, user_id: Optional[str] = None):
        if user_id is None:
            self._users_to_reset = list(self._context.users)
        elif isinstance(user_id, str) and user_id in self._context.users:
            self._users_to_reset.append(user_id)
        else:
            logger.warning(f"Cannot reset unknown user {user_id!r}")

    def add_response(self, response_name: str, response_data: Optional[Dict[str, Any]] = None):
        if not isinstance(response_name, str):
            raise ValueError("A valid response name must be provided")

        if not response_name.startswith(RESPONSE_NAME_PREFIX):
            response_name = f"{RESPONSE_NAME_PREFIX}{response_name}"

        self._responses.append(OutboundPart(
            content_type=ResponseType.PREPARED_OUTBOUND,
            content={"response_name": response_name, "response_data": response_data or None},
            to=self._sender_id(),
        ))

    def done(self):
        if self.result is not None:
            logger.warning("done() called more than once; ignoring")
            return

        self.result = TurnResult(
            version=settings.VERSION,
            execution_id=self._context.execution_data.get("execution_id"),
            conversation_state=self.get_conversation_state(),
            reset_users=self.users_to_reset,
            messages=self.responses,
            stream_name=self.get_stream_name(),
        )
        logger.info(f"Turn done with {len(self._responses)} queued responses")

        if self._on_done:
            self._on_done(self.result)

    def _sender_id(self) -> Optional[str]:
        sender = self.get_message_part().sender or {}
        return sender.get("id")

"""
Domain Constants

Reserved stream names, protocol signals and the enums shared between the
flow engine and the client collaborator. Enum members are immutable, so
every consumer shares the same values by reference.
"""

from enum import Enum


class MessageType(str, Enum):
    """Content type of an inbound message part."""

    TEXT = "text"
    EVENT = "event"
    POSTBACK = "postback"
    IMAGE = "image"


class ParticipantRole(str, Enum):
    """Role of the participant who sent a message."""

    APP = "app"
    AGENT = "agent"
    END_USER = "end-user"


class ResponseType(str, Enum):
    """Content type of a queued outbound message part."""

    PREPARED_OUTBOUND = "prepared-outbound-message"
    PREPARED_OUTBOUND_WITH_REPLIES = "prepared-outbound-message-with-replies"
    IMAGE = "image"
    TEXT = "text"


class IdType(str, Enum):
    APP_USER_ID = "app_user_id"


# Entry point of every flow. May itself be a pointer to another stream.
MAIN_STREAM = "main"

# Stream the engine falls back to when nothing else applies.
TERMINAL_STREAM = "end"

# Prompt signal asking the engine to advance past the prompting step.
PROCEED_SIGNAL = "init.proceed"

# Prefix of every prepared response name.
RESPONSE_NAME_PREFIX = "app:response:name:"

# Reserved auto-response key holding the continuation policy.
CONTINUATION_RULE_KEY = "_continuation"

# Event handler key used when no handler matches the event type.
WILDCARD_EVENT = "*"

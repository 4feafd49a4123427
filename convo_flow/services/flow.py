"""
Flow Service - Turn Orchestration Layer

The FlowController is the entry point for a single message turn. It checks
who sent the message, dispatches events to their handlers, and for
conversational messages runs the engine twice around a routing decision:

1. First pass: walk from "main" to the first unsatisfied step and let it
   extract information (no prompting).
2. Extraction: every step in every stream reads the message.
3. Routing: decide where the second pass starts (first match wins).
4. Second pass: walk from the routed cursor and prompt.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..client.interface import FlowClient
from ..config import settings
from ..domain.constants import TERMINAL_STREAM, WILDCARD_EVENT, MessageType
from ..domain.models import FlowDefinition, Step
from ..execution.extractor import InfoExtractor
from ..execution.runner import StepRunner
from ..execution.streams import is_stream
from ..execution.validation import validate_streams
from ..schemas.classification import ClassificationKeys
from ..schemas.messages import Message, MessagePart
from ..state.models import Cursor, Expectations, frames_from_state
from .auto_responder import AutoResponder

logger = logging.getLogger(__name__)

MESSAGE_TYPES = (MessageType.TEXT, MessageType.POSTBACK, MessageType.IMAGE)


class TurnPhase(Enum):
    INIT = auto()
    ROLE_CHECK = auto()
    EVENT_PATH = auto()
    MESSAGE_PATH = auto()
    ROUTING_DECISION = auto()
    STEP_EXECUTION = auto()
    DONE = auto()


class Route(Enum):
    """Which routing rule decided where the second pass starts."""

    RESET = auto()  # Reset command; the turn ends
    EXPECTATION_OVERRIDE = auto()  # Active step expects this classification; prompted directly
    EXPECTATION_MATCH = auto()  # Persisted expectation matched the classification
    AUTO_RESPONSE = auto()  # Auto responder handled the message
    POSTBACK_STREAM = auto()  # Postback payload named a stream
    CLASSIFICATION = auto()  # Static classification mapping matched
    EXPECTATION_FALLBACK = auto()  # Expected stream entered in fallback mode
    TERMINAL = auto()  # Nothing active and nothing matched
    RESTART = auto()  # Restart the flow from "main"


@dataclass
class RoutingDecision:
    route: Route
    cursor: Cursor
    stop: bool = False


class FlowController:
    def __init__(self, definition: FlowDefinition, client: FlowClient):
        validate_streams(definition.streams)

        self.definition = definition
        self.streams = definition.streams
        self.client = client

        self.runner = StepRunner(self.streams, client)
        self.extractor = InfoExtractor(self.streams)
        self.auto_responder = AutoResponder(definition.auto_responses, client)

        roles = definition.sender_roles_to_process or settings.DEFAULT_SENDER_ROLES
        self.sender_roles = {getattr(role, "value", role) for role in roles}

        # Computed once and reused for every mapping lookup this turn
        self.keys = ClassificationKeys.from_classification(
            client.get_message_part().classification
        )

        self.cursor = Cursor.initial()
        self.expectations = Expectations()
        self.phase = TurnPhase.INIT
        self.route: Optional[Route] = None

    def handle_turn(self) -> Cursor:
        """
        Process the current message and return the final cursor.
        """
        self.phase = TurnPhase.ROLE_CHECK
        if not self._is_valid_sender_role(self.client.get_message()):
            logger.info("Sender role is not processed by this flow")
            self.client.done()
            self.phase = TurnPhase.DONE
            return self.cursor

        part = self.client.get_message_part()

        if part.content_type == MessageType.EVENT:
            self.phase = TurnPhase.EVENT_PATH
            logger.info("Processing event message part")
            self._handle_event(part)
        elif part.content_type in MESSAGE_TYPES:
            self.phase = TurnPhase.MESSAGE_PATH
            logger.info(f"Processing {part.content_type} message part")
            self._handle_message(part)
        else:
            logger.warning(f"Unsupported message part content type: {part.content_type}")

        self.phase = TurnPhase.DONE
        return self.cursor

    # ==========================================================================
    # Paths
    # ==========================================================================

    def _is_valid_sender_role(self, message: Message) -> bool:
        if not message.sender_role:
            return True
        return message.sender_role in self.sender_roles

    def _handle_event(self, part: MessagePart):
        content = part.content or {}
        event_type = content.get("event_type")
        handler = (
            self.definition.event_handlers.get(event_type)
            or self.definition.event_handlers.get(WILDCARD_EVENT)
        )

        if handler is None:
            logger.info(f"Did not find matching event handler for '{event_type}'")
            return

        logger.info(f"Found matching event handler for '{event_type}'")
        handler(event_type, content.get("payload"))

    def _handle_message(self, part: MessagePart):
        self.cursor = self.runner.run(self.cursor)
        self.extractor.extract(part)

        self.phase = TurnPhase.ROUTING_DECISION
        decision = self._decide_route(part)
        self.route = decision.route
        self.cursor = decision.cursor
        logger.info(f"Routed via {decision.route.name} to {decision.cursor.describe()}")

        if decision.stop:
            return

        self.phase = TurnPhase.STEP_EXECUTION
        self.cursor = self.runner.run(self.cursor)

    # ==========================================================================
    # Routing (first match wins)
    # ==========================================================================

    def _decide_route(self, part: MessagePart) -> RoutingDecision:
        active_step = self.cursor.currently_active_step

        if self._is_reset_command(part):
            logger.info("Resetting user")
            self.client.reset_user()
            self.client.done()
            return RoutingDecision(Route.RESET, self.cursor, stop=True)

        if (
            active_step is not None
            and self.keys.display is not None
            and self.keys.display in active_step.expects()
        ):
            logger.info("Prompt after expectation assignment override")
            self._prompt_once(active_step)
            return RoutingDecision(Route.EXPECTATION_OVERRIDE, self.cursor, stop=True)

        state = self.client.get_conversation_state()
        self.expectations = Expectations.from_conversation_state(state)

        expected_stream = self.keys.match(self.expectations.classifications)
        if expected_stream:
            cursor = self._start_of(expected_stream).with_changes(
                stream_stack=frames_from_state(state.get("currentExpectationsStreamStack"))
            )
            self.client.update_conversation_state("currentExpectations", None)
            self.client.update_conversation_state("lastExpectations", self.expectations.to_archive())
            return RoutingDecision(Route.EXPECTATION_MATCH, cursor)

        if self.auto_responder.respond(part.predicted_next_message).stops_processing:
            logger.info("Auto responder stopped processing")
            return RoutingDecision(Route.AUTO_RESPONSE, self.cursor, stop=True)

        postback_stream = self._postback_stream(part)
        if postback_stream:
            logger.info(f"Got postback that directs to stream '{postback_stream}'")
            return RoutingDecision(Route.POSTBACK_STREAM, self._start_of(postback_stream))

        mapped_stream = self.keys.match(self.definition.classifications)
        logger.info(f"Matching classification mapping: {mapped_stream}")
        if mapped_stream:
            return RoutingDecision(Route.CLASSIFICATION, self._start_of(mapped_stream))

        if active_step is None and not self.expectations.is_empty:
            return self._run_expectation_fallback()

        if active_step is None:
            logger.info("Routing to end")
            return RoutingDecision(Route.TERMINAL, self._start_of(TERMINAL_STREAM))

        return RoutingDecision(Route.RESTART, Cursor.initial().with_changes(is_first_run=False))

    def _run_expectation_fallback(self) -> RoutingDecision:
        cursor = self._start_of(self.expectations.stream).with_changes(run_fallback=True)
        cursor = self.runner.run(cursor)

        if cursor.ran_fallback:
            logger.info("Ran expectation fallback")
            return RoutingDecision(Route.EXPECTATION_FALLBACK, cursor, stop=True)

        logger.info("Did not run expectation fallback, routing to end")
        return RoutingDecision(Route.EXPECTATION_FALLBACK, self._start_of(TERMINAL_STREAM))

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _prompt_once(self, step: Step):
        """Call the step's prompt and discard whatever signal it produces."""
        if step.prompt.is_suspending:
            step.prompt.fn(_ignore_signal)
        else:
            step.prompt.fn()

    def _start_of(self, stream_name: str) -> Cursor:
        return self.cursor.jump(stream_name).with_changes(is_first_run=False)

    def _is_reset_command(self, part: MessagePart) -> bool:
        # Postbacks never reset, even when their text matches
        if part.content_type != MessageType.TEXT or not isinstance(part.content, str):
            return False
        return part.content.strip() in settings.RESET_COMMANDS

    def _postback_stream(self, part: MessagePart) -> Optional[str]:
        if part.content_type != MessageType.POSTBACK or not isinstance(part.content, dict):
            return None
        stream = part.content.get("stream")
        return stream if is_stream(self.streams, stream) else None


def _ignore_signal(signal=None):
    logger.debug(f"Ignoring prompt signal {signal!r} after expectation override")


def run_flow(definition: FlowDefinition, client: FlowClient) -> FlowController:
    """Build a controller for ``definition`` and run the current turn."""
    controller = FlowController(definition, client)
    controller.handle_turn()
    return controller

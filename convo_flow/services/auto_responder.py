"""
Auto Responder Service.

Decides whether a predicted next message should short-circuit normal
routing, either by sending a prepared response straight away or by ignoring
a message the user is expected to follow up on.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from ..client.interface import FlowClient
from ..config import settings
from ..domain.constants import CONTINUATION_RULE_KEY, RESPONSE_NAME_PREFIX
from ..domain.models import AutoResponseRule
from ..schemas.messages import Prediction

logger = logging.getLogger(__name__)


class AutoResponseEffect(str, Enum):
    """
    CONTINUE: route the message normally.
    IGNORED: stop; another user message is expected, nothing is sent.
    RESPONDED: stop; a prepared response was queued.
    """

    CONTINUE = "CONTINUE"
    IGNORED = "IGNORED"
    RESPONDED = "RESPONDED"

    @property
    def stops_processing(self) -> bool:
        return self is not AutoResponseEffect.CONTINUE


class AutoResponder:
    def __init__(self, rules: Dict[str, AutoResponseRule], client: FlowClient):
        self.rules = rules or {}
        self.client = client

    def respond(self, prediction: Optional[Prediction]) -> AutoResponseEffect:
        logger.debug("Running auto responder")

        if prediction is None:
            return AutoResponseEffect.CONTINUE

        logger.debug(f"Prediction: {prediction.model_dump_json()}")
        direction = prediction.direction.value

        if direction == "input":
            return self._respond_to_input(prediction)
        if direction == "output":
            return self._respond_to_output(prediction)

        return AutoResponseEffect.CONTINUE

    def _respond_to_input(self, prediction: Prediction) -> AutoResponseEffect:
        policy = self.rules.get(CONTINUATION_RULE_KEY)
        logger.info(f"Another message from the user is expected (policy: {policy})")

        if policy and policy.minimum_confidence and policy.minimum_confidence > prediction.overall_confidence:
            logger.info("Not confident enough in continuation")
            return AutoResponseEffect.CONTINUE

        if policy and policy.ignore:
            logger.info("Ignoring message because it is expected the user will continue")
            return AutoResponseEffect.IGNORED

        return AutoResponseEffect.CONTINUE

    def _respond_to_output(self, prediction: Prediction) -> AutoResponseEffect:
        base_type = prediction.base_type.value
        sub_type = prediction.sub_type.value if prediction.sub_type else ""

        rule = self.rules.get(f"{base_type}/{sub_type}") or self.rules.get(base_type)
        if rule is None:
            logger.info("Auto response is not configured for the predicted response")
            return AutoResponseEffect.CONTINUE

        if not prediction.predicted_response or not prediction.predicted_response.auto_fill_capable:
            logger.info("Predicted response is not capable of being auto filled")
            return AutoResponseEffect.CONTINUE

        minimum_confidence = rule.minimum_confidence or settings.DEFAULT_MINIMUM_CONFIDENCE
        if minimum_confidence > prediction.overall_confidence:
            logger.info(
                f"Prediction confidence of {prediction.overall_confidence} did not meet "
                f"minimum threshold of {minimum_confidence}"
            )
            return AutoResponseEffect.CONTINUE

        response_name = f"{RESPONSE_NAME_PREFIX}{base_type}"
        if sub_type:
            response_name += f"/{sub_type}"

        logger.info(f"Automatically sending predicted response: {response_name}")
        self.client.add_response(response_name, {})
        return AutoResponseEffect.RESPONDED

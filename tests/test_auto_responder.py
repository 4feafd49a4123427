import pytest

from convo_flow.domain.models import AutoResponseRule, FlowDefinition
from convo_flow.schemas.messages import Prediction
from convo_flow.services.auto_responder import AutoResponder, AutoResponseEffect


@pytest.fixture
def respond(client, make_prediction):
    def _respond(rules, **prediction_kwargs):
        rules = {key: AutoResponseRule.model_validate(rule) for key, rule in rules.items()}
        prediction = Prediction.model_validate(make_prediction(**prediction_kwargs))
        return AutoResponder(rules, client).respond(prediction)
    return _respond


def response_names(client):
    return [part.content["response_name"] for part in client.responses]


def test_no_prediction_continues(client):
    assert AutoResponder({}, client).respond(None) is AutoResponseEffect.CONTINUE


class TestOutputPrediction:
    def test_confident_prediction_is_sent(self, respond, client):
        effect = respond({"greeting": {"minimumConfidence": 0.6}}, confidence=0.9)

        assert effect is AutoResponseEffect.RESPONDED
        assert effect.stops_processing
        assert response_names(client) == ["app:response:name:greeting"]

    def test_below_threshold_continues_without_response(self, respond, client):
        effect = respond({"greeting": {"minimumConfidence": 0.6}}, confidence=0.5)

        assert effect is AutoResponseEffect.CONTINUE
        assert not effect.stops_processing
        assert client.responses == []

    def test_default_threshold_applies_without_rule_minimum(self, respond, client):
        assert respond({"greeting": {}}, confidence=0.4) is AutoResponseEffect.CONTINUE
        assert respond({"greeting": {}}, confidence=0.5) is AutoResponseEffect.RESPONDED

    def test_sub_type_rule_takes_precedence(self, respond, client):
        rules = {"greeting/formal": {"minimumConfidence": 0.5}, "greeting": {"minimumConfidence": 0.99}}

        assert respond(rules, sub="formal", confidence=0.7) is AutoResponseEffect.RESPONDED
        assert response_names(client) == ["app:response:name:greeting/formal"]

    def test_unconfigured_prediction_continues(self, respond, client):
        assert respond({"farewell": {}}, confidence=1.0) is AutoResponseEffect.CONTINUE
        assert client.responses == []

    def test_not_auto_fill_capable_continues(self, respond, client):
        effect = respond({"greeting": {}}, confidence=1.0, auto_fill_capable=False)
        assert effect is AutoResponseEffect.CONTINUE


class TestInputPrediction:
    def test_ignore_policy_stops(self, respond, client):
        effect = respond({"_continuation": {"ignore": True}}, direction="input", confidence=0.3)

        assert effect is AutoResponseEffect.IGNORED
        assert client.responses == []

    def test_ignore_policy_respects_minimum_confidence(self, respond):
        rules = {"_continuation": {"ignore": True, "minimumConfidence": 0.7}}

        assert respond(rules, direction="input", confidence=0.5) is AutoResponseEffect.CONTINUE
        assert respond(rules, direction="input", confidence=0.8) is AutoResponseEffect.IGNORED

    def test_no_policy_continues(self, respond):
        assert respond({}, direction="input") is AutoResponseEffect.CONTINUE


def test_unknown_direction_continues(respond):
    assert respond({"greeting": {}}, direction="sideways") is AutoResponseEffect.CONTINUE


def test_flow_definition_coerces_rules():
    definition = FlowDefinition(auto_responses={
        "greeting": {"minimumConfidence": 0.7},
        "_continuation": {"ignore": True},
    })

    assert definition.auto_responses["greeting"] == AutoResponseRule(minimum_confidence=0.7)
    assert definition.auto_responses["_continuation"].ignore
    assert FlowDefinition().auto_responses == {}

"""
Service Layer - Turn Orchestration

Defines the FlowController that runs one message turn and the AutoResponder
it consults for predicted messages.
"""

from convo_flow.services.auto_responder import AutoResponder, AutoResponseEffect
from convo_flow.services.flow import FlowController, Route, TurnPhase, run_flow

__all__ = [
    "AutoResponder",
    "AutoResponseEffect",
    "FlowController",
    "Route",
    "TurnPhase",
    "run_flow",
]

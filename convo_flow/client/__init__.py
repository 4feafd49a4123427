"""
Client Layer - Collaborator Contract

Defines the FlowClient interface the engine talks to and an in-memory
implementation of it.
"""

from convo_flow.client.interface import FlowClient
from convo_flow.client.memory import InMemoryClient

__all__ = [
    "FlowClient",
    "InMemoryClient",
]

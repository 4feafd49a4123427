"""
Domain Layer - Static Flow Models

This module defines the static structure a flow author hands to the engine:
Steps, their Prompt capability, auto-response rules and the FlowDefinition
that groups streams of steps by name.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PromptMode(str, Enum):
    """
    Declared calling convention of a step prompt.

    SYNC: called with no arguments; its return value is the continuation signal.
    SUSPENDING: called with a continuation; the step invokes it exactly once,
        either before returning or later from asynchronous work.
    """

    SYNC = "sync"
    SUSPENDING = "suspending"


@dataclass(frozen=True)
class Prompt:
    """
    A step's prompt function together with its declared calling convention.

    Attributes:
        fn: The prompt callable. Takes no arguments for SYNC, one continuation
            argument for SUSPENDING.
        mode: PromptMode
    """

    fn: Callable[..., Any]
    mode: PromptMode = PromptMode.SYNC

    @property
    def is_suspending(self) -> bool:
        return self.mode == PromptMode.SUSPENDING


def suspending(fn: Callable[[Callable[..., Any]], Any]) -> Prompt:
    """Declare ``fn`` as a suspending prompt. Usable as a decorator."""
    return Prompt(fn=fn, mode=PromptMode.SUSPENDING)


def _noop(*args, **kwargs) -> None:
    return None


def _always_satisfied() -> bool:
    return True


def _no_expectations() -> List[str]:
    return []


@dataclass(eq=False)
class Step:
    """
    Fundamental unit of conversational logic.

    Steps have no identity beyond the object itself (eq=False keeps the default
    identity hash), so the same Step may appear in several streams and still be
    recognised as one. The engine never mutates a Step.

    Attributes:
        extract_info: Called with the current message part to pull data out of it.
        satisfied: Returns True when the step needs no further input.
        prompt: Prompt asking the user for the missing input.
        next: Returns a stream name to route to once satisfied, or None to
            advance within the current stream.
        expects: Classification displays that re-activate this step directly.
        fallback: Optional handler run instead of the prompt when the engine
            routes here from an unmatched expectation.
    """

    extract_info: Callable[[Any], None] = _noop
    satisfied: Callable[[], bool] = _always_satisfied
    prompt: Union[Prompt, Callable[..., Any]] = field(default_factory=lambda: Prompt(_noop))
    next: Callable[[], Optional[str]] = _noop
    expects: Callable[[], List[str]] = _no_expectations
    fallback: Optional[Callable[[], None]] = None

    def __post_init__(self):
        # Plain callables are synchronous prompts
        if not isinstance(self.prompt, Prompt):
            self.prompt = Prompt(fn=self.prompt)


def create_step(**capabilities) -> Step:
    """
    Build a Step from keyword capabilities, filling in defaults for the rest.

    Example:
        create_step(satisfied=lambda: False, prompt=lambda: "init.proceed")
    """
    return Step(**capabilities)


class AutoResponseRule(BaseModel):
    """
    Configuration for one auto-response entry.

    For a classification key it sets the minimum confidence a predicted
    response needs before it is sent automatically. For the reserved
    ``_continuation`` key it decides what happens when more user input is
    predicted.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    minimum_confidence: Optional[float] = Field(None, alias="minimumConfidence")
    ignore: bool = False


StreamElement = Union[Step, str]
Stream = Union[List[StreamElement], Step, str]


@dataclass
class FlowDefinition:
    """
    Everything the engine needs to route one conversation.

    Attributes:
        streams: Stream name to list of steps, single step, or pointer name.
            "main" is the entry point and "end" the terminal fallback.
        classifications: Classification key to stream name.
        event_handlers: Event type (or "*") to handler(event_type, payload).
        auto_responses: "base" or "base/sub" to AutoResponseRule, plus the
            reserved "_continuation" policy.
        sender_roles_to_process: Allowed sender roles. None means the
            configured default (end-user only).
    """

    streams: Dict[str, Stream] = field(default_factory=dict)
    classifications: Dict[str, str] = field(default_factory=dict)
    event_handlers: Dict[str, Callable[[str, Any], Any]] = field(default_factory=dict)
    auto_responses: Dict[str, AutoResponseRule] = field(default_factory=dict)
    sender_roles_to_process: Optional[List[str]] = None

    def __post_init__(self):
        self.classifications = self.classifications or {}
        self.event_handlers = self.event_handlers or {}
        self.auto_responses = {
            key: rule if isinstance(rule, AutoResponseRule) else AutoResponseRule.model_validate(rule)
            for key, rule in (self.auto_responses or {}).items()
        }

"""
Load-time validation of a flow's stream graph.

Unknown pointers and pointer cycles would otherwise only surface as a crash
or unbounded recursion in the middle of a turn.
"""

import logging
from typing import Dict, List, Mapping

from ..domain.constants import MAIN_STREAM, TERMINAL_STREAM
from ..domain.models import Stream
from .exceptions import CyclicStreamError, InvalidStreamReferenceError

logger = logging.getLogger(__name__)


def validate_streams(streams: Mapping[str, Stream]) -> None:
    """
    Raises:
        InvalidStreamReferenceError: a pointer names no defined stream, or a
            stream holds an empty element.
        CyclicStreamError: pointers lead back to a stream already on the path.
    """
    graph = _pointer_graph(streams)
    _check_acyclic(graph)

    for reserved in (MAIN_STREAM, TERMINAL_STREAM):
        if reserved not in streams:
            logger.warning(f"Flow does not define the '{reserved}' stream")


def _pointer_graph(streams: Mapping[str, Stream]) -> Dict[str, List[str]]:
    graph: Dict[str, List[str]] = {}

    for name, stream in streams.items():
        elements = stream if isinstance(stream, list) else [stream]
        targets = []
        for element in elements:
            if not element:
                raise InvalidStreamReferenceError(element)
            if isinstance(element, str):
                if element not in streams:
                    raise InvalidStreamReferenceError(element)
                targets.append(element)
        graph[name] = targets

    return graph


def _check_acyclic(graph: Dict[str, List[str]]) -> None:
    visiting, done = set(), set()

    def visit(name: str, path: List[str]):
        if name in done:
            return
        if name in visiting:
            raise CyclicStreamError(path[path.index(name):] + [name])
        visiting.add(name)
        for target in graph.get(name, []):
            visit(target, path + [name])
        visiting.discard(name)
        done.add(name)

    for name in graph:
        visit(name, [])

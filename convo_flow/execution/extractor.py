"""
Info Extraction across all streams.

Every step gets a chance to read the current message regardless of where the
cursor is, so answers given out of order are still captured.
"""

import logging
from typing import Any, Iterator, Mapping, Set

from ..domain.constants import MAIN_STREAM
from ..domain.models import Step, Stream

logger = logging.getLogger(__name__)


class InfoExtractor:
    def __init__(self, streams: Mapping[str, Stream]):
        self.streams = streams

    def extract(self, message_part: Any) -> int:
        """
        Call ``extract_info`` once on every distinct step outside "main".

        Returns the number of steps visited.
        """
        visited: Set[int] = set()

        for step in self._iter_steps():
            if id(step) in visited:
                continue
            visited.add(id(step))
            step.extract_info(message_part)

        logger.debug(f"Extracted info from {len(visited)} steps")
        return len(visited)

    def _iter_steps(self) -> Iterator[Step]:
        for name, stream in self.streams.items():
            if name == MAIN_STREAM:
                continue
            # Pointers are covered when their target stream is visited
            elements = stream if isinstance(stream, list) else [stream]
            for element in elements:
                if isinstance(element, Step):
                    yield element

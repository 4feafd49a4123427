"""
Classification projections.

Routing tables are keyed by string projections of a Classification rather
than by the object itself. The three projections are computed once per turn
and reused for every lookup.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, TypeVar

from .messages import Classification

T = TypeVar("T")


def _facet_value(facet) -> str:
    return facet.value if facet is not None and facet.value else ""


def classification_display(classification: Optional[Classification]) -> Optional[str]:
    """``base/sub#style``, omitting the parts that are empty."""
    if classification is None:
        return None

    display = classification_without_style(classification)
    style = _facet_value(classification.style)
    if style:
        display += f"#{style}"
    return display


def classification_without_style(classification: Optional[Classification]) -> Optional[str]:
    """``base/sub``, omitting the sub type when empty."""
    if classification is None:
        return None

    without_style = str(classification.base_type.value)
    sub_type = _facet_value(classification.sub_type)
    if sub_type:
        without_style += f"/{sub_type}"
    return without_style


def classification_base_type(classification: Optional[Classification]) -> Optional[str]:
    if classification is None:
        return None
    return classification.base_type.value


@dataclass(frozen=True)
class ClassificationKeys:
    """
    The lookup keys for one message, most specific first.
    """

    display: Optional[str] = None
    without_style: Optional[str] = None
    base_type: Optional[str] = None

    @classmethod
    def from_classification(cls, classification: Optional[Classification]) -> "ClassificationKeys":
        return cls(
            display=classification_display(classification),
            without_style=classification_without_style(classification),
            base_type=classification_base_type(classification),
        )

    def match(self, mapping: Mapping[str, T]) -> Optional[T]:
        """
        Look the keys up in ``mapping`` in order of precedence
        (display, then without style, then base type).
        """
        if not mapping:
            return None
        for key in (self.display, self.without_style, self.base_type):
            if key is not None and mapping.get(key):
                return mapping[key]
        return None

from .base import BaseMatcher, MatchResult
from .nested_attributes import (
    AcceptNestedAttributesForMatcher,
    accept_nested_attributes_for,
)

__all__ = [
    "accept_nested_attributes_for",
    "AcceptNestedAttributesForMatcher",
    "BaseMatcher",
    "MatchResult",
]

__version__ = "0.1.0"

from .config import Config
from .matchers import (
    AcceptNestedAttributesForMatcher,
    MatchResult,
    accept_nested_attributes_for,
)
from .model import BaseModel, HasMany, HasOne, accepts_nested_attributes_for
from .options import MethodRef

__all__ = [
    "accept_nested_attributes_for",
    "AcceptNestedAttributesForMatcher",
    "accepts_nested_attributes_for",
    "BaseModel",
    "Config",
    "HasMany",
    "HasOne",
    "MatchResult",
    "MethodRef",
]

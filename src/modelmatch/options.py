"""Declared option values and their resolution against a subject.

A nested attributes option can be declared as a fixed value, as a reference to
a method on the model, or as a callable. Each shape is wrapped in its own
class with a single ``resolve(subject)`` operation, so callers never have to
switch on the runtime type of the raw declared value::

    wrap(3).resolve(car)                    # 3
    wrap("max_doors").resolve(car)          # car.max_doors()
    wrap(lambda car: car.size).resolve(car) # car.size
"""

from __future__ import annotations

import logging
from typing import Any

from modelmatch.exceptions import MethodNotFoundError
from modelmatch.utils.reflection import find_method, responds_to

logger = logging.getLogger(__name__)


class OptionValue:
    """Base class for declared option values"""

    def resolve(self, subject: Any) -> Any:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), repr(self)))


class Literal(OptionValue):
    """A fixed value, used as-is"""

    def __init__(self, value: Any) -> None:
        self.value = value

    def resolve(self, subject: Any) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


class MethodRef(OptionValue):
    """Reference, by name, to a zero-argument method on the subject.

    Model declarations may use a plain string instead; both end up as a
    ``MethodRef`` after :func:`wrap`.
    """

    def __init__(self, name: str) -> None:
        if not isinstance(name, str):
            raise ValueError(f"Invalid method reference `{name!r}`")

        self.name = name

    def exists_on(self, subject: Any, include_private: bool = False) -> bool:
        return responds_to(subject, self.name, include_private=include_private)

    def resolve(self, subject: Any, include_private: bool = False) -> Any:
        """Invoke the referenced method on `subject` and return its result.

        Raises `MethodNotFoundError` when the method is missing, or when it is
        non-public and `include_private` is not set. Errors raised by the method
        itself propagate unchanged.
        """
        method = find_method(subject, self.name, include_private=include_private)
        if method is None:
            raise MethodNotFoundError(
                f"{'method' if include_private else 'public method'} "
                f"`{self.name}` is not defined on {type(subject).__name__}"
            )

        logger.debug(f"Resolving {self.name} on {type(subject).__name__}")
        return method()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"MethodRef({self.name!r})"


class Callable(OptionValue):
    """A callable invoked with the subject as its sole argument"""

    def __init__(self, fn: Any) -> None:
        self.fn = fn

    def resolve(self, subject: Any) -> Any:
        return self.fn(subject)

    def __repr__(self) -> str:
        return f"Callable({self.fn!r})"


def wrap(raw: Any) -> OptionValue:
    """Classify a raw declared value into its `OptionValue` variant.

    Strings are treated as method references; other callables are invoked with
    the subject; anything else is a literal.
    """
    if isinstance(raw, OptionValue):
        return raw
    if isinstance(raw, str):
        return MethodRef(raw)
    if callable(raw):
        return Callable(raw)

    return Literal(raw)


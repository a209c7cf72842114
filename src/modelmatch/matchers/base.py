"""Base data structures shared by matchers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from modelmatch.exceptions import IncorrectUsageError


@dataclass(frozen=True)
class MatchResult:
    """Result of evaluating a matcher against one subject.

    Attributes:
        passed: Whether every expectation held.
        expectation: What was expected, e.g. "Car to accept nested attributes for doors".
        problem: Why the match failed; `None` when it passed.
    """

    passed: bool
    expectation: str
    problem: str | None = None

    def __bool__(self) -> bool:
        return self.passed

    @property
    def failure_message(self) -> str:
        return f"Expected {self.expectation} ({self.problem})"

    @property
    def negated_failure_message(self) -> str:
        return f"Did not expect {self.expectation}"


class BaseMatcher(ABC):
    """Contract between matchers and the assertion frameworks that drive them.

    A framework constructs a matcher, calls `matches(subject)`, and on an
    unexpected outcome asks for `failure_message()` or
    `failure_message_when_negated()`. `evaluate(subject)` is the stateless
    variant that hands back the `MatchResult` directly.
    """

    def __init__(self) -> None:
        self._last_result: MatchResult | None = None

    @abstractmethod
    def evaluate(self, subject: Any) -> MatchResult:
        """Evaluate the matcher against `subject`"""

    @abstractmethod
    def description(self) -> str:
        """Describe the expectation, independent of any subject"""

    def matches(self, subject: Any) -> bool:
        self._last_result = self.evaluate(subject)
        return self._last_result.passed

    @property
    def last_result(self) -> MatchResult:
        if self._last_result is None:
            raise IncorrectUsageError(
                f"{self.__class__.__name__} has not been matched against a subject yet"
            )
        return self._last_result

    def failure_message(self) -> str:
        return self.last_result.failure_message

    def failure_message_when_negated(self) -> str:
        return self.last_result.negated_failure_message

    def __str__(self) -> str:
        return self.description()

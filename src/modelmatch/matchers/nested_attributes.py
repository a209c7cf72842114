"""The `accept_nested_attributes_for` matcher tests usage of
`accepts_nested_attributes_for` on a model.

::

    @accepts_nested_attributes_for("doors")
    class Car(BaseModel):
        doors = HasMany("Door")

    matcher = accept_nested_attributes_for("doors")
    assert matcher.matches(Car()), matcher.failure_message()

Qualifiers narrow the expectation down to the options of the declaration.
Only qualifiers that were called are checked.

``allow_destroy`` asserts the ``allow_destroy`` option::

    accept_nested_attributes_for("mirrors").allow_destroy(True)

``reject_if`` asserts what the ``reject_if`` option resolves to on the
subject. A method reference is invoked on the subject, a callable is called
with the subject, anything else is compared as-is::

    @accepts_nested_attributes_for("mirrors", reject_if="different_than_2")
    class Car(BaseModel):
        mirrors = HasMany("Mirror")

        def different_than_2(self):
            return len(self.mirrors) != 2

    accept_nested_attributes_for("mirrors").reject_if(True)

``limit`` asserts the ``limit`` option::

    accept_nested_attributes_for("windows").limit(3)

``update_only`` asserts the ``update_only`` option::

    accept_nested_attributes_for("engine").update_only(True)
"""

from __future__ import annotations

import logging
from typing import Any

from modelmatch.config import Config, ConfigAttribute, get_config
from modelmatch.exceptions import MethodNotFoundError
from modelmatch.matchers.base import BaseMatcher, MatchResult
from modelmatch.options import MethodRef, wrap
from modelmatch.utils import inspect_value
from modelmatch.utils.container import NestedAttributesOptions
from modelmatch.utils.reflection import nested_attributes_options

logger = logging.getLogger(__name__)


def accept_nested_attributes_for(
    name: str, config: Config | None = None
) -> AcceptNestedAttributesForMatcher:
    return AcceptNestedAttributesForMatcher(name, config=config)


class AcceptNestedAttributesForMatcher(BaseMatcher):
    resolution_errors = ConfigAttribute("resolution_errors")

    def __init__(self, name: str, config: Config | None = None) -> None:
        super().__init__()

        self.name = name
        self._config = config
        self._options: dict[str, Any] = {}

    @property
    def config(self) -> Config:
        return self._config if self._config is not None else get_config()

    def allow_destroy(self, allow_destroy: bool) -> AcceptNestedAttributesForMatcher:
        self._options["allow_destroy"] = allow_destroy
        return self

    def reject_if(self, reject_if: Any) -> AcceptNestedAttributesForMatcher:
        self._options["reject_if"] = reject_if
        return self

    def limit(self, limit: int) -> AcceptNestedAttributesForMatcher:
        self._options["limit"] = limit
        return self

    def update_only(self, update_only: bool) -> AcceptNestedAttributesForMatcher:
        self._options["update_only"] = update_only
        return self

    def evaluate(self, subject: Any) -> MatchResult:
        problem = self._find_problem(subject)
        result = MatchResult(
            passed=problem is None,
            expectation=self._expectation(subject),
            problem=problem,
        )

        logger.debug(f"{self.description()} against {subject!r}: {result}")
        return result

    def description(self) -> str:
        description = f"accepts_nested_attributes_for :{self.name}"
        for option_name in NestedAttributesOptions.SLOTS:
            if option_name in self._options:
                description += (
                    f" {option_name} => {inspect_value(self._options[option_name])}"
                )
        return description

    def _find_problem(self, subject: Any) -> str | None:
        declared = nested_attributes_options(subject).get(self.name)
        if declared is None:
            return "is not declared"

        for check in (
            self._allow_destroy_problem,
            self._reject_if_problem,
            self._limit_problem,
            self._update_only_problem,
        ):
            problem = check(subject, declared)
            if problem is not None:
                return problem

        return None

    def _allow_destroy_problem(self, subject, declared):
        if "allow_destroy" not in self._options:
            return None

        expected = self._options["allow_destroy"]
        if expected == declared.get("allow_destroy"):
            return None

        return f"{_should_or_should_not(expected)} allow destroy"

    def _reject_if_problem(self, subject, declared):
        if "reject_if" not in self._options:
            return None

        expected = self._options["reject_if"]
        problem_prefix = f"reject_if should resolve to {inspect_value(expected)}"
        option_value = wrap(declared.get("reject_if"))

        if isinstance(option_value, MethodRef):
            if not option_value.exists_on(subject, include_private=True):
                return (
                    f"{problem_prefix}, but {inspect_value(option_value.name)} "
                    f"does not exist on {type(subject).__name__}"
                )
            resolved = option_value.resolve(subject, include_private=True)
        else:
            resolved = option_value.resolve(subject)

        if expected == resolved:
            return None

        return f"{problem_prefix}, got {inspect_value(resolved)}"

    def _limit_problem(self, subject, declared):
        if "limit" not in self._options:
            return None

        expected = self._options["limit"]
        resolved, problem = self._resolve_generic("limit", subject, declared)
        if problem is not None:
            return problem

        if expected == resolved:
            return None

        return f"limit should be {expected}, got {resolved}"

    def _update_only_problem(self, subject, declared):
        if "update_only" not in self._options:
            return None

        expected = self._options["update_only"]
        resolved, problem = self._resolve_generic("update_only", subject, declared)
        if problem is not None:
            return problem

        if expected == resolved:
            return None

        return f"{_should_or_should_not(expected)} be update only"

    def _resolve_generic(self, option_name, subject, declared):
        """Resolve a declared option against `subject`, public methods only.

        Returns a `(resolved, problem)` pair. A missing method raises
        `MethodNotFoundError`, unless `resolution_errors` is "fail", in which
        case it is reported as the problem.
        """
        try:
            return wrap(declared.get(option_name)).resolve(subject), None
        except MethodNotFoundError as exc:
            if self.resolution_errors != "fail":
                raise
            return None, f"{option_name} could not be resolved: {exc}"

    def _expectation(self, subject: Any) -> str:
        return f"{type(subject).__name__} to accept nested attributes for {self.name}"


def _should_or_should_not(value: Any) -> str:
    return "should" if value else "should not"

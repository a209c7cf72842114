"""Utility module for modelmatch

Definitions/declaractions in this module should be independent of other modules,
to the maximum extent possible.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def inspect_value(value: Any) -> str:
    """Return the debug representation used in matcher descriptions and messages.

    Booleans and ``None`` are rendered the way the ``accepts_nested_attributes_for``
    declaration vocabulary spells them (``true``, ``false``, ``nil``); everything
    else falls back to ``repr``.
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "nil"

    return repr(value)


def is_blank(value: Any) -> bool:
    """Check if a value is considered blank: ``None``, empty, or whitespace only."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0

    return False


def is_truthy_flag(value: Any) -> bool:
    """Interpret a ``_destroy`` style flag coming in from nested attributes payloads."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes", "on")

    return bool(value)

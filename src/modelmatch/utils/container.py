from __future__ import annotations

from typing import Any


class Options(dict):
    """Dictionary with attribute access, used to hold option records.

    Keys that were never set raise ``AttributeError`` on attribute access,
    which keeps "unset" distinguishable from "set to a falsy value".
    """

    def __init__(self, opts: dict[str, Any] | None = None) -> None:
        super().__init__()

        if opts is None:
            opts = {}
        else:
            try:
                opts = dict(opts)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid options `{opts}`. Must be a dict.")

        self.update(opts)

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(
                f"'{self.__class__.__name__}' object has no attribute '{name}'"
            )

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value


class NestedAttributesOptions(Options):
    """Declared option record for one relation accepting nested attributes."""

    SLOTS = ("allow_destroy", "reject_if", "limit", "update_only")

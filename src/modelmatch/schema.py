"""Validation of ``accepts_nested_attributes_for`` declaration options"""

import logging

from marshmallow import Schema, fields, post_load, validate
from marshmallow import ValidationError as MarshmallowValidationError

from modelmatch.exceptions import ValidationError
from modelmatch.options import OptionValue
from modelmatch.utils import is_blank

logger = logging.getLogger(__name__)

ALL_BLANK = "all_blank"


def reject_all_blank(attributes):
    """Reject a nested record whose values, ignoring `_destroy`, are all blank"""
    return all(
        is_blank(value) for key, value in attributes.items() if key != "_destroy"
    )


class Resolvable(fields.Field):
    """Accept a method reference or a callable as-is, otherwise validate with `inner`.

    Options like `limit` may be declared as a number, or as something that
    produces the number when resolved against the model.
    """

    def __init__(self, inner: fields.Field, **kwargs):
        self.inner = inner
        super().__init__(**kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, (str, OptionValue)) or callable(value):
            if isinstance(value, str) and not value:
                raise MarshmallowValidationError("Method reference cannot be empty.")
            return value

        return self.inner.deserialize(value, attr, data, **kwargs)


class NestedAttributesOptionsSchema(Schema):
    allow_destroy = fields.Boolean(truthy={True}, falsy={False}, load_default=False)
    reject_if = Resolvable(fields.Raw(), load_default=None, allow_none=True)
    limit = Resolvable(
        fields.Integer(strict=True, validate=validate.Range(min=0)),
        load_default=None,
        allow_none=True,
    )
    update_only = Resolvable(
        fields.Boolean(truthy={True}, falsy={False}), load_default=False
    )

    @post_load
    def expand_all_blank(self, data, **kwargs):
        if data.get("reject_if") == ALL_BLANK:
            data["reject_if"] = reject_all_blank
        return data


def load_options(options: dict) -> dict:
    """Validate raw declaration options, returning them with defaults filled in.

    Raises `ValidationError` carrying marshmallow's messages dict.
    """
    try:
        return NestedAttributesOptionsSchema().load(options)
    except MarshmallowValidationError as exc:
        logger.debug(f"Invalid nested attributes options {options}: {exc.messages}")
        raise ValidationError(exc.messages) from exc

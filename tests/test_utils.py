import pytest

from modelmatch import BaseModel, HasMany, HasOne
from modelmatch.exceptions import IncorrectUsageError
from modelmatch.utils import inspect_value, is_blank, is_truthy_flag
from modelmatch.utils.reflection import (
    association_fields,
    fields,
    has_fields,
    nested_attributes_options,
    responds_to,
)


class Leaf(BaseModel):
    pass


class Branch(BaseModel):
    leaves = HasMany(Leaf)
    bud = HasOne(Leaf)

    def grow(self):
        return True

    def _prune(self):
        return True


class Twig(Branch):
    def __sprout(self):
        return True


def test_inspect_value():
    assert inspect_value(True) == "true"
    assert inspect_value(False) == "false"
    assert inspect_value(None) == "nil"
    assert inspect_value(3) == "3"
    assert inspect_value("doors") == "'doors'"


@pytest.mark.parametrize(
    "value, blank",
    [
        (None, True),
        ("", True),
        ("   ", True),
        ([], True),
        ({}, True),
        (False, True),
        ("x", False),
        (0, False),
        ([0], False),
    ],
)
def test_is_blank(value, blank):
    assert is_blank(value) is blank


@pytest.mark.parametrize(
    "value, truthy",
    [("1", True), ("true", True), ("0", False), ("false", False), (1, True), (None, False)],
)
def test_is_truthy_flag(value, truthy):
    assert is_truthy_flag(value) is truthy


class TestReflection:
    def test_fields_are_gathered_in_declaration_order(self):
        assert list(fields(Branch).keys()) == ["leaves", "bud"]
        assert list(association_fields(Branch()).keys()) == ["leaves", "bud"]

    def test_fields_on_plain_objects_raise(self):
        with pytest.raises(IncorrectUsageError):
            fields(object())

    def test_has_fields(self):
        assert has_fields(Branch) is True
        assert has_fields(object) is False

    def test_nested_attributes_options_of_plain_class_is_empty(self):
        assert nested_attributes_options(object()) == {}

    def test_responds_to(self):
        assert responds_to(Branch(), "grow") is True
        assert responds_to(Branch(), "_prune") is False
        assert responds_to(Branch(), "_prune", include_private=True) is True
        assert responds_to(Branch(), "wither") is False

    def test_responds_to_finds_mangled_private_methods(self):
        assert responds_to(Twig(), "__sprout") is False
        assert responds_to(Twig(), "__sprout", include_private=True) is True
        assert responds_to(Twig(), "__unknown", include_private=True) is False

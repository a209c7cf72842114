from __future__ import annotations

from typing import TYPE_CHECKING, Any, Type

from modelmatch.exceptions import IncorrectUsageError

if TYPE_CHECKING:
    from modelmatch.model import Association, BaseModel
    from modelmatch.utils.container import NestedAttributesOptions

_FIELDS = "__container_fields__"
_NESTED_ATTRIBUTES = "__nested_attributes_options__"


def _as_class(class_or_instance: Any) -> type:
    return class_or_instance if isinstance(class_or_instance, type) else type(class_or_instance)


def fields(class_or_instance: Type[BaseModel] | BaseModel) -> dict[str, Association]:
    """Return a dictionary of associations declared on this model.

    Accepts a model or an instance of one.
    """
    try:
        fields_dict = getattr(class_or_instance, _FIELDS)
    except AttributeError:
        raise IncorrectUsageError(f"{class_or_instance} does not have fields")

    return fields_dict


def has_fields(class_or_instance: Any) -> bool:
    """Check if the class encloses association fields"""
    return hasattr(class_or_instance, _FIELDS)


def association_fields(
    class_or_instance: Type[BaseModel] | BaseModel,
) -> dict[str, Association]:
    """Return a dictionary of association fields in this model."""
    from modelmatch.model import Association

    return {
        field_name: field_obj
        for field_name, field_obj in fields(class_or_instance).items()
        if isinstance(field_obj, Association)
    }


def nested_attributes_options(
    class_or_instance: Any,
) -> dict[str, NestedAttributesOptions]:
    """Return the relation name -> declared option record table of a model class.

    Classes that never declared nested attributes yield an empty table,
    so plain objects can be inspected without raising.
    """
    return getattr(_as_class(class_or_instance), _NESTED_ATTRIBUTES, {})


def find_method(obj: Any, name: str, include_private: bool = False) -> Any:
    """Return the bound method called `name` on `obj`, or ``None``.

    Names with a leading underscore are considered non-public and only
    count when `include_private` is set. A double-underscore name is also
    looked up in its mangled form (``_Class__name``) along the MRO.
    """
    if name.startswith("_") and not include_private:
        return None

    candidates = [name]
    if name.startswith("__") and not name.endswith("__"):
        candidates += [
            f"_{klass.__name__.lstrip('_')}{name}" for klass in _as_class(obj).__mro__
        ]

    for candidate in candidates:
        attr = getattr(obj, candidate, None)
        if callable(attr):
            return attr

    return None


def responds_to(obj: Any, name: str, include_private: bool = False) -> bool:
    """Check whether `obj` exposes a callable attribute called `name`."""
    return find_method(obj, name, include_private=include_private) is not None

"""Models, associations and nested attributes assignment.

A model declares its associations as class attributes, and opts into accepting
nested attributes for some of them::

    @accepts_nested_attributes_for("doors", allow_destroy=True, limit=3)
    class Car(BaseModel):
        doors = HasMany("Door")

    car = Car(doors_attributes=[{"color": "red"}, {"color": "blue"}])

The declared options are kept per relation in a class-level table, which is
what :mod:`modelmatch.matchers` inspects.

While assigning, ``reject_if`` only takes effect when it names a method or is a
callable, either of which receives the attributes of the nested record. Any
other declared value, ``reject_if=True`` included, never rejects a record.
Associations linked by class name are looked up in the module of the
declaring model first, then among all models defined so far.
"""

from __future__ import annotations

import inspect
import logging
import sys
from collections import defaultdict
from collections.abc import Mapping
from typing import Any

from modelmatch.exceptions import (
    ConfigurationError,
    IncorrectUsageError,
    MethodNotFoundError,
    ObjectNotFoundError,
    TooManyRecordsError,
)
from modelmatch.options import Callable, MethodRef, wrap
from modelmatch.schema import load_options
from modelmatch.utils import is_blank, is_truthy_flag
from modelmatch.utils.container import NestedAttributesOptions
from modelmatch.utils.reflection import (
    _FIELDS,
    _NESTED_ATTRIBUTES,
    association_fields,
    fields,
    find_method,
    has_fields,
    nested_attributes_options,
)

logger = logging.getLogger(__name__)

UNASSIGNABLE_KEYS = ("id", "_destroy")

# Model classes by name, to resolve associations declared with a class name
# that is not an attribute of the declaring module
_registry: defaultdict[str, list[type[BaseModel]]] = defaultdict(list)


class Association:
    """Base class for associations between models"""

    def __init__(self, to_cls: type[BaseModel] | str) -> None:
        self._to_cls = to_cls
        self.field_name: str | None = None
        self.owner: type | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.field_name = name
        self.owner = owner

    @property
    def to_cls(self) -> type[BaseModel]:
        if isinstance(self._to_cls, str):
            self._to_cls = self._resolve_model(self._to_cls)

        return self._to_cls

    def _resolve_model(self, name: str) -> type[BaseModel]:
        """Look `name` up in the declaring module first, then among all models"""
        if self.owner is not None:
            module = sys.modules.get(self.owner.__module__)
            model = getattr(module, name, None)
            if isinstance(model, type) and issubclass(model, BaseModel):
                return model

        candidates = _registry.get(name, [])
        if not candidates:
            raise ConfigurationError(
                f"Model `{name}` linked from `{self.field_name}` has not been defined"
            )
        if len(candidates) > 1:
            qualified_names = ", ".join(
                f"{c.__module__}.{c.__qualname__}" for c in candidates
            )
            raise ConfigurationError(
                f"Model `{name}` linked from `{self.field_name}` is ambiguous: "
                f"{qualified_names}. "
                f"Link the model class itself instead of its name"
            )

        return candidates[0]

    def __repr__(self) -> str:
        to_cls = self._to_cls if isinstance(self._to_cls, str) else self._to_cls.__name__
        return f"{self.__class__.__name__}({to_cls!r})"


class HasMany(Association):
    """Association to a list of child models"""

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.__dict__.setdefault(self.field_name, [])

    def __set__(self, instance, value):
        instance.__dict__[self.field_name] = list(value or [])


class HasOne(Association):
    """Association to at most one child model"""

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.__dict__.get(self.field_name)

    def __set__(self, instance, value):
        instance.__dict__[self.field_name] = value


class NestedAttributesWriter:
    """Write-only `<association>_attributes` attribute installed on declaration"""

    def __init__(self, association_name: str) -> None:
        self.association_name = association_name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        raise AttributeError(f"`{self.association_name}_attributes` is write-only")

    def __set__(self, instance, value):
        instance.assign_nested_attributes(self.association_name, value)


class BaseModel:
    """Base class for models that can accept nested attributes for their associations."""

    __container_fields__: dict[str, Association] = {}
    __nested_attributes_options__: dict[str, NestedAttributesOptions] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)

        # Gather associations in the order specified, starting with base classes
        fields_dict = {}

        for base in reversed(cls.__bases__):
            if has_fields(base):
                fields_dict.update(fields(base))

        for attr_name, attr_obj in cls.__dict__.items():
            if isinstance(attr_obj, Association):
                fields_dict[attr_name] = attr_obj

        setattr(cls, _FIELDS, fields_dict)

        # Declarations on a subclass must not leak into its parent
        setattr(cls, _NESTED_ATTRIBUTES, dict(nested_attributes_options(cls)))

        _registry[cls.__name__].append(cls)

    def __init__(self, **kwargs: Any) -> None:
        self.id = kwargs.pop("id", None)
        self._marked_for_destruction = False

        for field_name, field_obj in fields(self).items():
            if isinstance(field_obj, HasMany):
                setattr(self, field_name, [])

        for name, value in kwargs.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: id={self.id!r}>"

    @classmethod
    def accepts_nested_attributes_for(cls, *names: str, **options: Any):
        """Accept nested attributes for one or more associations of this model.

        Supported options are ``allow_destroy``, ``reject_if``, ``limit`` and
        ``update_only``. Returns the class, so it can be chained.
        """
        if not names:
            raise IncorrectUsageError(
                "`accepts_nested_attributes_for` needs at least one association name"
            )

        record = load_options(options)
        associations = association_fields(cls)
        table = nested_attributes_options(cls)

        for name in names:
            if name not in associations:
                raise ConfigurationError(
                    f"No association found for name `{name}` on {cls.__name__}. "
                    f"Has it been defined yet?"
                )

            table[name] = NestedAttributesOptions(record)

            writer_name = f"{name}_attributes"
            if writer_name not in cls.__dict__ or isinstance(
                cls.__dict__[writer_name], NestedAttributesWriter
            ):
                setattr(cls, writer_name, NestedAttributesWriter(name))

            logger.debug(
                f"{cls.__name__} accepts nested attributes for `{name}` with {record}"
            )

        return cls

    @property
    def marked_for_destruction(self) -> bool:
        return self._marked_for_destruction

    def mark_for_destruction(self) -> None:
        self._marked_for_destruction = True

    def assign_attributes(self, attributes: Mapping[str, Any]) -> None:
        for name, value in attributes.items():
            if name not in UNASSIGNABLE_KEYS:
                setattr(self, name, value)

    def assign_nested_attributes(self, association_name: str, attributes: Any) -> None:
        options = nested_attributes_options(self).get(association_name)
        if options is None:
            raise IncorrectUsageError(
                f"{self.__class__.__name__} does not accept nested attributes "
                f"for `{association_name}`"
            )

        association = association_fields(self)[association_name]
        if isinstance(association, HasMany):
            self._assign_nested_attributes_for_collection(
                association, options, attributes
            )
        else:
            self._assign_nested_attributes_for_one(association, options, attributes)

    def _assign_nested_attributes_for_collection(
        self,
        association: HasMany,
        options: NestedAttributesOptions,
        attributes_collection: Any,
    ) -> None:
        if isinstance(attributes_collection, Mapping):
            if "id" in attributes_collection:
                attributes_collection = [attributes_collection]
            else:
                attributes_collection = list(attributes_collection.values())
        elif not isinstance(attributes_collection, (list, tuple)):
            raise IncorrectUsageError(
                f"Mapping or list expected for `{association.field_name}_attributes`, "
                f"got {type(attributes_collection).__name__} "
                f"({attributes_collection!r})"
            )

        if options.limit is not None:
            limit = wrap(options.limit).resolve(self)
            if len(attributes_collection) > limit:
                raise TooManyRecordsError(
                    f"Maximum {limit} records are allowed. "
                    f"Got {len(attributes_collection)} records instead."
                )

        existing_records = getattr(self, association.field_name)

        for attributes in attributes_collection:
            attributes = self._ensure_mapping(association, attributes)
            record_id = attributes.get("id")

            if is_blank(record_id):
                if not self._reject_new_record(options, attributes):
                    existing_records.append(self._build(association, attributes))
                continue

            record = next(
                (r for r in existing_records if str(r.id) == str(record_id)), None
            )
            if record is None:
                self._raise_nested_attributes_record_not_found(association, record_id)

            if not self._call_reject_if(options, attributes):
                self._assign_to_or_mark_for_destruction(
                    record, attributes, options.allow_destroy
                )

    def _assign_nested_attributes_for_one(
        self,
        association: HasOne,
        options: NestedAttributesOptions,
        attributes: Any,
    ) -> None:
        attributes = self._ensure_mapping(association, attributes)
        record_id = attributes.get("id")
        existing_record = getattr(self, association.field_name)

        if existing_record is not None and (
            wrap(options.update_only).resolve(self)
            or (not is_blank(record_id) and str(existing_record.id) == str(record_id))
        ):
            if not self._call_reject_if(options, attributes):
                self._assign_to_or_mark_for_destruction(
                    existing_record, attributes, options.allow_destroy
                )
        elif not is_blank(record_id):
            self._raise_nested_attributes_record_not_found(association, record_id)
        elif not self._reject_new_record(options, attributes):
            setattr(self, association.field_name, self._build(association, attributes))

    @staticmethod
    def _ensure_mapping(association: Association, attributes: Any) -> Mapping:
        if not isinstance(attributes, Mapping):
            raise IncorrectUsageError(
                f"Mapping expected for a `{association.field_name}` record, "
                f"got {type(attributes).__name__} ({attributes!r})"
            )
        return attributes

    def _build(self, association: Association, attributes: Mapping) -> BaseModel:
        record = association.to_cls(
            **{k: v for k, v in attributes.items() if k not in UNASSIGNABLE_KEYS}
        )
        logger.debug(f"Built {record!r} for {self!r}.{association.field_name}")
        return record

    @staticmethod
    def _assign_to_or_mark_for_destruction(
        record: BaseModel, attributes: Mapping, allow_destroy: bool
    ) -> None:
        record.assign_attributes(attributes)
        if allow_destroy and is_truthy_flag(attributes.get("_destroy")):
            record.mark_for_destruction()

    @staticmethod
    def _will_be_destroyed(options: NestedAttributesOptions, attributes: Mapping) -> bool:
        return bool(options.allow_destroy) and is_truthy_flag(attributes.get("_destroy"))

    def _reject_new_record(
        self, options: NestedAttributesOptions, attributes: Mapping
    ) -> bool:
        return self._will_be_destroyed(options, attributes) or self._call_reject_if(
            options, attributes
        )

    def _call_reject_if(
        self, options: NestedAttributesOptions, attributes: Mapping
    ) -> bool:
        if self._will_be_destroyed(options, attributes) or options.reject_if is None:
            return False

        reject_if = wrap(options.reject_if)

        if isinstance(reject_if, MethodRef):
            method = find_method(self, reject_if.name, include_private=True)
            if method is None:
                raise MethodNotFoundError(
                    f"`{reject_if.name}` is not defined on {self.__class__.__name__}"
                )
            if _accepts_positional_argument(method):
                return bool(method(attributes))
            return bool(method())

        if isinstance(reject_if, Callable):
            return bool(reject_if.fn(attributes))

        # Neither a method reference nor a callable: never rejects
        return False

    def _raise_nested_attributes_record_not_found(
        self, association: Association, record_id: Any
    ) -> None:
        raise ObjectNotFoundError(
            f"Couldn't find {association.to_cls.__name__} with id={record_id} "
            f"for {self.__class__.__name__} with id={self.id}"
        )


def _accepts_positional_argument(method) -> bool:
    try:
        parameters = inspect.signature(method).parameters.values()
    except (TypeError, ValueError):
        return False

    return any(
        p.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
        for p in parameters
    )


def accepts_nested_attributes_for(*names: str, **options: Any):
    """Class decorator form of `BaseModel.accepts_nested_attributes_for`"""

    def decorator(cls):
        if not (isinstance(cls, type) and issubclass(cls, BaseModel)):
            raise IncorrectUsageError(
                f"`accepts_nested_attributes_for` can only decorate BaseModel "
                f"subclasses, got {cls!r}"
            )

        return cls.accepts_nested_attributes_for(*names, **options)

    return decorator

import pytest

from modelmatch import BaseModel, HasMany, accepts_nested_attributes_for
from modelmatch.exceptions import (
    ConfigurationError,
    IncorrectUsageError,
    ValidationError,
)
from modelmatch.model import NestedAttributesWriter
from modelmatch.schema import reject_all_blank
from modelmatch.utils.container import NestedAttributesOptions
from modelmatch.utils.reflection import association_fields, nested_attributes_options

from .elements import Book, Notebook, Page, Pamphlet


class TestDeclaration:
    def test_declared_options_are_recorded_per_relation(self):
        options = nested_attributes_options(Book)

        assert set(options.keys()) == {"pages", "cover"}
        assert type(options["pages"]) is NestedAttributesOptions

    def test_unset_options_get_defaults(self):
        cover = nested_attributes_options(Book)["cover"]

        assert cover.allow_destroy is False
        assert cover.reject_if is None
        assert cover.limit is None
        assert cover.update_only is False

    def test_set_options_are_kept(self):
        options = nested_attributes_options(Pamphlet)

        assert options["pages"].limit == 2
        assert options["cover"].update_only is True
        assert options["cover"].allow_destroy is True

    def test_all_blank_is_expanded_to_a_predicate(self):
        assert nested_attributes_options(Notebook)["pages"].reject_if is reject_all_blank

    def test_attributes_writer_is_installed(self):
        assert isinstance(Book.__dict__["pages_attributes"], NestedAttributesWriter)

    def test_attributes_writer_is_write_only(self):
        with pytest.raises(AttributeError):
            Book().pages_attributes

    def test_classmethod_form_declares_multiple_relations(self):
        class Binder(BaseModel):
            pages = HasMany(Page)
            inserts = HasMany(Page)

        Binder.accepts_nested_attributes_for("pages", "inserts", limit=5)

        options = nested_attributes_options(Binder)
        assert options["pages"].limit == 5
        assert options["inserts"].limit == 5

    def test_instances_expose_the_class_table(self):
        assert nested_attributes_options(Book()) is nested_attributes_options(Book)


class TestInheritance:
    def test_subclass_inherits_declarations(self):
        class Novel(Book):
            pass

        assert "pages" in nested_attributes_options(Novel)
        assert "pages" in association_fields(Novel)

    def test_subclass_declarations_do_not_leak_into_parent(self):
        class Novel(Book):
            chapters = HasMany(Page)

        Novel.accepts_nested_attributes_for("chapters")

        assert "chapters" in nested_attributes_options(Novel)
        assert "chapters" not in nested_attributes_options(Book)

    def test_base_model_has_no_declarations(self):
        assert nested_attributes_options(BaseModel) == {}


class TestInvalidDeclarations:
    def test_unknown_association_is_rejected(self):
        class Leaflet(BaseModel):
            pass

        with pytest.raises(ConfigurationError) as exc:
            Leaflet.accepts_nested_attributes_for("pages")

        assert "No association found for name `pages`" in exc.value.args[0]

    def test_unknown_options_are_rejected(self):
        class Leaflet(BaseModel):
            pages = HasMany(Page)

        with pytest.raises(ValidationError) as exc:
            Leaflet.accepts_nested_attributes_for("pages", allow_delete=True)

        assert exc.value.messages == {"allow_delete": ["Unknown field."]}

    def test_wrongly_typed_options_are_rejected(self):
        class Leaflet(BaseModel):
            pages = HasMany(Page)

        with pytest.raises(ValidationError) as exc:
            Leaflet.accepts_nested_attributes_for("pages", limit=2.5, allow_destroy=3)

        assert set(exc.value.messages.keys()) == {"limit", "allow_destroy"}

    def test_negative_limit_is_rejected(self):
        class Leaflet(BaseModel):
            pages = HasMany(Page)

        with pytest.raises(ValidationError) as exc:
            Leaflet.accepts_nested_attributes_for("pages", limit=-1)

        assert "limit" in exc.value.messages

    def test_empty_reject_if_method_name_is_rejected(self):
        class Leaflet(BaseModel):
            pages = HasMany(Page)

        with pytest.raises(ValidationError) as exc:
            Leaflet.accepts_nested_attributes_for("pages", reject_if="")

        assert exc.value.messages == {"reject_if": ["Method reference cannot be empty."]}

    def test_declaration_needs_a_name(self):
        class Leaflet(BaseModel):
            pages = HasMany(Page)

        with pytest.raises(IncorrectUsageError):
            Leaflet.accepts_nested_attributes_for()

    def test_decorator_needs_a_model_class(self):
        with pytest.raises(IncorrectUsageError):

            @accepts_nested_attributes_for("pages")
            class NotAModel:
                pass

"""Tests for serialize()/deserialize() and polymorphic dispatch."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from petrify import (
    DateTime,
    Id,
    Integer,
    ListOf,
    Model,
    ModelTypeError,
    Nested,
    Number,
    Raw,
    Ref,
    String,
    Transient,
    deserialize,
    get_type,
    is_instance,
    is_model_type,
    serialize,
)
from petrify.exceptions import FieldError


class ShapeFields(Model):
    id = Id()
    kind = String()


class Circle(ShapeFields):
    radius = Integer()


class Square(ShapeFields):
    side = Integer()


class Shape(ShapeFields):
    class Meta:
        polymorphic_on = "kind"
        polymorphic_map = {"circle": Circle, "square": Square}


class EventFields(Model):
    kind = String(serialized_name="type")


class Click(EventFields):
    x = Integer()


class Event(EventFields):
    class Meta:
        polymorphic_on = "kind"
        polymorphic_map = {"click": Click}


class Author(Model):
    id = Id()
    name = String()


class Comment(Model):
    id = Id()
    body = String()
    created_at = DateTime(serialized_name="createdAt")
    author = Nested(Author)
    author_name = Ref("author.name")
    draft = Transient()
    note = String()

    class Meta:
        exclude_from_serialize = ("note",)


class Tagged(Model):
    ids = ListOf(Id())
    comments = ListOf(Nested(Comment))


class Preferences(Model):
    attrs = Raw()
    sizes = Number()


class TestSerialize:
    """Test instance → wire conversion."""

    def test_uses_wire_names_in_declared_order(self):
        """Test that wire keys use serialized names in declared order."""
        comment = Comment(
            id=1,
            body="hi",
            created_at=datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc),
        )
        wire = serialize(comment)
        assert list(wire) == ["id", "body", "createdAt", "author"]
        assert wire["createdAt"] == "2024-03-09T12:00:00+00:00"

    def test_skips_refs_transients_and_excluded(self):
        """Test that refs, transient and excluded fields are not serialized."""
        comment = Comment(id=1, author=Author(id=2, name="Ada"), draft=object(), note="x")
        wire = serialize(comment)
        assert "author_name" not in wire
        assert "draft" not in wire
        assert "note" not in wire

    def test_nested_values_are_serialized(self):
        """Test that nested instances become wire objects."""
        comment = Comment(id=1, author=Author(id=2, name="Ada"))
        assert serialize(comment)["author"] == {"id": 2, "name": "Ada"}

    def test_none_fields_are_kept(self):
        """Test that None values are kept on the wire."""
        assert serialize(Author(id=3)) == {"id": 3, "name": None}

    def test_none_instance(self):
        """Test that serialize(None) returns None."""
        assert serialize(None) is None

    def test_lists_of_nested(self):
        """Test serializing lists of ids and nested models."""
        tagged = Tagged(ids=[1, 2], comments=[Comment(id=5, body="ok")])
        wire = serialize(tagged)
        assert wire["ids"] == [1, 2]
        assert wire["comments"][0]["body"] == "ok"

    def test_raw_containers_are_plain_on_the_wire(self):
        """Test that containers held by scalar fields serialize to dicts and lists."""
        wire = serialize(Preferences(attrs={"color": "red", "shades": ["a"]}, sizes=[1, 2]))
        assert wire == {"attrs": {"color": "red", "shades": ["a"]}, "sizes": [1, 2]}
        assert type(wire["attrs"]) is dict
        assert type(wire["attrs"]["shades"]) is list
        assert type(wire["sizes"]) is list

    def test_rejects_non_model(self):
        """Test that serialize() rejects non-model values."""
        with pytest.raises(ModelTypeError):
            serialize({"id": 1})


class TestDeserialize:
    """Test wire → instance conversion."""

    def test_round_trip(self):
        """Test that deserialize() inverts serialize()."""
        comment = Comment(
            id=1,
            body="hi",
            created_at=datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc),
            author=Author(id=2, name="Ada"),
        )
        assert deserialize(Comment, serialize(comment)) == comment

    def test_reads_wire_names(self):
        """Test that deserialize() reads serialized names."""
        comment = deserialize(Comment, {"id": 1, "createdAt": "2024-03-09T12:00:00Z"})
        assert comment.created_at == datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc)

    def test_missing_keys_take_defaults(self):
        """Test that missing wire keys fall back to defaults."""
        tagged = deserialize(Tagged, {})
        assert tagged.ids == ()
        assert tagged.comments == ()

    def test_unknown_keys_are_ignored(self):
        """Test that unknown wire keys are ignored."""
        author = deserialize(Author, {"id": 1, "name": "Ada", "age": 36})
        assert author == Author(id=1, name="Ada")

    def test_ref_resolves_after_deserialize(self):
        """Test that refs resolve on deserialized instances."""
        comment = deserialize(Comment, {"id": 1, "author": {"id": 2, "name": "Ada"}})
        assert comment.author_name == "Ada"

    def test_wire_key_for_transient_is_rejected(self):
        """Test that a wire key naming a transient field raises FieldError."""
        with pytest.raises(FieldError):
            deserialize(Comment, {"id": 1, "draft": "x"})

    def test_none_wire(self):
        """Test that deserialize() of None returns None."""
        assert deserialize(Author, None) is None

    def test_none_wire_still_checks_type(self):
        """Test that deserialize() checks the type even for None."""
        with pytest.raises(ModelTypeError):
            deserialize(dict, None)

    def test_accepts_instance_as_type(self):
        """Test that deserialize() accepts an instance for its type."""
        assert deserialize(Author(id=1), {"id": 4}) == Author(id=4)


class TestPolymorphicDispatch:
    """Test subtype selection by discriminator."""

    def test_mapped_value_selects_subtype(self):
        """Test that a mapped discriminator selects the subtype."""
        shape = deserialize(Shape, {"id": 1, "kind": "circle", "radius": 2})
        assert type(shape) is Circle
        assert shape.radius == 2

    def test_each_mapped_value(self):
        """Test each entry of the polymorphic map."""
        shape = deserialize(Shape, {"id": 1, "kind": "square", "side": 4})
        assert isinstance(shape, Square)
        assert shape.side == 4

    def test_unmapped_value_falls_back_with_warning(self, caplog):
        """Test that an unmapped value falls back to the base type and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="petrify.models.runtime"):
            shape = deserialize(Shape, {"id": 1, "kind": "hexagon", "side": 6})
        assert type(shape) is Shape
        assert shape.kind == "hexagon"
        assert "hexagon" in caplog.text

    def test_missing_discriminator_falls_back_quietly(self, caplog):
        """Test that a missing discriminator falls back without a warning."""
        with caplog.at_level(logging.WARNING, logger="petrify.models.runtime"):
            shape = deserialize(Shape, {"id": 1})
        assert type(shape) is Shape
        assert caplog.records == []

    def test_unhashable_discriminator_falls_back(self):
        """Test that an unhashable discriminator falls back to the base type."""
        shape = deserialize(Shape, {"id": 1, "kind": ["circle"]})
        assert type(shape) is Shape

    def test_discriminator_read_by_wire_name(self):
        """Test that the discriminator is read by its serialized name."""
        event = deserialize(Event, {"type": "click", "x": 3})
        assert type(event) is Click
        assert event.kind == "click"
        assert serialize(event) == {"type": "click", "x": 3}

    def test_subtype_deserializes_directly(self):
        """Test deserializing straight into a subtype."""
        circle = deserialize(Circle, {"id": 1, "kind": "circle", "radius": 5})
        assert type(circle) is Circle


class TestTypeChecks:
    """Test model type introspection helpers."""

    def test_is_model_type(self):
        """Test is_model_type()."""
        assert is_model_type(Author)
        assert is_model_type(Model)
        assert not is_model_type(Author(id=1))
        assert not is_model_type(dict)

    def test_is_instance(self):
        """Test is_instance()."""
        assert is_instance(Author(id=1))
        assert not is_instance(Author)
        assert not is_instance({"id": 1})

    def test_get_type(self):
        """Test get_type() on types, instances and other values."""
        assert get_type(Author) is Author
        assert get_type(Author(id=1)) is Author
        with pytest.raises(ModelTypeError):
            get_type(42)

    def test_model_type_error_is_type_error(self):
        """Test that ModelTypeError is a TypeError."""
        with pytest.raises(TypeError):
            get_type("Author")

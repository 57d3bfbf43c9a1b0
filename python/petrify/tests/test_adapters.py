"""Tests for adapters between model types."""

from __future__ import annotations

from types import SimpleNamespace

from petrify import Id, Integer, Model, Ref, String, create_adapter
from petrify.models.adapters import shared_field_names


class User(Model):
    id = Id()
    name = String()
    email = String()
    password = String()


class UserSummary(Model):
    name = String()
    id = Id()
    label = String(default="user")
    login_count = Integer(default=0)
    display = Ref("name")


class TestSharedFields:
    """Test which fields an adapter copies."""

    def test_shared_names_follow_target_order(self):
        """Test that shared fields are listed in the target's declared order."""
        assert shared_field_names(User, UserSummary) == ("name", "id")

    def test_refs_are_never_copied(self):
        """Test that target ref fields are left out of the shared fields."""
        class Source(Model):
            display = String()
            name = String()

        assert shared_field_names(Source, UserSummary) == ("name",)


class TestCreateAdapter:
    """Test adapter functions."""

    def test_copies_shared_fields(self):
        """Test that the adapter copies every shared field into a target instance."""
        to_summary = create_adapter(User, UserSummary)
        user = User(id=1, name="Ada", email="ada@example.com", password="x")

        summary = to_summary(user)

        assert type(summary) is UserSummary
        assert summary.id == 1
        assert summary.name == "Ada"
        assert summary.display == "Ada"

    def test_target_only_fields_take_defaults(self):
        """Test that fields only the target declares take their defaults."""
        summary = create_adapter(User, UserSummary)(User(id=1))
        assert summary.label == "user"
        assert summary.login_count == 0

    def test_accepts_mappings(self):
        """Test that the adapter reads fields from a mapping."""
        summary = create_adapter(User, UserSummary)({"id": 2, "name": "Grace"})
        assert summary == UserSummary(id=2, name="Grace")

    def test_missing_input_fields_take_defaults(self):
        """Test that fields absent from the input take the target's defaults."""
        summary = create_adapter(User, UserSummary)({"id": 3})
        assert summary.name is None

    def test_accepts_plain_objects(self):
        """Test that the adapter reads fields from object attributes."""
        obj = SimpleNamespace(id=4, name="Linus", password="secret")
        assert create_adapter(User, UserSummary)(obj).name == "Linus"

    def test_explicit_none_is_copied(self):
        """Test that an explicit None in the input overrides the target default."""
        class Labeled(Model):
            label = String()

        summary = create_adapter(Labeled, UserSummary)({"label": None})
        assert summary.label is None

    def test_adapter_name(self):
        """Test the generated adapter function's name."""
        assert create_adapter(User, UserSummary).__name__ == "User_to_UserSummary"

    def test_extra_source_fields_are_dropped(self):
        """Test that source-only fields do not reach the target."""
        summary = create_adapter(User, UserSummary)(User(id=1, password="x"))
        assert not hasattr(summary, "password")

"""Catalog of built-in field kinds.

Each constructor returns a FieldDescriptor. Keyword overrides replace any
descriptor attribute, so every kind can be renamed on the wire, mapped to a
different column, given a default, or given custom conversions:

    class User(Model):
        id = Id()
        name = String(serialized_name="userName")
        created_at = DateTime(serialized_name="createdAt", column_name="created")
        tags = ListOf(String())
        avatar = Blob()
        settings = Object(default_factory=dict)
        team = Nested(Team)
        team_name = Ref("team.name")
        session = Transient()

Kinds:
    Raw (Number, Integer, Int, Float, Boolean, Bool, String, Str, Text)
        Pass-through; enum members serialize to their value and frozen
        containers to plain dicts/lists.
    Date          date ↔ "YYYY-MM-DD"
    DateTime      datetime ↔ ISO-8601 text
    Blob          bytes ↔ base64 text
    Object        opaque structured value, stored as JSON text in rows
    Nested        single nested model
    ListOf        ordered list of another kind
    Ref           computed, read-only key-path lookup (never stored)
    Transient     in-memory only, never serialized
    Id            integer primary key
"""

from __future__ import annotations

import base64
import binascii
from datetime import date, datetime
from enum import Enum
from typing import Any

from petrify.core.frozen import thaw
from petrify.core.keypath import parse_key_path
from petrify.exceptions import FieldError, SchemaError
from petrify.models.field import FieldDescriptor
from petrify.models.runtime import deserialize, is_instance, is_model_type, serialize


def _build(kind: str, overrides: dict[str, Any], **base: Any) -> FieldDescriptor:
    return FieldDescriptor(kind=kind, **{**base, **overrides})


def _unsupported(message: str):
    def convert(*args: Any) -> Any:
        raise FieldError(message)

    return convert


# =============================================================================
# Scalars
# =============================================================================


def _unwrap_enum(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _serialize_raw(value: Any, instance: Any = None) -> Any:
    return thaw(value, _unwrap_enum)


def _deserialize_raw(value: Any) -> Any:
    return value


def Raw(**overrides: Any) -> FieldDescriptor:
    """Pass-through scalar field."""
    return _build(
        "raw", overrides, serialize=_serialize_raw, deserialize=_deserialize_raw
    )


Number = Integer = Int = Float = Raw
Boolean = Bool = Raw
String = Str = Text = Raw


def Id(**overrides: Any) -> FieldDescriptor:
    """Integer primary-key field."""
    return _build(
        "id",
        overrides,
        serialize=_serialize_raw,
        deserialize=_deserialize_raw,
        primary=True,
    )


# =============================================================================
# Dates and binary
# =============================================================================


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise FieldError(f"cannot convert {type(value).__name__} to a date")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        return datetime.fromisoformat(text)
    raise FieldError(f"cannot convert {type(value).__name__} to a datetime")


def Date(**overrides: Any) -> FieldDescriptor:
    """Calendar date, serialized as YYYY-MM-DD."""
    return _build(
        "date",
        overrides,
        serialize=lambda value, instance=None: (
            None if value is None else _to_date(value).isoformat()
        ),
        deserialize=lambda value: None if value is None else _to_date(value),
    )


def DateTime(**overrides: Any) -> FieldDescriptor:
    """Timestamp, serialized as ISO-8601 text."""
    return _build(
        "datetime",
        overrides,
        serialize=lambda value, instance=None: (
            None if value is None else _to_datetime(value).isoformat()
        ),
        deserialize=lambda value: None if value is None else _to_datetime(value),
    )


def _serialize_blob(value: Any, instance: Any = None) -> str | None:
    if value is None:
        return None
    return base64.b64encode(bytes(value)).decode("ascii")


def _deserialize_blob(value: Any) -> bytes | None:
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FieldError(f"invalid base64 payload: {e}") from e


def Blob(**overrides: Any) -> FieldDescriptor:
    """Byte string, serialized as base64 text."""
    return _build(
        "blob", overrides, serialize=_serialize_blob, deserialize=_deserialize_blob
    )


# =============================================================================
# Structured values
# =============================================================================


def _wire_leaf(value: Any) -> Any:
    if is_instance(value):
        return serialize(value)
    return _unwrap_enum(value)


def _serialize_object(value: Any, instance: Any = None) -> Any:
    if value is None:
        return None
    return thaw(value, _wire_leaf)


def Object(**overrides: Any) -> FieldDescriptor:
    """Opaque structured value (dicts, lists, nested models).

    Containers are copied and frozen on construction. Any other object is
    stored by reference: passing it to a model transfers ownership, and the
    caller must not mutate it afterwards.
    """
    return _build(
        "object",
        overrides,
        serialize=_serialize_object,
        deserialize=_deserialize_raw,
        object=True,
    )


def Nested(model_type: Any = None, **overrides: Any) -> FieldDescriptor:
    """Single nested model.

    Use either Nested(SomeModel, **overrides) or Nested(**overrides) with a
    custom ``deserialize`` or ``transient=True``. A custom deserialize always
    wins over the model type.
    """
    if model_type is not None and not is_model_type(model_type):
        raise SchemaError(
            f"Nested() expects a model type, got {type(model_type).__name__}"
        )

    custom = overrides.pop("deserialize", None)
    if custom is not None:
        convert = custom
    elif model_type is not None:

        def convert(value: Any) -> Any:
            return deserialize(model_type, value)

    elif overrides.get("transient"):
        convert = _unsupported("transient nested field cannot be deserialized")
    else:
        raise SchemaError(
            "must specify a model type or a custom deserialize for any "
            "non-transient nested field"
        )

    return _build(
        "model",
        overrides,
        serialize=lambda value, instance=None: serialize(value),
        deserialize=convert,
        object=True,
        model_type=model_type,
    )


def ListOf(item_type: FieldDescriptor, **overrides: Any) -> FieldDescriptor:
    """Ordered list whose elements use item_type's conversions."""
    if not isinstance(item_type, FieldDescriptor):
        raise SchemaError(
            f"ListOf() expects a field descriptor, got {type(item_type).__name__}"
        )

    def serialize_items(value: Any, instance: Any = None) -> list[Any] | None:
        if value is None:
            return None
        return [item_type.serialize(item, instance) for item in value]

    def deserialize_items(value: Any) -> tuple[Any, ...] | None:
        if value is None:
            return None
        return tuple(item_type.deserialize(item) for item in value)

    return _build(
        "list",
        overrides,
        serialize=serialize_items,
        deserialize=deserialize_items,
        default_factory=list,
        object=True,
        item_type=item_type,
    )


# =============================================================================
# Non-serialized kinds
# =============================================================================


def Ref(key_path: Any, **overrides: Any) -> FieldDescriptor:
    """Computed read-only field resolved by key path on the owning instance."""
    try:
        path = parse_key_path(key_path)
    except (TypeError, ValueError) as e:
        raise SchemaError(str(e)) from e
    return _build(
        "ref",
        overrides,
        serialize=_unsupported("ref fields cannot be serialized: not implemented"),
        deserialize=_unsupported("ref fields cannot be deserialized: type is read-only"),
        ref=True,
        readonly=True,
        transient=True,
        ref_path=path,
    )


def Transient(**overrides: Any) -> FieldDescriptor:
    """In-memory field excluded from every serialization."""
    return _build(
        "transient",
        overrides,
        serialize=_unsupported("transient fields cannot be serialized"),
        deserialize=_unsupported("transient fields cannot be deserialized"),
        transient=True,
    )


__all__ = [
    "Raw",
    "Number",
    "Integer",
    "Int",
    "Float",
    "Boolean",
    "Bool",
    "String",
    "Str",
    "Text",
    "Id",
    "Date",
    "DateTime",
    "Blob",
    "Object",
    "Nested",
    "ListOf",
    "Ref",
    "Transient",
]

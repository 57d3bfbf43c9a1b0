"""Conversion between model instances and wire objects.

serialize(instance) -> dict:
    For every non-transient field not listed in Meta.exclude_from_serialize,
    in declared order, store field.serialize(value, instance) under the
    field's wire name (serialized_name, else the field name).

deserialize(model_type, wire) -> Model:
    Resolve each wire key to its field by wire name, deserialize the value,
    and construct model_type from the result. Keys that match no field are
    ignored; missing keys fall back to field defaults.

Polymorphic dispatch:
    When model_type declares Meta.polymorphic_on, the discriminator value is
    read by its wire name, deserialized, and looked up in
    Meta.polymorphic_map. A hit delegates the whole object to the subtype;
    a miss falls back to model_type itself and logs a warning.

    deserialize(Shape, {"kind": "circle", "radius": 2})  →  Circle(...)
    deserialize(Shape, {"kind": "blob"})                 →  Shape(...)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from petrify.exceptions import ModelTypeError
from petrify.models.base import Model, ModelMeta

logger = logging.getLogger(__name__)


def is_model_type(value: Any) -> bool:
    """Return True if value is a model type."""
    return isinstance(value, ModelMeta)


def is_instance(value: Any) -> bool:
    """Return True if value is a model instance."""
    return isinstance(value, Model)


def get_type(value: Any) -> type[Model]:
    """Return the model type of a model type or instance."""
    if is_model_type(value):
        return value
    if is_instance(value):
        return type(value)
    raise ModelTypeError(f"object is not a model type: {type(value).__name__}")


def serialize(instance: Model | None) -> dict[str, Any] | None:
    """Convert a model instance to its wire object."""
    if instance is None:
        return None
    schema = get_type(instance).__schema__
    wire: dict[str, Any] = {}
    for name in schema.field_names:
        field = schema.fields[name]
        if field.transient or name in schema.exclude_from_serialize:
            continue
        wire[field.wire_name] = field.serialize(getattr(instance, name), instance)
    return wire


def deserialize(model_type: type[Model], wire: Mapping[str, Any] | None) -> Any:
    """Convert a wire object to an instance of model_type (or a subtype)."""
    model_type = get_type(model_type)
    if wire is None:
        return None
    schema = model_type.__schema__
    if schema.polymorphic_on is not None:
        subtype = _resolve_subtype(model_type, wire)
        if subtype is not model_type:
            return deserialize(subtype, wire)
    return _deserialize_simple(model_type, wire)


def _resolve_subtype(model_type: type[Model], wire: Mapping[str, Any]) -> type[Model]:
    schema = model_type.__schema__
    field_name = schema.polymorphic_on
    field = schema.fields[field_name]
    value = model_type.deserialize_field(field_name, wire.get(field.wire_name))
    try:
        subtype = schema.polymorphic_map.get(value)
    except TypeError:
        subtype = None
    if subtype is not None:
        return subtype
    if value is None:
        logger.debug("%s: no discriminator value, using base type", schema.name)
    else:
        logger.warning(
            "%s: unmapped %s value %r, falling back to base type",
            schema.name,
            field_name,
            value,
        )
    return model_type


def _deserialize_simple(model_type: type[Model], wire: Mapping[str, Any]) -> Model:
    schema = model_type.__schema__
    values: dict[str, Any] = {}
    for key, raw in wire.items():
        field_name = schema.serialized_names.get(key)
        if field_name is None:
            logger.debug("%s: ignoring unknown key %r", schema.name, key)
            continue
        values[field_name] = model_type.deserialize_field(field_name, raw)
    return model_type(**values)


__all__ = [
    "is_model_type",
    "is_instance",
    "get_type",
    "serialize",
    "deserialize",
]

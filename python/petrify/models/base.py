"""Model base class and the ModelType factory.

A model type is declared by assigning field descriptors to class attributes
of a Model subclass. Per-type options live in an inner Meta class:

    class Shape(ShapeFields):
        class Meta:
            polymorphic_on = "kind"                       # discriminator field
            polymorphic_map = {"circle": Circle}          # value → subtype
            exclude_from_serialize = ("internal_note",)   # kept off the wire

The same type can be built without a class statement:

    Shape = create_model_type(
        "Shape",
        {"id": Id(), "kind": String()},
        meta={"polymorphic_on": "kind", "polymorphic_map": {"circle": Circle}},
    )

Class creation (ModelMeta.__new__):
    1. Merge inherited descriptors with the class's own, binding each
       descriptor to its attribute name.
    2. Turn stored fields into pydantic fields typed Any with the
       descriptor's default/default_factory.
    3. Install a read-only property for every Ref field. The property reads
       through ModelSchema.ref_accessors, a table built once per type.
    4. Validate Meta and attach the frozen ModelSchema as __schema__.
       Schema problems raise SchemaError immediately.

Instances are frozen pydantic models. Every value, defaults included, goes
through freeze() on construction, so caller-owned dicts/lists are copied
into immutable containers. clone() builds a new instance instead of mutating.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from petrify.core.frozen import FrozenDict, freeze
from petrify.core.keypath import KeyPath, get_in
from petrify.exceptions import SchemaError
from petrify.models.field import FieldDescriptor

# Pydantic's metaclass, reached through BaseModel. ModelMeta must rewrite
# descriptors into annotated fields before it collects them.
ModelMetaclass = type(BaseModel)

MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    validate_default=True,
    arbitrary_types_allowed=True,
    protected_namespaces=(),
)


@dataclass(frozen=True)
class ModelSchema:
    """Type-level metadata of a model type."""

    name: str
    fields: Mapping[str, FieldDescriptor]
    field_names: tuple[str, ...]
    refs: Mapping[str, KeyPath]
    ref_accessors: Mapping[str, Callable[[Any], Any]]
    persistent_field_names: tuple[str, ...]
    exclude_from_serialize: tuple[str, ...]
    serialized_names: Mapping[str, str]
    polymorphic_on: str | None = None
    polymorphic_map: Mapping[Any, type[Model]] | None = None

    @property
    def stored_field_names(self) -> tuple[str, ...]:
        """Fields held on instances (everything except refs)."""
        return tuple(name for name in self.field_names if name not in self.refs)


def _meta_option(meta: Any, key: str, default: Any = None) -> Any:
    if meta is None:
        return default
    return getattr(meta, key, default)


def _inherited_fields(bases: tuple[type, ...]) -> dict[str, FieldDescriptor]:
    fields: dict[str, FieldDescriptor] = {}
    for base in bases:
        schema = getattr(base, "__schema__", None)
        if schema is None:
            continue
        for name, field in schema.fields.items():
            fields.setdefault(name, field)
    return fields


def _ref_accessor(path: KeyPath) -> Callable[[Any], Any]:
    def resolve(instance: Any) -> Any:
        return get_in(instance, path)

    return resolve


def _ref_property(name: str, path: KeyPath) -> property:
    def getter(self: Model) -> Any:
        return type(self).__schema__.ref_accessors[name](self)

    getter.__name__ = name
    return property(getter, doc=f"Read-only value at {'.'.join(map(str, path))}.")


def build_model_schema(
    name: str, fields: dict[str, FieldDescriptor], meta: Any
) -> ModelSchema:
    """Validate Meta against fields and build the ModelSchema."""
    field_names = tuple(fields)
    refs = {n: f.ref_path for n, f in fields.items() if f.ref}

    serialized_names: dict[str, str] = {}
    for field_name, field in fields.items():
        wire_name = field.wire_name
        if wire_name in serialized_names:
            raise SchemaError(
                f"{name}: fields {serialized_names[wire_name]!r} and "
                f"{field_name!r} share serialized name {wire_name!r}"
            )
        serialized_names[wire_name] = field_name

    exclude = tuple(_meta_option(meta, "exclude_from_serialize", ()))
    unknown = [n for n in exclude if n not in fields]
    if unknown:
        raise SchemaError(f"{name}: cannot exclude unknown fields {unknown}")

    polymorphic_on = _meta_option(meta, "polymorphic_on")
    polymorphic_map = _meta_option(meta, "polymorphic_map")
    if polymorphic_on is not None:
        if polymorphic_map is None:
            raise SchemaError(
                f'{name}: must define a "polymorphic_map" attribute to use '
                f'"polymorphic_on"'
            )
        if polymorphic_on not in fields or fields[polymorphic_on].transient:
            raise SchemaError(
                f"{name}: polymorphic_on {polymorphic_on!r} is not a persistent field"
            )
        for value, subtype in polymorphic_map.items():
            if not isinstance(subtype, ModelMeta):
                raise SchemaError(
                    f"{name}: polymorphic_map[{value!r}] is not a model type"
                )
            missing = [n for n in field_names if n not in subtype.__schema__.fields]
            if missing:
                raise SchemaError(
                    f"{name}: subtype {subtype.__name__} for {value!r} is missing "
                    f"fields {missing}"
                )
        polymorphic_map = FrozenDict(polymorphic_map)

    return ModelSchema(
        name=name,
        fields=FrozenDict(fields),
        field_names=field_names,
        refs=FrozenDict(refs),
        ref_accessors=FrozenDict({n: _ref_accessor(p) for n, p in refs.items()}),
        persistent_field_names=tuple(n for n in field_names if not fields[n].transient),
        exclude_from_serialize=exclude,
        serialized_names=FrozenDict(serialized_names),
        polymorphic_on=polymorphic_on,
        polymorphic_map=polymorphic_map,
    )


class ModelMeta(ModelMetaclass):
    """Metaclass turning field descriptors into a frozen pydantic model."""

    def __new__(
        mcs,
        cls_name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        **kwargs: Any,
    ):
        meta = namespace.pop("Meta", None)
        own = {k: v for k, v in namespace.items() if isinstance(v, FieldDescriptor)}

        fields = _inherited_fields(bases)
        for field_name, field in own.items():
            fields[field_name] = field.bind(field_name)

        annotations = dict(namespace.get("__annotations__", {}))
        for field_name in own:
            field = fields[field_name]
            if field.ref:
                annotations.pop(field_name, None)
                namespace[field_name] = _ref_property(field_name, field.ref_path)
            else:
                annotations[field_name] = Any
                namespace[field_name] = field.to_pydantic()
        namespace["__annotations__"] = annotations
        namespace.update(mcs.build_schemas(cls_name, fields, meta))

        return super().__new__(mcs, cls_name, bases, namespace, **kwargs)

    @classmethod
    def build_schemas(
        mcs, cls_name: str, fields: dict[str, FieldDescriptor], meta: Any
    ) -> dict[str, Any]:
        """Class attributes holding the type-level metadata."""
        return {"__schema__": build_model_schema(cls_name, fields, meta)}


class Model(BaseModel, metaclass=ModelMeta):
    """Base class for immutable model records."""

    model_config = MODEL_CONFIG

    @field_validator("*", mode="after")
    @classmethod
    def _freeze_value(cls, value: Any) -> Any:
        return freeze(value)

    @classmethod
    def get_schema(cls) -> ModelSchema:
        return cls.__schema__

    @classmethod
    def serialize_field(cls, field_name: str, instance: Model) -> Any:
        field = cls.__schema__.fields[field_name]
        return field.serialize(getattr(instance, field_name), instance)

    @classmethod
    def deserialize_field(cls, field_name: str, value: Any) -> Any:
        return cls.__schema__.fields[field_name].deserialize(value)

    def clone(self, **values: Any) -> Model:
        """Return a new instance with values replaced; self is unchanged."""
        current = {
            name: getattr(self, name)
            for name in type(self).__schema__.stored_field_names
        }
        current.update(values)
        return type(self)(**current)


def _caller_module(depth: int) -> str:
    try:
        return sys._getframe(depth + 1).f_globals.get("__name__", __name__)
    except (AttributeError, ValueError):
        return __name__


def _meta_class(meta: Any) -> Any:
    if meta is None or isinstance(meta, type):
        return meta
    return type("Meta", (), dict(meta))


def create_model_type(
    name: str,
    fields: Mapping[str, FieldDescriptor],
    *,
    meta: Mapping[str, Any] | type | None = None,
    base: type[Model] | None = None,
    module: str | None = None,
    **methods: Any,
) -> type[Model]:
    """Build a model type from a field mapping, Meta options and methods."""
    namespace: dict[str, Any] = {
        "__module__": module or _caller_module(1),
        "__qualname__": name,
        **fields,
        **methods,
    }
    meta_cls = _meta_class(meta)
    if meta_cls is not None:
        namespace["Meta"] = meta_cls
    parent = base or Model
    return type(parent)(name, (parent,), namespace)


__all__ = [
    "MODEL_CONFIG",
    "Model",
    "ModelMeta",
    "ModelSchema",
    "build_model_schema",
    "create_model_type",
]

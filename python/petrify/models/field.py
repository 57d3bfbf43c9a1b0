"""Field descriptor: the declarative unit describing one model attribute.

A FieldDescriptor bundles everything the model layer needs to know about a
field:

    default / default_factory   value for fields the caller leaves out
    serialize(value, instance)  in-memory value → wire value
    deserialize(wire)           wire value → in-memory value
    flags                       transient, ref, object, primary, readonly
    serialized_name             wire key (defaults to the field name)
    column_name                 row column (defaults to the field name)

Descriptors are built by the constructors in petrify.models.types and are
immutable. The same descriptor may be shared by several model types; each
type binds its own copy carrying the attribute name (see bind()).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import Field as PydanticField

if TYPE_CHECKING:
    from petrify.core.keypath import KeyPath
    from petrify.models.base import Model


@dataclass(frozen=True)
class FieldDescriptor:
    """Describes how one model field is defaulted, converted and stored."""

    kind: str
    serialize: Callable[[Any, Any], Any]
    deserialize: Callable[[Any], Any]
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    transient: bool = False
    ref: bool = False
    object: bool = False
    primary: bool = False
    readonly: bool = False
    ref_path: KeyPath | None = None
    serialized_name: str | None = None
    column_name: str | None = None
    item_type: FieldDescriptor | None = None
    model_type: type[Model] | None = None
    name: str | None = None

    @property
    def wire_name(self) -> str:
        """Key used for this field in wire objects."""
        return self.serialized_name or self._require_name()

    @property
    def column(self) -> str:
        """Key used for this field in persistence rows."""
        return self.column_name or self._require_name()

    @property
    def flags(self) -> tuple[str, ...]:
        names = ("transient", "ref", "object", "primary", "readonly")
        return tuple(flag for flag in names if getattr(self, flag))

    def bind(self, name: str) -> FieldDescriptor:
        """Return a copy of this descriptor attached to attribute name."""
        if self.name == name:
            return self
        return dataclasses.replace(self, name=name)

    def make_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def to_pydantic(self) -> Any:
        """Pydantic FieldInfo carrying this descriptor's default."""
        if self.default_factory is not None:
            return PydanticField(default_factory=self.default_factory)
        return PydanticField(default=self.default)

    def _require_name(self) -> str:
        if self.name is None:
            raise AttributeError(f"{self.kind} field is not bound to a model")
        return self.name


__all__ = ["FieldDescriptor"]

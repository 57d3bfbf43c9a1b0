"""Table mapping: model types stored as persistence rows.

A Table is a Model whose fields map one-to-one onto row columns:

    class Account(Table):
        id = Id()
        email = String(column_name="email_address")
        settings = Object(default_factory=dict)
        display = Transient()

        class Meta:
            table_name = "accounts"

    Account.__table__.columns       →  {"id": "id", "email_address": "email", "settings": "settings"}
    Account.__table__.primary_keys  →  ("id",)

Rules (checked when the class is created, SchemaError otherwise):
    - exactly one field flagged primary
    - at least one non-transient column
    - polymorphic subtypes must themselves be tables

Meta options (not inherited):
    table_name      defaults to the lower-cased class name
    abstract        skip table validation (for shared field bases)
    + every Model option (polymorphic_on, polymorphic_map, ...)

Row conversion goes through the field's serialize/deserialize, with one
extra step for fields flagged ``object`` (Object, Nested, ListOf): their
values are stored as JSON text. Dates, UUIDs, decimals and bytes inside
those values are encoded through petrify.core.types.TYPE_REGISTRY.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from petrify.core.frozen import FrozenDict
from petrify.core.types import json_default
from petrify.exceptions import SchemaError
from petrify.models.base import (
    Model,
    ModelMeta,
    _caller_module,
    build_model_schema,
    create_model_type,
)
from petrify.models.field import FieldDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableSchema:
    """Column metadata of a table type."""

    table_name: str
    columns: Mapping[str, str]
    field_columns: Mapping[str, str]
    column_names: tuple[str, ...]
    primary_keys: tuple[str, ...]

    @property
    def primary_key(self) -> str:
        return self.primary_keys[0]


def build_table_schema(
    cls_name: str, fields: dict[str, FieldDescriptor], meta: Any
) -> TableSchema:
    """Resolve columns and validate the primary key."""
    table_name = getattr(meta, "table_name", None) or cls_name.lower()
    columns: dict[str, str] = {}
    primary_keys: list[str] = []
    for name, field in fields.items():
        column = field.column
        if field.primary:
            primary_keys.append(column)
        if not field.transient:
            if column in columns:
                raise SchemaError(
                    f"{cls_name}: fields {columns[column]!r} and {name!r} "
                    f"share column {column!r}"
                )
            columns[column] = name

    if len(primary_keys) != 1:
        raise SchemaError(
            f"{cls_name}: expected one primary key field, found {len(primary_keys)}"
        )
    if not columns:
        raise SchemaError(f"{cls_name}: expected at least one column")

    polymorphic_map = getattr(meta, "polymorphic_map", None) or {}
    for value, subtype in polymorphic_map.items():
        if not isinstance(subtype, TableMeta) or subtype.__table__ is None:
            raise SchemaError(
                f"{cls_name}: polymorphic_map[{value!r}] is not a table type"
            )

    return TableSchema(
        table_name=table_name,
        columns=FrozenDict(columns),
        field_columns=FrozenDict({name: column for column, name in columns.items()}),
        column_names=tuple(columns),
        primary_keys=tuple(primary_keys),
    )


class TableMeta(ModelMeta):
    """Metaclass adding column mapping to model types."""

    @classmethod
    def build_schemas(
        mcs, cls_name: str, fields: dict[str, FieldDescriptor], meta: Any
    ) -> dict[str, Any]:
        schema = build_model_schema(cls_name, fields, meta)
        if getattr(meta, "abstract", False):
            return {"__schema__": schema, "__table__": None}
        return {
            "__schema__": schema,
            "__table__": build_table_schema(cls_name, fields, meta),
        }


class Table(Model, metaclass=TableMeta):
    """Base class for model types persisted as rows."""

    class Meta:
        abstract = True

    @classmethod
    def get_table_name(cls) -> str:
        return cls._require_table().table_name

    @classmethod
    def _require_table(cls) -> TableSchema:
        if cls.__table__ is None:
            raise SchemaError(f"{cls.__name__} is abstract and has no table")
        return cls.__table__

    @classmethod
    def serialize_column(cls, column: str, instance: Model) -> Any:
        field_name = cls._require_table().columns[column]
        value = cls.serialize_field(field_name, instance)
        if value is not None and cls.__schema__.fields[field_name].object:
            value = json.dumps(value, default=json_default)
        return value

    @classmethod
    def deserialize_column(cls, column: str, raw: Any) -> tuple[str, Any]:
        field_name = cls._require_table().columns[column]
        field = cls.__schema__.fields[field_name]
        if field.object and isinstance(raw, (str, bytes, bytearray)):
            raw = json.loads(raw)
        return field_name, cls.deserialize_field(field_name, raw)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Table:
        """Build an instance (or a mapped subtype instance) from a row."""
        table = cls._require_table()
        polymorphic_on = cls.__schema__.polymorphic_on
        if polymorphic_on is not None:
            column = table.field_columns[polymorphic_on]
            _, value = cls.deserialize_column(column, row.get(column))
            try:
                subtype = cls.__schema__.polymorphic_map.get(value)
            except TypeError:
                subtype = None
            if subtype is not None and subtype is not cls:
                return subtype.from_row(row)
            if value is not None:
                logger.warning(
                    "%s: unmapped %s value %r, falling back to base table",
                    cls.__name__,
                    column,
                    value,
                )

        values = {}
        for column in table.column_names:
            if column in row:
                field_name, value = cls.deserialize_column(column, row[column])
                values[field_name] = value
        return cls(**values)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> list[Table]:
        return [cls.from_row(row) for row in rows]

    def to_row(self) -> dict[str, Any]:
        """Convert this instance to a row keyed by column name."""
        table = type(self)._require_table()
        return {
            column: type(self).serialize_column(column, self)
            for column in table.column_names
        }


def map_table(
    table_name: str,
    fields: Mapping[str, FieldDescriptor],
    *,
    meta: Mapping[str, Any] | None = None,
    base: type[Table] | None = None,
    name: str | None = None,
    module: str | None = None,
    **methods: Any,
) -> type[Table]:
    """Build a table type without a class statement."""
    if not table_name:
        raise SchemaError("expected a value for table_name")
    options = {**(meta or {}), "table_name": table_name}
    type_name = name or "".join(part.title() for part in table_name.split("_"))
    return create_model_type(
        type_name,
        fields,
        meta=options,
        base=base or Table,
        module=module or _caller_module(1),
        **methods,
    )


__all__ = ["Table", "TableMeta", "TableSchema", "build_table_schema", "map_table"]

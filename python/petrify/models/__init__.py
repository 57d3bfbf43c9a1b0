"""Model definitions, field kinds and table mapping.

This module provides the core record system built on Pydantic v2:

Classes:
    Model: Base class for immutable records. Provides:
        - Field declaration through descriptors from petrify.models.types
        - Computed Ref properties resolved by key path
        - Polymorphic subtypes selected by a discriminator (Meta.polymorphic_on)
        - clone() for copy-on-write updates

    Table: Model persisted as rows:
        - Column mapping (column_name override)
        - Exactly one primary key
        - to_row(), from_row(), from_rows()

    SchemaRegistry: explicit collection of model types.

Functions:
    create_model_type(), map_table(): build types without a class statement.
    serialize(), deserialize(): wire object conversion.
    create_adapter(): copy shared fields between model types.
    unpack_rows(), pack_rows(), decode_rows(), encode_rows(): packed rows.

Example:
    from petrify import Id, String, Table

    class User(Table):
        id = Id()
        name = String(serialized_name="userName")

        class Meta:
            table_name = "users"
"""

from .adapters import create_adapter
from .base import Model, ModelMeta, ModelSchema, create_model_type
from .field import FieldDescriptor
from .registry import SchemaRegistry
from .rows import decode_rows, encode_rows, pack_rows, unpack_rows
from .runtime import deserialize, get_type, is_instance, is_model_type, serialize
from .table import Table, TableMeta, TableSchema, map_table

__all__ = [
    "Model",
    "ModelMeta",
    "ModelSchema",
    "FieldDescriptor",
    "create_model_type",
    "Table",
    "TableMeta",
    "TableSchema",
    "map_table",
    "SchemaRegistry",
    "serialize",
    "deserialize",
    "get_type",
    "is_instance",
    "is_model_type",
    "create_adapter",
    "unpack_rows",
    "pack_rows",
    "decode_rows",
    "encode_rows",
]

"""petrify: declarative, immutable model records with wire and row mapping.

    from petrify import Id, ListOf, Nested, Ref, String, Table, serialize

    class Team(Table):
        id = Id()
        name = String()

    class Member(Table):
        id = Id()
        name = String(serialized_name="fullName")
        team = Nested(Team)
        team_name = Ref("team.name")
        roles = ListOf(String())

    member = Member(id=1, name="Ada", team=Team(id=7, name="core"))
    serialize(member)   # {"id": 1, "fullName": "Ada", "team": {...}, "roles": []}
    member.to_row()     # {"id": 1, "name": "Ada", "team": '{"id": 7, ...}', "roles": "[]"}
"""

from petrify.core.frozen import FrozenDict
from petrify.exceptions import (
    FieldError,
    ModelTypeError,
    PetrifyError,
    RowError,
    SchemaError,
)
from petrify.models import (
    FieldDescriptor,
    Model,
    ModelSchema,
    SchemaRegistry,
    Table,
    TableSchema,
    create_adapter,
    create_model_type,
    decode_rows,
    deserialize,
    encode_rows,
    get_type,
    is_instance,
    is_model_type,
    map_table,
    pack_rows,
    serialize,
    unpack_rows,
)
from petrify.models.types import (
    Blob,
    Bool,
    Boolean,
    Date,
    DateTime,
    Float,
    Id,
    Int,
    Integer,
    ListOf,
    Nested,
    Number,
    Object,
    Raw,
    Ref,
    Str,
    String,
    Text,
    Transient,
)

__version__ = "0.1.0"

__all__ = [
    # models
    "Model",
    "ModelSchema",
    "Table",
    "TableSchema",
    "FieldDescriptor",
    "SchemaRegistry",
    "create_model_type",
    "map_table",
    # runtime
    "serialize",
    "deserialize",
    "get_type",
    "is_instance",
    "is_model_type",
    "create_adapter",
    # rows
    "unpack_rows",
    "pack_rows",
    "decode_rows",
    "encode_rows",
    # field kinds
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
    # containers
    "FrozenDict",
    # exceptions
    "PetrifyError",
    "SchemaError",
    "FieldError",
    "ModelTypeError",
    "RowError",
]

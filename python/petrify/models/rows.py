"""Packed row batches exchanged with the persistence engine.

The engine returns result sets as MessagePack bytes. Rows arrive either as
maps keyed by column name or as arrays in column order:

    [{"id": 1, "email": "ada@example.com"}, ...]
    [[1, "ada@example.com"], ...]           # needs the column list

decode_rows() turns such a payload straight into table instances;
encode_rows() packs instances back into map rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import msgpack

from petrify.exceptions import RowError

if TYPE_CHECKING:
    from petrify.models.table import Table


def unpack_rows(
    payload: bytes, columns: Sequence[str] | None = None
) -> list[dict[str, Any]]:
    """Decode a MessagePack payload into a list of row dicts."""
    try:
        result = msgpack.unpackb(payload, raw=False)
    except (msgpack.ExtraData, msgpack.FormatError, msgpack.StackError, ValueError) as e:
        raise RowError(f"invalid row payload: {e}") from e

    if not isinstance(result, list):
        raise RowError(f"expected an array of rows, got {type(result).__name__}")

    rows = []
    for row in result:
        if isinstance(row, dict):
            rows.append(row)
        elif isinstance(row, list):
            if columns is None:
                raise RowError("array rows require a column list")
            if len(row) != len(columns):
                raise RowError(
                    f"row has {len(row)} values for {len(columns)} columns"
                )
            rows.append(dict(zip(columns, row)))
        else:
            raise RowError(f"unsupported row type: {type(row).__name__}")
    return rows


def pack_rows(rows: Iterable[Mapping[str, Any]]) -> bytes:
    """Encode row mappings as a MessagePack array."""
    return msgpack.packb([dict(row) for row in rows], use_bin_type=True)


def decode_rows(
    table_type: type[Table], payload: bytes, columns: Sequence[str] | None = None
) -> list[Table]:
    """Decode a payload into instances of table_type (or its subtypes).

    Array rows default to the table's own column order.
    """
    if columns is None:
        columns = table_type._require_table().column_names
    return table_type.from_rows(unpack_rows(payload, columns))


def encode_rows(instances: Iterable[Table]) -> bytes:
    return pack_rows(instance.to_row() for instance in instances)


__all__ = ["unpack_rows", "pack_rows", "decode_rows", "encode_rows"]

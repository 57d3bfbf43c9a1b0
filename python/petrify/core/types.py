"""JSON-safe conversion of values held in object columns.

TYPE_REGISTRY maps Python types to a function returning a JSON-safe value:

    date / datetime / time  →  ISO-8601 text
    timedelta               →  seconds (float)
    UUID / Decimal          →  text
    bytes / bytearray       →  base64 text
    set / frozenset         →  list

json_default() is the ``default=`` hook handed to json.dumps(). Uses exact
type() lookup, so subclasses must be registered explicitly. Enum members
are unwrapped to their value.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


def _b64(value: bytes | bytearray) -> str:
    return base64.b64encode(bytes(value)).decode("ascii")


TYPE_REGISTRY: dict[type, Callable[[Any], Any]] = {
    datetime: lambda v: v.isoformat(),
    date: lambda v: v.isoformat(),
    time: lambda v: v.isoformat(),
    timedelta: lambda v: v.total_seconds(),
    UUID: str,
    Decimal: str,
    bytes: _b64,
    bytearray: _b64,
    set: list,
    frozenset: list,
}


def json_default(value: Any) -> Any:
    """Convert a value json.dumps() cannot encode natively."""
    if isinstance(value, Enum):
        return value.value
    convert = TYPE_REGISTRY.get(type(value))
    if convert is None:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return convert(value)


def dumps(value: Any) -> str:
    """Encode value as JSON text using TYPE_REGISTRY for non-native types."""
    return json.dumps(value, default=json_default)


__all__ = ["TYPE_REGISTRY", "json_default", "dumps"]

"""Key-path lookup into nested values.

A key path addresses a value inside a model instance, mapping or sequence:

    "owner.name"            →  ("owner", "name")
    ("tags", 0)             →  first element of .tags
    "items.0.sku"           →  numeric parts index into sequences

Each step reads a mapping key, a sequence index or an attribute, whichever
the current value supports. Lookups never raise for a missing step; they
return the supplied default instead.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

KeyPath = tuple[Any, ...]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def parse_key_path(path: str | Sequence[Any]) -> KeyPath:
    """Normalize a dotted string or key sequence to a tuple of keys."""
    if isinstance(path, str):
        parts: KeyPath = tuple(path.split("."))
    else:
        parts = tuple(path)
    if not parts or any(part == "" for part in parts):
        raise ValueError(f"invalid key path: {path!r}")
    return parts


def get_in(obj: Any, path: str | Sequence[Any], default: Any = None) -> Any:
    """Follow path through obj, returning default at the first missing step."""
    current = obj
    for key in parse_key_path(path):
        if current is None:
            return default
        if isinstance(current, Mapping):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            index = _as_index(key)
            if index is None:
                current = getattr(current, key, MISSING) if isinstance(key, str) else MISSING
                if current is MISSING:
                    return default
                continue
            try:
                current = current[index]
            except IndexError:
                return default
        elif isinstance(key, str):
            current = getattr(current, key, MISSING)
            if current is MISSING:
                return default
        else:
            return default
    return current


def _as_index(key: Any) -> int | None:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.lstrip("-").isdigit():
        return int(key)
    return None


__all__ = ["KeyPath", "MISSING", "parse_key_path", "get_in"]

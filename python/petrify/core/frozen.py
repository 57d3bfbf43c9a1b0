"""Immutable containers and the freeze/thaw conversions used by model instances.

Every value stored on a model instance passes through freeze(), which copies
caller-owned containers into immutable equivalents:

    list / tuple      →  tuple (namedtuples keep their type)
    dict / Mapping    →  FrozenDict
    set / frozenset   →  frozenset
    bytearray         →  bytes

Anything else (scalars, dates, model instances, arbitrary objects) is stored
as-is: the instance takes ownership of such objects and does not copy them.
thaw() is the inverse used at the wire boundary: it turns frozen containers
back into plain dict/list values.

Both walks use an explicit stack, so nesting depth is bounded by memory
rather than by the interpreter's recursion limit. A container that holds a
reference to one of its own ancestors raises ValueError.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

CONTAINER_TYPES = (list, tuple, set, frozenset, Mapping)


class FrozenDict(Mapping):
    """Read-only, hashable mapping."""

    __slots__ = ("_data", "_hash")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._data: dict[Any, Any] = dict(*args, **kwargs)
        self._hash: int | None = None

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._data.items()))
        return self._hash

    def __repr__(self) -> str:
        return f"FrozenDict({self._data!r})"


class _Frame:
    """One container being rebuilt by _walk()."""

    __slots__ = ("value", "keys", "children", "results", "index")

    def __init__(self, value: Any) -> None:
        self.value = value
        if isinstance(value, Mapping):
            self.keys: list[Any] | None = list(value.keys())
            self.children = [value[key] for key in self.keys]
        else:
            self.keys = None
            self.children = list(value)
        self.results: list[Any] = []
        self.index = 0


def _walk(
    root: Any,
    leaf: Callable[[Any], Any],
    build: Callable[[_Frame], Any],
) -> Any:
    if not isinstance(root, CONTAINER_TYPES):
        return leaf(root)

    stack = [_Frame(root)]
    active = {id(root)}
    while True:
        frame = stack[-1]
        if frame.index < len(frame.children):
            child = frame.children[frame.index]
            frame.index += 1
            if not isinstance(child, CONTAINER_TYPES):
                frame.results.append(leaf(child))
                continue
            if id(child) in active:
                raise ValueError("cannot convert a self-referencing value")
            active.add(id(child))
            stack.append(_Frame(child))
            continue

        stack.pop()
        active.discard(id(frame.value))
        built = build(frame)
        if not stack:
            return built
        stack[-1].results.append(built)


def _freeze_leaf(value: Any) -> Any:
    if isinstance(value, bytearray):
        return bytes(value)
    return value


def _build_frozen(frame: _Frame) -> Any:
    value = frame.value
    if frame.keys is not None:
        return FrozenDict(zip(frame.keys, frame.results))
    if isinstance(value, (set, frozenset)):
        return frozenset(frame.results)
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return type(value)(*frame.results)
    return tuple(frame.results)


def _build_plain(frame: _Frame) -> Any:
    if frame.keys is not None:
        return dict(zip(frame.keys, frame.results))
    return frame.results


def freeze(value: Any) -> Any:
    """Return an immutable copy of value.

    Containers are copied; other objects are returned unchanged. Raises
    ValueError when a container holds a reference to itself.
    """
    return _walk(value, _freeze_leaf, _build_frozen)


def thaw(value: Any, leaf: Callable[[Any], Any] | None = None) -> Any:
    """Return a plain dict/list copy of a (possibly frozen) value.

    leaf, when given, converts every non-container value.
    """
    return _walk(value, leaf or _identity, _build_plain)


def _identity(value: Any) -> Any:
    return value


__all__ = ["CONTAINER_TYPES", "FrozenDict", "freeze", "thaw"]

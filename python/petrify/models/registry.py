"""Schema registry: an explicit collection of model types.

A registry is an ordinary value created and passed around by its owner;
there is no module-level registry:

    registry = SchemaRegistry()
    registry.register(Account)
    registry.get("myapp.models.Account")

Model Key Format:
    "{module}.{qualname}" e.g., "myapp.models.Account"

SchemaRegistry.from_module() collects every concrete model type defined in
a module; the CLI uses it to discover what to describe or decode.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from types import ModuleType

from petrify.exceptions import ModelTypeError
from petrify.models.base import Model
from petrify.models.runtime import is_model_type
from petrify.models.table import Table


def model_key(model: type[Model]) -> str:
    return f"{model.__module__}.{model.__qualname__}"


class SchemaRegistry:
    """Mapping of model keys to model types."""

    def __init__(self) -> None:
        self._types: dict[str, type[Model]] = {}

    def register(self, model: type[Model], *, overwrite: bool = False) -> None:
        """Add a model type. Raises ValueError if its key is already taken."""
        if not is_model_type(model):
            raise ModelTypeError(f"object is not a model type: {model!r}")
        key = model_key(model)
        existing = self._types.get(key)
        if existing is model:
            return
        if existing is not None and not overwrite:
            raise ValueError(f"Model '{key}' is already registered")
        self._types[key] = model

    def unregister(self, model: type[Model]) -> None:
        """Remove a model type if present."""
        self._types.pop(model_key(model), None)

    def get(self, key: str) -> type[Model] | None:
        return self._types.get(key)

    def registered(self) -> dict[str, type[Model]]:
        """Return a copy of the key → type mapping."""
        return dict(self._types)

    def tables(self) -> tuple[type[Table], ...]:
        """Return the registered concrete table types."""
        return tuple(
            model
            for model in self._types.values()
            if issubclass(model, Table) and model.__table__ is not None
        )

    def clear(self) -> None:
        self._types.clear()

    def __contains__(self, model: object) -> bool:
        if isinstance(model, str):
            return model in self._types
        return is_model_type(model) and self._types.get(model_key(model)) is model

    def __iter__(self) -> Iterator[type[Model]]:
        return iter(tuple(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    @classmethod
    def from_module(cls, module: ModuleType | str) -> SchemaRegistry:
        """Build a registry of the model types defined in module."""
        if isinstance(module, str):
            module = importlib.import_module(module)
        registry = cls()
        for value in vars(module).values():
            if not is_model_type(value) or value.__module__ != module.__name__:
                continue
            if issubclass(value, Table) and value.__table__ is None:
                continue
            registry.register(value)
        return registry


__all__ = ["SchemaRegistry", "model_key"]

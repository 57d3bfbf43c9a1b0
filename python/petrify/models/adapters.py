"""Adapters translating values between model types that share field names.

    to_summary = create_adapter(User, UserSummary)
    summary = to_summary(user)          # any object exposing the key paths
    summary = to_summary({"id": 1})     # mappings work too

Shared fields are the stored fields of the target that the source also
declares, in the target's order. Fields the input lacks, and fields only the
target declares, take the target's defaults.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from petrify.core.keypath import MISSING, get_in
from petrify.models.base import Model
from petrify.models.runtime import get_type


def shared_field_names(source_type: type[Model], target_type: type[Model]) -> tuple[str, ...]:
    source_names = set(get_type(source_type).__schema__.field_names)
    target_schema = get_type(target_type).__schema__
    return tuple(
        name for name in target_schema.stored_field_names if name in source_names
    )


def create_adapter(
    source_type: type[Model], target_type: type[Model]
) -> Callable[[Any], Model]:
    """Return a function building target_type instances from source-shaped values."""
    names = shared_field_names(source_type, target_type)

    def adapt(obj: Any) -> Model:
        values = {}
        for name in names:
            value = get_in(obj, name, MISSING)
            if value is not MISSING:
                values[name] = value
        return target_type(**values)

    adapt.__name__ = f"{source_type.__name__}_to_{target_type.__name__}"
    adapt.__qualname__ = adapt.__name__
    return adapt


__all__ = ["create_adapter", "shared_field_names"]

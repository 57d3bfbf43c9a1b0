"""Exception hierarchy for petrify.

All petrify exceptions inherit from PetrifyError, allowing catch-all handling:

    try:
        Shape.from_row(row)
    except PetrifyError as e:
        print(f"schema error: {e}")

Exception hierarchy:
    PetrifyError (base)
    ├── SchemaError      - Invalid model/table/field definition (raised at class creation)
    ├── FieldError       - Field used in a way its kind forbids (e.g. serializing a Ref)
    ├── ModelTypeError   - Value is not a model type or instance (also a TypeError)
    └── RowError         - Malformed packed row payload
"""

from __future__ import annotations


class PetrifyError(Exception):
    """Base exception for all petrify-related errors."""


class SchemaError(PetrifyError):
    """Raised when a model, table or field definition is invalid."""


class FieldError(PetrifyError):
    """Raised when a field cannot perform the requested conversion."""


class ModelTypeError(PetrifyError, TypeError):
    """Raised when a value is not a model type or model instance."""


class RowError(PetrifyError):
    """Raised when a packed row payload cannot be decoded."""


__all__ = [
    "PetrifyError",
    "SchemaError",
    "FieldError",
    "ModelTypeError",
    "RowError",
]

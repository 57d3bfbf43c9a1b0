"""Zero-dependency helpers shared by the model layer."""

from petrify.core.frozen import FrozenDict, freeze, thaw
from petrify.core.keypath import MISSING, KeyPath, get_in, parse_key_path
from petrify.core.types import TYPE_REGISTRY, json_default

__all__ = [
    "FrozenDict",
    "freeze",
    "thaw",
    "MISSING",
    "KeyPath",
    "get_in",
    "parse_key_path",
    "TYPE_REGISTRY",
    "json_default",
]

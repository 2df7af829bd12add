"""
Settings persistence and error types.

The core only consumes the flat load/save contract; storage representation
is an implementation detail of each store.
"""

from .exceptions import (
    EmbedGenError,
    SchemaError,
    DuplicateWidgetTypeError,
    DuplicateTemplateIdError,
    DuplicateOptionIdError,
    DuplicateMenuIdError,
    DependencyCycleError,
    DanglingDependencyError,
    InvalidDefaultError,
    FieldTypeCollisionError,
    PreviewCollisionError,
    PersistenceError,
)
from .base import SettingsStore, DataProvider
from .memory_store import InMemorySettingsStore
from .json_store import JsonFileSettingsStore

__all__ = [
    "EmbedGenError",
    "SchemaError",
    "DuplicateWidgetTypeError",
    "DuplicateTemplateIdError",
    "DuplicateOptionIdError",
    "DuplicateMenuIdError",
    "DependencyCycleError",
    "DanglingDependencyError",
    "InvalidDefaultError",
    "FieldTypeCollisionError",
    "PreviewCollisionError",
    "PersistenceError",
    "SettingsStore",
    "DataProvider",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
]

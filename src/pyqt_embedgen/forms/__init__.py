"""
Form generation.

Field type dispatch and the settings editor generated from template schemas.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .field_type_registry import (
        FieldTypeRegistry,
        get_field_type_registry,
        register_field_type,
    )
    from .settings_form import SettingsFormWidget

_EXPORTS = {
    "FieldTypeRegistry": ("pyqt_embedgen.forms.field_type_registry", "FieldTypeRegistry"),
    "RENDERER_CONTRACT": ("pyqt_embedgen.forms.field_type_registry", "RENDERER_CONTRACT"),
    "get_field_type_registry": ("pyqt_embedgen.forms.field_type_registry", "get_field_type_registry"),
    "register_field_type": ("pyqt_embedgen.forms.field_type_registry", "register_field_type"),
    "SettingsFormWidget": ("pyqt_embedgen.forms.settings_form", "SettingsFormWidget"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())

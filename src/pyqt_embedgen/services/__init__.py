"""
Service layer.

Settings mutation with debounced persistence, preview projection, the shared
render entry point, editor sessions and the embed loader.
"""

from .settings_mutator import (
    apply_edit,
    SettingsMutator,
    DebouncedSettingsWriter,
)
from .preview_projector import (
    PreviewProjector,
    get_preview_projector,
    register_preview,
    ANY_TEMPLATE,
)
from .render_service import render
from .editor_session import EditorSession
from .embed_loader import EmbedLoader

__all__ = [
    "apply_edit",
    "SettingsMutator",
    "DebouncedSettingsWriter",
    "PreviewProjector",
    "get_preview_projector",
    "register_preview",
    "ANY_TEMPLATE",
    "render",
    "EditorSession",
    "EmbedLoader",
]

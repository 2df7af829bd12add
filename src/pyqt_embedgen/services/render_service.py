"""
Render entry point shared by the editor preview and the embed loader.

Both call sites go through render(), so identical inputs yield identical
rendering descriptions wherever the widget is shown.
"""

import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pyqt_embedgen.protocols import RenderNode, ViewMode, error_node, get_embed_config
from pyqt_embedgen.schema.registry import TemplateRegistry, get_template_registry
from pyqt_embedgen.schema.resolver import resolve
from .preview_projector import PreviewProjector, get_preview_projector

logger = logging.getLogger(__name__)


def render(
    widget_type_id: str,
    template_id: str,
    settings: Mapping[str, Any],
    data: Any = None,
    view_mode: Optional[ViewMode] = None,
    registry: Optional[TemplateRegistry] = None,
    projector: Optional[PreviewProjector] = None,
) -> RenderNode:
    """
    Render a widget from (possibly partial) settings.

    Settings are resolved against the template's defaults when the template
    is registered, then handed read-only to the selected preview renderer.
    Never raises: a failing renderer yields an error node.

    Args:
        widget_type_id: Widget type id
        template_id: Template id
        settings: Settings record; missing keys come from defaults
        data: Widget-specific external data, passed through unmodified
        view_mode: Target viewport (configured default when None)
        registry: Template registry (process-wide default when None)
        projector: Preview projector (process-wide default when None)
    """
    registry = registry if registry is not None else get_template_registry()
    projector = projector if projector is not None else get_preview_projector()
    view_mode = view_mode if view_mode is not None else get_embed_config().default_view_mode

    template = registry.get_template(widget_type_id, template_id)
    resolved = resolve(template, settings) if template is not None else dict(settings)

    renderer = projector.select(widget_type_id, template_id)
    try:
        return renderer.render(MappingProxyType(resolved), view_mode, data)
    except Exception as e:
        logger.exception(
            f"Preview {type(renderer).__name__} failed for '{widget_type_id}/{template_id}'"
        )
        return error_node(widget_type_id, template_id, e)

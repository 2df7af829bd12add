"""Preview renderer registry keyed by (widget type, template).

Applications register one renderer per template, or one renderer for every
template of a widget type with ``template_id="*"``. Selection never fails:
unregistered pairs get a "no preview available" placeholder renderer.

Example:
    projector = PreviewProjector()
    projector.register("notice_bar", "*", NoticeBarPreview())
    renderer = projector.select("notice_bar", "classic")
"""

import logging
from typing import Dict, Optional, Tuple

from pyqt_embedgen.io.exceptions import PreviewCollisionError
from pyqt_embedgen.protocols import PlaceholderPreviewRenderer, PreviewRenderer

logger = logging.getLogger(__name__)

ANY_TEMPLATE = "*"


class PreviewProjector:
    """Selects the preview renderer for a (widget type, template) pair."""

    def __init__(self):
        self._renderers: Dict[Tuple[str, str], PreviewRenderer] = {}

    def register(self, widget_type_id: str, template_id: str,
                 renderer: PreviewRenderer, override: bool = False) -> None:
        """
        Register a preview renderer.

        Args:
            widget_type_id: Widget type id
            template_id: Template id, or "*" for every template of the type
            renderer: PreviewRenderer instance
            override: Replace an existing registration

        Raises:
            PreviewCollisionError: pair already registered and override is False
            TypeError: renderer is not a PreviewRenderer
        """
        if not isinstance(renderer, PreviewRenderer):
            raise TypeError(
                f"Preview for '{widget_type_id}/{template_id}' must be a PreviewRenderer, "
                f"got {type(renderer).__name__}"
            )
        key = (widget_type_id, template_id)
        if key in self._renderers and not override:
            raise PreviewCollisionError(
                f"Preview for '{widget_type_id}/{template_id}' is already registered. "
                f"Pass override=True to replace it."
            )
        self._renderers[key] = renderer
        logger.debug(f"Registered preview {type(renderer).__name__} for '{widget_type_id}/{template_id}'")

    def unregister(self, widget_type_id: str, template_id: str) -> None:
        self._renderers.pop((widget_type_id, template_id), None)

    def select(self, widget_type_id: str, template_id: str) -> PreviewRenderer:
        """Renderer for the pair; the placeholder renderer when none is registered."""
        renderer = (
            self._renderers.get((widget_type_id, template_id))
            or self._renderers.get((widget_type_id, ANY_TEMPLATE))
        )
        if renderer is None:
            logger.debug(f"No preview registered for '{widget_type_id}/{template_id}'")
            return PlaceholderPreviewRenderer(widget_type_id, template_id)
        return renderer

    def has_preview(self, widget_type_id: str, template_id: str) -> bool:
        return not isinstance(self.select(widget_type_id, template_id), PlaceholderPreviewRenderer)


_default_projector: Optional[PreviewProjector] = None


def get_preview_projector() -> PreviewProjector:
    """Process-wide projector used when a caller doesn't pass one."""
    global _default_projector
    if _default_projector is None:
        _default_projector = PreviewProjector()
    return _default_projector


def register_preview(widget_type_id: str, template_id: str,
                     renderer: PreviewRenderer, override: bool = False) -> None:
    """Register a preview renderer on the process-wide projector."""
    get_preview_projector().register(widget_type_id, template_id, renderer, override=override)

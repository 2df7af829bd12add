"""Built-in notice bar widget type: declaration and preview renderer."""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from pyqt_embedgen.protocols import PreviewRenderer, RenderNode, ViewMode, node
from pyqt_embedgen.schema import TemplateRegistry, WidgetType, load_widget_type
from pyqt_embedgen.services.preview_projector import ANY_TEMPLATE, PreviewProjector

logger = logging.getLogger(__name__)

WIDGET_TYPE_ID = "notice_bar"
DECLARATION_PATH = Path(__file__).with_name("notice_bar.json")

# Mobile viewports get a smaller font, never below this
MOBILE_MIN_FONT_PX = 10


class NoticeBarPreview(PreviewRenderer):
    """Renders both notice bar templates; menus a template lacks fall back to plain defaults."""

    def render(self, settings: Mapping[str, Any], view_mode: ViewMode, data: Any) -> RenderNode:
        font_size = settings.get("fontSize", 14)
        if not isinstance(font_size, (int, float)) or isinstance(font_size, bool):
            font_size = 14
        if view_mode is ViewMode.MOBILE:
            font_size = max(MOBILE_MIN_FONT_PX, int(font_size) - 2)

        style = (
            f"background:{settings.get('backgroundColor', '#1f2937')};"
            f"color:{settings.get('textColor', '#ffffff')};"
            f"font-size:{font_size}px;"
            f"text-align:{settings.get('align', 'center')}"
        )

        subtitle = None
        if settings.get("showSubtitle") is True and settings.get("subtitle"):
            subtitle = node("p", settings["subtitle"], class_="notice-subtitle")

        button = None
        if settings.get("showButton") is True:
            button = node(
                "a",
                settings.get("buttonText", ""),
                class_="notice-button",
                href=settings.get("buttonUrl", "#"),
            )

        return node(
            "div",
            node("strong", settings.get("message", ""), class_="notice-message"),
            subtitle,
            button,
            class_=f"notice-bar notice-{settings.get('position', 'top')} view-{view_mode.value}",
            style=style,
        )


def notice_bar_widget_type() -> WidgetType:
    return load_widget_type(DECLARATION_PATH)


def register_notice_bar(registry: TemplateRegistry, projector: Optional[PreviewProjector] = None,
                        override: bool = False) -> WidgetType:
    """Register the notice bar declaration and, if given a projector, its preview."""
    widget_type = notice_bar_widget_type()
    registry.register(widget_type, override=override)
    if projector is not None:
        projector.register(WIDGET_TYPE_ID, ANY_TEMPLATE, NoticeBarPreview(), override=override)
    logger.debug(f"Registered built-in widget type '{WIDGET_TYPE_ID}'")
    return widget_type

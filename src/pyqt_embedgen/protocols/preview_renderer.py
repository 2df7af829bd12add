"""Preview renderer contract and the rendering description it produces.

A preview renderer turns ``(resolved settings, view mode, external data)``
into a RenderNode tree. Renderers must be referentially transparent: equal
inputs give equal trees, so the editor preview and the production embed can
be compared node for node.

Example:
    class NoticeBarPreview(PreviewRenderer):
        def render(self, settings, view_mode, data):
            return node("div", settings["message"], class_="notice")
"""

import html
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Tuple, Union


class ViewMode(Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"


@dataclass(frozen=True)
class RenderNode:
    """Immutable, comparable description of a rendered element."""
    tag: str
    attrs: Tuple[Tuple[str, Any], ...] = ()
    children: Tuple[Union["RenderNode", str], ...] = ()

    def attr(self, name: str, default: Any = None) -> Any:
        for key, value in self.attrs:
            if key == name:
                return value
        return default

    def find(self, tag: str) -> list:
        """Depth-first list of descendant nodes (self included) with this tag."""
        found = [self] if self.tag == tag else []
        for child in self.children:
            if isinstance(child, RenderNode):
                found.extend(child.find(tag))
        return found

    def text(self) -> str:
        """Concatenated text content."""
        return "".join(
            child.text() if isinstance(child, RenderNode) else child
            for child in self.children
        )

    def to_html(self) -> str:
        parts = [self.tag]
        for key, value in self.attrs:
            if value is None or value is False:
                continue
            if value is True:
                parts.append(key)
            else:
                parts.append(f'{key}="{html.escape(str(value), quote=True)}"')
        inner = "".join(
            child.to_html() if isinstance(child, RenderNode) else html.escape(child)
            for child in self.children
        )
        return f"<{' '.join(parts)}>{inner}</{self.tag}>"


def node(tag: str, *children: Union[RenderNode, str, None], **attrs: Any) -> RenderNode:
    """
    Build a RenderNode.

    ``None`` children are dropped, non-string scalars are stringified and a
    trailing underscore is stripped from attribute names (``class_``).
    Attributes are sorted so construction order never affects equality.
    """
    kids = tuple(
        child if isinstance(child, RenderNode) else str(child)
        for child in children
        if child is not None
    )
    normalized = tuple(sorted(
        (((key[:-1] if key.endswith("_") else key).replace("_", "-"), value)
         for key, value in attrs.items()),
        key=lambda item: item[0],
    ))
    return RenderNode(tag=tag, attrs=normalized, children=kids)


EMPTY = RenderNode(tag="div", attrs=(("class", "embed-empty"),))


class PreviewRenderer(ABC):
    """Renders one (widget type, template) pair from resolved settings."""

    @abstractmethod
    def render(self, settings: Mapping[str, Any], view_mode: ViewMode, data: Any) -> RenderNode:
        """
        Build the rendering description.

        Args:
            settings: Complete settings record (defaults already resolved)
            view_mode: Target viewport
            data: Widget-specific external data, or None. May be an
                  exception instance when the data fetch failed.
        """
        pass


class PlaceholderPreviewRenderer(PreviewRenderer):
    """Fallback for (widget type, template) pairs with no registered preview."""

    def __init__(self, widget_type_id: str = "", template_id: str = ""):
        self.widget_type_id = widget_type_id
        self.template_id = template_id

    def render(self, settings, view_mode, data) -> RenderNode:
        return node(
            "div",
            "No preview available",
            class_="embed-placeholder",
            data_widget_type=self.widget_type_id,
            data_template=self.template_id,
        )


def error_node(widget_type_id: str, template_id: str, error: Exception) -> RenderNode:
    """Node shown in place of a preview whose renderer raised."""
    return node(
        "div",
        "Preview unavailable",
        class_="embed-error",
        data_widget_type=widget_type_id,
        data_template=template_id,
        data_error=type(error).__name__,
    )

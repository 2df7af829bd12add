"""
Field type registry: menu type tag -> input renderer.

Two tiers share one keyspace:
- basic tags ship with the package (text, textarea, number, toggle, select,
  radio, color, group)
- complex tags are registered by widget-specific extensions

Lookup is total. An unknown tag resolves to UnsupportedFieldAdapter, so one
bad menu declaration never blocks the rest of the editor. Registration is
additive: an existing tag is only replaced with an explicit override.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from PyQt6.QtWidgets import QWidget

from pyqt_embedgen.io.exceptions import FieldTypeCollisionError
from pyqt_embedgen.protocols import (
    BASIC_ADAPTERS, ChangeSignalEmitter, MenuConfigurable,
    UnsupportedFieldAdapter, ValueGettable, ValueSettable,
)

logger = logging.getLogger(__name__)

# ABCs every renderer must implement
RENDERER_CONTRACT = (ValueGettable, ValueSettable, ChangeSignalEmitter, MenuConfigurable)


def _check_renderer(tag: str, renderer: Type) -> None:
    if not isinstance(renderer, type) or not issubclass(renderer, QWidget):
        raise TypeError(f"Renderer for '{tag}' must be a QWidget subclass, got {renderer!r}")
    missing = [abc.__name__ for abc in RENDERER_CONTRACT if not issubclass(renderer, abc)]
    if missing:
        raise TypeError(
            f"Renderer {renderer.__name__} for '{tag}' does not implement {missing}. "
            f"Add them to the renderer's base classes."
        )


class FieldTypeRegistry:
    """
    Maps type tags to renderer classes.

    Example:
        registry = FieldTypeRegistry()
        registry.register("font_picker", FontPickerAdapter)
        renderer_cls = registry.resolve_renderer(menu.type)
    """

    def __init__(self, fallback: Type = UnsupportedFieldAdapter):
        self._basic: Dict[str, Type] = {adapter._type_tag: adapter for adapter in BASIC_ADAPTERS}
        self._complex: Dict[str, Type] = {}
        self._fallback = fallback

    @property
    def fallback(self) -> Type:
        return self._fallback

    def register(self, tag: str, renderer: Type, override: bool = False) -> None:
        """
        Register a complex type tag.

        Args:
            tag: Menu type tag
            renderer: QWidget subclass implementing the renderer ABCs
            override: Replace an existing basic or complex registration

        Raises:
            FieldTypeCollisionError: tag already registered and override is False
            TypeError: renderer doesn't satisfy the renderer contract
        """
        _check_renderer(tag, renderer)

        existing = self._complex.get(tag) or self._basic.get(tag)
        if existing is not None:
            if not override:
                raise FieldTypeCollisionError(
                    f"Field type '{tag}' is already registered to {existing.__name__}. "
                    f"Pass override=True to replace it with {renderer.__name__}."
                )
            logger.info(f"Overriding field type '{tag}': {existing.__name__} -> {renderer.__name__}")

        self._complex[tag] = renderer
        logger.debug(f"Registered field type '{tag}' -> {renderer.__name__}")

    def unregister(self, tag: str) -> None:
        """Remove a complex tag. Basic tags can only be overridden, not removed."""
        self._complex.pop(tag, None)

    def resolve_renderer(self, tag: str) -> Type:
        """Renderer class for ``tag``; the fallback renderer for unknown tags."""
        renderer = self._complex.get(tag) or self._basic.get(tag)
        if renderer is None:
            logger.debug(f"No renderer for field type '{tag}', using {self._fallback.__name__}")
            return self._fallback
        return renderer

    def is_registered(self, tag: str) -> bool:
        return tag in self._complex or tag in self._basic

    def is_basic(self, tag: str) -> bool:
        return tag in self._basic and tag not in self._complex

    def tags(self) -> List[str]:
        return sorted(set(self._basic) | set(self._complex))

    def create_widget(self, menu: Any, parent: Optional[QWidget] = None) -> QWidget:
        """
        Instantiate and configure the renderer for ``menu``.

        A renderer that raises while being built is replaced by the fallback
        for this menu only.
        """
        renderer = self.resolve_renderer(menu.type)
        widget = None
        try:
            widget = renderer(parent)
            widget.configure_from_menu(menu)
            return widget
        except Exception:
            logger.exception(
                f"Renderer {renderer.__name__} failed for menu '{menu.id}' ({menu.type}); using fallback"
            )
            if widget is not None:
                widget.setParent(None)
                widget.deleteLater()
        widget = self._fallback(parent)
        widget.configure_from_menu(menu)
        return widget


_default_registry: Optional[FieldTypeRegistry] = None


def get_field_type_registry() -> FieldTypeRegistry:
    """Process-wide registry used when an editor isn't given one."""
    global _default_registry
    if _default_registry is None:
        _default_registry = FieldTypeRegistry()
    return _default_registry


def register_field_type(tag: str, renderer: Type, override: bool = False) -> None:
    """Register a complex field type on the process-wide registry."""
    get_field_type_registry().register(tag, renderer, override=override)

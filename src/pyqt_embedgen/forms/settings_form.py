"""PyQt settings editor - VIEW layer for an EditorSession."""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QFormLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from pyqt_embedgen.protocols import SubMenuContainer
from pyqt_embedgen.services.editor_session import EditorSession
from .field_type_registry import FieldTypeRegistry, get_field_type_registry

logger = logging.getLogger(__name__)


class SettingsFormWidget(QWidget):
    """
    Settings editor generated from a template schema.

    One section (QGroupBox) per option, one row per menu. Inputs come from
    the field type registry; a row whose renderer fails is replaced by the
    fallback so the rest of the form keeps working. Row visibility follows
    the dependency evaluator and is recomputed from the session's current
    record after every edit.
    """

    settings_changed = pyqtSignal(dict)            # full record after an edit
    parameter_changed = pyqtSignal(str, object)    # menu_id, value

    def __init__(self, session: EditorSession,
                 field_types: Optional[FieldTypeRegistry] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.session = session
        self.field_types = field_types or get_field_type_registry()
        self.widgets: Dict[str, QWidget] = {}
        self._labels: Dict[str, QLabel] = {}
        self.sections: Dict[str, QGroupBox] = {}
        self._updating = False

        self._layout = QVBoxLayout(self)
        self._build()
        self.refresh_visibility()

    # ========== BUILD ==========

    def _build(self) -> None:
        template = self.session.schema.template
        for option in template.options:
            section = QGroupBox(option.name, self)
            section.setObjectName(f"option_{option.id}")
            form_layout = QFormLayout(section)
            for menu in option.menus:
                self._add_menu_row(menu, form_layout)
            self._layout.addWidget(section)
            self.sections[option.id] = section
        self._layout.addStretch(1)
        logger.debug(f"Built settings form for '{template.id}' with {len(self.widgets)} rows")

    def _add_menu_row(self, menu: Any, form_layout: QFormLayout) -> None:
        widget = self.field_types.create_widget(menu, self)
        try:
            child_layout = self._wire_row(menu, widget)
        except Exception:
            logger.exception(
                f"Renderer {type(widget).__name__} failed while wiring menu '{menu.id}'; using fallback"
            )
            widget.setParent(None)
            widget.deleteLater()
            widget = self.field_types.fallback(self)
            widget.configure_from_menu(menu)
            child_layout = self._wire_row(menu, widget)

        if child_layout is not None:
            form_layout.addRow(widget)
        else:
            label = QLabel(menu.label, self)
            if menu.description:
                label.setToolTip(menu.description)
                widget.setToolTip(menu.description)
            form_layout.addRow(label, widget)
            self._labels[menu.id] = label
            child_layout = form_layout

        self.widgets[menu.id] = widget
        for sub_menu in menu.menus:
            self._add_menu_row(sub_menu, child_layout)

    def _wire_row(self, menu: Any, widget: QWidget) -> Optional[QFormLayout]:
        """Set the stored value and connect edits. Returns the sub-menu layout of a container."""
        widget.setObjectName(menu.id)
        self._set_widget_value(menu.id, widget)
        child_layout = widget.content_layout() if isinstance(widget, SubMenuContainer) else None
        # Connected after set_value so building the row never records an edit
        widget.connect_change_signal(lambda value, menu_id=menu.id: self._on_value_changed(menu_id, value))
        return child_layout

    def _set_widget_value(self, menu_id: str, widget: QWidget) -> None:
        value = self.session.settings.get(menu_id)
        try:
            widget.set_value(value)
        except Exception:
            # Stored value of an unexpected type; keep the row, show the renderer's default
            logger.exception(f"Renderer for '{menu_id}' rejected stored value {value!r}")

    # ========== EDITS ==========

    def _on_value_changed(self, menu_id: str, value: Any) -> None:
        if self._updating:
            return
        if self.session.closed:
            logger.debug(f"Ignoring edit of '{menu_id}': session is closed")
            return
        self.session.edit(menu_id, value)
        self.refresh_visibility(self.session.schema.graph.dependents_of(menu_id))
        self.parameter_changed.emit(menu_id, value)
        self.settings_changed.emit(dict(self.session.settings))

    def refresh_visibility(self, menu_ids: Optional[Iterable[str]] = None) -> None:
        """Show active rows, hide inactive ones. Only ``menu_ids`` when given."""
        active = self.session.active_menu_ids()
        targets = self.widgets if menu_ids is None else [m for m in menu_ids if m in self.widgets]
        for menu_id in targets:
            visible = menu_id in active
            self.widgets[menu_id].setVisible(visible)
            label = self._labels.get(menu_id)
            if label is not None:
                label.setVisible(visible)

    def reload(self) -> None:
        """Push the session's current record into every input."""
        self._updating = True
        try:
            for menu_id, widget in self.widgets.items():
                self._set_widget_value(menu_id, widget)
        finally:
            self._updating = False
        self.refresh_visibility()

    # ========== QUERIES ==========

    def widget_for(self, menu_id: str) -> Optional[QWidget]:
        return self.widgets.get(menu_id)

    def is_row_visible(self, menu_id: str) -> bool:
        """Row visibility as set by the form (independent of the window being shown)."""
        widget = self.widgets.get(menu_id)
        return widget is not None and widget.isVisibleTo(self)

    def row(self, menu_id: str) -> Tuple[Optional[QLabel], Optional[QWidget]]:
        return self._labels.get(menu_id), self.widgets.get(menu_id)

"""
Input adapters that wrap Qt widgets to implement the editor ABCs.

Normalizes Qt's inconsistent APIs:
- QLineEdit.text() vs QDoubleSpinBox.value() vs QComboBox.currentData()
- QLineEdit.setText() vs QDoubleSpinBox.setValue() vs QComboBox.setCurrentIndex()

All adapters implement consistent interface via ABCs:
- get_value() / set_value() for all widgets
- configure_from_menu() for all widgets
- connect_change_signal() for all widgets

Each adapter carries the menu type tag it renders in ``_type_tag``; the field
type registry maps tags to these classes.
"""

import logging
from abc import ABCMeta
from typing import Any, Callable, Sequence

from PyQt6.QtCore import QObject, QRegularExpression
from PyQt6.QtGui import QRegularExpressionValidator
from PyQt6.QtWidgets import (
    QButtonGroup, QCheckBox, QComboBox, QDoubleSpinBox, QGroupBox, QLabel,
    QLineEdit, QPlainTextEdit, QRadioButton, QVBoxLayout, QFormLayout,
)

from .widget_protocols import (
    ValueGettable, ValueSettable, PlaceholderCapable, RangeConfigurable,
    ChoiceSelectable, ChangeSignalEmitter, MenuConfigurable, SubMenuContainer,
)

logger = logging.getLogger(__name__)

# PyQt-specific metaclass that combines ABCMeta with Qt's metaclass
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


NUMERIC_RANGE_MIN = -999999
NUMERIC_RANGE_MAX = 999999


def _choice_pairs(choices: Sequence[Any]) -> list:
    """Normalize choices to (value, label) pairs."""
    pairs = []
    for choice in choices:
        if isinstance(choice, (tuple, list)) and len(choice) == 2:
            pairs.append((choice[0], str(choice[1])))
        else:
            pairs.append((choice, str(choice)))
    return pairs


class TextAdapter(QLineEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                  ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """
    Single-line text input.

    Unlike a lazy-config line edit, empty text is a real value (""), not None.
    """

    _type_tag = "text"

    def configure_from_menu(self, menu: Any) -> None:
        placeholder = menu.props.get("placeholder")
        if placeholder:
            self.set_placeholder(str(placeholder))
        max_length = menu.props.get("max_length")
        if isinstance(max_length, int) and max_length > 0:
            self.setMaxLength(max_length)

    def get_value(self) -> Any:
        return self.text()

    def set_value(self, value: Any) -> None:
        self.setText("" if value is None else str(value))

    def set_placeholder(self, text: str) -> None:
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.textChanged.connect(lambda: callback(self.get_value()))


class TextAreaAdapter(QPlainTextEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                      ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """Multi-line text input."""

    _type_tag = "textarea"

    def configure_from_menu(self, menu: Any) -> None:
        placeholder = menu.props.get("placeholder")
        if placeholder:
            self.set_placeholder(str(placeholder))
        self.setMaximumHeight(int(menu.props.get("height", 96)))

    def get_value(self) -> Any:
        return self.toPlainText()

    def set_value(self, value: Any) -> None:
        self.setPlainText("" if value is None else str(value))

    def set_placeholder(self, text: str) -> None:
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.textChanged.connect(lambda: callback(self.get_value()))


class NumberAdapter(QDoubleSpinBox, ValueGettable, ValueSettable, RangeConfigurable,
                    ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """
    Numeric input.

    Integer menus (integer default, no ``decimals`` prop) report ints so the
    settings record keeps the declared value type.
    """

    _type_tag = "number"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._integral = False
        self.setRange(NUMERIC_RANGE_MIN, NUMERIC_RANGE_MAX)

    def configure_from_menu(self, menu: Any) -> None:
        props = menu.props
        default = menu.default_value
        integral_default = isinstance(default, int) and not isinstance(default, bool)
        decimals = props.get("decimals", 0 if integral_default else 2)
        self._integral = decimals == 0
        self.setDecimals(int(decimals))
        self.configure_range(props.get("min", NUMERIC_RANGE_MIN), props.get("max", NUMERIC_RANGE_MAX))
        if "step" in props:
            self.setSingleStep(float(props["step"]))
        suffix = props.get("suffix")
        if suffix:
            self.setSuffix(f" {suffix}")

    def get_value(self) -> Any:
        value = self.value()
        return int(round(value)) if self._integral else value

    def set_value(self, value: Any) -> None:
        try:
            self.setValue(float(value))
        except (TypeError, ValueError):
            logger.debug(f"NumberAdapter ignoring non-numeric value {value!r}")

    def configure_range(self, minimum: float, maximum: float) -> None:
        self.setRange(float(minimum), float(maximum))

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.valueChanged.connect(lambda: callback(self.get_value()))


class ToggleAdapter(QCheckBox, ValueGettable, ValueSettable,
                    ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """Boolean toggle. Reports True/False, treats any stored value by truthiness."""

    _type_tag = "toggle"

    def configure_from_menu(self, menu: Any) -> None:
        text = menu.props.get("text")
        if text:
            self.setText(str(text))

    def get_value(self) -> Any:
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        self.setChecked(bool(value))

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.stateChanged.connect(lambda: callback(self.get_value()))


class SelectAdapter(QComboBox, ValueGettable, ValueSettable, PlaceholderCapable,
                    ChoiceSelectable, ChangeSignalEmitter, MenuConfigurable,
                    metaclass=PyQtWidgetMeta):
    """
    Dropdown selection.

    Stores actual values in itemData, not just display text.
    """

    _type_tag = "select"

    def configure_from_menu(self, menu: Any) -> None:
        self.set_choices(menu.choices)

    def set_choices(self, choices: Sequence[Any]) -> None:
        self.blockSignals(True)
        try:
            self.clear()
            for value, label in _choice_pairs(choices):
                self.addItem(label, value)
        finally:
            self.blockSignals(False)

    def get_value(self) -> Any:
        if self.currentIndex() < 0:
            return None
        return self.itemData(self.currentIndex())

    def set_value(self, value: Any) -> None:
        for i in range(self.count()):
            if self.itemData(i) == value:
                self.setCurrentIndex(i)
                return
        # Value not among choices - clear selection
        self.setCurrentIndex(-1)

    def set_placeholder(self, text: str) -> None:
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.currentIndexChanged.connect(lambda: callback(self.get_value()))


class RadioGroupAdapter(QGroupBox, ValueGettable, ValueSettable, ChoiceSelectable,
                        ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """Exclusive radio buttons, one per choice."""

    _type_tag = "radio"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._layout = QVBoxLayout(self)
        self._group = QButtonGroup(self)
        self._group.setExclusive(True)
        self._values: list = []

    def configure_from_menu(self, menu: Any) -> None:
        self.set_choices(menu.choices)

    def set_choices(self, choices: Sequence[Any]) -> None:
        for button in self._group.buttons():
            self._group.removeButton(button)
            button.deleteLater()
        self._values = []
        for index, (value, label) in enumerate(_choice_pairs(choices)):
            button = QRadioButton(label, self)
            self._group.addButton(button, index)
            self._layout.addWidget(button)
            self._values.append(value)

    def get_value(self) -> Any:
        index = self._group.checkedId()
        if index < 0:
            return None
        return self._values[index]

    def set_value(self, value: Any) -> None:
        for index, choice in enumerate(self._values):
            if choice == value:
                self._group.button(index).setChecked(True)
                return
        checked = self._group.checkedButton()
        if checked is not None:
            self._group.setExclusive(False)
            checked.setChecked(False)
            self._group.setExclusive(True)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self._group.idToggled.connect(
            lambda _id, checked: callback(self.get_value()) if checked else None
        )


class ColorAdapter(QLineEdit, ValueGettable, ValueSettable, PlaceholderCapable,
                   ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """Hex color input (#rgb or #rrggbb)."""

    _type_tag = "color"

    def __init__(self, parent=None):
        super().__init__(parent)
        pattern = QRegularExpression(r"^#?[0-9A-Fa-f]{0,6}$")
        self.setValidator(QRegularExpressionValidator(pattern, self))
        self.setPlaceholderText("#rrggbb")

    def configure_from_menu(self, menu: Any) -> None:
        placeholder = menu.props.get("placeholder")
        if placeholder:
            self.set_placeholder(str(placeholder))

    def get_value(self) -> Any:
        text = self.text().strip()
        if text and not text.startswith("#"):
            text = f"#{text}"
        return text.lower()

    def set_value(self, value: Any) -> None:
        self.setText("" if value is None else str(value))

    def set_placeholder(self, text: str) -> None:
        self.setPlaceholderText(text)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.editingFinished.connect(lambda: callback(self.get_value()))


class GroupAdapter(QGroupBox, ValueGettable, ValueSettable, ChangeSignalEmitter,
                   MenuConfigurable, SubMenuContainer, metaclass=PyQtWidgetMeta):
    """
    Expandable group holding a menu's sub-menus.

    A boolean default makes the group checkable and its value the checked
    state; any other default is carried through unchanged.
    """

    _type_tag = "group"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._content = QFormLayout(self)
        self._value: Any = None

    def configure_from_menu(self, menu: Any) -> None:
        self.setTitle(menu.label)
        self.setCheckable(isinstance(menu.default_value, bool))

    def content_layout(self) -> QFormLayout:
        return self._content

    def get_value(self) -> Any:
        if self.isCheckable():
            return self.isChecked()
        return self._value

    def set_value(self, value: Any) -> None:
        if self.isCheckable():
            self.setChecked(bool(value))
        else:
            self._value = value

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        self.toggled.connect(lambda: callback(self.get_value()))


class UnsupportedFieldAdapter(QLabel, ValueGettable, ValueSettable,
                              ChangeSignalEmitter, MenuConfigurable, metaclass=PyQtWidgetMeta):
    """
    Fallback renderer for unknown type tags and renderers that failed to build.

    Shows a notice in place of the input and passes the stored value through
    untouched so the rest of the form keeps working.
    """

    _type_tag = "unsupported"

    def __init__(self, parent=None):
        super().__init__(parent)
        self._value: Any = None
        self.setObjectName("unsupported_field")

    def configure_from_menu(self, menu: Any) -> None:
        self.setText(f"Unsupported field type '{menu.type}'")

    def get_value(self) -> Any:
        return self._value

    def set_value(self, value: Any) -> None:
        self._value = value

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        # Read-only, never changes
        pass


BASIC_ADAPTERS = (
    TextAdapter,
    TextAreaAdapter,
    NumberAdapter,
    ToggleAdapter,
    SelectAdapter,
    RadioGroupAdapter,
    ColorAdapter,
    GroupAdapter,
)

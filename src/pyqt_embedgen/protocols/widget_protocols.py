"""
Widget ABC contracts for settings editor inputs.

Defines explicit contracts that every field renderer must implement,
eliminating duck typing in favor of fail-loud inheritance-based architecture.

Design Philosophy:
- Explicit inheritance over duck typing
- Multiple inheritance for composable capabilities
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence


class ValueGettable(ABC):
    """
    ABC for widgets that can return a value.

    All input widgets must implement this to participate in settings edits.
    """

    @abstractmethod
    def get_value(self) -> Any:
        """
        Get the current value from the widget.

        Returns:
            The widget's current value.
        """
        pass


class ValueSettable(ABC):
    """
    ABC for widgets that can accept a value.

    Values come straight from the settings record and are never coerced by
    the core, so implementations must tolerate values of the wrong type.
    """

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """
        Set the widget's value.

        Args:
            value: The stored value. Unexpected types must not raise.
        """
        pass


class PlaceholderCapable(ABC):
    """ABC for widgets that can display placeholder text."""

    @abstractmethod
    def set_placeholder(self, text: str) -> None:
        pass


class RangeConfigurable(ABC):
    """
    ABC for widgets that support numeric range configuration.

    Typically implemented by numeric input widgets (spinboxes, sliders).
    """

    @abstractmethod
    def configure_range(self, minimum: float, maximum: float) -> None:
        pass


class ChoiceSelectable(ABC):
    """
    ABC for widgets that select one of a fixed set of choices.

    Typically implemented by dropdowns and radio button groups.
    """

    @abstractmethod
    def set_choices(self, choices: Sequence[Any]) -> None:
        """
        Configure widget with choices.

        Args:
            choices: Raw values, or (value, label) pairs
        """
        pass


class ChangeSignalEmitter(ABC):
    """
    ABC for widgets that emit change signals.

    Provides explicit contract for signal connection, eliminating duck typing
    of signal names (textChanged vs valueChanged vs currentIndexChanged).
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Connect callback to widget's change signal.

        Args:
            callback: Function to call when widget value changes.
                     Signature: callback(new_value: Any) -> None
        """
        pass


class MenuConfigurable(ABC):
    """
    ABC for renderers that configure themselves from a menu declaration.

    Called once, right after construction and before the first set_value().
    """

    @abstractmethod
    def configure_from_menu(self, menu: Any) -> None:
        pass


class SubMenuContainer(ABC):
    """
    ABC for renderers that lay out a menu's sub-menus inside themselves.

    Renderers without it get their sub-menu rows placed right after their own.
    """

    @abstractmethod
    def content_layout(self) -> Any:
        """Return the QFormLayout sub-menu rows are added to."""
        pass

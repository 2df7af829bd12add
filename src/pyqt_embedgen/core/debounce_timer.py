"""Trailing debounce on a single reusable QTimer."""

from typing import Callable
from PyQt6.QtCore import QTimer


class DebounceTimer:
    """
    Fires ``handler`` once ``delay_ms`` have passed without a new trigger.

    Usage:
        self._debounce = DebounceTimer(delay_ms=100, handler=self._write_latest)

        def on_settings_changed(self):
            self._debounce.trigger()  # every call restarts the quiet window
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._handler = handler
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._handler)

    @property
    def delay_ms(self) -> int:
        return self._timer.interval()

    def is_active(self) -> bool:
        """True while a trigger is waiting for its quiet window to elapse."""
        return self._timer.isActive()

    def trigger(self):
        # QTimer.start() on a running timer restarts it
        self._timer.start()

    def cancel(self):
        self._timer.stop()

    def force(self):
        """Skip the rest of the quiet window and fire now."""
        self._timer.stop()
        self._handler()

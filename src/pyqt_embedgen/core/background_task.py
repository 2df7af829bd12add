"""QThread worker for blocking calls made on behalf of the GUI thread."""

from typing import Any, Callable, Dict, Optional, Tuple
from PyQt6.QtCore import QThread, pyqtSignal


class BackgroundTask(QThread):
    """
    Runs one blocking call off the GUI thread.

    The outcome is reported twice: by signal (delivered on the GUI thread
    through a queued connection) and on the task itself, so a caller that
    chose to ``wait()`` can read ``result`` / ``error`` directly.

    Usage:
        task = BackgroundTask(store.save, args=(instance_id, record), parent=self)
        task.error_occurred.connect(self._on_write_failed)  # Exception object
        task.finished.connect(task.deleteLater)
        task.start()

    After ``cancel()`` the call still runs to completion (a started write is
    never interrupted) but no result/error signal is emitted.
    """

    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(Exception)

    def __init__(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: Optional[Dict[str, Any]] = None,
        parent=None
    ):
        super().__init__(parent)
        self._call = (target, tuple(args), dict(kwargs or {}))
        self.cancelled = False
        self.result: Any = None
        self.error: Optional[Exception] = None

    def run(self):
        target, args, kwargs = self._call
        try:
            self.result = target(*args, **kwargs)
        except Exception as e:
            self.error = e
            if not self.cancelled:
                self.error_occurred.emit(e)
            return
        if not self.cancelled:
            self.result_ready.emit(self.result)

    def cancel(self):
        """Suppress the outcome signals; the running call is not interrupted."""
        self.cancelled = True

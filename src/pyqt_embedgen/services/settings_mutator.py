"""
Settings mutation and debounced persistence.

Edits produce a new settings record (the previous one is never mutated) and
schedule a write. Writes are debounced: every edit restarts the quiet
window, and when it elapses a single write carries only the latest record.
At most one write per instance is in flight; a record that arrives during a
write waits and is written as soon as the in-flight write completes.

A failed write never touches the in-memory record. The failed record is kept
for retry() until a newer record supersedes it.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from pyqt_embedgen.core import BackgroundTask, DebounceTimer
from pyqt_embedgen.io.base import SettingsStore
from pyqt_embedgen.protocols.embed_config import get_embed_config

logger = logging.getLogger(__name__)

# Debug flag for verbose writer logging
DEBUG_WRITER = False


def apply_edit(settings: Mapping[str, Any], menu_id: str, value: Any) -> Dict[str, Any]:
    """
    Return a new record equal to ``settings`` except at ``menu_id``.

    Activity of other menus is not touched here; it is recomputed from the
    new record by the dependency evaluator.
    """
    updated = dict(settings)
    updated[menu_id] = value
    return updated


class DebouncedSettingsWriter(QObject):
    """
    Coalesces settings writes for one widget instance.

    Usage:
        writer = DebouncedSettingsWriter("inst-1", store)
        writer.write_failed.connect(on_failed)
        writer.schedule(record)   # restarts the quiet window
        ...
        writer.flush()            # on close: write the pending record now
    """

    write_succeeded = pyqtSignal(str, dict)       # instance_id, record written
    write_failed = pyqtSignal(str, Exception)     # instance_id, error

    def __init__(
        self,
        instance_id: str,
        store: SettingsStore,
        delay_ms: Optional[int] = None,
        background: Optional[bool] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        config = get_embed_config()
        self.instance_id = instance_id
        self._store = store
        self._background = config.background_writes if background is None else background
        self._debounce = DebounceTimer(
            delay_ms=config.debounce_ms if delay_ms is None else delay_ms,
            handler=self._on_quiet_window_elapsed,
        )
        self._pending: Optional[Dict[str, Any]] = None
        self._in_flight: Optional[Dict[str, Any]] = None
        self._failed: Optional[Dict[str, Any]] = None
        self._task: Optional[BackgroundTask] = None
        self.write_count = 0

    # ========== STATE ==========

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def is_writing(self) -> bool:
        return self._in_flight is not None

    @property
    def last_failed_record(self) -> Optional[Dict[str, Any]]:
        return self._failed

    # ========== PUBLIC API ==========

    def schedule(self, record: Mapping[str, Any]) -> None:
        """Queue ``record`` as the latest state and restart the quiet window."""
        self._pending = dict(record)
        self._failed = None
        self._debounce.trigger()
        if DEBUG_WRITER:
            logger.info(f"[{self.instance_id}] scheduled write ({len(record)} keys)")

    def flush(self) -> bool:
        """
        Write the pending record now, synchronously.

        Waits for an in-flight background write first. Returns True when
        nothing is left unwritten and the last write succeeded.
        """
        self._debounce.cancel()
        if self._task is not None:
            task = self._task
            task.wait()
            self._complete_task(task, drain=False)
        if self._pending is not None:
            record = self._pending
            self._pending = None
            self._write_sync(record)
        return self._pending is None and self._failed is None

    def discard(self) -> bool:
        """Drop the pending record. An in-flight write is not interrupted."""
        self._debounce.cancel()
        dropped = self._pending is not None
        self._pending = None
        if dropped:
            logger.info(f"[{self.instance_id}] discarded pending settings write")
        return dropped

    def retry(self) -> bool:
        """Re-issue the last failed record. False if there is nothing to retry."""
        if self._failed is None or self._pending is not None:
            return False
        self._pending = self._failed
        self._failed = None
        if not self.is_writing:
            self._start_write()
        return True

    def wait(self) -> None:
        """Block until an in-flight background write has finished and is processed."""
        if self._task is not None:
            task = self._task
            task.wait()
            self._complete_task(task, drain=True)

    # ========== WRITE PIPELINE ==========

    def _on_quiet_window_elapsed(self) -> None:
        if self.is_writing:
            # Written once the in-flight write completes
            if DEBUG_WRITER:
                logger.info(f"[{self.instance_id}] write in flight, queueing latest record")
            return
        self._start_write()

    def _start_write(self) -> None:
        if self._pending is None:
            return
        record = self._pending
        self._pending = None

        if not self._background:
            self._write_sync(record)
            self._drain()
            return

        self._in_flight = record
        task = BackgroundTask(target=self._store.save, args=(self.instance_id, record), parent=self)
        task.finished.connect(self._on_task_finished)
        task.finished.connect(task.deleteLater)
        self._task = task
        task.start()
        logger.debug(f"[{self.instance_id}] started background write")

    def _write_sync(self, record: Dict[str, Any]) -> None:
        self._in_flight = record
        try:
            self._store.save(self.instance_id, record)
        except Exception as e:
            self._in_flight = None
            self._record_failure(record, e)
        else:
            self._in_flight = None
            self._record_success(record)

    @pyqtSlot()
    def _on_task_finished(self) -> None:
        task = self.sender()
        if task is not None:
            self._complete_task(task, drain=True)

    def _complete_task(self, task: BackgroundTask, drain: bool) -> None:
        # flush() may already have completed this task synchronously
        if task is not self._task:
            return
        record = self._in_flight
        self._task = None
        self._in_flight = None

        if task.error is not None:
            self._record_failure(record, task.error)
        else:
            self._record_success(record)

        if drain:
            self._drain()

    def _drain(self) -> None:
        # A record that arrived mid-write goes out now, unless the user is still typing
        if self._pending is not None and not self._debounce.is_active():
            self._start_write()

    def _record_success(self, record: Dict[str, Any]) -> None:
        self.write_count += 1
        logger.debug(f"[{self.instance_id}] settings written ({len(record)} keys)")
        self.write_succeeded.emit(self.instance_id, record)

    def _record_failure(self, record: Dict[str, Any], error: Exception) -> None:
        if self._pending is None:
            self._failed = record
        logger.error(f"[{self.instance_id}] settings write failed: {error}", exc_info=error)
        self.write_failed.emit(self.instance_id, error)


class SettingsMutator:
    """
    Applies single edits and hands the new record to a debounced writer.

    Example:
        mutator = SettingsMutator(writer)
        settings = mutator.apply(settings, "showSubtitle", True)
    """

    def __init__(self, writer: Optional[DebouncedSettingsWriter] = None):
        self.writer = writer

    def apply(self, settings: Mapping[str, Any], menu_id: str, value: Any) -> Dict[str, Any]:
        updated = apply_edit(settings, menu_id, value)
        if self.writer is not None:
            self.writer.schedule(updated)
        return updated

"""In-memory settings store."""

import copy
import logging
import threading
from typing import Any, Dict

logger = logging.getLogger(__name__)


class InMemorySettingsStore:
    """
    Dict-backed SettingsStore.

    Stores deep copies so callers can't mutate persisted records by accident.
    Safe to call from a BackgroundTask thread.
    """

    def __init__(self, initial: Dict[str, Dict[str, Any]] = None):
        self._records: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})
        self._lock = threading.Lock()
        self.save_count = 0

    def load(self, instance_id: str) -> Dict[str, Any]:
        with self._lock:
            record = self._records.get(instance_id, {})
            return copy.deepcopy(record)

    def save(self, instance_id: str, record: Dict[str, Any]) -> None:
        with self._lock:
            self._records[instance_id] = copy.deepcopy(dict(record))
            self.save_count += 1
        logger.debug(f"Saved {len(record)} settings for instance '{instance_id}'")

    def delete(self, instance_id: str) -> None:
        with self._lock:
            self._records.pop(instance_id, None)

    def __contains__(self, instance_id: str) -> bool:
        with self._lock:
            return instance_id in self._records

"""
JSON file settings store.

One ``<instance_id>.json`` file per widget instance inside a root directory.
Writes go to a temporary sibling first and are moved into place, so a
concurrent reader never observes a half-written record.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Union

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"[A-Za-z0-9_.-]+")


class JsonFileSettingsStore:
    """SettingsStore persisting each record as a JSON object on disk."""

    def __init__(self, root: Union[str, Path]):
        if root is None:
            raise ValueError("Root directory must be provided to JsonFileSettingsStore.")
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug(f"JsonFileSettingsStore initialized at {self.root}")

    def _path_for(self, instance_id: str) -> Path:
        if not _SAFE_ID.fullmatch(instance_id) or instance_id in (".", ".."):
            raise PersistenceError(instance_id, "Instance id is not a valid file name")
        return self.root / f"{instance_id}.json"

    def load(self, instance_id: str) -> Dict[str, Any]:
        path = self._path_for(instance_id)
        if not path.exists():
            return {}
        try:
            with path.open("r", encoding="utf-8") as fh:
                record = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load settings from {path}: {e}", exc_info=True)
            raise PersistenceError(instance_id, f"Failed to load {path}") from e

        if not isinstance(record, dict):
            raise PersistenceError(
                instance_id, f"Expected a JSON object in {path}, got {type(record).__name__}"
            )
        return record

    def save(self, instance_id: str, record: Dict[str, Any]) -> None:
        path = self._path_for(instance_id)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(record, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save settings to {path}: {e}", exc_info=True)
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(instance_id, f"Failed to save {path}") from e
        logger.debug(f"Saved {len(record)} settings to {path}")

    def delete(self, instance_id: str) -> None:
        path = self._path_for(instance_id)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceError(instance_id, f"Failed to delete {path}") from e

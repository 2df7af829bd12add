"""
Core PyQt6 utilities.

Pure PyQt6 utility components with zero external dependencies.
Foundational helpers with no schema-specific logic.
"""

from .debounce_timer import DebounceTimer
from .background_task import BackgroundTask

__all__ = [
    "DebounceTimer",
    "BackgroundTask",
]

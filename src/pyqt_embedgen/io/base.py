"""Protocols for settings persistence and widget-specific external data."""

from typing import Protocol, Any, Dict, runtime_checkable


@runtime_checkable
class SettingsStore(Protocol):
    """Protocol for settings persistence backends.

    Records are flat ``menu id -> value`` mappings. ``save`` raises
    PersistenceError on failure; ``load`` returns an empty record for an
    unknown instance.
    """

    def load(self, instance_id: str) -> Dict[str, Any]:
        ...

    def save(self, instance_id: str, record: Dict[str, Any]) -> None:
        ...


@runtime_checkable
class DataProvider(Protocol):
    """Protocol for widget-type-specific external data (feeds, counters, ...).

    The result is handed unmodified to the preview renderer.
    """

    def fetch_data(self, instance_id: str) -> Any:
        ...

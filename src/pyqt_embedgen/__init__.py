"""
pyqt-embedgen: template-driven settings schema engine for embeddable widgets.

Operators compose embeddable widgets from declarative templates. A template
schema describes the user-editable options, an editor renders inputs from that
schema into a flat settings record, a preview renders the widget live from the
same record, and an embed loader renders it again from persisted settings.

Architecture:
- Tier 1 (Core): Pure PyQt6 utilities (debounce timer, background task)
- Tier 2 (Protocols): Widget ABCs, input adapters, configuration, IO protocols
- Tier 3 (Schema): Templates, default resolution, dependency evaluation
- Tier 4 (Forms): Field type dispatch and the settings editor
- Tier 5 (Services): Settings mutation, debounced persistence, preview/embed

Key Features:
- Flat settings records validated against a global menu keyspace
- Transitive, fail-closed conditional visibility
- Extensible type-tag dispatch with a documented fallback renderer
- Debounced persistence with at most one write in flight
- Identical output for editor preview and production embed
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]

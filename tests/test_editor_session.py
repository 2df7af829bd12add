"""Tests for editor sessions: creation, editing and close policies."""

import pytest

from pyqt_embedgen.io import InMemorySettingsStore, PersistenceError
from pyqt_embedgen.protocols import CLOSE_DISCARD, EmbedGenConfig, set_embed_config
from pyqt_embedgen.schema import WidgetInstance
from pyqt_embedgen.services import EditorSession


@pytest.fixture
def slow_writes():
    """Long quiet window so nothing is written before close()."""
    set_embed_config(EmbedGenConfig(debounce_ms=10000))


def test_create_initializes_defaults(qapp, registry, store, slow_writes):
    session = EditorSession.create(registry, store, "banner", "basic", instance_id="inst-1")
    assert session.instance.instance_id == "inst-1"
    assert session.instance.title == "Basic"
    assert session.settings == {"title": "Hello", "showSubtitle": False, "subtitle": ""}
    assert session.writer.has_pending


def test_create_generates_instance_ids(qapp, registry, store, slow_writes):
    first = EditorSession.create(registry, store, "banner", "basic")
    second = EditorSession.create(registry, store, "banner", "basic")
    assert first.instance.instance_id != second.instance.instance_id


def test_create_with_unknown_template_returns_none(qapp, registry, store):
    assert EditorSession.create(registry, store, "banner", "nope") is None
    assert EditorSession.create(registry, store, "nope", "basic") is None


def test_edit_updates_activity(qapp, registry, store, slow_writes):
    session = EditorSession.create(registry, store, "banner", "basic")
    before = session.settings
    assert not session.is_active("subtitle")

    session.edit("showSubtitle", True)
    assert session.is_active("subtitle")
    assert session.active_menu_ids() == frozenset({"title", "showSubtitle", "subtitle"})
    assert before["showSubtitle"] is False


def test_edit_of_undeclared_menu_is_kept(qapp, registry, store, slow_writes, caplog):
    session = EditorSession.create(registry, store, "banner", "basic")
    with caplog.at_level("WARNING"):
        session.edit("legacy", 1)
    assert session.settings["legacy"] == 1
    assert "legacy" in caplog.text


def test_close_flushes_pending_write_by_default(qapp, registry, store, slow_writes):
    session = EditorSession.create(registry, store, "banner", "basic", instance_id="inst")
    session.edit("title", "Sale")
    assert store.save_count == 0

    assert session.close() is True
    assert session.closed
    assert store.load("inst") == {"title": "Sale", "showSubtitle": False, "subtitle": ""}
    assert store.save_count == 1


def test_close_discard_drops_pending_write(qapp, registry, store, slow_writes):
    session = EditorSession.create(registry, store, "banner", "basic", instance_id="inst")
    session.edit("title", "Sale")
    assert session.close(CLOSE_DISCARD) is True
    assert store.save_count == 0
    assert "inst" not in store


def test_close_policy_comes_from_config(qapp, registry, store):
    set_embed_config(EmbedGenConfig(debounce_ms=10000, close_policy=CLOSE_DISCARD))
    session = EditorSession.create(registry, store, "banner", "basic")
    session.close()
    assert store.save_count == 0


def test_closed_session_rejects_edits(qapp, registry, store, slow_writes):
    session = EditorSession.create(registry, store, "banner", "basic")
    session.close()
    with pytest.raises(RuntimeError):
        session.edit("title", "late")
    assert session.close() is True


def test_open_resolves_stored_record(qapp, registry, slow_writes):
    store = InMemorySettingsStore({"inst": {"showSubtitle": True, "subtitle": "Today only"}})
    instance = WidgetInstance(instance_id="inst", widget_type_id="banner", template_id="basic")
    session = EditorSession.open(registry, store, instance)
    assert session.settings == {"title": "Hello", "showSubtitle": True, "subtitle": "Today only"}
    assert session.is_active("subtitle")
    assert not session.writer.has_pending


def test_open_unknown_template_returns_none(qapp, registry, store):
    instance = WidgetInstance(instance_id="inst", widget_type_id="banner", template_id="gone")
    assert EditorSession.open(registry, store, instance) is None


class FailingStore(InMemorySettingsStore):
    def __init__(self):
        super().__init__()
        self.failing = True

    def save(self, instance_id, record):
        if self.failing:
            raise PersistenceError(instance_id, "offline")
        super().save(instance_id, record)


def test_failed_write_keeps_in_memory_record(qapp, registry, slow_writes):
    store = FailingStore()
    session = EditorSession.create(registry, store, "banner", "basic", instance_id="inst")
    session.edit("title", "Kept")
    assert session.close() is False
    assert session.settings["title"] == "Kept"
    assert session.writer.last_failed_record["title"] == "Kept"

    store.failing = False
    assert session.retry_failed_write() is True
    session.writer.wait()
    assert store.load("inst")["title"] == "Kept"

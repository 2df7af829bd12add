"""Tests for settings mutation and the debounced writer."""

import threading

import pytest
from PyQt6.QtTest import QTest

from pyqt_embedgen.io import InMemorySettingsStore, PersistenceError
from pyqt_embedgen.services import DebouncedSettingsWriter, SettingsMutator, apply_edit


class BlockingStore(InMemorySettingsStore):
    """Store whose saves block until released, tracking concurrent writes."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()
        self.active = 0
        self.max_active = 0
        self._count_lock = threading.Lock()

    def save(self, instance_id, record):
        with self._count_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.release.wait(5)
            super().save(instance_id, record)
        finally:
            with self._count_lock:
                self.active -= 1


class FlakyStore(InMemorySettingsStore):
    def __init__(self):
        super().__init__()
        self.failing = True

    def save(self, instance_id, record):
        if self.failing:
            raise PersistenceError(instance_id, "backend unavailable")
        super().save(instance_id, record)


def test_apply_edit_returns_new_record():
    settings = {"showSubtitle": False, "subtitle": ""}
    updated = apply_edit(settings, "showSubtitle", True)
    assert updated == {"showSubtitle": True, "subtitle": ""}
    assert settings == {"showSubtitle": False, "subtitle": ""}
    assert updated is not settings


def test_mutator_without_writer_only_applies():
    assert SettingsMutator().apply({}, "a", 1) == {"a": 1}


def test_burst_of_edits_writes_once_with_latest_record(qapp, wait_until):
    store = InMemorySettingsStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=20, background=False)
    mutator = SettingsMutator(writer)

    settings = {}
    for i in range(10):
        settings = mutator.apply(settings, "count", i)

    wait_until(lambda: writer.write_count == 1)
    QTest.qWait(50)
    assert store.save_count == 1
    assert store.load("inst") == {"count": 9}


def test_background_write_in_flight_queues_latest(qapp, wait_until):
    """Test a record arriving mid-write is written after the in-flight write, never concurrently."""
    store = BlockingStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=5, background=True)

    writer.schedule({"v": 1})
    wait_until(lambda: writer.is_writing)

    writer.schedule({"v": 2})
    writer.schedule({"v": 3})
    QTest.qWait(30)
    assert writer.is_writing
    assert writer.has_pending

    store.release.set()
    wait_until(lambda: store.save_count == 2)
    wait_until(lambda: not writer.is_writing)
    assert store.max_active == 1
    assert store.load("inst") == {"v": 3}
    assert writer.write_count == 2


def test_failed_write_keeps_record_for_retry(qapp, wait_until):
    store = FlakyStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=5, background=False)
    failures = []
    writer.write_failed.connect(lambda instance_id, error: failures.append((instance_id, error)))

    writer.schedule({"message": "hi"})
    wait_until(lambda: failures)
    assert failures[0][0] == "inst"
    assert isinstance(failures[0][1], PersistenceError)
    assert writer.last_failed_record == {"message": "hi"}

    store.failing = False
    assert writer.retry() is True
    assert store.load("inst") == {"message": "hi"}
    assert writer.last_failed_record is None
    assert writer.retry() is False


def test_background_failure_is_reported(qapp, wait_until):
    store = FlakyStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=5, background=True)
    writer.schedule({"a": 1})
    wait_until(lambda: writer.last_failed_record is not None)
    assert writer.last_failed_record == {"a": 1}
    assert not writer.is_writing


def test_newer_record_supersedes_failed_one(qapp, wait_until):
    store = FlakyStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=5, background=False)
    writer.schedule({"a": 1})
    wait_until(lambda: writer.last_failed_record is not None)

    writer.schedule({"a": 2})
    assert writer.last_failed_record is None
    store.failing = False
    wait_until(lambda: writer.write_count == 1)
    assert store.load("inst") == {"a": 2}


def test_flush_writes_pending_record_immediately(qapp):
    store = InMemorySettingsStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=10000, background=True)
    writer.schedule({"a": 1})
    assert writer.flush() is True
    assert store.load("inst") == {"a": 1}
    assert not writer.has_pending


def test_flush_waits_for_in_flight_write(qapp, wait_until):
    store = BlockingStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=5, background=True)
    writer.schedule({"v": 1})
    wait_until(lambda: writer.is_writing)
    writer.schedule({"v": 2})

    threading.Timer(0.05, store.release.set).start()
    assert writer.flush() is True
    assert store.save_count == 2
    assert store.load("inst") == {"v": 2}
    assert store.max_active == 1

    # The queued completion of the first write must not write again
    QTest.qWait(30)
    assert store.save_count == 2


def test_flush_reports_failure(qapp):
    store = FlakyStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=10000, background=True)
    writer.schedule({"a": 1})
    assert writer.flush() is False
    assert writer.last_failed_record == {"a": 1}


def test_discard_drops_pending_write(qapp):
    store = InMemorySettingsStore()
    writer = DebouncedSettingsWriter("inst", store, delay_ms=10, background=False)
    writer.schedule({"a": 1})
    assert writer.discard() is True
    QTest.qWait(40)
    assert store.save_count == 0
    assert writer.discard() is False


@pytest.mark.parametrize("background", [False, True])
def test_delay_defaults_come_from_config(qapp, wait_until, background):
    from pyqt_embedgen.protocols import EmbedGenConfig, set_embed_config

    set_embed_config(EmbedGenConfig(debounce_ms=5, background_writes=background))
    store = InMemorySettingsStore()
    writer = DebouncedSettingsWriter("inst", store)
    writer.schedule({"a": 1})
    wait_until(lambda: store.save_count == 1)
    writer.wait()
    assert store.load("inst") == {"a": 1}

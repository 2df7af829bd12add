"""pytest configuration and fixtures for pyqt-embedgen tests."""

import os
import time

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_embed_config():
    """Each test starts from the default EmbedGenConfig."""
    from pyqt_embedgen.protocols import set_embed_config
    set_embed_config(None)
    yield
    set_embed_config(None)


@pytest.fixture
def wait_until(qapp):
    """Spin the Qt event loop until predicate() is true or the timeout expires."""
    def _wait(predicate, timeout_ms=3000):
        deadline = time.monotonic() + timeout_ms / 1000
        while not predicate():
            if time.monotonic() > deadline:
                raise AssertionError(f"Condition not met within {timeout_ms}ms")
            QTest.qWait(10)
    return _wait


@pytest.fixture
def subtitle_widget_type():
    """Widget type with the showSubtitle/subtitle dependency."""
    from pyqt_embedgen.schema import WidgetType
    return WidgetType.from_dict({
        "id": "banner",
        "name": "Banner",
        "templates": [{
            "id": "basic",
            "name": "Basic",
            "options": [{
                "id": "content",
                "name": "Content",
                "menus": [
                    {"id": "title", "label": "Title", "type": "text", "defaultValue": "Hello"},
                    {"id": "showSubtitle", "label": "Show subtitle", "type": "toggle",
                     "defaultValue": False},
                    {"id": "subtitle", "label": "Subtitle", "type": "text", "defaultValue": "",
                     "dependsOn": {"menuId": "showSubtitle", "value": True}},
                ],
            }],
        }],
    })


@pytest.fixture
def registry(subtitle_widget_type):
    from pyqt_embedgen.schema import TemplateRegistry
    registry = TemplateRegistry()
    registry.register(subtitle_widget_type)
    return registry


@pytest.fixture
def store():
    from pyqt_embedgen.io import InMemorySettingsStore
    return InMemorySettingsStore()

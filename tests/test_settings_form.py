"""Tests for the generated settings editor and the live preview pane."""

import pytest

from pyqt_embedgen.protocols import (
    EmbedGenConfig, GroupAdapter, TextAdapter, ToggleAdapter, UnsupportedFieldAdapter,
    ViewMode, set_embed_config,
)
from pyqt_embedgen.schema import TemplateRegistry, WidgetType
from pyqt_embedgen.services import EditorSession, PreviewProjector


@pytest.fixture
def session(qapp, registry, store):
    set_embed_config(EmbedGenConfig(debounce_ms=10000))
    session = EditorSession.create(registry, store, "banner", "basic", instance_id="inst")
    yield session
    session.close("discard")


@pytest.fixture
def notice_session(qapp, store):
    from pyqt_embedgen.widgets import register_notice_bar

    set_embed_config(EmbedGenConfig(debounce_ms=10000))
    registry, projector = TemplateRegistry(), PreviewProjector()
    register_notice_bar(registry, projector)
    session = EditorSession.create(registry, store, "notice_bar", "classic",
                                   instance_id="bar", projector=projector)
    yield session
    session.close("discard")


def test_form_builds_one_row_per_menu(session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    form = SettingsFormWidget(session, field_types=FieldTypeRegistry())
    assert set(form.widgets) == {"title", "showSubtitle", "subtitle"}
    assert isinstance(form.widget_for("title"), TextAdapter)
    assert isinstance(form.widget_for("showSubtitle"), ToggleAdapter)
    assert form.widget_for("title").get_value() == "Hello"
    assert set(form.sections) == {"content"}
    label, widget = form.row("subtitle")
    assert label.text() == "Subtitle"
    assert widget is form.widget_for("subtitle")


def test_toggling_dependency_shows_dependent_row(session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    form = SettingsFormWidget(session, field_types=FieldTypeRegistry())
    changes = []
    form.parameter_changed.connect(lambda menu_id, value: changes.append((menu_id, value)))
    assert not form.is_row_visible("subtitle")

    form.widget_for("showSubtitle").setChecked(True)
    assert session.settings["showSubtitle"] is True
    assert form.is_row_visible("subtitle")
    assert changes == [("showSubtitle", True)]

    form.widget_for("showSubtitle").setChecked(False)
    assert not form.is_row_visible("subtitle")
    assert not form.row("subtitle")[0].isVisibleTo(form)


def test_settings_changed_carries_full_record(session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    form = SettingsFormWidget(session, field_types=FieldTypeRegistry())
    records = []
    form.settings_changed.connect(records.append)
    form.widget_for("title").setText("New title")
    assert records[-1] == {"title": "New title", "showSubtitle": False, "subtitle": ""}
    assert session.writer.has_pending


def test_reload_does_not_emit_edits(session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    form = SettingsFormWidget(session, field_types=FieldTypeRegistry())
    records = []
    form.settings_changed.connect(records.append)
    session.instance.settings = dict(session.settings, title="From elsewhere", showSubtitle=True)
    form.reload()
    assert records == []
    assert form.widget_for("title").get_value() == "From elsewhere"
    assert form.is_row_visible("subtitle")


def test_unknown_field_type_gets_fallback_row(qapp, store):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    set_embed_config(EmbedGenConfig(debounce_ms=10000))
    registry = TemplateRegistry()
    registry.register(WidgetType.from_dict({
        "id": "odd", "name": "Odd",
        "templates": [{"id": "t", "name": "T", "options": [{"id": "o", "name": "O", "menus": [
            {"id": "hologram", "label": "Hologram", "type": "hologram", "defaultValue": {"depth": 3}},
            {"id": "caption", "label": "Caption", "type": "text", "defaultValue": "ok"},
        ]}]}],
    }))
    session = EditorSession.create(registry, store, "odd", "t")
    form = SettingsFormWidget(session, field_types=FieldTypeRegistry())

    fallback = form.widget_for("hologram")
    assert isinstance(fallback, UnsupportedFieldAdapter)
    assert fallback.get_value() == {"depth": 3}
    assert isinstance(form.widget_for("caption"), TextAdapter)
    session.close("discard")


def test_group_hosts_its_sub_menus(notice_session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    form = SettingsFormWidget(notice_session, field_types=FieldTypeRegistry())
    group = form.widget_for("showButton")
    assert isinstance(group, GroupAdapter)
    assert group.isAncestorOf(form.widget_for("buttonText"))
    assert group.isAncestorOf(form.widget_for("buttonUrl"))
    assert form.row("showButton")[0] is None

    group.setChecked(False)
    assert notice_session.settings["showButton"] is False
    assert not notice_session.is_active("buttonText")
    assert not form.is_row_visible("buttonText")
    assert not form.is_row_visible("buttonUrl")

    group.setChecked(True)
    assert notice_session.is_active("buttonText")
    assert form.is_row_visible("buttonText")
    assert form.widget_for("buttonText").isEnabled()


def test_preview_pane_follows_edits(notice_session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget
    from pyqt_embedgen.widgets import PreviewPane

    form = SettingsFormWidget(notice_session, field_types=FieldTypeRegistry())
    pane = PreviewPane(notice_session)
    form.settings_changed.connect(pane.refresh)
    assert pane.current_node == notice_session.preview()

    form.widget_for("message").setText("Closing early today")
    assert pane.current_node.find("strong")[0].text() == "Closing early today"
    assert "Closing early today" in pane.toPlainText()

    pane.set_view_mode(ViewMode.MOBILE)
    assert pane.current_node == notice_session.preview(view_mode=ViewMode.MOBILE)
    assert "view-mobile" in pane.current_node.attr("class")


def test_row_that_fails_to_wire_gets_fallback(qapp, store):
    """Test a renderer raising after construction only loses its own row."""
    from PyQt6.QtWidgets import QLineEdit
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget
    from pyqt_embedgen.protocols import (
        ChangeSignalEmitter, MenuConfigurable, PyQtWidgetMeta, ValueGettable, ValueSettable,
    )

    class SignallessAdapter(QLineEdit, ValueGettable, ValueSettable, ChangeSignalEmitter,
                            MenuConfigurable, metaclass=PyQtWidgetMeta):
        def configure_from_menu(self, menu):
            pass

        def get_value(self):
            return self.text()

        def set_value(self, value):
            self.setText(str(value))

        def connect_change_signal(self, callback):
            raise RuntimeError("no signal")

    set_embed_config(EmbedGenConfig(debounce_ms=10000))
    registry = TemplateRegistry()
    registry.register(WidgetType.from_dict({
        "id": "odd", "name": "Odd",
        "templates": [{"id": "t", "name": "T", "options": [{"id": "o", "name": "O", "menus": [
            {"id": "code", "label": "Code", "type": "signalless", "defaultValue": "x"},
            {"id": "caption", "label": "Caption", "type": "text", "defaultValue": "ok"},
        ]}]}],
    }))
    field_types = FieldTypeRegistry()
    field_types.register("signalless", SignallessAdapter)
    session = EditorSession.create(registry, store, "odd", "t")

    form = SettingsFormWidget(session, field_types=field_types)
    fallback = form.widget_for("code")
    assert isinstance(fallback, UnsupportedFieldAdapter)
    assert fallback.get_value() == "x"
    form.widget_for("caption").setText("still editable")
    assert session.settings["caption"] == "still editable"
    session.close("discard")


def test_edits_after_close_are_ignored(session):
    from pyqt_embedgen.forms import FieldTypeRegistry, SettingsFormWidget

    form = SettingsFormWidget(session, field_types=FieldTypeRegistry())
    records = []
    form.settings_changed.connect(records.append)
    session.close("discard")

    form.widget_for("title").setText("too late")
    assert records == []
    assert session.settings["title"] == "Hello"

"""Read-only live preview of an editor session."""

import logging
from typing import Any, Optional

from PyQt6.QtWidgets import QTextBrowser, QWidget

from pyqt_embedgen.protocols import RenderNode, ViewMode, get_embed_config
from pyqt_embedgen.services.editor_session import EditorSession

logger = logging.getLogger(__name__)


class PreviewPane(QTextBrowser):
    """
    Shows the session's rendered preview as HTML.

    Connect SettingsFormWidget.settings_changed to refresh() to follow edits:

        form.settings_changed.connect(pane.refresh)
    """

    def __init__(self, session: EditorSession, data: Any = None,
                 view_mode: Optional[ViewMode] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.session = session
        self.data = data
        self._view_mode = view_mode or get_embed_config().default_view_mode
        self.current_node: Optional[RenderNode] = None
        self.setReadOnly(True)
        self.setOpenExternalLinks(False)
        self.refresh()

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    def set_view_mode(self, view_mode: ViewMode) -> None:
        if view_mode is not self._view_mode:
            self._view_mode = view_mode
            self.refresh()

    def set_data(self, data: Any) -> None:
        self.data = data
        self.refresh()

    def refresh(self, *_args) -> None:
        rendered = self.session.preview(data=self.data, view_mode=self._view_mode)
        if rendered == self.current_node:
            return
        self.current_node = rendered
        self.setHtml(rendered.to_html())

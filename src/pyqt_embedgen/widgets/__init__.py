"""
Widgets: the live preview pane and the built-in notice bar widget type.
"""

from .preview_pane import PreviewPane
from .notice_bar import (
    NoticeBarPreview,
    notice_bar_widget_type,
    register_notice_bar,
    WIDGET_TYPE_ID as NOTICE_BAR,
)

__all__ = [
    "PreviewPane",
    "NoticeBarPreview",
    "notice_bar_widget_type",
    "register_notice_bar",
    "NOTICE_BAR",
]

"""
Protocol definitions, input adapters and configuration.

ABC-based widget contracts that eliminate duck typing in favor of
explicit, fail-loud inheritance-based architecture, plus the preview
rendering contract shared by the editor preview and the embed loader.
"""

from .widget_protocols import (
    ValueGettable,
    ValueSettable,
    PlaceholderCapable,
    RangeConfigurable,
    ChoiceSelectable,
    ChangeSignalEmitter,
    MenuConfigurable,
    SubMenuContainer,
)
from .widget_adapters import (
    TextAdapter,
    TextAreaAdapter,
    NumberAdapter,
    ToggleAdapter,
    SelectAdapter,
    RadioGroupAdapter,
    ColorAdapter,
    GroupAdapter,
    UnsupportedFieldAdapter,
    PyQtWidgetMeta,
    BASIC_ADAPTERS,
)
from .preview_renderer import (
    ViewMode,
    RenderNode,
    node,
    EMPTY,
    PreviewRenderer,
    PlaceholderPreviewRenderer,
    error_node,
)
from .embed_config import (
    EmbedGenConfig,
    set_embed_config,
    get_embed_config,
    DANGLING_INACTIVE,
    DANGLING_REJECT,
    CLOSE_FLUSH,
    CLOSE_DISCARD,
)

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "PlaceholderCapable",
    "RangeConfigurable",
    "ChoiceSelectable",
    "ChangeSignalEmitter",
    "MenuConfigurable",
    "SubMenuContainer",
    "TextAdapter",
    "TextAreaAdapter",
    "NumberAdapter",
    "ToggleAdapter",
    "SelectAdapter",
    "RadioGroupAdapter",
    "ColorAdapter",
    "GroupAdapter",
    "UnsupportedFieldAdapter",
    "PyQtWidgetMeta",
    "BASIC_ADAPTERS",
    "ViewMode",
    "RenderNode",
    "node",
    "EMPTY",
    "PreviewRenderer",
    "PlaceholderPreviewRenderer",
    "error_node",
    "EmbedGenConfig",
    "set_embed_config",
    "get_embed_config",
    "DANGLING_INACTIVE",
    "DANGLING_REJECT",
    "CLOSE_FLUSH",
    "CLOSE_DISCARD",
]

"""
Embed loader: renders persisted widget instances for third-party pages.

Reuses default resolution and preview projection through render(), without
any editor-side component, so an embed and the editor preview of the same
settings are identical.
"""

import logging
from typing import Any, Optional

from pyqt_embedgen.io.base import DataProvider, SettingsStore
from pyqt_embedgen.protocols import EMPTY, RenderNode, ViewMode
from pyqt_embedgen.schema.registry import TemplateRegistry
from pyqt_embedgen.schema.types import WidgetInstance
from .preview_projector import PreviewProjector
from .render_service import render

logger = logging.getLogger(__name__)


class EmbedLoader:
    """
    Loads settings and external data for an instance and renders it.

    Example:
        loader = EmbedLoader(registry, projector, store, data_provider=feed_client)
        html = loader.render_html(instance)
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        projector: PreviewProjector,
        store: SettingsStore,
        data_provider: Optional[DataProvider] = None,
    ):
        self.registry = registry
        self.projector = projector
        self.store = store
        self.data_provider = data_provider

    def fetch_data(self, instance_id: str) -> Any:
        """
        External data for the instance, or None without a provider.

        A failing fetch is not fatal: the exception itself is handed to the
        preview renderer as its data so it can render a degraded state.
        """
        if self.data_provider is None:
            return None
        try:
            return self.data_provider.fetch_data(instance_id)
        except Exception as e:
            logger.warning(f"Data fetch failed for instance '{instance_id}': {e}")
            return e

    def render_instance(self, instance: WidgetInstance,
                        view_mode: Optional[ViewMode] = None) -> RenderNode:
        """
        Render a persisted instance.

        Inactive instances render an empty node.

        Raises:
            PersistenceError: the store failed to load the record
        """
        if not instance.is_active:
            logger.debug(f"Instance '{instance.instance_id}' is inactive, rendering nothing")
            return EMPTY

        settings = self.store.load(instance.instance_id)
        data = self.fetch_data(instance.instance_id)
        return render(
            instance.widget_type_id,
            instance.template_id,
            settings,
            data=data,
            view_mode=view_mode,
            registry=self.registry,
            projector=self.projector,
        )

    def render_html(self, instance: WidgetInstance,
                    view_mode: Optional[ViewMode] = None) -> str:
        return self.render_instance(instance, view_mode).to_html()

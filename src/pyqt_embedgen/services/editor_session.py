"""
Editor session: owns one widget instance's in-memory settings while it is
being edited.

The session is the single source of truth during editing. Every edit
produces a new record and schedules a debounced write; activity and preview
are recomputed from the current record on demand. A failed write never rolls
the record back.

Closing a session resolves the pending write deterministically according to
``EmbedGenConfig.close_policy``: "flush" writes it before returning,
"discard" drops it.
"""

import logging
import uuid
from typing import Any, FrozenSet, Optional

from pyqt_embedgen.io.base import SettingsStore
from pyqt_embedgen.protocols import CLOSE_FLUSH, RenderNode, ViewMode, get_embed_config
from pyqt_embedgen.schema.registry import TemplateRegistry, TemplateSchema
from pyqt_embedgen.schema.resolver import resolve
from pyqt_embedgen.schema.types import WidgetInstance
from .preview_projector import PreviewProjector
from .render_service import render
from .settings_mutator import DebouncedSettingsWriter, SettingsMutator

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Editing state for one widget instance.

    Example:
        session = EditorSession.create(registry, store, "notice_bar", "classic")
        session.edit("showSubtitle", True)
        session.is_active("subtitle")   # True
        node = session.preview()
        session.close()                 # flushes the pending write
    """

    def __init__(
        self,
        instance: WidgetInstance,
        schema: TemplateSchema,
        store: SettingsStore,
        registry: TemplateRegistry,
        projector: Optional[PreviewProjector] = None,
        writer: Optional[DebouncedSettingsWriter] = None,
    ):
        self.instance = instance
        self.schema = schema
        self.registry = registry
        self.projector = projector
        self.writer = writer or DebouncedSettingsWriter(instance.instance_id, store)
        self._mutator = SettingsMutator(self.writer)
        self._evaluator = schema.evaluator()
        self._closed = False

    # ========== LIFECYCLE ==========

    @classmethod
    def create(
        cls,
        registry: TemplateRegistry,
        store: SettingsStore,
        widget_type_id: str,
        template_id: str,
        title: str = "",
        instance_id: Optional[str] = None,
        projector: Optional[PreviewProjector] = None,
    ) -> Optional["EditorSession"]:
        """
        Start editing a new instance of a template.

        Settings are initialized from the template defaults and an initial
        write is scheduled. Returns None for an unknown (widget type, template).
        """
        schema = registry.get_schema(widget_type_id, template_id)
        if schema is None:
            logger.warning(f"Cannot create instance: unknown template '{widget_type_id}/{template_id}'")
            return None

        instance = WidgetInstance(
            instance_id=instance_id or uuid.uuid4().hex,
            widget_type_id=widget_type_id,
            template_id=template_id,
            title=title or schema.template.name,
            settings=resolve(schema.template, {}),
        )
        session = cls(instance, schema, store, registry, projector)
        session.writer.schedule(instance.settings)
        logger.info(f"Created instance '{instance.instance_id}' of '{widget_type_id}/{template_id}'")
        return session

    @classmethod
    def open(
        cls,
        registry: TemplateRegistry,
        store: SettingsStore,
        instance: WidgetInstance,
        projector: Optional[PreviewProjector] = None,
    ) -> Optional["EditorSession"]:
        """
        Resume editing a persisted instance.

        Raises:
            PersistenceError: the store failed to load the record
        """
        schema = registry.get_schema(instance.widget_type_id, instance.template_id)
        if schema is None:
            logger.warning(
                f"Cannot open instance '{instance.instance_id}': unknown template "
                f"'{instance.widget_type_id}/{instance.template_id}'"
            )
            return None

        instance.settings = resolve(schema.template, store.load(instance.instance_id))
        return cls(instance, schema, store, registry, projector)

    def close(self, policy: Optional[str] = None) -> bool:
        """
        End the session, resolving the pending write.

        Args:
            policy: "flush" or "discard"; configured close_policy when None

        Returns:
            True when no write is outstanding and the last write succeeded
            (always True for "discard" unless an in-flight write failed)
        """
        if self._closed:
            return True
        policy = policy or get_embed_config().close_policy
        if policy == CLOSE_FLUSH:
            ok = self.writer.flush()
        else:
            self.writer.discard()
            self.writer.wait()
            ok = self.writer.last_failed_record is None
        self._closed = True
        logger.debug(f"Closed session for '{self.instance.instance_id}' ({policy}, ok={ok})")
        return ok

    @property
    def closed(self) -> bool:
        return self._closed

    # ========== EDITING ==========

    @property
    def settings(self):
        return self.instance.settings

    def edit(self, menu_id: str, value: Any) -> None:
        """Apply one user edit and schedule a debounced write."""
        if self._closed:
            raise RuntimeError(f"Session for '{self.instance.instance_id}' is closed")
        if menu_id not in self.schema.menus:
            logger.warning(f"Edit of undeclared menu '{menu_id}' on '{self.instance.instance_id}'")
        self.instance.settings = self._mutator.apply(self.instance.settings, menu_id, value)

    def is_active(self, menu_id: str) -> bool:
        return self._evaluator.is_active(menu_id, self.instance.settings)

    def active_menu_ids(self) -> FrozenSet[str]:
        return self._evaluator.active_menu_ids(self.instance.settings)

    def retry_failed_write(self) -> bool:
        return self.writer.retry()

    # ========== PREVIEW ==========

    def preview(self, data: Any = None, view_mode: Optional[ViewMode] = None) -> RenderNode:
        """Render the live preview from the current record."""
        return render(
            self.instance.widget_type_id,
            self.instance.template_id,
            self.instance.settings,
            data=data,
            view_mode=view_mode,
            registry=self.registry,
            projector=self.projector,
        )

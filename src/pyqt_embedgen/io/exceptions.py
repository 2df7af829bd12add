"""Exception hierarchy for schema registration and settings persistence."""

from typing import Sequence


class EmbedGenError(Exception):
    """Base class for all pyqt-embedgen errors."""


class SchemaError(EmbedGenError):
    """Raised when a widget type or template declaration is malformed.

    Schema errors are fatal at registration time and never surface
    mid-session.
    """


class DuplicateWidgetTypeError(SchemaError):
    """Raised when a widget type id is registered twice without override."""


class DuplicateTemplateIdError(SchemaError):
    """Raised when two templates of one widget type share an id."""


class DuplicateOptionIdError(SchemaError):
    """Raised when two options of one template share an id."""


class DuplicateMenuIdError(SchemaError):
    """Raised when a menu id occurs twice in a flattened template."""


class DependencyCycleError(SchemaError):
    """Raised when menu dependencies form a cycle."""

    def __init__(self, template_id: str, cycle: Sequence[str]):
        self.template_id = template_id
        self.cycle = tuple(cycle)
        super().__init__(
            f"Template '{template_id}' has a dependency cycle: {' -> '.join(self.cycle)}"
        )


class DanglingDependencyError(SchemaError):
    """Raised under the 'reject' policy when dependsOn names an undeclared menu."""


class InvalidDefaultError(SchemaError):
    """Raised when a menu's default value is not one of its declared choices."""


class FieldTypeCollisionError(EmbedGenError):
    """Raised when a field type tag is registered twice without override."""


class PreviewCollisionError(EmbedGenError):
    """Raised when a preview renderer is registered twice without override."""


class PersistenceError(EmbedGenError):
    """Raised by settings stores when a load or save fails.

    Persistence failures are retryable; the in-memory record is kept.
    """

    def __init__(self, instance_id: str, message: str):
        self.instance_id = instance_id
        super().__init__(f"[{instance_id}] {message}")

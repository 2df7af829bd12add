"""Base configuration for the schema engine and editor.

Provides hooks for applications to customize registration, editing and
persistence behavior.
"""

from typing import Optional
from dataclasses import dataclass

from .preview_renderer import ViewMode

# Dangling dependsOn references
DANGLING_INACTIVE = "inactive"
DANGLING_REJECT = "reject"

# Pending write when an editor session closes
CLOSE_FLUSH = "flush"
CLOSE_DISCARD = "discard"


@dataclass
class EmbedGenConfig:
    """Base configuration for schema and editor behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        debounce_ms: Quiet window before a settings write is issued
        dangling_dependency_policy: "inactive" hides menus whose dependsOn names an
            undeclared menu (logged); "reject" fails template registration
        close_policy: "flush" writes a pending record when an editor session
            closes; "discard" drops it
        background_writes: Run store.save on a BackgroundTask thread
        default_view_mode: View mode used when a caller doesn't pass one
        strict_value_match: dependsOn values must match by type as well as value
    """

    debounce_ms: int = 100
    dangling_dependency_policy: str = DANGLING_INACTIVE
    close_policy: str = CLOSE_FLUSH
    background_writes: bool = True
    default_view_mode: ViewMode = ViewMode.DESKTOP
    strict_value_match: bool = True

    def __post_init__(self):
        if self.dangling_dependency_policy not in (DANGLING_INACTIVE, DANGLING_REJECT):
            raise ValueError(
                f"Unknown dangling_dependency_policy '{self.dangling_dependency_policy}'"
            )
        if self.close_policy not in (CLOSE_FLUSH, CLOSE_DISCARD):
            raise ValueError(f"Unknown close_policy '{self.close_policy}'")
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must be >= 0")


# Global config instance (set by application)
_embed_config: Optional[EmbedGenConfig] = None


def set_embed_config(config: Optional[EmbedGenConfig]) -> None:
    """Set the global configuration.

    Args:
        config: EmbedGenConfig instance, or None to restore defaults
    """
    global _embed_config
    _embed_config = config


def get_embed_config() -> EmbedGenConfig:
    """Get the current configuration.

    Returns:
        Current EmbedGenConfig or default if not set
    """
    if _embed_config is None:
        return EmbedGenConfig()
    return _embed_config

"""Base configuration class for grid cell editing.

Provides hooks for applications to customize editing and teardown behavior.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class GridEditConfig:
    """Base configuration for grid editing behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        teardown_delay_ms: Delay before the deferred teardown sweep runs after disposal
        default_template_id: Editor template used when a column does not name one
        default_editor_directive: Editor substituted into the template placeholder
        hidden_contents_property: Dynamic Qt property toggled on the read-only label
            while an editor is shown (usable from stylesheets)
        log_teardown: Emit an INFO record for every completed teardown
    """

    teardown_delay_ms: int = 500
    default_template_id: str = "grid/editableCell"
    default_editor_directive: str = "grid-text-editor"
    hidden_contents_property: str = "cellContentsHidden"
    log_teardown: bool = True
    teardown_logger_name: Optional[str] = None


# Global config instance (set by application)
_grid_edit_config: Optional[GridEditConfig] = None


def set_grid_edit_config(config: Optional[GridEditConfig]) -> None:
    """Set the global grid edit configuration.

    Args:
        config: GridEditConfig instance, or None to restore defaults
    """
    global _grid_edit_config
    _grid_edit_config = config


def get_grid_edit_config() -> GridEditConfig:
    """Get the current grid edit configuration.

    Returns:
        Current GridEditConfig or default if not set
    """
    if _grid_edit_config is None:
        return GridEditConfig()
    return _grid_edit_config

"""
Configuration and editor contracts.

ABC-based editor contract plus the application-level configuration hook.
"""

from .grid_config import GridEditConfig, set_grid_edit_config, get_grid_edit_config
from .cell_editor import CellEditor, PyQtWidgetMeta

__all__ = [
    "GridEditConfig",
    "set_grid_edit_config",
    "get_grid_edit_config",
    "CellEditor",
    "PyQtWidgetMeta",
]

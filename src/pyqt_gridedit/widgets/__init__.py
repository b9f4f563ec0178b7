"""
Grid widgets.

The editable grid host widget and its data model.
"""

from .grid_models import ColumnDef, GridOptions, GridColumn, GridRow, GridState, EventProvider
from .editable_grid import EditableGrid, get_teardown_engine

__all__ = [
    "ColumnDef",
    "GridOptions",
    "GridColumn",
    "GridRow",
    "GridState",
    "EventProvider",
    "EditableGrid",
    "get_teardown_engine",
]

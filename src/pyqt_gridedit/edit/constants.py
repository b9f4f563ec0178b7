"""Constants shared by the cell edit feature."""

import re


class EditEvents:
    """Lifecycle signals exchanged between a cell and its editor."""
    BEGIN_CELL_EDIT = "gridEventBeginCellEdit"
    END_CELL_EDIT = "gridEventEndCellEdit"
    CANCEL_CELL_EDIT = "gridEventCancelCellEdit"


class GridEvents:
    """Signals owned by the surrounding grid widget."""
    GRID_SCROLL = "gridEventScroll"


# Placeholder substituted with the column's editor directive name.
# Lowercase because template markup is normalized to lowercase tag names.
EDITABLE_CELL_DIRECTIVE = re.compile(r"editable_cell_directive")

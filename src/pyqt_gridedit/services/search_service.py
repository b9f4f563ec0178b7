"""
Row search provider for the editable grid.

Filters the grid's row cache by a search term matched against the text of every
column value. The provider keeps a back-reference to the grid (``ext_filter``) which
the teardown engine clears when the grid is discarded.
"""

from typing import List, Optional, TYPE_CHECKING
import logging

from pyqt_gridedit.core import FieldPath
from pyqt_gridedit.exceptions import FieldPathError

if TYPE_CHECKING:
    from pyqt_gridedit.widgets.grid_models import GridRow, GridState

logger = logging.getLogger(__name__)


class _RowScope:
    """Minimal lookup scope exposing one row to a FieldPath."""

    def __init__(self, row: "GridRow"):
        self.fields = {"row": row}

    def lookup(self, key: str):
        return self.fields[key]


class GridSearchProvider:
    """
    Search over grid rows with minimum character trigger.

    Key features:
    - Minimum character threshold (default: 2)
    - Case-insensitive match against every column's displayed value
    - Marks rows visible/invisible and returns the matching rows
    """

    # Class constant for minimum search characters
    MIN_SEARCH_CHARS = 2

    def __init__(self, grid: "GridState", min_chars: int = MIN_SEARCH_CHARS):
        self.ext_filter: Optional["GridState"] = grid
        self.min_chars = min_chars
        self.search_term = ""

    def _row_text(self, row: "GridRow") -> str:
        scope = _RowScope(row)
        parts = []
        for column in self.ext_filter.columns:
            try:
                value = FieldPath(row.qualified_field(column)).get(scope)
            except FieldPathError:
                continue
            if value is not None:
                parts.append(str(value))
        return " ".join(parts)

    def filter(self, search_term: str) -> List["GridRow"]:
        """Filter rows by search term and update their visibility."""
        grid = self.ext_filter
        if grid is None:
            return []

        search_term = search_term.strip()

        # Searches below min_chars keep the current state, an empty one resets
        if search_term and len(search_term) < self.min_chars:
            return [row for row in grid.row_cache if row.visible]

        self.search_term = search_term
        search_lower = search_term.lower()
        matches = []
        for row in grid.row_cache:
            row.visible = not search_lower or search_lower in self._row_text(row).lower()
            if row.visible:
                matches.append(row)
        logger.debug(f"Search {search_term!r}: {len(matches)}/{len(grid.row_cache)} rows")
        return matches

    def reset(self) -> List["GridRow"]:
        """Reset filter to show all rows."""
        return self.filter("")

"""
Grid services.

Teardown of discarded grid instances and row search.
"""

from .teardown_service import (
    TeardownEngine,
    SCOPE_FIELDS,
    scrub,
    scrub_row,
    scrub_column,
    scrub_grid,
    restore_destroy,
)
from .search_service import GridSearchProvider

__all__ = [
    "TeardownEngine",
    "SCOPE_FIELDS",
    "scrub",
    "scrub_row",
    "scrub_column",
    "scrub_grid",
    "restore_destroy",
    "GridSearchProvider",
]

"""
pyqt-gridedit: spreadsheet-style in-place cell editing for PyQt6 grids.

Architecture:
- Tier 1 (Core): Component node tree, hierarchical event channel, field paths (no Qt)
- Tier 2 (Protocols): Configuration hook and the CellEditor ABC
- Tier 3 (Edit): Per-cell edit state machine, key classifier, editor templates
- Tier 4 (Services): Teardown of discarded grids, row search
- Tier 5 (Widgets): EditableGrid host widget

Key Features:
- Double click, typing or focus starts an in-place edit
- Enter/blur commits, Escape rolls back to the original value
- Grid scroll ends any edit in progress
- Replaceable edit-start key classifier and editor registry
- Deferred teardown that severs rows, columns and the grid after disposal
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]

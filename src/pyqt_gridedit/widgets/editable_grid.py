"""
Editable grid widget.

A small host grid that lays out one GridCell per row/column inside a scroll area
and wires both subsystems of the package:

- every cell of an editable column gets a CellEditController
- scrolling the viewport broadcasts GRID_SCROLL from the grid's root node
- dispose() destroys the root node, which hands the grid to the TeardownEngine

Component tree:
    grid (fields: grid, columns, rendered_rows, ...)
      row (fields: row)
        cell (fields: col)
          editor (only while editing)
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from PyQt6.QtWidgets import (
    QGridLayout, QHBoxLayout, QLabel, QLineEdit, QScrollArea, QVBoxLayout, QWidget,
)

from pyqt_gridedit.core import ComponentNode
from pyqt_gridedit.edit import (
    CellEditController, EditorRegistry, GridCell, GridEvents, TemplateCache, edit_column_builder,
)
from pyqt_gridedit.services.search_service import GridSearchProvider
from pyqt_gridedit.services.teardown_service import TeardownEngine
from pyqt_gridedit.widgets.grid_models import EventProvider, GridOptions, GridState

logger = logging.getLogger(__name__)

_default_engine: Optional[TeardownEngine] = None


def get_teardown_engine() -> TeardownEngine:
    """Shared engine used by grids created without an explicit one."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TeardownEngine()
    return _default_engine


class EditableGrid(QWidget):
    """Grid of editable cells backed by a list of row entities."""

    def __init__(self, options: GridOptions, data: Optional[List[Any]] = None,
                 teardown_engine: Optional[TeardownEngine] = None,
                 template_cache: Optional[TemplateCache] = None,
                 editor_registry: Optional[EditorRegistry] = None,
                 show_search: bool = False, parent=None):
        super().__init__(parent)
        self.options = options
        self._template_cache = template_cache
        self._editor_registry = editor_registry
        self._controllers: Dict[Tuple[int, str], CellEditController] = {}

        self.root_node = ComponentNode(name="grid")
        self.grid = GridState(options)
        self.grid.register_column_builder(edit_column_builder)
        self.grid.event_provider = EventProvider(self.grid, self.notify_scrolled)
        self.grid.search_provider = GridSearchProvider(self.grid)

        self._setup_ui(show_search)

        columns = self.grid.build_columns()
        self._build_header(columns)

        state = self.root_node.fields
        state["grid"] = self.grid
        state["columns"] = columns
        state["rendered_columns"] = list(columns)
        state["rendered_rows"] = []
        state["adjust_scroll_top"] = self.grid.viewport.verticalScrollBar().setValue
        state["adjust_scroll_left"] = self.grid.viewport.horizontalScrollBar().setValue
        state["total_row_width"] = sum(col.width or 100 for col in columns)
        state["viewport_style"] = {"height": options.row_height * len(data or ())}
        state["selection_provider"] = None

        self.teardown_engine = teardown_engine or get_teardown_engine()
        self.teardown_engine.register_for_teardown(self.root_node, self.grid)

        self.set_data(data or [])

    def _setup_ui(self, show_search: bool):
        """Set up header, optional search input and the scrolling viewport."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.search_input = None
        if show_search:
            self.search_input = QLineEdit()
            self.search_input.setPlaceholderText("Search rows...")
            self.search_input.textChanged.connect(self.filter_rows)
            layout.addWidget(self.search_input)

        header = QWidget()
        header.setObjectName("gridHeader")
        QHBoxLayout(header).setContentsMargins(0, 0, 0, 0)
        self.grid.header_scroller = header
        layout.addWidget(header)

        viewport = QScrollArea()
        viewport.setWidgetResizable(True)
        self._canvas = QWidget()
        self._canvas_layout = QGridLayout(self._canvas)
        self._canvas_layout.setContentsMargins(0, 0, 0, 0)
        self._canvas_layout.setSpacing(0)
        viewport.setWidget(self._canvas)
        self.grid.viewport = viewport
        layout.addWidget(viewport, 1)

    def _build_header(self, columns):
        header_layout = self.grid.header_scroller.layout()
        for column in columns:
            label = QLabel(column.display_name)
            if column.width:
                label.setFixedWidth(column.width)
            header_layout.addWidget(label)

    def set_data(self, data: List[Any]) -> None:
        """Replace the grid's rows, rebuilding row and cell nodes."""
        for row_node in list(self.root_node.children):
            row_node.destroy()
        for cell in self.findChildren(GridCell):
            self._canvas_layout.removeWidget(cell)
            cell.setParent(None)
            cell.deleteLater()
        self._controllers.clear()

        rows = self.grid.build_rows(data)
        self.root_node.fields["rendered_rows"] = list(rows)

        for row in rows:
            row_node = self.root_node.new_child("row")
            row_node.fields["row"] = row
            for column in self.grid.columns:
                cell_node = row_node.new_child("cell")
                cell_node.fields["col"] = column
                cell = GridCell(cell_node, row.qualified_field(column))
                if column.width:
                    cell.setFixedWidth(column.width)
                cell.setFixedHeight(self.options.row_height)
                self._canvas_layout.addWidget(cell, row.index, column.index)

                controller = CellEditController(
                    cell_node, cell,
                    template_cache=self._template_cache,
                    editor_registry=self._editor_registry,
                )
                controller.attach()
                cell.controller = controller
                self._controllers[(row.index, column.name)] = controller

        self.grid.event_provider.assign_events()
        logger.debug(f"Grid populated with {len(rows)} rows x {len(self.grid.columns)} columns")

    # ========== ACCESS ==========

    def controller_at(self, row_index: int, column_name: str) -> CellEditController:
        return self._controllers[(row_index, column_name)]

    def cell_at(self, row_index: int, column_name: str) -> GridCell:
        return self.controller_at(row_index, column_name).cell_widget

    # ========== EVENTS ==========

    def notify_scrolled(self) -> None:
        """Tell every cell that the grid scrolled."""
        if self.root_node.destroyed:
            return
        self.root_node.broadcast(GridEvents.GRID_SCROLL)

    def filter_rows(self, search_term: str) -> None:
        search_provider = self.grid.search_provider
        if search_provider is None:
            return
        search_provider.filter(search_term)
        for (row_index, _), controller in self._controllers.items():
            row = self.grid.row_cache[row_index]
            controller.cell_widget.setVisible(row.visible)

    # ========== LIFECYCLE ==========

    def dispose(self) -> None:
        """Discard the grid instance; teardown follows after the configured delay."""
        if self.root_node.destroyed:
            return
        logger.debug(f"Disposing grid {self.root_node!r}")
        self._controllers.clear()
        self.root_node.destroy()

    @property
    def disposed(self) -> bool:
        return self.root_node.destroyed

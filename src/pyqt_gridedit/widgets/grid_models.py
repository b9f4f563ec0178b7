"""
Grid data model.

Column definitions and grid options are declarative dataclasses supplied by the
application. GridColumn, GridRow and GridState are the live objects built from them;
they are plain attribute bags so the teardown sweep can clear every field.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

logger = logging.getLogger(__name__)

EditableCondition = Union[bool, Callable[[Any], bool], None]
ColumnBuilder = Callable[["ColumnDef", "GridColumn", "GridOptions"], Any]


@dataclass
class ColumnDef:
    """Declarative column configuration."""
    name: str
    field: Optional[str] = None
    display_name: Optional[str] = None
    width: Optional[int] = None
    enable_cell_edit: Optional[bool] = None
    editable_condition: EditableCondition = None
    editor_template_id: Optional[str] = None
    editor_directive_name: Optional[str] = None
    enable_edit_on_focus: Optional[bool] = None


@dataclass
class GridOptions:
    """Grid level configuration; column level values take precedence."""
    column_defs: List[ColumnDef] = field(default_factory=list)
    enable_cell_edit: bool = False
    editable_condition: EditableCondition = None
    enable_edit_on_focus: bool = False
    row_height: int = 24


class GridColumn:
    """Live column built from a ColumnDef by the registered column builders."""

    def __init__(self, col_def: ColumnDef, index: int):
        self.col_def = col_def
        self.index = index
        self.name = col_def.name
        self.field = col_def.field or col_def.name
        self.display_name = col_def.display_name or col_def.name
        self.width = col_def.width
        self.enable_cell_edit = False
        self.editable_condition: EditableCondition = True
        self.editor_template_id: Optional[str] = None
        self.editor_directive_name: Optional[str] = None
        self.enable_edit_on_focus = False

    def __repr__(self) -> str:
        return f"GridColumn({self.name!r})"


class GridRow:
    """Live row wrapping one data entity."""

    def __init__(self, entity: Any, index: int):
        self.entity = entity
        self.index = index
        self.visible = True
        self.clone: Optional["GridRow"] = None
        self.orig: Optional["GridRow"] = None

    def qualified_field(self, column: GridColumn) -> str:
        """Field path of this row's value for column, relative to a cell node."""
        return f"row.entity.{column.field}"

    def make_clone(self) -> "GridRow":
        """Create the pinned-area copy of this row."""
        clone = GridRow(self.entity, self.index)
        clone.orig = self
        self.clone = clone
        return clone

    def __repr__(self) -> str:
        return f"GridRow({self.index})"


class EventProvider:
    """Wires viewport scrolling to the grid scroll signal."""

    def __init__(self, grid: "GridState", on_scroll: Callable[[], None]):
        self.grid = grid
        self.on_scroll = on_scroll
        self.assigned = 0

    def assign_events(self) -> None:
        """(Re)connect the viewport scroll bars. Called whenever rows are rebuilt."""
        viewport = self.grid.viewport
        if viewport is None:
            return
        for bar in (viewport.verticalScrollBar(), viewport.horizontalScrollBar()):
            try:
                bar.valueChanged.disconnect(self._scrolled)
            except TypeError:
                # Signal not connected yet - ignore
                pass
            bar.valueChanged.connect(self._scrolled)
        self.assigned += 1

    def _scrolled(self, value: int) -> None:
        self.on_scroll()


class GridState:
    """The grid object: columns, row cache and the presentational widgets."""

    def __init__(self, options: GridOptions):
        self.options = options
        self.columns: List[GridColumn] = []
        self.row_cache: List[GridRow] = []
        self.column_builders: List[ColumnBuilder] = []
        self.header_scroller = None
        self.viewport = None
        self.search_provider = None
        self.event_provider: Optional[EventProvider] = None

    def register_column_builder(self, builder: ColumnBuilder) -> None:
        if builder not in self.column_builders:
            self.column_builders.append(builder)

    def build_columns(self) -> List[GridColumn]:
        """Build live columns from the column definitions, running every builder."""
        columns = []
        for index, col_def in enumerate(self.options.column_defs):
            column = GridColumn(col_def, index)
            for builder in self.column_builders:
                result = builder(col_def, column, self.options)
                if result is not None and hasattr(result, "result"):
                    # Builders return futures; none of ours are pending
                    result.result()
            columns.append(column)
        self.columns = columns
        logger.debug(f"Built {len(columns)} columns")
        return columns

    def build_rows(self, entities: List[Any]) -> List[GridRow]:
        self.row_cache = [GridRow(entity, index) for index, entity in enumerate(entities)]
        return self.row_cache

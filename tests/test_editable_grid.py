"""End-to-end tests for the editable grid widget."""

import pytest
from PyQt6.QtCore import Qt
from PyQt6.QtTest import QTest

from pyqt_gridedit.edit import EditState, GridCell
from pyqt_gridedit.services import TeardownEngine
from pyqt_gridedit.widgets import ColumnDef, EditableGrid, GridOptions


@pytest.fixture
def bob_grid(qapp, scheduler):
    options = GridOptions(column_defs=[ColumnDef("name", enable_cell_edit=True), ColumnDef("title")])
    grid = EditableGrid(options, [{"name": "Bob", "title": "CEO"}],
                        teardown_engine=TeardownEngine(scheduler=scheduler), show_search=True)
    yield grid
    grid.deleteLater()


def test_grid_builds_cells_and_node_tree(bob_grid):
    assert len(bob_grid.findChildren(GridCell)) == 2
    assert bob_grid.cell_at(0, "name").text() == "Bob"
    assert bob_grid.cell_at(0, "title").text() == "CEO"

    row_node = bob_grid.root_node.children[0]
    assert row_node.fields["row"] is bob_grid.grid.row_cache[0]
    assert [cell.fields["col"].name for cell in row_node.children] == ["name", "title"]
    assert bob_grid.grid.event_provider.assigned == 1


def test_edit_commit_with_enter(bob_grid, dblclick):
    """Double click, type a new name, press Enter: the new value is kept."""
    controller = bob_grid.controller_at(0, "name")
    cell = bob_grid.cell_at(0, "name")

    dblclick(cell)
    assert controller.state is EditState.EDITING
    assert cell.text() == "Bob"
    assert cell.editor.selectedText() == "Bob"

    QTest.keyClicks(cell.editor, "Robert")
    QTest.keyClick(cell.editor, Qt.Key.Key_Return)

    assert controller.state is EditState.IDLE
    assert bob_grid.grid.row_cache[0].entity["name"] == "Robert"
    assert cell.text() == "Robert"


def test_edit_cancel_with_escape(bob_grid, dblclick):
    """Double click, type a new name, press Escape: the original value comes back."""
    controller = bob_grid.controller_at(0, "name")
    cell = bob_grid.cell_at(0, "name")

    dblclick(cell)
    QTest.keyClicks(cell.editor, "Robert")
    assert bob_grid.grid.row_cache[0].entity["name"] == "Robert"
    QTest.keyClick(cell.editor, Qt.Key.Key_Escape)

    assert controller.state is EditState.IDLE
    assert bob_grid.grid.row_cache[0].entity["name"] == "Bob"
    assert cell.text() == "Bob"


def test_scroll_ends_edit_without_rollback(bob_grid, dblclick):
    controller = bob_grid.controller_at(0, "name")
    cell = bob_grid.cell_at(0, "name")

    dblclick(cell)
    QTest.keyClicks(cell.editor, "Rob")
    bob_grid.notify_scrolled()

    assert controller.state is EditState.IDLE
    assert cell.editor is None
    assert not cell.contents_hidden()
    assert bob_grid.grid.row_cache[0].entity["name"] == "Rob"
    assert cell.text() == "Rob"


def test_search_filters_rows(qapp, scheduler):
    options = GridOptions(column_defs=[ColumnDef("name"), ColumnDef("title")])
    grid = EditableGrid(options, [{"name": "Bob", "title": "CEO"}, {"name": "Frank", "title": "Developer"}],
                        teardown_engine=TeardownEngine(scheduler=scheduler), show_search=True)

    grid.search_input.setText("dev")
    assert [row.visible for row in grid.grid.row_cache] == [False, True]
    assert grid.cell_at(0, "name").isHidden()

    grid.search_input.setText("d")  # below the minimum length, keeps current filter
    assert [row.visible for row in grid.grid.row_cache] == [False, True]

    grid.search_input.setText("")
    assert [row.visible for row in grid.grid.row_cache] == [True, True]
    grid.deleteLater()


def test_set_data_rebuilds_rows(bob_grid):
    old_row_node = bob_grid.root_node.children[0]
    bob_grid.set_data([{"name": "Ann", "title": "CTO"}, {"name": "Cy", "title": "Dev"}])

    assert old_row_node.destroyed
    assert len(bob_grid.root_node.children) == 2
    assert bob_grid.cell_at(1, "name").text() == "Cy"
    assert bob_grid.grid.event_provider.assigned == 2


@pytest.fixture
def shown_grid(bob_grid):
    bob_grid.show()
    bob_grid.activateWindow()
    assert QTest.qWaitForWindowExposed(bob_grid)
    yield bob_grid
    bob_grid.hide()


def test_begin_edit_focuses_editor(shown_grid, dblclick):
    cell = shown_grid.cell_at(0, "name")

    dblclick(cell)

    assert cell.editor.hasFocus()
    assert cell.editor.selectedText() == "Bob"


def test_moving_focus_away_ends_edit(shown_grid, dblclick):
    """Test a real blur of the editor commits the typed value."""
    controller = shown_grid.controller_at(0, "name")
    cell = shown_grid.cell_at(0, "name")

    dblclick(cell)
    QTest.keyClicks(cell.editor, "Robert")
    shown_grid.search_input.setFocus()
    QTest.qWait(20)

    assert controller.state is EditState.IDLE
    assert cell.editor is None
    assert shown_grid.grid.row_cache[0].entity["name"] == "Robert"
    assert cell.text() == "Robert"

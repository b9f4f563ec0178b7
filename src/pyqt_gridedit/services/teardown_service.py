"""
Grid teardown service.

Cleans up a grid instance's object graph when its root component node is disposed.
Rows, columns and the grid object routinely end up referenced from long-lived
places (watcher lists, signal connections, closures held by the host widget), and
any one of those references keeps the whole grid reachable. After disposal this
service severs the root node from its tree and clears every field of every row, row
clone, column and of the grid object itself.

This does not guarantee that every possible leak is gone, but it stops discarded
grids from lingering in memory as a whole.
"""

import logging
import weakref
from typing import Any, Callable, Iterable, List, Optional

from PyQt6.QtCore import QTimer

from pyqt_gridedit.core import ComponentNode, DISPOSED, sever_node
from pyqt_gridedit.protocols import get_grid_edit_config

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], Any]

# Fields on the grid's root node state that close over the grid, rows or columns
SCOPE_FIELDS = (
    "adjust_scroll_left",
    "adjust_scroll_top",
    "cant_page_backward",
    "cant_page_forward",
    "cant_page_to_last",
    "canvas_style",
    "dom_access_provider",
    "footer_style",
    "group_by",
    "group_panel_style",
    "header_cell_style",
    "header_scroller_dim",
    "header_scroller_style",
    "header_style",
    "max_pages",
    "max_rows",
    "multi_select",
    "page_backward",
    "page_forward",
    "page_to_first",
    "page_to_last",
    "paging_options",
    "remove_group",
    "row_style",
    "selected_item_count",
    "selection_provider",
    "show_group_panel",
    "toggle_pin",
    "toggle_select_all",
    "toggle_show_menu",
    "top_panel_height",
    "top_panel_style",
    "total_filtered_items_length",
    "total_row_width",
    "viewport_dim_height",
    "viewport_style",
)


def _noop(*args, **kwargs) -> None:
    return None


def scrub(obj: Any) -> None:
    """Set every own attribute of obj to None."""
    if obj is None:
        return
    for name in list(vars(obj)):
        setattr(obj, name, None)


def scrub_row(row: Any) -> None:
    """Clear a row, clearing its clone first."""
    if row is None:
        return
    clone = getattr(row, "clone", None)
    if clone is not None:
        scrub_row(clone)
        clone.orig = None
    scrub(row)


def scrub_column(column: Any) -> None:
    scrub(column)


def _detach_widget(widget: Any) -> None:
    if widget is None:
        return
    widget.setParent(None)
    widget.deleteLater()


def scrub_grid(grid: Any) -> None:
    """Detach the grid's widgets, clear its rows, then clear the grid itself."""
    if grid is None:
        return
    search_provider = getattr(grid, "search_provider", None)
    if search_provider is not None:
        search_provider.ext_filter = None

    _detach_widget(getattr(grid, "header_scroller", None))
    _detach_widget(getattr(grid, "viewport", None))

    for row in list(getattr(grid, "row_cache", None) or ()):
        scrub_row(row)

    scrub(grid)


def restore_destroy(node: ComponentNode) -> Callable[[], None]:
    """Give node a working destroy() again.

    The node's own destroy() is consumed after the first call (it becomes a no-op),
    while the node may still be linked into its tree. The rebuilt routine severs the
    node unconditionally.
    """
    def destroy(*args, **kwargs) -> None:
        sever_node(node)

    node.destroy = destroy
    return destroy


class TeardownEngine:
    """
    Registers grids for teardown and runs the deferred sweep after disposal.

    Usage:
        engine = TeardownEngine()
        engine.register_for_teardown(root_node, grid_state)
        ...
        root_node.destroy()   # sweep runs after teardown_delay_ms
    """

    def __init__(self, scheduler: Optional[Scheduler] = None, delay_ms: Optional[int] = None):
        config = get_grid_edit_config()
        self._scheduler = scheduler or QTimer.singleShot
        self._delay_ms = config.teardown_delay_ms if delay_ms is None else delay_ms
        self._registered: "weakref.WeakSet[ComponentNode]" = weakref.WeakSet()
        self._pending: List[Callable[[], None]] = []
        self._logger = (logging.getLogger(config.teardown_logger_name)
                        if config.teardown_logger_name else logger)
        self._log_teardown = config.log_teardown

    @property
    def pending(self) -> int:
        """Number of scheduled sweeps that have not run yet."""
        return len(self._pending)

    def is_registered(self, root: ComponentNode) -> bool:
        return root in self._registered

    def register_for_teardown(self, root: ComponentNode, grid: Any) -> bool:
        """Tear down grid once root is disposed. Returns False if already registered."""
        if root in self._registered or root.destroyed:
            return False
        self._registered.add(root)

        def on_disposed(event, *args):
            subscription.remove()
            self._on_disposed(root, grid)

        subscription = root.subscribe(DISPOSED, on_disposed)
        logger.debug(f"Registered {root!r} for teardown")
        return True

    def _on_disposed(self, root: ComponentNode, grid: Any) -> None:
        # No handler rewiring is meaningful once teardown has begun
        event_provider = getattr(grid, "event_provider", None)
        if event_provider is not None:
            event_provider.assign_events = _noop

        def task():
            self._teardown(root, grid)

        self._pending.append(task)
        # Disposal is still being broadcast; mutate the graph on a later turn
        self._scheduler(self._delay_ms, lambda: self._run(task))
        logger.debug(f"Scheduled teardown of {root!r} in {self._delay_ms} ms")

    def _run(self, task: Callable[[], None]) -> None:
        if task in self._pending:
            self._pending.remove(task)
            task()

    def flush(self) -> int:
        """Run every scheduled sweep now. Returns how many ran."""
        count = 0
        while self._pending:
            self._run(self._pending[0])
            count += 1
        return count

    def _teardown(self, root: ComponentNode, grid: Any) -> None:
        if root.destroyed:
            restore_destroy(root)
        root.destroy()
        root.fields["destroyed_by_force"] = True

        state = root.fields
        rendered_rows = state.get("rendered_rows") or ()
        columns = state.get("columns") or ()
        grid_columns = getattr(grid, "columns", None) or ()

        # Rows and columns read grid fields, so the grid goes last
        row_count = self._scrub_all(scrub_row, _chain(getattr(grid, "row_cache", None), rendered_rows))
        column_count = self._scrub_all(scrub_column, _chain(grid_columns, columns))
        scrub_grid(grid)

        for name in SCOPE_FIELDS:
            state[name] = None
        state["columns"] = None
        state["rendered_columns"] = None
        state["rendered_rows"] = None
        state["grid"] = None

        if self._log_teardown:
            self._logger.info(f"Tore down grid {root!r}: {row_count} rows, {column_count} columns")

    @staticmethod
    def _scrub_all(scrubber: Callable[[Any], None], objects: Iterable[Any]) -> int:
        seen = set()
        for obj in objects:
            if obj is None or id(obj) in seen:
                continue
            seen.add(id(obj))
            scrubber(obj)
        return len(seen)


def _chain(*collections: Optional[Iterable[Any]]) -> List[Any]:
    # Copy first; scrubbing may clear the collections being iterated
    items: List[Any] = []
    for collection in collections:
        if collection:
            items.extend(collection)
    return items

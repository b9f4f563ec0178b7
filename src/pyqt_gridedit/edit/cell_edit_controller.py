"""
Per-cell edit state machine.

States:
    IDLE --begin_edit--> EDITING --end_edit--> IDLE
                                 --cancel_edit--> IDLE (value rolled back)

Begin-edit triggers (only while IDLE, only for columns with enable_cell_edit):
- double click on the cell
- a key press accepted by the edit-start key classifier
- focus reaching the cell contents, when the column sets enable_edit_on_focus

While EDITING the cell holds three one-shot subscriptions on its own node:
GRID_SCROLL and END_CELL_EDIT end the edit, CANCEL_CELL_EDIT cancels it. The first
one to fire removes itself, and ending the session removes the other two, so exactly
one of them can ever act on a given session. If two of these signals are dispatched
in the same turn, whichever the channel delivers first wins.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget

from pyqt_gridedit.core import ComponentNode, FieldPath, Subscription
from pyqt_gridedit.edit.cell_widget import CellEventFilter, GridCell
from pyqt_gridedit.edit.constants import EDITABLE_CELL_DIRECTIVE, EditEvents, GridEvents
from pyqt_gridedit.edit.edit_service import get_start_edit_key_classifier
from pyqt_gridedit.edit.templates import (
    EditorRegistry, TemplateCache, compile_template, get_editor_registry, get_template_cache,
)

logger = logging.getLogger(__name__)


class EditState(Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass
class CellEditSession:
    """Live state of one cell while it is in edit mode."""
    owner_cell: ComponentNode
    field_path: FieldPath
    original_value: Any
    editor_scope: ComponentNode
    editor_widget: QWidget
    state: EditState = EditState.EDITING
    subscriptions: List[Subscription] = field(default_factory=list)

    def release(self) -> None:
        """Remove every subscription still held by the session."""
        for subscription in self.subscriptions:
            subscription.remove()
        self.subscriptions.clear()


class CellEditController:
    """Drives in-place editing for one grid cell."""

    def __init__(self, cell_node: ComponentNode, cell_widget: GridCell,
                 template_cache: Optional[TemplateCache] = None,
                 editor_registry: Optional[EditorRegistry] = None):
        self.cell_node = cell_node
        self.cell_widget = cell_widget
        self.column = cell_node.lookup("col")
        self.session: Optional[CellEditSession] = None
        self._template_cache = template_cache or get_template_cache()
        self._editor_registry = editor_registry or get_editor_registry()
        self._event_filter = CellEventFilter(self, cell_widget)
        self._listening = False

    @property
    def state(self) -> EditState:
        return self.session.state if self.session is not None else EditState.IDLE

    @property
    def listening(self) -> bool:
        """True while begin-edit triggers are installed on the cell."""
        return self._listening

    def attach(self) -> bool:
        """Install begin-edit triggers. Does nothing for non-editable columns."""
        if not self.column.enable_cell_edit:
            return False
        self.register_begin_edit_events()
        return True

    # ========== BEGIN-EDIT TRIGGERS ==========

    def register_begin_edit_events(self) -> None:
        if self._listening:
            return
        self.cell_widget.installEventFilter(self._event_filter)
        if self.column.enable_edit_on_focus:
            contents = self.cell_widget.contents
            contents.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
            contents.installEventFilter(self._event_filter)
        self._listening = True

    def cancel_begin_edit_events(self) -> None:
        if not self._listening:
            return
        self.cell_widget.removeEventFilter(self._event_filter)
        if self.column.enable_edit_on_focus:
            self.cell_widget.contents.removeEventFilter(self._event_filter)
        self._listening = False

    def handle_key(self, key: Qt.Key, modifiers: Qt.KeyboardModifier) -> bool:
        """Begin editing if the key is classified as an edit-start key."""
        if self.state is not EditState.IDLE:
            return False
        if not get_start_edit_key_classifier()(key, modifiers):
            return False
        return self.begin_edit()

    def handle_focus(self) -> bool:
        return self.begin_edit()

    def is_editable(self) -> bool:
        condition = self.column.editable_condition
        if callable(condition):
            return bool(condition(self.cell_node))
        return bool(condition)

    # ========== TRANSITIONS ==========

    def begin_edit(self) -> bool:
        """IDLE -> EDITING. Returns True if an edit session started."""
        if not self.column.enable_cell_edit or self.state is EditState.EDITING:
            return False
        if not self.is_editable():
            logger.debug(f"Cell {self.cell_node.id} not editable, ignoring begin edit")
            return False

        # Everything that can fail happens before the cell is touched
        row = self.cell_node.lookup("row")
        expression = row.qualified_field(self.column)
        field_path = FieldPath(expression)
        original_value = field_path.get(self.cell_node)

        markup = self._template_cache.get(self.column.editor_template_id)
        markup = EDITABLE_CELL_DIRECTIVE.sub(self.column.editor_directive_name, markup)

        editor_scope = self.cell_node.new_child("editor")
        editor_scope.fields["field_path"] = expression
        try:
            editor_widget = compile_template(markup, editor_scope, self._editor_registry)
        except Exception:
            editor_scope.destroy()
            raise

        session = CellEditSession(
            owner_cell=self.cell_node,
            field_path=field_path,
            original_value=original_value,
            editor_scope=editor_scope,
            editor_widget=editor_widget,
        )
        self.session = session

        self.cancel_begin_edit_events()
        self.cell_widget.hide_contents()
        self.cell_widget.insert_editor(editor_widget)

        session.subscriptions = [
            self._once(GridEvents.GRID_SCROLL, self.end_edit),
            self._once(EditEvents.END_CELL_EDIT, self.end_edit),
            self._once(EditEvents.CANCEL_CELL_EDIT, self.cancel_edit),
        ]
        logger.debug(f"Begin edit on cell {self.cell_node.id} ({expression}), original={original_value!r}")

        self.cell_node.broadcast(EditEvents.BEGIN_CELL_EDIT)
        return True

    def end_edit(self) -> bool:
        """EDITING -> IDLE keeping whatever the editor wrote."""
        session = self.session
        if session is None:
            return False

        session.state = EditState.IDLE
        self.session = None
        session.release()

        session.editor_scope.destroy()
        self.cell_widget.remove_editor()
        self.cell_widget.show_contents()
        self.register_begin_edit_events()
        self.cell_node.apply()

        logger.debug(f"End edit on cell {self.cell_node.id}")
        return True

    def cancel_edit(self) -> bool:
        """EDITING -> IDLE restoring the value captured at begin edit."""
        session = self.session
        if session is None:
            return False

        session.field_path.assign(self.cell_node, session.original_value)
        logger.debug(f"Cancel edit on cell {self.cell_node.id}, restored {session.original_value!r}")
        return self.end_edit()

    def _once(self, name: str, action: Callable[[], Any]) -> Subscription:
        """Subscribe action to name on the cell; the handler removes itself first."""
        def handler(event, *args):
            subscription.remove()
            action()

        subscription = self.cell_node.subscribe(name, handler)
        return subscription

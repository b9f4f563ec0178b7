"""
Grid cell widget and its begin-edit event filter.

GridCell shows the read-only presentation of one row/column value. While an edit is
in progress the presentation is hidden (not destroyed) and the editor widget is laid
out next to it, so ending the edit only has to drop the editor and show the label.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QEvent, QObject, Qt
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import QApplication, QFrame, QHBoxLayout, QLabel, QWidget

from pyqt_gridedit.core import ComponentNode, FieldPath
from pyqt_gridedit.exceptions import FieldPathError
from pyqt_gridedit.protocols import get_grid_edit_config

logger = logging.getLogger(__name__)


class GridCell(QFrame):
    """Read-only presentation of one cell, plus a slot for an in-place editor."""

    def __init__(self, node: ComponentNode, field_path: str, parent=None):
        super().__init__(parent)
        self.node = node
        self.field_path = FieldPath(field_path)
        self.editor: Optional[QWidget] = None

        self.setObjectName("gridCell")
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(2, 0, 2, 0)
        layout.setSpacing(0)

        self.contents = QLabel()
        self.contents.setObjectName("gridCellContents")
        layout.addWidget(self.contents)

        node.watch(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        """Re-read the bound value into the presentation label."""
        try:
            value = self.field_path.get(self.node)
        except FieldPathError:
            # Row or column already torn down
            return
        self.contents.setText("" if value is None else str(value))

    def text(self) -> str:
        return self.contents.text()

    def contents_hidden(self) -> bool:
        return bool(self.contents.property(get_grid_edit_config().hidden_contents_property))

    def hide_contents(self) -> None:
        self.contents.setProperty(get_grid_edit_config().hidden_contents_property, True)
        self.contents.setVisible(False)

    def show_contents(self) -> None:
        self.contents.setProperty(get_grid_edit_config().hidden_contents_property, False)
        self.contents.setVisible(True)

    def insert_editor(self, editor: QWidget) -> None:
        self.editor = editor
        self.layout().addWidget(editor)
        editor.show()

    def remove_editor(self) -> None:
        editor, self.editor = self.editor, None
        if editor is None:
            return
        self.layout().removeWidget(editor)
        editor.hide()
        editor.setParent(None)
        editor.deleteLater()


class CellEventFilter(QObject):
    """
    Translates Qt input on a cell into begin-edit calls on its controller.

    Installed while the cell is idle and removed while it is editing, so begin-edit
    triggers never fire for a cell that is already in edit mode.
    """

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self._controller = controller

    def eventFilter(self, obj, event):
        event_type = event.type()

        if event_type == QEvent.Type.MouseButtonDblClick:
            # A rejected double click goes on to other handlers
            return self._controller.begin_edit()

        if event_type == QEvent.Type.KeyPress and obj is self._controller.cell_widget:
            if self._controller.handle_key(event.key(), event.modifiers()):
                self._forward_key(event)
                return True

        elif event_type == QEvent.Type.FocusIn and obj is not self._controller.cell_widget:
            # Focus reaching the contents starts an edit and goes no further
            self._controller.handle_focus()
            return True

        return super().eventFilter(obj, event)

    def _forward_key(self, event) -> None:
        """Deliver the key that started the edit to the new editor, as typed input."""
        editor = self._controller.cell_widget.editor
        if editor is None or not event.text():
            return
        QApplication.sendEvent(editor, QKeyEvent(event.type(), event.key(), event.modifiers(), event.text()))

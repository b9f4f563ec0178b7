"""
Text cell editor.

Default in-place editor, and the reference implementation of the CellEditor
contract for anyone writing their own editor:

- BEGIN_CELL_EDIT: take focus and select all text
- focus out / Enter: emit END_CELL_EDIT
- Escape: swallow the key and emit CANCEL_CELL_EDIT
"""

import logging
from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFocusEvent, QKeyEvent
from PyQt6.QtWidgets import QLineEdit

from pyqt_gridedit.core import ComponentNode, FieldPath
from pyqt_gridedit.edit.constants import EditEvents
from pyqt_gridedit.edit.edit_service import key_code
from pyqt_gridedit.protocols import CellEditor, PyQtWidgetMeta

logger = logging.getLogger(__name__)


class TextCellEditor(QLineEdit, CellEditor, metaclass=PyQtWidgetMeta):
    """Line edit bound to the edited cell's field path."""

    def __init__(self, scope: ComponentNode, parent=None):
        super().__init__(parent)
        self._scope = scope
        self._field_path = FieldPath(scope.lookup("field_path"))
        self._blur_armed = False

        value = self._field_path.get(scope)
        self.setText("" if value is None else str(value))
        self.setObjectName("gridTextEditor")

        # Live binding: every user edit is written straight through
        self.textEdited.connect(self._write_through)
        scope.subscribe(EditEvents.BEGIN_CELL_EDIT, lambda event: self.on_begin_edit())

    def _write_through(self, text: str) -> None:
        if self._scope.destroyed:
            return
        self._field_path.assign(self._scope, text)

    def on_begin_edit(self) -> None:
        self.setFocus(Qt.FocusReason.OtherFocusReason)
        self.selectAll()
        self._blur_armed = True

    def get_value(self) -> Any:
        return self.text()

    def stop_edit(self) -> None:
        self._blur_armed = False
        self._scope.emit(EditEvents.END_CELL_EDIT)

    def cancel_edit(self) -> None:
        self._blur_armed = False
        self._scope.emit(EditEvents.CANCEL_CELL_EDIT)

    def focusOutEvent(self, event: QFocusEvent) -> None:  # type: ignore[override]
        super().focusOutEvent(event)
        if self._blur_armed:
            self.stop_edit()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        key = key_code(event.key())
        if key == key_code(Qt.Key.Key_Escape):
            # Accepted here so navigation handlers above never see it
            event.accept()
            self.cancel_edit()
            return
        if key in (key_code(Qt.Key.Key_Return), key_code(Qt.Key.Key_Enter)):
            event.accept()
            self.stop_edit()
            return
        super().keyPressEvent(event)

"""
Edit service.

Holds the replaceable edit-start key classifier and the column builder step that
copies edit settings from column and grid options onto a built column.
"""

import logging
from concurrent.futures import Future
from typing import Any, Callable, Optional

from PyQt6.QtCore import Qt

from pyqt_gridedit.protocols import get_grid_edit_config

logger = logging.getLogger(__name__)

KeyClassifier = Callable[[Qt.Key, Qt.KeyboardModifier], bool]


def key_code(key) -> int:
    """Normalize a Qt.Key member or a raw QKeyEvent.key() value to an int."""
    return int(getattr(key, "value", key))


# Keys reserved for moving between cells. Shift+Tab arrives as Key_Backtab.
NAVIGATION_KEYS = frozenset(key_code(key) for key in (
    Qt.Key.Key_Left,
    Qt.Key.Key_Right,
    Qt.Key.Key_Up,
    Qt.Key.Key_Down,
    Qt.Key.Key_Tab,
    Qt.Key.Key_Backtab,
    Qt.Key.Key_Return,
    Qt.Key.Key_Enter,
))


def is_start_edit_key(key: Qt.Key, modifiers: Qt.KeyboardModifier = Qt.KeyboardModifier.NoModifier) -> bool:
    """Return True if a key press on an idle cell should start editing.

    Navigation keys (arrows, Tab, Shift+Tab, Enter, Shift+Enter) never start an edit,
    whatever the modifiers. Every other key does.
    """
    return key_code(key) not in NAVIGATION_KEYS


_start_edit_key_classifier: KeyClassifier = is_start_edit_key


def register_start_edit_key_classifier(classifier: Optional[KeyClassifier]) -> None:
    """Replace the edit-start key classifier. None restores the default."""
    global _start_edit_key_classifier
    _start_edit_key_classifier = classifier or is_start_edit_key


def decorate_start_edit_key_classifier(
        decorator: Callable[[KeyClassifier], KeyClassifier]) -> KeyClassifier:
    """Wrap the current classifier.

    Example:
        def also_reject_f1(previous):
            def classify(key, modifiers):
                return key != Qt.Key.Key_F1 and previous(key, modifiers)
            return classify

        decorate_start_edit_key_classifier(also_reject_f1)
    """
    global _start_edit_key_classifier
    _start_edit_key_classifier = decorator(_start_edit_key_classifier)
    return _start_edit_key_classifier


def get_start_edit_key_classifier() -> KeyClassifier:
    """Get the current edit-start key classifier."""
    return _start_edit_key_classifier


def _pick(column_value: Any, grid_value: Any) -> Any:
    return column_value if column_value is not None else grid_value


def edit_column_builder(col_def: Any, column: Any, grid_options: Any) -> Future:
    """Column builder step that adds edit properties to a built column.

    Column level settings take precedence over grid level settings.

    Returns:
        An already resolved Future; no template needs preloading.
    """
    config = get_grid_edit_config()

    column.enable_cell_edit = bool(_pick(col_def.enable_cell_edit, grid_options.enable_cell_edit))
    column.editable_condition = _pick(_pick(col_def.editable_condition, grid_options.editable_condition), True)

    if column.enable_cell_edit:
        column.editor_template_id = col_def.editor_template_id or config.default_template_id
        column.editor_directive_name = col_def.editor_directive_name or config.default_editor_directive

    column.enable_edit_on_focus = bool(_pick(col_def.enable_edit_on_focus, grid_options.enable_edit_on_focus))

    logger.debug(f"Edit settings for column {column.name!r}: enable_cell_edit={column.enable_cell_edit}")

    future: Future = Future()
    future.set_result(column)
    return future

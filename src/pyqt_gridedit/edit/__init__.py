"""
In-place cell editing.

Spreadsheet-style editing for grid cells: a per-cell state machine, the edit-start
key classifier, editor templates and the default text editor.
"""

from .constants import EditEvents, GridEvents, EDITABLE_CELL_DIRECTIVE
from .edit_service import (
    NAVIGATION_KEYS,
    key_code,
    is_start_edit_key,
    register_start_edit_key_classifier,
    decorate_start_edit_key_classifier,
    get_start_edit_key_classifier,
    edit_column_builder,
)
from .templates import (
    TemplateCache,
    EditorRegistry,
    compile_template,
    get_template_cache,
    get_editor_registry,
)
from .text_editor import TextCellEditor
from .cell_widget import GridCell, CellEventFilter
from .cell_edit_controller import CellEditController, CellEditSession, EditState

__all__ = [
    "EditEvents",
    "GridEvents",
    "EDITABLE_CELL_DIRECTIVE",
    "NAVIGATION_KEYS",
    "key_code",
    "is_start_edit_key",
    "register_start_edit_key_classifier",
    "decorate_start_edit_key_classifier",
    "get_start_edit_key_classifier",
    "edit_column_builder",
    "TemplateCache",
    "EditorRegistry",
    "compile_template",
    "get_template_cache",
    "get_editor_registry",
    "TextCellEditor",
    "GridCell",
    "CellEventFilter",
    "CellEditController",
    "CellEditSession",
    "EditState",
]

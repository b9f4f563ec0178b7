"""
Editor templates.

A template is markup text naming the editor element to build, e.g.
``<div class="grid-cell-editor"><editable_cell_directive/></div>``. Before compiling,
the cell replaces the placeholder with the column's editor directive name. Compiling
resolves the first self-closing element against the EditorRegistry and builds the
editor widget for a given scope node.
"""

import logging
import re
from typing import Callable, Dict, Optional

from PyQt6.QtWidgets import QWidget

from pyqt_gridedit.core import ComponentNode
from pyqt_gridedit.exceptions import TemplateNotFoundError, UnknownEditorError
from pyqt_gridedit.edit.text_editor import TextCellEditor

logger = logging.getLogger(__name__)

EditorFactory = Callable[[ComponentNode], QWidget]

_ELEMENT = re.compile(r"<([a-z][a-z0-9_-]*)\s*/>")

DEFAULT_TEMPLATES: Dict[str, str] = {
    "grid/editableCell": '<div class="grid-cell-editor"><editable_cell_directive/></div>',
}


class TemplateCache:
    """Template id -> markup text."""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        self._templates = dict(DEFAULT_TEMPLATES if templates is None else templates)

    def put(self, template_id: str, markup: str) -> None:
        self._templates[template_id] = markup

    def get(self, template_id: str) -> str:
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(f"No editor template registered as {template_id!r}") from None

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates


class EditorRegistry:
    """Editor directive name -> factory building the editor widget for a scope."""

    def __init__(self):
        self._factories: Dict[str, EditorFactory] = {}

    def register(self, name: str, factory: EditorFactory) -> None:
        self._factories[name.lower()] = factory
        logger.debug(f"Registered cell editor {name!r}")

    def get(self, name: str) -> EditorFactory:
        try:
            return self._factories[name.lower()]
        except KeyError:
            raise UnknownEditorError(f"No cell editor registered as {name!r}") from None

    def names(self):
        return sorted(self._factories)


def compile_template(markup: str, scope: ComponentNode,
                     registry: Optional[EditorRegistry] = None) -> QWidget:
    """Build the editor widget described by markup against scope."""
    registry = registry or get_editor_registry()
    match = _ELEMENT.search(markup)
    if match is None:
        raise UnknownEditorError(f"Template contains no editor element: {markup!r}")
    return registry.get(match.group(1))(scope)


_template_cache: Optional[TemplateCache] = None
_editor_registry: Optional[EditorRegistry] = None


def get_template_cache() -> TemplateCache:
    """Get the shared template cache."""
    global _template_cache
    if _template_cache is None:
        _template_cache = TemplateCache()
    return _template_cache


def get_editor_registry() -> EditorRegistry:
    """Get the shared editor registry, pre-populated with the text editor."""
    global _editor_registry
    if _editor_registry is None:
        _editor_registry = EditorRegistry()
        _editor_registry.register("grid-text-editor", TextCellEditor)
    return _editor_registry

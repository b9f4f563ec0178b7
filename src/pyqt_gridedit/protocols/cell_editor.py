"""
Cell editor contract.

Any widget used as an in-place cell editor must implement CellEditor. The editor is
created against its own child component node (the editor scope) and talks to the
owning cell exclusively through lifecycle events:

- it observes BEGIN_CELL_EDIT (broadcast into the cell subtree) to take focus
- it emits END_CELL_EDIT once the user accepts the value
- it emits CANCEL_CELL_EDIT when the user abandons the edit

Accepted values are written back through the bound field path by the editor itself,
before END_CELL_EDIT is emitted.
"""

from abc import ABC, ABCMeta, abstractmethod
from typing import Any

from PyQt6.QtCore import QObject

# PyQt-specific metaclass that combines ABCMeta with Qt's metaclass
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


class CellEditor(ABC):
    """ABC for in-place cell editors."""

    @abstractmethod
    def on_begin_edit(self) -> None:
        """Take input focus and prepare the content for editing."""
        pass

    @abstractmethod
    def get_value(self) -> Any:
        """Return the value currently held by the editor."""
        pass

    @abstractmethod
    def stop_edit(self) -> None:
        """Accept the edit (emit END_CELL_EDIT from the editor scope)."""
        pass

    @abstractmethod
    def cancel_edit(self) -> None:
        """Abandon the edit (emit CANCEL_CELL_EDIT from the editor scope)."""
        pass

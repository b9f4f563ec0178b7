"""pytest configuration and fixtures for pyqt-gridedit tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_global_hooks():
    """Restore global configuration and the key classifier after each test."""
    yield
    from pyqt_gridedit.protocols import set_grid_edit_config
    from pyqt_gridedit.edit import register_start_edit_key_classifier

    set_grid_edit_config(None)
    register_start_edit_key_classifier(None)


class ManualScheduler:
    """Stands in for QTimer.singleShot; runs callbacks on demand."""

    def __init__(self):
        self.calls = []

    def __call__(self, delay_ms, callback):
        self.calls.append((delay_ms, callback))

    def run_all(self):
        calls, self.calls = self.calls, []
        for _, callback in calls:
            callback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


def double_click(widget):
    """Deliver a double click to widget (and its event filters)."""
    pos = QPointF(5, 5)
    event = QMouseEvent(
        QEvent.Type.MouseButtonDblClick, pos, widget.mapToGlobal(pos),
        Qt.MouseButton.LeftButton, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier,
    )
    QApplication.sendEvent(widget, event)


@pytest.fixture
def dblclick(qapp):
    return double_click

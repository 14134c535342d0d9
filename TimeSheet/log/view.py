"""Log dialog for browsing the in-memory log tank.

This module provides:
    - LogView: read-only text view of the formatted log messages
    - LogDialog: dialog with a minimum level filter, refresh and clear actions
"""
import logging

from PySide6 import QtCore, QtWidgets

from . import log
from ..ui import ui

LEVELS = [
    ('Debug', logging.DEBUG),
    ('Info', logging.INFO),
    ('Warning', logging.WARNING),
    ('Error', logging.ERROR),
    ('Critical', logging.CRITICAL),
]


class LogView(QtWidgets.QPlainTextEdit):
    """Read-only view of the log tank."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setReadOnly(True)
        self.setLineWrapMode(QtWidgets.QPlainTextEdit.NoWrap)
        self._level = logging.DEBUG

    def filter_level(self) -> int:
        return self._level

    @QtCore.Slot(int)
    def set_filter_level(self, level: int) -> None:
        self._level = level
        self.reload()

    @QtCore.Slot()
    def reload(self) -> None:
        handler = log.get_handler()
        if handler is None:
            logging.warning('TankHandler not found; no logs to show.')
            self.setPlainText('')
            return

        self.setPlainText('\n'.join(handler.get_logs(self._level)))
        self.verticalScrollBar().setValue(self.verticalScrollBar().maximum())


class LogDialog(QtWidgets.QDialog):
    """Dialog for viewing app logs."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setWindowTitle('Log')
        self.setObjectName('TimeSheetLogDialog')

        self.level_combo = None
        self.view = None
        self.clear_button = None
        self.refresh_button = None

        self._create_ui()
        self._connect_signals()

    def _create_ui(self):
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(0.5)
        self.layout().setContentsMargins(o, o, o, o)

        row = QtWidgets.QHBoxLayout()
        row.addWidget(QtWidgets.QLabel('Niveau'), 0)

        self.level_combo = QtWidgets.QComboBox(self)
        for name, lvl in LEVELS:
            self.level_combo.addItem(name, lvl)
        row.addWidget(self.level_combo, 1)

        self.refresh_button = QtWidgets.QPushButton('Opdater', self)
        row.addWidget(self.refresh_button, 0)

        self.clear_button = QtWidgets.QPushButton('Ryd', self)
        row.addWidget(self.clear_button, 0)

        self.layout().addLayout(row)

        self.view = LogView(self)
        self.layout().addWidget(self.view, 1)

    def _connect_signals(self):
        self.level_combo.currentIndexChanged.connect(
            lambda idx: self.view.set_filter_level(self.level_combo.itemData(idx))
        )
        self.refresh_button.clicked.connect(self.view.reload)
        self.clear_button.clicked.connect(self._clear_logs)

    def showEvent(self, event):
        self.view.reload()
        super().showEvent(event)

    @QtCore.Slot()
    def _clear_logs(self) -> None:
        handler = log.get_handler()
        if handler is None:
            logging.warning('TankHandler not found; cannot clear underlying logs.')
            return
        handler.clear_logs()
        self.view.reload()

    def sizeHint(self):
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.2),
            ui.Size.DefaultHeight(0.8)
        )

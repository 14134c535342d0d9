"""Application-wide Qt signals and utility slots for TimeSheet.

This module provides:
    - open_spreadsheet slot: opens the configured Google Sheets URL in the browser.
    - Signals: custom Qt signals for session and activity state, sync results
      and UI actions.
"""
import logging

from PySide6 import QtCore, QtWidgets, QtGui


@QtCore.Slot()
def open_spreadsheet() -> None:
    """
    Opens the spreadsheet in the default browser.
    """
    from ..settings import lib

    spreadsheet_id: str = lib.settings.spreadsheet_id
    if not spreadsheet_id:
        logging.error('Cannot open spreadsheet, no spreadsheet id configured.')
        QtWidgets.QMessageBox.critical(None, 'Fejl', 'Der er ikke angivet et regneark-id.')
        return

    url: str = f'https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit'
    logging.debug(f'Opening spreadsheet: {url}')
    QtGui.QDesktopServices.openUrl(QtCore.QUrl(url))


class Signals(QtCore.QObject):
    """Centralized Qt signals for session, sync and UI events."""
    sessionChanged = QtCore.Signal(bool)  # credential present
    activityStateChanged = QtCore.Signal(str)

    monthLabelSaved = QtCore.Signal(str)
    entrySaved = QtCore.Signal()

    openSpreadsheet = QtCore.Signal()
    showLogs = QtCore.Signal()

    error = QtCore.Signal(str)

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        self.openSpreadsheet.connect(open_spreadsheet)


signals = Signals()

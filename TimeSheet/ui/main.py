"""Main window composition and UI entry points for TimeSheet.

This module defines:
    - show(): initialize and display the main window
    - LoginWidget: the page shown while no session is held
    - MainWindow: stacked login and form pages wired to the controller
"""
import logging
from typing import Optional

from PySide6 import QtWidgets, QtCore, QtGui

from . import ui
from .form import TimeEntryForm
from ..core.controller import ActivityState, Controller
from ..core.entry import TimeEntry
from ..log.view import LogDialog
from ..settings.lib import app_name
from ..ui.actions import signals

widget = None


def show():
    global widget

    if widget is None:
        widget = MainWindow()

    widget.show()


class LoginWidget(QtWidgets.QWidget):
    """Sign-in page.

    Signals:
        loginRequested (): Emitted when the sign-in button is clicked.
    """
    loginRequested = QtCore.Signal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('TimeSheetLoginWidget')

        self.error_label: QtWidgets.QLabel
        self.login_button: QtWidgets.QPushButton

        self._create_ui()
        self._connect_signals()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setAlignment(QtCore.Qt.AlignCenter)

        card = QtWidgets.QFrame(self)
        card.setObjectName('TimeSheetCard')
        QtWidgets.QVBoxLayout(card)
        card.layout().setContentsMargins(o * 2, o * 2, o * 2, o * 2)
        card.layout().setSpacing(o)
        self.layout().addWidget(card)

        from ..settings import lib
        title = QtWidgets.QLabel(lib.settings['name'] or app_name, parent=card)
        title.setObjectName('TimeSheetTitleLabel')
        title.setAlignment(QtCore.Qt.AlignCenter)
        card.layout().addWidget(title)

        label = QtWidgets.QLabel('Log ind med din Google-konto for at registrere arbejdstimer', parent=card)
        label.setObjectName('TimeSheetSecondaryLabel')
        label.setAlignment(QtCore.Qt.AlignCenter)
        label.setWordWrap(True)
        card.layout().addWidget(label)

        self.error_label = QtWidgets.QLabel(parent=card)
        self.error_label.setObjectName('TimeSheetErrorLabel')
        self.error_label.setAlignment(QtCore.Qt.AlignCenter)
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        card.layout().addWidget(self.error_label)

        self.login_button = QtWidgets.QPushButton('Log ind med Google', parent=card)
        self.login_button.setObjectName('TimeSheetPrimaryButton')
        card.layout().addWidget(self.login_button)

    def _connect_signals(self) -> None:
        self.login_button.clicked.connect(self.login_requested)

    @QtCore.Slot()
    def login_requested(self) -> None:
        self.error_label.hide()
        self.loginRequested.emit()

    @QtCore.Slot(str)
    def show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.show()

    @QtCore.Slot(bool)
    def set_busy(self, busy: bool) -> None:
        self.login_button.setEnabled(not busy)


class MainWindow(QtWidgets.QMainWindow):
    """Application window switching between the login page and the form.

    Args:
        controller: Runs the operations. A new :class:`Controller` is created if not given.
    """

    def __init__(self, controller: Optional[Controller] = None, parent=None):
        super().__init__(parent=parent)
        self.setWindowTitle(app_name)
        self.setObjectName('TimeSheetMainWindow')

        self.controller: Controller = controller or Controller(parent=self)

        self.stack: QtWidgets.QStackedWidget
        self.login_widget: LoginWidget
        self.form: TimeEntryForm
        self.toolbar: QtWidgets.QToolBar
        self.logout_action: QtGui.QAction
        self.log_dialog: Optional[LogDialog] = None

        self._create_ui()
        self._init_actions()
        self._connect_signals()

    def _create_ui(self) -> None:
        self.toolbar = QtWidgets.QToolBar(self)
        self.toolbar.setObjectName('TimeSheetActionToolBar')
        self.toolbar.setMovable(False)
        self.addToolBar(QtCore.Qt.TopToolBarArea, self.toolbar)

        self.stack = QtWidgets.QStackedWidget(self)
        self.setCentralWidget(self.stack)

        self.login_widget = LoginWidget(parent=self.stack)
        self.stack.addWidget(self.login_widget)

        self.form = TimeEntryForm(parent=self.stack)
        self.stack.addWidget(self.form)

        self.stack.setCurrentWidget(self.login_widget)

    def _init_actions(self) -> None:
        """
        Create and register toolbar actions.
        """
        action_configs = [
            {
                'label': 'Åbn regneark',
                'trigger': signals.openSpreadsheet,
                'shortcut': 'Ctrl+O',
            },
            {
                'label': 'Vis log',
                'trigger': signals.showLogs,
                'shortcut': 'Ctrl+L',
            },
            {
                'attr': 'logout_action',
                'label': 'Log ud',
                'trigger': self.controller.logout,
            },
        ]

        for cfg in action_configs:
            action = QtGui.QAction(cfg['label'], self)
            action.triggered.connect(cfg['trigger'])
            if 'shortcut' in cfg:
                action.setShortcut(cfg['shortcut'])
                action.setShortcutContext(QtCore.Qt.ApplicationShortcut)
            if 'attr' in cfg:
                setattr(self, cfg['attr'], action)
            self.toolbar.addAction(action)
            self.addAction(action)

        self.logout_action.setEnabled(False)

    def _connect_signals(self) -> None:
        self.login_widget.loginRequested.connect(self.login)
        self.form.monthChanged.connect(self.month_changed)
        self.form.submitRequested.connect(self.submit)

        signals.sessionChanged.connect(self.session_changed)
        signals.activityStateChanged.connect(self.activity_state_changed)
        signals.entrySaved.connect(self.entry_saved)
        signals.monthLabelSaved.connect(self.month_label_saved)
        signals.error.connect(self.show_error)
        signals.showLogs.connect(self.show_logs)

    def is_form_shown(self) -> bool:
        return self.stack.currentWidget() is self.form

    @QtCore.Slot()
    def login(self) -> None:
        if not self.controller.login():
            return
        self.show_form()
        self.controller.set_month(self.form.month_index())

    @QtCore.Slot()
    def show_form(self) -> None:
        self.form.clear_messages()
        self.stack.setCurrentWidget(self.form)
        self.logout_action.setEnabled(True)

    @QtCore.Slot()
    def show_login(self) -> None:
        self.stack.setCurrentWidget(self.login_widget)
        self.logout_action.setEnabled(False)

    @QtCore.Slot(int)
    def month_changed(self, index: int) -> None:
        if not self.controller.is_ready():
            return
        self.controller.set_month(index)

    @QtCore.Slot(object)
    def submit(self, time_entry: TimeEntry) -> None:
        self.controller.submit(time_entry)

    @QtCore.Slot(bool)
    def session_changed(self, present: bool) -> None:
        if present:
            return
        logging.debug('Session ended, returning to the login page.')
        self.show_login()

    @QtCore.Slot(str)
    def activity_state_changed(self, state: str) -> None:
        busy = state != ActivityState.Idle.value
        self.login_widget.set_busy(busy)
        self.form.set_busy(busy)

    @QtCore.Slot()
    def entry_saved(self) -> None:
        self.form.reset()
        self.form.show_success()

    @QtCore.Slot(str)
    def month_label_saved(self, month: str) -> None:
        self.statusBar().showMessage(f'Måned gemt: {month}', 5000)

    @QtCore.Slot(str)
    def show_error(self, message: str) -> None:
        if self.is_form_shown():
            self.form.show_error(message)
        else:
            self.login_widget.show_error(message)

    @QtCore.Slot()
    def show_logs(self) -> None:
        if self.log_dialog is None:
            self.log_dialog = LogDialog(parent=self)
        self.log_dialog.show()
        self.log_dialog.raise_()

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.0),
            ui.Size.DefaultHeight(1.5)
        )

"""Activity state machine tying the session and the spreadsheet client together.

The controller runs one operation at a time::

    Idle -> Authenticating -> Syncing -> Idle   (login)
    Idle -> Syncing -> Idle                     (month label, time entry)

Outcomes are reported through :data:`TimeSheet.ui.actions.signals`; the public
methods return ``True`` on success and never raise status exceptions.
"""
import enum
import logging
from typing import Any, Callable, Optional

from PySide6 import QtCore

from . import auth
from . import entry as entry_
from . import service
from ..status import status
from ..ui.actions import signals


class ActivityState(enum.StrEnum):
    Idle = 'idle'
    Authenticating = 'authenticating'
    Syncing = 'syncing'


class Controller(QtCore.QObject):
    """Runs login, month label and time entry operations against the sheet.

    Args:
        session: The session owner. Defaults to :data:`TimeSheet.core.auth.session`.
        runner: Callable running a blocking function, ``runner(func, *args, status_text=...)``.
            Defaults to :func:`TimeSheet.core.service.start_asynchronous`.
        client_factory: Callable returning an uninitialized :class:`SyncClient`.
    """

    def __init__(self, session: Optional[auth.SessionManager] = None,
                 runner: Optional[Callable[..., Any]] = None,
                 client_factory: Optional[Callable[[], service.SyncClient]] = None,
                 parent=None) -> None:
        super().__init__(parent=parent)
        self.session: auth.SessionManager = session or auth.session
        self.runner: Callable[..., Any] = runner or service.start_asynchronous
        self.client_factory: Callable[[], service.SyncClient] = client_factory or service.SyncClient.create

        self.client: Optional[service.SyncClient] = None
        self._state: ActivityState = ActivityState.Idle

        self._connect_signals()

    def _connect_signals(self) -> None:
        signals.sessionChanged.connect(self.session_changed)

    @property
    def state(self) -> ActivityState:
        return self._state

    def is_busy(self) -> bool:
        return self._state != ActivityState.Idle

    def is_ready(self) -> bool:
        """True when signed in and the spreadsheet connection is initialized."""
        return (
            self.session.is_authenticated() and
            self.client is not None and
            self.client.is_initialized()
        )

    def _set_state(self, state: ActivityState) -> None:
        if state == self._state:
            return
        logging.debug(f'Activity state: {self._state.value} -> {state.value}')
        self._state = state
        signals.activityStateChanged.emit(state.value)

    def _check_idle(self) -> bool:
        if not self.is_busy():
            return True
        ex = status.BusyException(f'Operation refused, controller is {self._state.value}.')
        signals.error.emit(ex.status_message)
        return False

    @QtCore.Slot(bool)
    def session_changed(self, present: bool) -> None:
        if present:
            return
        self._close_client()

    def _close_client(self) -> None:
        client, self.client = self.client, None
        if client is not None:
            client.close()

    def login(self) -> bool:
        """
        Sign in and initialize the spreadsheet connection.

        Any initialization failure invalidates the session, even if an
        earlier login succeeded.

        Returns:
            bool: True when the form can be used.
        """
        if not self._check_idle():
            return False

        self._set_state(ActivityState.Authenticating)
        try:
            credential = self.session.login()
        except status.BaseStatusException as ex:
            self._set_state(ActivityState.Idle)
            signals.error.emit(ex.status_message)
            return False

        self._set_state(ActivityState.Syncing)
        self._close_client()
        try:
            client = self.client_factory()
            self.runner(client.initialize, credential, status_text='Forbinder til Google Sheets...')
        except status.BaseStatusException as ex:
            self.session.invalidate(ex.detail or ex.status_message)
            signals.error.emit(ex.status_message)
            return False
        finally:
            self._set_state(ActivityState.Idle)

        self.client = client
        return True

    def set_month(self, index: int) -> bool:
        """
        Write the label of the selected month.

        A failure keeps the session.

        Args:
            index: Zero-based month index.
        """
        if not self._check_idle():
            return False

        try:
            name = entry_.month_name(index)
            client = self._require_client()
        except status.BaseStatusException as ex:
            signals.error.emit(ex.status_message)
            return False

        self._set_state(ActivityState.Syncing)
        try:
            self.runner(client.set_month_label, name, status_text='Gemmer måned...')
        except status.BaseStatusException as ex:
            signals.error.emit(ex.status_message)
            return False
        finally:
            self._set_state(ActivityState.Idle)

        signals.monthLabelSaved.emit(name)
        return True

    def submit(self, time_entry: entry_.TimeEntry) -> bool:
        """
        Validate and write a time entry into its day's row.

        Validation errors are reported without any remote call. A failed write
        keeps the session and the caller keeps its form data.
        """
        if not self._check_idle():
            return False

        try:
            time_entry.validate()
            client = self._require_client()
        except status.BaseStatusException as ex:
            signals.error.emit(ex.status_message)
            return False

        self._set_state(ActivityState.Syncing)
        try:
            self.runner(client.save_time_entry, time_entry, status_text='Gemmer tidsregistrering...')
        except status.BaseStatusException as ex:
            signals.error.emit(ex.status_message)
            return False
        finally:
            self._set_state(ActivityState.Idle)

        signals.entrySaved.emit()
        return True

    def logout(self) -> None:
        """End the session and drop the spreadsheet connection."""
        if self.is_busy():
            logging.warning('Sign-out requested while busy, ignored.')
            return
        self._close_client()
        self.session.invalidate('Signed out by the user.')

    def _require_client(self) -> service.SyncClient:
        if self.client is None or not self.client.is_initialized():
            raise status.WriteException('No initialized spreadsheet connection.')
        return self.client

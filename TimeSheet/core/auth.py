"""
Google OAuth2 sign-in and session credential management.

The credential lives only in process memory, owned by :class:`SessionManager`.
It is acquired at login and discarded when the connection probe after login
fails or the user signs out. There is no refresh: a failed call ends the session.
"""

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

import google.oauth2.credentials
import google_auth_oauthlib.flow
from PySide6 import QtCore, QtWidgets

from ..status import status
from ..ui.ui import BaseProgressDialog

AUTH_TIMEOUT: int = 60


class AuthStrategy(enum.StrEnum):
    """How the bearer token for the Sheets API is obtained.

    The strategy is picked once, in the configuration, and never mixed.
    """
    AccessToken = 'access_token'
    IdToken = 'id_token'

    @property
    def scopes(self) -> List[str]:
        if self == AuthStrategy.IdToken:
            return [
                'openid',
                'https://www.googleapis.com/auth/userinfo.email',
            ]
        return [
            'https://www.googleapis.com/auth/spreadsheets',
            'https://www.googleapis.com/auth/drive.file',
        ]


class SessionState(enum.StrEnum):
    Absent = 'absent'
    Present = 'present'


@dataclass(frozen=True)
class Credential:
    """An opaque bearer token and the strategy that produced it."""
    token: str = field(repr=False)
    strategy: AuthStrategy = AuthStrategy.AccessToken

    def to_google_credentials(self) -> google.oauth2.credentials.Credentials:
        """Wraps the token for use with googleapiclient."""
        return google.oauth2.credentials.Credentials(token=self.token)


def credential_from_oauth(creds, strategy: AuthStrategy) -> Credential:
    """
    Picks the bearer token out of the OAuth flow result.

    Args:
        creds: The credentials returned by the OAuth flow.
        strategy: The configured strategy.

    Raises:
        status.AuthenticationException: If the flow did not yield the expected token.
    """
    if not creds:
        raise status.AuthenticationException('Authentication was cancelled or no credentials obtained.')

    if strategy == AuthStrategy.IdToken:
        token = getattr(creds, 'id_token', None)
    else:
        token = getattr(creds, 'token', None)

    if not token:
        raise status.AuthenticationException(f'The sign-in flow returned no {strategy.value}.')
    return Credential(token=token, strategy=strategy)


class AuthFlowWorker(QtCore.QThread):
    """
    Runs OAuth web flow in a background thread.

    Signals:
        resultReady (object): Emitted with credentials on success.
        errorOccurred (object): Emitted with the exception on failure.
    """
    resultReady = QtCore.Signal(object)
    errorOccurred = QtCore.Signal(object)

    def __init__(self, flow: google_auth_oauthlib.flow.InstalledAppFlow, parent=None):
        super().__init__(parent)
        self.flow = flow

    def run(self):
        logging.debug(f'[Thread-{threading.get_ident()}] AuthFlowWorker.run: starting local server flow')
        try:
            creds = self.flow.run_local_server(port=0)
        except Exception as ex:
            logging.debug(f'[Thread-{threading.get_ident()}] AuthFlowWorker.run: exception: {ex}')
            self.errorOccurred.emit(ex)
            return
        self.resultReady.emit(creds)


class AuthProgressDialog(BaseProgressDialog):
    """
    Dialog displaying authentication progress with countdown and cancel.
    """

    def __init__(self, timeout_seconds: int = AUTH_TIMEOUT) -> None:
        super().__init__(timeout_seconds)
        self.setWindowTitle('Log ind')

    def _populate_content(self, layout: QtWidgets.QVBoxLayout) -> None:
        label = QtWidgets.QLabel(
            'Fuldfør venligst login i din browser.\n'
            'Venter...'
        )
        layout.addWidget(label, 1)

        self.countdown_label = QtWidgets.QLabel(
            f'Tid tilbage: {self.remaining} sekunder'
        )
        layout.addWidget(self.countdown_label)

        self.cancel_button = QtWidgets.QPushButton('Annuller')
        layout.addWidget(self.cancel_button, 1)

    def _update_countdown_label(self) -> None:
        self.countdown_label.setText(f'Tid tilbage: {self.remaining} sekunder')

    @QtCore.Slot()
    def on_timeout(self) -> None:
        super().on_timeout()
        self.countdown_label.setText('Login fik timeout. Prøv venligst igen.')


def authenticate(strategy: AuthStrategy) -> Credential:
    """
    Run the OAuth consent flow and return the bearer credential.

    The flow runs in a worker thread while the GUI thread waits in a local
    event loop with a progress dialog.

    Returns:
        Credential: The bearer credential for the configured strategy.

    Raises:
        status.ClientSecretNotFoundException: If client_secret.json is missing.
        status.ClientSecretInvalidException: If the client configuration is invalid.
        status.AuthenticationException: If the flow fails, is cancelled or times out.
    """
    from ..settings import lib

    app = QtWidgets.QApplication.instance()
    if not app:
        raise RuntimeError('No Qt application instance; cannot perform interactive auth')
    if QtCore.QThread.currentThread() != app.thread():
        raise RuntimeError('authenticate must be called from the main GUI thread')

    client_config = lib.settings.get_client_config()

    logging.debug(f'Starting new OAuth flow using the "{strategy.value}" strategy...')
    flow = google_auth_oauthlib.flow.InstalledAppFlow.from_client_config(client_config, scopes=strategy.scopes)

    dialog = AuthProgressDialog(timeout_seconds=AUTH_TIMEOUT)
    auth_worker = AuthFlowWorker(flow)
    result = {'creds': None, 'error': None, 'cancelled': False}
    loop = QtCore.QEventLoop()

    auth_worker.resultReady.connect(lambda c: (result.update({'creds': c}), loop.quit()))
    auth_worker.errorOccurred.connect(lambda err: (result.update({'error': err}), loop.quit()))
    dialog.cancelled.connect(lambda: (result.update({'cancelled': True}), loop.quit()))

    auth_worker.start()

    timer = QtCore.QTimer()
    timer.setSingleShot(True)
    timer.timeout.connect(lambda: (dialog.on_timeout(), loop.quit()))
    timer.start(AUTH_TIMEOUT * 1000)

    dialog.show()
    loop.exec()
    timer.stop()
    dialog.close()

    if auth_worker.isRunning():
        auth_worker.terminate()
        auth_worker.wait()
        if result['cancelled']:
            raise status.AuthenticationException('Sign-in was cancelled by the user.')
        raise status.AuthenticationException('OAuth flow timed out (no response from browser).')

    logging.debug('OAuth flow completed.')
    if result['error']:
        raise status.AuthenticationException(f'OAuth flow failed: {result["error"]}')

    return credential_from_oauth(result['creds'], strategy)


class SessionManager:
    """Single owner of the session credential.

    The credential is either present or absent. :meth:`login` makes it present,
    :meth:`invalidate` makes it absent. Both broadcast ``signals.sessionChanged``.
    """

    def __init__(self, strategy: Optional[AuthStrategy] = None):
        self._lock = threading.Lock()
        self._credential: Optional[Credential] = None
        self._strategy = strategy

    @property
    def strategy(self) -> AuthStrategy:
        if self._strategy is not None:
            return self._strategy
        from ..settings import lib
        return lib.settings.auth_strategy

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    @property
    def state(self) -> SessionState:
        return SessionState.Present if self._credential else SessionState.Absent

    def is_authenticated(self) -> bool:
        return self._credential is not None

    def login(self) -> Credential:
        """
        Run the sign-in flow and hold the resulting credential.

        Raises:
            status.AuthenticationException: If sign-in fails or is cancelled. The
                session stays absent.
        """
        strategy = self.strategy
        try:
            credential = authenticate(strategy)
        except (status.ClientSecretNotFoundException, status.ClientSecretInvalidException) as ex:
            raise status.AuthenticationException(str(ex)) from ex

        with self._lock:
            self._credential = credential
        logging.info(f'Signed in using the "{strategy.value}" strategy.')

        from ..ui.actions import signals
        signals.sessionChanged.emit(True)
        return credential

    def invalidate(self, reason: str = '') -> None:
        """
        Discard the held credential and ask the UI to sign in again.

        Args:
            reason: Why the session ended, for the log.
        """
        with self._lock:
            had_credential = self._credential is not None
            self._credential = None

        if not had_credential:
            logging.debug('Session already absent, nothing to invalidate.')
            return

        logging.warning(f'Session invalidated: {reason or "no reason given"}')

        from ..ui.actions import signals
        signals.sessionChanged.emit(False)


session = SessionManager()

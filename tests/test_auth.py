"""
Tests for TimeSheet.core.auth: strategies, credential extraction and the session lifecycle.

Run:
    python -m unittest tests.test_auth
"""
from types import SimpleNamespace
from unittest.mock import patch

from PySide6 import QtCore

from TimeSheet.core import auth
from TimeSheet.core.auth import AuthStrategy, Credential, SessionManager, SessionState
from TimeSheet.settings import lib
from TimeSheet.status import status
from TimeSheet.ui.actions import signals
from tests.base import BaseTestCase


class AuthStrategyTests(BaseTestCase):

    def test_default_strategy_from_config(self):
        self.assertEqual(lib.settings.auth_strategy, AuthStrategy.AccessToken)
        self.assertEqual(SessionManager().strategy, AuthStrategy.AccessToken)

    def test_strategy_from_config(self):
        self.write_config_section('auth', {'strategy': 'id_token'})
        self.assertEqual(SessionManager().strategy, AuthStrategy.IdToken)

    def test_invalid_strategy_is_rejected(self):
        with self.assertRaises(status.ConfigInvalidException):
            self.write_config_section('auth', {'strategy': 'both'})
        self.assertEqual(lib.settings.auth_strategy, AuthStrategy.AccessToken)

    def test_scopes(self):
        self.assertIn('https://www.googleapis.com/auth/spreadsheets', AuthStrategy.AccessToken.scopes)
        self.assertIn('https://www.googleapis.com/auth/drive.file', AuthStrategy.AccessToken.scopes)
        self.assertIn('openid', AuthStrategy.IdToken.scopes)


class CredentialTests(BaseTestCase):

    def test_access_token_strategy_uses_token(self):
        creds = SimpleNamespace(token='access', id_token='identity')
        c = auth.credential_from_oauth(creds, AuthStrategy.AccessToken)
        self.assertEqual(c, Credential(token='access', strategy=AuthStrategy.AccessToken))

    def test_id_token_strategy_uses_id_token(self):
        creds = SimpleNamespace(token='access', id_token='identity')
        c = auth.credential_from_oauth(creds, AuthStrategy.IdToken)
        self.assertEqual(c.token, 'identity')

    def test_missing_token(self):
        with self.assertRaises(status.AuthenticationException):
            auth.credential_from_oauth(SimpleNamespace(token=None), AuthStrategy.AccessToken)
        with self.assertRaises(status.AuthenticationException):
            auth.credential_from_oauth(None, AuthStrategy.AccessToken)

    def test_token_not_in_repr(self):
        self.assertNotIn('secret-token', repr(Credential(token='secret-token')))

    def test_google_credentials(self):
        creds = Credential(token='tok1').to_google_credentials()
        self.assertEqual(creds.token, 'tok1')


class SessionManagerTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.session_changed = self.record(signals.sessionChanged)
        self.session = SessionManager(strategy=AuthStrategy.AccessToken)

    def test_initially_absent(self):
        self.assertEqual(self.session.state, SessionState.Absent)
        self.assertFalse(self.session.is_authenticated())
        self.assertIsNone(self.session.credential)

    @patch('TimeSheet.core.auth.authenticate', return_value=Credential(token='tok1'))
    def test_login_holds_credential(self, authenticate):
        credential = self.session.login()

        authenticate.assert_called_once_with(AuthStrategy.AccessToken)
        self.assertEqual(credential.token, 'tok1')
        self.assertEqual(self.session.state, SessionState.Present)
        self.assertEqual(self.session_changed.emissions, [(True,)])

    def test_login_failure_keeps_session_absent(self):
        with patch('TimeSheet.core.auth.authenticate', side_effect=status.AuthenticationException('cancelled')):
            with self.assertRaises(status.AuthenticationException):
                self.session.login()
        self.assertEqual(self.session.state, SessionState.Absent)
        self.assertEqual(self.session_changed.count, 0)

    def test_login_without_client_secret(self):
        # The template ships an empty client id
        with self.assertRaises(status.AuthenticationException):
            self.session.login()
        self.assertFalse(self.session.is_authenticated())

    @patch('TimeSheet.core.auth.authenticate', return_value=Credential(token='tok1'))
    def test_invalidate_is_idempotent(self, _):
        self.session.login()
        self.session.invalidate('connection check failed')
        self.session.invalidate('connection check failed')

        self.assertEqual(self.session.state, SessionState.Absent)
        self.assertEqual(self.session_changed.emissions, [(True,), (False,)])

    @patch('TimeSheet.core.auth.authenticate', return_value=Credential(token='tok1'))
    def test_credential_is_never_written_to_disk(self, _):
        before = {p.name: p.read_bytes() for p in self.config_paths.config_dir.iterdir()}
        self.session.login()
        after = {p.name: p.read_bytes() for p in self.config_paths.config_dir.iterdir()}

        self.assertEqual(before, after)
        for data in after.values():
            self.assertNotIn(b'tok1', data)


class AuthenticateTests(BaseTestCase):

    def test_client_id_override(self):
        self.set_client_secret(client_id='from-file')
        with patch.dict('os.environ', {lib.CLIENT_ID_ENV_KEY: 'from-env'}):
            config = lib.settings.get_client_config()
        self.assertEqual(config['installed']['client_id'], 'from-env')

    def test_empty_client_id(self):
        with self.assertRaises(status.ClientSecretInvalidException):
            lib.settings.get_client_config()

    def test_flow_uses_strategy_scopes(self):
        self.set_client_secret()

        with patch('google_auth_oauthlib.flow.InstalledAppFlow.from_client_config') as from_client_config, \
                patch.object(auth.AuthFlowWorker, 'start'), \
                patch.object(auth.AuthFlowWorker, 'isRunning', return_value=False), \
                patch.object(auth.AuthProgressDialog, 'show'), \
                patch('PySide6.QtCore.QEventLoop.exec'):
            with self.assertRaises(status.AuthenticationException):
                # No result was delivered, so no credentials were obtained
                auth.authenticate(AuthStrategy.IdToken)

        _, kwargs = from_client_config.call_args
        self.assertEqual(kwargs['scopes'], AuthStrategy.IdToken.scopes)


class FakeFlowWorker(QtCore.QObject):
    """Delivers a preset outcome of the consent flow when started."""
    resultReady = QtCore.Signal(object)
    errorOccurred = QtCore.Signal(object)

    outcome = None
    running = False

    def __init__(self, flow, parent=None):
        super().__init__(parent)
        self.flow = flow

    def start(self):
        if isinstance(self.outcome, Exception):
            self.errorOccurred.emit(self.outcome)
        elif self.outcome is not None:
            self.resultReady.emit(self.outcome)

    def isRunning(self):
        return self.running

    def terminate(self):
        self.running = False

    def wait(self):
        return True


class FakeProgressDialog(QtCore.QObject):
    """Progress dialog that can press its own cancel button when shown."""
    cancelled = QtCore.Signal()

    cancel_on_show = False

    def __init__(self, timeout_seconds=None):
        super().__init__()

    def show(self):
        if self.cancel_on_show:
            self.cancelled.emit()

    def on_timeout(self):
        pass

    def close(self):
        pass


class ConsentFlowTests(BaseTestCase):
    """Drives each outcome of the consent flow through SessionManager.login()."""

    def setUp(self) -> None:
        super().setUp()
        self.set_client_secret()
        self.session_changed = self.record(signals.sessionChanged)
        self.session = SessionManager(strategy=AuthStrategy.AccessToken)

        for target, kwargs in (
                ('google_auth_oauthlib.flow.InstalledAppFlow.from_client_config', {}),
                ('PySide6.QtCore.QEventLoop.exec', {}),
                ('TimeSheet.core.auth.AuthFlowWorker', {'new': FakeFlowWorker}),
                ('TimeSheet.core.auth.AuthProgressDialog', {'new': FakeProgressDialog}),
        ):
            patcher = patch(target, **kwargs)
            patcher.start()
            self.addCleanup(patcher.stop)

    def _login_with(self, outcome=None, running=False, cancel=False):
        with patch.object(FakeFlowWorker, 'outcome', outcome), \
                patch.object(FakeFlowWorker, 'running', running), \
                patch.object(FakeProgressDialog, 'cancel_on_show', cancel):
            return self.session.login()

    def assertLoginFails(self, detail, **kwargs):
        with self.assertRaises(status.AuthenticationException) as ctx:
            self._login_with(**kwargs)
        self.assertIn(detail, ctx.exception.detail)
        self.assertEqual(ctx.exception.status_message, 'Der opstod en fejl under login. Prøv venligst igen.')
        self.assertEqual(self.session.state, SessionState.Absent)
        self.assertIsNone(self.session.credential)
        self.assertEqual(self.session_changed.count, 0)

    def test_success(self):
        credential = self._login_with(outcome=SimpleNamespace(token='tok1', id_token=None))
        self.assertEqual(credential.token, 'tok1')
        self.assertTrue(self.session.is_authenticated())

    def test_user_cancels(self):
        self.assertLoginFails('cancelled by the user', running=True, cancel=True)

    def test_browser_never_answers(self):
        self.assertLoginFails('timed out', running=True)

    def test_provider_error(self):
        self.assertLoginFails('OAuth flow failed', outcome=RuntimeError('access_denied'))
        self.assertLoginFails('access_denied', outcome=RuntimeError('access_denied'))

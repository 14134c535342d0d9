"""Google Sheets API integration for the fixed timesheet layout.

Provides :class:`SyncClient`, which performs the connectivity probe and the two
writes (month label, one day's row) against one spreadsheet, and
:func:`start_asynchronous`, which runs a blocking call in a worker thread while
the GUI waits.

Sheet layout (worksheet ``Ark1``):

=====================  =====================
Purpose                Range
=====================  =====================
Last-sync date stamp   ``F53``
Month label            ``B2``
Day ``d``              ``B{9+d}:G{9+d}``
=====================  =====================

Row columns B..G hold weekday, start time, end time, activity type, duration
and description.
"""

import datetime
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import google.auth.exceptions
from PySide6 import QtCore, QtWidgets
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .auth import Credential
from .entry import TimeEntry, WeekdaySource, FIRST_DAY, LAST_DAY
from ..status import status
from ..ui.ui import BaseProgressDialog

WORKSHEET_NAME: str = 'Ark1'
LAST_SYNC_CELL: str = 'F53'
MONTH_LABEL_CELL: str = 'B2'
BASE_ROW: int = 9
ROW_FIRST_COLUMN: str = 'B'
ROW_LAST_COLUMN: str = 'G'

VALUE_INPUT_OPTION: str = 'USER_ENTERED'


def _today() -> datetime.date:
    return datetime.date.today()


def a1_range(cells: str, worksheet: str = WORKSHEET_NAME) -> str:
    """Returns a sheet-qualified A1 range, e.g. ``Ark1!B2``."""
    return f'{worksheet}!{cells}'


def row_for_day(day: int) -> int:
    """
    Returns the sheet row of a day of the month: day 1 is row 10, day 31 row 40.

    Raises:
        status.InvalidDayException: If the day is outside 1..31.
    """
    if not isinstance(day, int) or not FIRST_DAY <= day <= LAST_DAY:
        raise status.InvalidDayException(f'Day must be {FIRST_DAY}..{LAST_DAY}, got {day!r}.')
    return BASE_ROW + day


def day_row_range(day: int, worksheet: str = WORKSHEET_NAME) -> str:
    """Returns the range covering columns B..G of a day's row, e.g. ``Ark1!B24:G24``."""
    row = row_for_day(day)
    return a1_range(f'{ROW_FIRST_COLUMN}{row}:{ROW_LAST_COLUMN}{row}', worksheet=worksheet)


def format_sync_date(date: datetime.date) -> str:
    """Formats a date as ``D-M-YYYY`` without zero padding, e.g. ``5-6-2024``."""
    return f'{date.day}-{date.month}-{date.year}'


def build_row(entry: TimeEntry, weekday: str) -> List[str]:
    """Returns the six cell values written for an entry, in column order B..G."""
    return [
        weekday,
        entry.start_time,
        entry.end_time,
        entry.activity_type,
        entry.duration,
        entry.description,
    ]


def _describe_http_error(ex: HttpError, spreadsheet_id: str) -> str:
    stat: Optional[int] = ex.resp.status if ex.resp else None
    if stat == 404:
        return f'Spreadsheet "{spreadsheet_id}" not found (HTTP 404).'
    if stat in (401, 403):
        return (
            f'Access denied (HTTP {stat}) for spreadsheet "{spreadsheet_id}". '
            'Make sure the sheet is shared with the signed-in Google account.'
        )
    return f'Error accessing spreadsheet "{spreadsheet_id}": {ex}'


class SyncClient:
    """Reads and writes the fixed timesheet layout of one spreadsheet.

    Construction is pure configuration. :meth:`initialize` attaches a credential
    and probes the connection; the write methods require a successful
    initialization. The client does not serialize calls; callers run one
    operation at a time.
    """

    def __init__(self, spreadsheet_id: str, weekday_source: WeekdaySource = WeekdaySource.CurrentMonth,
                 worksheet: str = WORKSHEET_NAME) -> None:
        if not spreadsheet_id:
            raise status.SpreadsheetIdNotConfiguredException
        self.spreadsheet_id: str = spreadsheet_id
        self.weekday_source: WeekdaySource = WeekdaySource(weekday_source)
        self.worksheet: str = worksheet
        self._service: Any = None

    @classmethod
    def create(cls, spreadsheet_id: Optional[str] = None) -> 'SyncClient':
        """
        Create a client from the settings. No network call is made.

        Args:
            spreadsheet_id: Overrides the configured spreadsheet id.

        Raises:
            status.SpreadsheetIdNotConfiguredException: If no spreadsheet id is available.
        """
        from ..settings import lib
        return cls(
            spreadsheet_id or lib.settings.spreadsheet_id,
            weekday_source=lib.settings.weekday_source,
        )

    def is_initialized(self) -> bool:
        return self._service is not None

    def initialize(self, credential: Credential) -> None:
        """
        Attach the credential, stamp today's date and probe the spreadsheet.

        The date stamp is written on every initialization, as a heartbeat.

        Raises:
            status.InitException: On any failure. The client stays uninitialized
                and the caller must treat the credential as invalid.
        """
        self.close()

        logging.debug(f'Connecting to spreadsheet "{self.spreadsheet_id}"...')
        try:
            service: Any = build(
                'sheets', 'v4',
                credentials=credential.to_google_credentials(),
                cache_discovery=False
            )
            self._update(service, LAST_SYNC_CELL, [[format_sync_date(_today())]])
            result: Dict[str, Any] = service.spreadsheets().get(spreadsheetId=self.spreadsheet_id).execute()
        except HttpError as ex:
            raise status.InitException(_describe_http_error(ex, self.spreadsheet_id)) from ex
        except google.auth.exceptions.GoogleAuthError as ex:
            raise status.InitException(f'Authorization failed: {ex}') from ex
        except Exception as ex:
            raise status.InitException(f'Could not reach spreadsheet "{self.spreadsheet_id}": {ex}') from ex

        if not result:
            raise status.InitException('No result returned from the Sheets API.')

        title = result.get('properties', {}).get('title', '')
        logging.info(f'Access confirmed for spreadsheet "{title or self.spreadsheet_id}".')
        self._service = service

    def set_month_label(self, month_name: str) -> None:
        """
        Overwrite the month label cell.

        Raises:
            status.WriteException: If the client is not initialized or the write fails.
        """
        self._write(MONTH_LABEL_CELL, [[month_name]])
        logging.info(f'Month label set to "{month_name}".')

    def save_time_entry(self, entry: TimeEntry) -> None:
        """
        Write an entry into its day's row, replacing columns B..G.

        The entry is validated first; an invalid entry is never sent.

        Raises:
            status.TimeEntryIncompleteException: If a required field is missing.
            status.TimeEntryInvalidException: If the entry is invalid.
            status.WriteException: If the client is not initialized or the write fails.
        """
        entry.validate()

        row = row_for_day(entry.day)
        weekday = entry.weekday(self.weekday_source, today=_today())
        cells = f'{ROW_FIRST_COLUMN}{row}:{ROW_LAST_COLUMN}{row}'
        self._write(cells, [build_row(entry, weekday)])
        logging.info(f'Saved entry for day {entry.day} ({weekday}) to row {row}.')

    def close(self) -> None:
        """Close the underlying HTTP client; the client is uninitialized afterwards."""
        service, self._service = self._service, None
        if service is None:
            return
        try:
            service.close()
        except Exception as ex:
            logging.debug(f'Failed closing Sheets service client: {ex}')

    def _update(self, service: Any, cells: str, values: List[List[str]]) -> Dict[str, Any]:
        range_ = a1_range(cells, worksheet=self.worksheet)
        logging.debug(f'Updating range "{range_}" with {values}.')
        return service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=range_,
            valueInputOption=VALUE_INPUT_OPTION,
            body={'values': values},
        ).execute()

    def _write(self, cells: str, values: List[List[str]]) -> None:
        if self._service is None:
            raise status.WriteException('The spreadsheet connection is not initialized.')
        try:
            self._update(self._service, cells, values)
        except HttpError as ex:
            raise status.WriteException(_describe_http_error(ex, self.spreadsheet_id)) from ex
        except (google.auth.exceptions.GoogleAuthError, OSError) as ex:
            raise status.WriteException(f'Could not write "{cells}": {ex}') from ex
        except Exception as ex:
            raise status.WriteException(f'Unexpected error writing "{cells}": {type(ex).__name__}: {ex}') from ex


class AsyncWorker(QtCore.QThread):
    """
    Runs one blocking call in a worker thread. Failures are not retried.

    The outcome is kept in :attr:`result` and :attr:`error` and read once the
    thread has finished.

    Signals:
        resultReady (object): Emitted with the function's result on success.
        errorOccurred (object): Emitted with the exception on failure.
    """
    resultReady = QtCore.Signal(object)
    errorOccurred = QtCore.Signal(object)

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.func = func
        self.args = args
        self.kwargs = kwargs

        self.result: Any = None
        self.error: Optional[Exception] = None

    def run(self) -> None:
        logging.debug(f'[Thread-{threading.get_ident()}] AsyncWorker.run: {getattr(self.func, "__name__", self.func)}')
        try:
            self.result = self.func(*self.args, **self.kwargs)
        except Exception as ex:
            self.error = ex
            self.errorOccurred.emit(ex)
            return
        self.resultReady.emit(self.result)


class SyncProgressDialog(BaseProgressDialog):
    """
    Modal busy indicator shown while a spreadsheet call is in flight.

    Calls run to completion, so the dialog has no cancel button.
    """

    def __init__(self, status_text: str = 'Synkroniserer...') -> None:
        super().__init__(None, status_text)
        self.setWindowTitle('Google Sheets')
        self.setWindowFlag(QtCore.Qt.WindowCloseButtonHint, False)

    def _populate_content(self, layout: QtWidgets.QVBoxLayout) -> None:
        self.status_label = QtWidgets.QLabel(self.status_text)
        layout.addWidget(self.status_label, 1)

        progress = QtWidgets.QProgressBar(self)
        progress.setRange(0, 0)
        progress.setTextVisible(False)
        layout.addWidget(progress, 1)

    def reject(self) -> None:
        # Escape must not close the dialog while the call is running
        pass


def start_asynchronous(func: Callable[..., Any], *args: Any,
                       status_text: str = 'Synkroniserer...', **kwargs: Any) -> Any:
    """
    Run a blocking function in an AsyncWorker while a progress dialog is shown.

    The GUI thread waits in a local event loop until the call finishes. There is
    no timeout beyond the transport's own and no cancellation.

    Args:
        func: The blocking function to run.
        *args, **kwargs: Arguments passed to func.
        status_text (str): Label displayed in the progress dialog.

    Returns:
        The result of the function on success.

    Raises:
        status.BaseStatusException: Propagated unchanged from func.
        status.UnknownException: For any other error.
    """
    dialog: SyncProgressDialog = SyncProgressDialog(status_text=status_text)
    worker: AsyncWorker = AsyncWorker(func, *args, **kwargs)
    loop: QtCore.QEventLoop = QtCore.QEventLoop()

    # Queued to the GUI thread, so a call that finishes early still ends the loop
    worker.finished.connect(loop.quit, QtCore.Qt.QueuedConnection)

    worker.start()
    dialog.open()
    loop.exec()

    worker.wait()
    dialog.hide()
    dialog.deleteLater()

    if worker.error is not None:
        err = worker.error
        if isinstance(err, status.BaseStatusException):
            raise err
        raise status.UnknownException(str(err)) from err
    return worker.result

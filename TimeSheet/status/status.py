"""Status definitions and exceptions for TimeSheet.

This module provides:
    - Status: enumeration of possible application states
    - STATUS_MESSAGE: user-facing (Danish) messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., InitException, WriteException) for error handling in services
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Config status
    ConfigNotFound = enum.auto()
    ConfigInvalid = enum.auto()

    # Authentication status
    ClientSecretNotFound = enum.auto()
    ClientSecretInvalid = enum.auto()
    NotAuthenticated = enum.auto()

    # Spreadsheet status
    SpreadsheetIdNotConfigured = enum.auto()
    InitFailed = enum.auto()
    WriteFailed = enum.auto()

    # Form status
    TimeEntryIncomplete = enum.auto()
    TimeEntryInvalid = enum.auto()
    InvalidDay = enum.auto()
    InvalidTime = enum.auto()
    InvalidMonth = enum.auto()

    Busy = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Der opstod en ukendt fejl. Prøv venligst igen.',
    Status.Okay: 'Alt er i orden.',

    Status.ConfigNotFound: 'Kunne ikke finde konfigurationen.',
    Status.ConfigInvalid: 'Konfigurationen er ufuldstændig eller indeholder ugyldige værdier.',

    Status.ClientSecretNotFound: 'Kunne ikke finde Google client secret. Er der sat en gyldig client secret op?',
    Status.ClientSecretInvalid: 'Kunne ikke verificere Google client secret. Er der sat en gyldig client secret op?',
    Status.NotAuthenticated: 'Der opstod en fejl under login. Prøv venligst igen.',

    Status.SpreadsheetIdNotConfigured: 'Der er ikke angivet et regneark-id. Angiv et gyldigt regneark-id i indstillingerne.',
    Status.InitFailed: 'Kunne ikke forbinde til Google Sheets. Prøv venligst igen.',
    Status.WriteFailed: 'Kunne ikke gemme tidsregistrering. Prøv venligst igen.',

    Status.TimeEntryIncomplete: 'Udfyld venligst alle påkrævede felter',
    Status.TimeEntryInvalid: 'Slut tidspunkt skal være efter starttidspunkt',
    Status.InvalidDay: 'Vælg en dag mellem 1 og 31',
    Status.InvalidTime: 'Angiv tidspunkter som TT:MM, f.eks. 08:30',
    Status.InvalidMonth: 'Vælg en gyldig måned',

    Status.Busy: 'Vent venligst, en anden handling er i gang.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, STATUS_MESSAGE[Status.UnknownStatus])


class BaseStatusException(Exception):
    """Base exception for status-based errors in TimeSheet.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.
        detail (str): Optional additional context, not shown to the user.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        self.detail = message or ''
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)


class UnknownException(BaseStatusException):
    """Exception for an unknown error during status processing."""
    pass


class ConfigNotFoundException(BaseStatusException):
    """Exception raised when the timesheet configuration file cannot be found."""
    status = Status.ConfigNotFound


class ConfigInvalidException(BaseStatusException):
    """Exception raised when the timesheet configuration is invalid or malformed."""
    status = Status.ConfigInvalid


class ClientSecretNotFoundException(BaseStatusException):
    """Exception raised when the Google OAuth client secret file cannot be found."""
    status = Status.ClientSecretNotFound


class ClientSecretInvalidException(BaseStatusException):
    """Exception raised when the Google OAuth client secret is invalid or malformed."""
    status = Status.ClientSecretInvalid


class AuthenticationException(BaseStatusException):
    """Exception raised when the sign-in flow fails or is cancelled."""
    status = Status.NotAuthenticated


class SpreadsheetIdNotConfiguredException(BaseStatusException):
    """Exception raised when the spreadsheet ID is not configured."""
    status = Status.SpreadsheetIdNotConfigured


class InitException(BaseStatusException):
    """Exception raised when the connectivity probe after sign-in fails."""
    status = Status.InitFailed


class WriteException(BaseStatusException):
    """Exception raised when a write to the spreadsheet fails."""
    status = Status.WriteFailed


class TimeEntryIncompleteException(BaseStatusException):
    """Exception raised when a required time entry field is missing."""
    status = Status.TimeEntryIncomplete


class TimeEntryInvalidException(BaseStatusException):
    """Exception raised when a time entry is invalid, by default because end is not after start."""
    status = Status.TimeEntryInvalid


class InvalidDayException(TimeEntryInvalidException):
    """Exception raised when the day is outside 1..31."""
    status = Status.InvalidDay


class InvalidTimeException(TimeEntryInvalidException):
    """Exception raised when a time is not a valid HH:MM value."""
    status = Status.InvalidTime


class InvalidMonthException(TimeEntryInvalidException):
    status = Status.InvalidMonth


class BusyException(BaseStatusException):
    """Exception raised when an operation is requested while another is in flight."""
    status = Status.Busy

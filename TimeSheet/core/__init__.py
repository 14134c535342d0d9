"""
Core package for TimeSheet.

This package includes:

- :mod:`TimeSheet.core.auth` – Google OAuth2 sign-in and the in-memory session credential.
- :mod:`TimeSheet.core.entry` – Time entry model, month and weekday names, durations and validation.
- :mod:`TimeSheet.core.service` – Google Sheets API integration for the fixed timesheet layout.
- :mod:`TimeSheet.core.controller` – Activity state machine running login and sync operations.
"""

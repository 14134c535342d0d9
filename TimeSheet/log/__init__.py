"""
Logging subsystem: handlers and a viewer for application logging.

Modules:

- :mod:`TimeSheet.log.log` – Log handler integrating with Python logging.
- :mod:`TimeSheet.log.view` – Qt dialog for browsing and filtering in-memory logs.
"""

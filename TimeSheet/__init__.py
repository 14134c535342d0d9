"""
TimeSheet: desktop application for registering working hours in a Google Sheets timesheet.

This package provides:

- :mod:`TimeSheet.core` – Google sign-in, the time entry model, the Sheets client and the activity controller.
- :mod:`TimeSheet.ui` – A PySide6-based UI with a login page and the time entry form.
- :mod:`TimeSheet.settings` – Settings management and schema validation.
- :mod:`TimeSheet.status` – Status codes, user-facing messages and exceptions.
- :mod:`TimeSheet.log` – In-app logging with a log viewer.

Use :func:`TimeSheet.exec_` to launch the application.
"""

import sys

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('TimeSheet requires Python 3.11 or higher.')

__version__ = '0.1.0'
__author__ = 'UIH/HRS'
__license__ = 'GPL-3.0'
__description__ = 'TimeSheet: desktop application for registering working hours in a Google Sheets timesheet.'

from .log import log

log.setup_logging()


def exec_() -> None:
    """Launch the TimeSheet GUI application and enter its event loop.

    Initializes the QApplication, shows the main window, and starts the Qt event loop.
    """
    from .ui import app
    from .ui import main
    app = app.Application(sys.argv)
    main.show()

    sys.exit(app.exec())


if __name__ == '__main__':
    exec_()

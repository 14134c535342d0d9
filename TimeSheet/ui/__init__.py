"""
UI package: application actions, main application setup, theming, and widgets.

This package provides:

- :mod:`TimeSheet.ui.actions` – Application-wide Qt signals and utility slots.
- :mod:`TimeSheet.ui.app` – QApplication subclass setting application metadata and theme.
- :mod:`TimeSheet.ui.form` – The time entry form.
- :mod:`TimeSheet.ui.main` – Main window with the login and form pages.
- :mod:`TimeSheet.ui.ui` – Styling constants for sizes and colors, and the base progress dialog.
"""

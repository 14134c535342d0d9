"""
Settings package: configuration API.

This package provides:

- :mod:`TimeSheet.settings.lib` – Core settings management and schema validation.
"""

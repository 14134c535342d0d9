"""UI styling utilities for TimeSheet.

This module provides:
    - Theme: supported UI themes (light, dark)
    - Size: standardized size constants and scaling logic
    - Color: standardized color palette for widgets and themes
    - init_stylesheet / apply_theme: token expansion of the bundled stylesheet
    - BaseProgressDialog: modal dialog shown while a blocking operation runs
"""
import enum
import logging
import math
import os
import re
from typing import Optional

from PySide6 import QtWidgets, QtGui, QtCore


class Theme(enum.StrEnum):
    Light = 'light'
    Dark = 'dark'


class Size(enum.Enum):
    """Enumeration of size values used for UI scaling."""
    SmallText = 11.0
    MediumText = 12.0
    LargeText = 16.0
    Indicator = 4.0
    Separator = 1.0
    Margin = 18.0
    RowHeight = 34.0
    DefaultWidth = 640.0
    DefaultHeight = 480.0

    def __new__(cls, value):
        obj = object.__new__(cls)
        obj._value_ = float(value)
        return obj

    def __call__(self, multiplier=1.0, apply_scale=True):
        """
        Returns the scaled size value.

        Args:
            multiplier (float): A multiplier to apply to the size.
            apply_scale (bool): If True, applies UI scaling factors.

        Returns:
            int: The scaled size.
        """
        if apply_scale:
            return round(self.value * float(multiplier))
        return round(self._value_ * float(multiplier))

    @property
    def value(self):
        """float: The scaled size value."""
        return self.size(self._value_)

    @classmethod
    def size(cls, value, ui_scale_factor=1.0, dpi=72.0):
        """Scale a value by DPI and UI scale factor."""
        return math.ceil(float(value) * (float(dpi) / 72.0)) * float(ui_scale_factor)


class Color(enum.Enum):
    """Enumeration of colours used across the UI."""

    VeryDarkBackground = {
        Theme.Light.value: (245, 245, 245),
        Theme.Dark.value: (30, 30, 30),
    }
    DarkBackground = {
        Theme.Light.value: (255, 255, 255),
        Theme.Dark.value: (45, 45, 45),
    }
    Background = {
        Theme.Light.value: (225, 225, 225),
        Theme.Dark.value: (65, 65, 65),
    }
    DisabledText = {
        Theme.Light.value: (150, 150, 150),
        Theme.Dark.value: (135, 135, 135),
    }
    SecondaryText = {
        Theme.Light.value: (90, 90, 90),
        Theme.Dark.value: (185, 185, 185),
    }
    Text = {
        Theme.Light.value: (30, 30, 30),
        Theme.Dark.value: (225, 225, 225),
    }
    Blue = {
        Theme.Light.value: (25, 118, 210),
        Theme.Dark.value: (88, 138, 180),
    }
    DarkBlue = {
        Theme.Light.value: (21, 101, 192),
        Theme.Dark.value: (68, 118, 160),
    }
    Red = {
        Theme.Light.value: (179, 64, 64),
        Theme.Dark.value: (229, 114, 114),
    }
    Green = {
        Theme.Light.value: (46, 125, 50),
        Theme.Dark.value: (90, 200, 155),
    }

    @classmethod
    def _get_theme(cls):
        from ..settings import lib
        theme = lib.settings['theme']
        if theme not in [f.value for f in Theme]:
            theme = Theme.Light.value
        return theme

    def __new__(cls, v):
        if not isinstance(v, dict):
            raise ValueError(f'Invalid color value: {v}. Must be a dictionary, got {type(v)}: {v}')
        obj = object.__new__(cls)
        obj._value_ = v
        return obj

    def __call__(self, qss=False):
        """
        Returns a QColor or CSS rgba string.

        Args:
            qss (bool): If True, returns a CSS rgba string suitable for QSS.
        """
        theme = self._get_theme()
        color = QtGui.QColor(*self._value_[theme])
        if not qss:
            return color

        return self.rgb(color)

    @staticmethod
    def rgb(color):
        """Returns the CSS rgba string for a QColor."""
        rgb = [str(f) for f in color.getRgb()]
        return f'rgba({",".join(rgb)})'


def init_stylesheet():
    """Loads and expands the style sheet used by the app.

    Tokens are written as ``<Name>`` for colors and ``<Name@multiplier>`` for sizes.

    Returns:
        str: The style sheet.
    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('init_stylesheet() must be called after a QApplication is initiated.')

    from ..settings import lib
    if not os.path.isfile(lib.settings.stylesheet_path):
        raise FileNotFoundError(f'Style sheet file not found: {lib.settings.stylesheet_path}')

    with open(lib.settings.stylesheet_path, 'r', encoding='utf-8') as f:
        qss = f.read()

    kwargs = {}

    for enum_ in Color:
        kwargs[enum_.name] = Color.rgb(enum_())

    for enum_ in Size:
        for i in [float(f) / 10.0 for f in range(1, 101)]:
            key = f'{enum_.name}@{i:.1f}'
            if key in kwargs:
                raise KeyError(f'Key {key} already set!')
            kwargs[key] = round(enum_() * i)

    for match in re.finditer(r'<(.*?)>', qss):
        key = match.group(1)
        if key not in kwargs:
            raise KeyError(f'Key {key} not found in kwargs!')

        qss = qss.replace(f'<{key}>', str(kwargs[key]))

    if re.search(r'<(.*?)>', qss):
        raise RuntimeError('Not all tokens were replaced!')

    return qss


def apply_theme() -> None:
    """Set the style sheet for the entire app.

    This function should be called after the QApplication is created.
    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('apply_theme() must be called after a QApplication is initiated.')

    if os.environ.get('TIMESHEET_DISABLE_STYLESHEET', '').lower() in ['1', 'true', 'yes']:
        logging.warning('Stylesheet disabled by environment variable.')
        return

    qss = init_stylesheet()
    QtWidgets.QApplication.instance().setStyleSheet(qss)


class BaseProgressDialog(QtWidgets.QDialog):
    """
    Modal dialog shown while a blocking operation runs in a worker thread.

    Subclasses add their widgets in :meth:`_populate_content`. When
    ``timeout_seconds`` is given, a countdown runs and :meth:`on_timeout` is
    called when it reaches zero.

    Signals:
        cancelled (): Emitted when the user cancels the operation.
    """
    cancelled = QtCore.Signal()

    def __init__(self, timeout_seconds: Optional[int] = None, status_text: str = '', parent=None) -> None:
        super().__init__(parent=parent)
        self.setModal(True)
        self.setWindowFlag(QtCore.Qt.WindowContextHelpButtonHint, False)

        self.timeout_seconds = timeout_seconds
        self.remaining = timeout_seconds or 0
        self.status_text = status_text

        self.cancel_button = None

        self.countdown_timer = QtCore.QTimer(self)
        self.countdown_timer.setInterval(1000)

        QtWidgets.QVBoxLayout(self)
        o = Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self._populate_content(self.layout())

        self._connect_signals()

    def _populate_content(self, layout: QtWidgets.QVBoxLayout) -> None:
        raise NotImplementedError('Subclasses must implement _populate_content.')

    def _connect_signals(self) -> None:
        self.countdown_timer.timeout.connect(self.update_countdown)
        if self.cancel_button is not None:
            self.cancel_button.clicked.connect(self.on_cancel)

    def showEvent(self, event: QtGui.QShowEvent) -> None:
        if self.timeout_seconds:
            self.countdown_timer.start()
        super().showEvent(event)

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(
            Size.DefaultWidth(0.5),
            Size.DefaultHeight(0.3)
        )

    @QtCore.Slot()
    def update_countdown(self) -> None:
        self.remaining -= 1
        self._update_countdown_label()
        if self.remaining <= 0:
            self.countdown_timer.stop()
            self.on_timeout()

    def _update_countdown_label(self) -> None:
        pass

    @QtCore.Slot()
    def on_timeout(self) -> None:
        self.countdown_timer.stop()

    @QtCore.Slot()
    def on_cancel(self) -> None:
        self.countdown_timer.stop()
        self.cancelled.emit()
        self.reject()

"""Time entry form.

This module provides:
    - TimeEdit: line edit accepting 24h "HH:MM" times
    - TimeEntryForm: month/day selectors, times, activity type and description
"""
import datetime

from PySide6 import QtCore, QtGui, QtWidgets

from . import ui
from ..core.entry import FIRST_DAY, LAST_DAY, MONTH_NAMES, TimeEntry, calculate_duration

TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'


class TimeEdit(QtWidgets.QLineEdit):
    """Line edit accepting an empty value or a 24h "HH:MM" time."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setPlaceholderText('TT:MM')
        self.setMaxLength(5)
        self.setValidator(
            QtGui.QRegularExpressionValidator(QtCore.QRegularExpression(r'^\d{0,2}(:\d{0,2})?$'), self)
        )
        self._pattern = QtCore.QRegularExpression(TIME_PATTERN)

    def time(self) -> str:
        """Returns the entered time, or an empty string if incomplete."""
        v = self.text().strip()
        if self._pattern.match(v).hasMatch():
            return v
        return ''


class TimeEntryForm(QtWidgets.QWidget):
    """Form collecting one time entry.

    The month selector is independent of the entry fields: it keeps its value
    across resets and announces changes through ``monthChanged``.

    Signals:
        monthChanged (int): Zero-based index of the newly selected month.
        submitRequested (object): The :class:`TimeEntry` built from the fields.
    """
    monthChanged = QtCore.Signal(int)
    submitRequested = QtCore.Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setObjectName('TimeSheetForm')

        self.month_combo: QtWidgets.QComboBox
        self.day_combo: QtWidgets.QComboBox
        self.start_edit: TimeEdit
        self.end_edit: TimeEdit
        self.activity_edit: QtWidgets.QLineEdit
        self.description_edit: QtWidgets.QPlainTextEdit
        self.duration_label: QtWidgets.QLabel
        self.error_label: QtWidgets.QLabel
        self.success_label: QtWidgets.QLabel
        self.submit_button: QtWidgets.QPushButton

        self._create_ui()
        self._connect_signals()
        self.update_duration()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(o * 0.5)

        card = QtWidgets.QFrame(self)
        card.setObjectName('TimeSheetCard')
        QtWidgets.QVBoxLayout(card)
        card.layout().setContentsMargins(o, o, o, o)
        card.layout().setSpacing(o * 0.5)
        self.layout().addWidget(card, 1)

        from ..settings import lib
        title = QtWidgets.QLabel(lib.settings['name'] or lib.app_name, parent=card)
        title.setObjectName('TimeSheetTitleLabel')
        title.setAlignment(QtCore.Qt.AlignCenter)
        card.layout().addWidget(title)

        grid = QtWidgets.QGridLayout()
        grid.setSpacing(o * 0.5)
        card.layout().addLayout(grid)

        self.month_combo = QtWidgets.QComboBox(parent=card)
        self.month_combo.addItems(MONTH_NAMES)
        self.month_combo.setCurrentIndex(datetime.date.today().month - 1)

        self.day_combo = QtWidgets.QComboBox(parent=card)
        self.day_combo.addItem('', None)
        for day in range(FIRST_DAY, LAST_DAY + 1):
            self.day_combo.addItem(str(day), day)

        self.start_edit = TimeEdit(parent=card)
        self.end_edit = TimeEdit(parent=card)

        rows = (
            (('Måned', self.month_combo), ('Dag', self.day_combo)),
            (('Start tid', self.start_edit), ('Slut tid', self.end_edit)),
        )
        for row, columns in enumerate(rows):
            for column, (label, widget) in enumerate(columns):
                grid.addWidget(QtWidgets.QLabel(label, parent=card), row * 2, column)
                grid.addWidget(widget, row * 2 + 1, column)

        self.duration_label = QtWidgets.QLabel(parent=card)
        self.duration_label.setObjectName('TimeSheetSecondaryLabel')
        card.layout().addWidget(self.duration_label)

        card.layout().addWidget(QtWidgets.QLabel('Undervisning', parent=card))
        self.activity_edit = QtWidgets.QLineEdit(parent=card)
        self.activity_edit.setPlaceholderText('F.eks. Vikar, Undervisning eller tomt')
        card.layout().addWidget(self.activity_edit)

        card.layout().addWidget(QtWidgets.QLabel('Beskrivelse', parent=card))
        self.description_edit = QtWidgets.QPlainTextEdit(parent=card)
        self.description_edit.setTabChangesFocus(True)
        self.description_edit.setFixedHeight(ui.Size.RowHeight(3.0))
        card.layout().addWidget(self.description_edit)

        self.error_label = QtWidgets.QLabel(parent=card)
        self.error_label.setObjectName('TimeSheetErrorLabel')
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        card.layout().addWidget(self.error_label)

        self.success_label = QtWidgets.QLabel('Tid registreret!', parent=card)
        self.success_label.setObjectName('TimeSheetSuccessLabel')
        self.success_label.hide()
        card.layout().addWidget(self.success_label)

        self.submit_button = QtWidgets.QPushButton('Registrer tid', parent=card)
        self.submit_button.setObjectName('TimeSheetPrimaryButton')
        self.submit_button.setDefault(True)
        card.layout().addWidget(self.submit_button)

    def _connect_signals(self) -> None:
        self.month_combo.currentIndexChanged.connect(self.monthChanged)
        self.start_edit.textChanged.connect(self.update_duration)
        self.end_edit.textChanged.connect(self.update_duration)
        self.submit_button.clicked.connect(self.submit)

        self.start_edit.returnPressed.connect(self.submit)
        self.end_edit.returnPressed.connect(self.submit)
        self.activity_edit.returnPressed.connect(self.submit)

    def month_index(self) -> int:
        return self.month_combo.currentIndex()

    def set_month_index(self, index: int) -> None:
        self.month_combo.setCurrentIndex(index)

    def entry(self) -> TimeEntry:
        """Returns the entry described by the current field values."""
        return TimeEntry(
            day=self.day_combo.currentData(),
            month=self.month_combo.currentText(),
            start_time=self.start_edit.time(),
            end_time=self.end_edit.time(),
            activity_type=self.activity_edit.text().strip(),
            description=self.description_edit.toPlainText().strip(),
        )

    @QtCore.Slot()
    def update_duration(self) -> None:
        start, end = self.start_edit.time(), self.end_edit.time()
        self.duration_label.setText(f'Varighed: {calculate_duration(start, end)}')

    @QtCore.Slot()
    def submit(self) -> None:
        """Clears the messages and emits ``submitRequested`` with the current entry."""
        if not self.submit_button.isEnabled():
            return
        self.clear_messages()
        self.submitRequested.emit(self.entry())

    @QtCore.Slot()
    def reset(self) -> None:
        """Clears every entry field. The selected month is kept."""
        self.day_combo.setCurrentIndex(0)
        self.start_edit.clear()
        self.end_edit.clear()
        self.activity_edit.clear()
        self.description_edit.clear()

    @QtCore.Slot(bool)
    def set_busy(self, busy: bool) -> None:
        for widget in (
                self.month_combo, self.day_combo, self.start_edit, self.end_edit,
                self.activity_edit, self.description_edit, self.submit_button
        ):
            widget.setEnabled(not busy)

    @QtCore.Slot()
    def clear_messages(self) -> None:
        self.error_label.hide()
        self.success_label.hide()

    @QtCore.Slot(str)
    def show_error(self, message: str) -> None:
        self.success_label.hide()
        self.error_label.setText(message)
        self.error_label.show()

    @QtCore.Slot()
    def show_success(self) -> None:
        self.error_label.hide()
        self.success_label.show()

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.0),
            ui.Size.DefaultHeight(1.2)
        )

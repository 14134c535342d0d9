"""Time entry model: month and weekday names, durations and local validation.

A :class:`TimeEntry` is created per form submission and never stored locally.
:meth:`TimeEntry.validate` runs before any remote call is made.
"""
import datetime
import enum
from dataclasses import dataclass
from typing import Optional

from ..status import status

MONTH_NAMES = [
    'Januar', 'Februar', 'Marts', 'April', 'Maj', 'Juni',
    'Juli', 'August', 'September', 'Oktober', 'November', 'December'
]

# Indexed by datetime.date.weekday(), Monday is 0
WEEKDAY_NAMES = ['Mandag', 'Tirsdag', 'Onsdag', 'Torsdag', 'Fredag', 'Lørdag', 'Søndag']

FIRST_DAY = 1
LAST_DAY = 31

TIME_FORMAT = '%H:%M'


class WeekdaySource(enum.StrEnum):
    """Which month the weekday of an entry's day is derived from."""
    CurrentMonth = 'current_month'
    SelectedMonth = 'selected_month'


def month_name(index: int) -> str:
    """Returns the display name for a zero-based month index.

    Raises:
        status.InvalidMonthException: If the index is outside 0..11.
    """
    if not isinstance(index, int) or not 0 <= index < len(MONTH_NAMES):
        raise status.InvalidMonthException(f'Invalid month index: {index!r}')
    return MONTH_NAMES[index]


def month_index(name: str) -> int:
    """Returns the zero-based index of a month display name.

    Raises:
        status.InvalidMonthException: If the name is not a known month.
    """
    try:
        return MONTH_NAMES.index(name)
    except ValueError as ex:
        raise status.InvalidMonthException(f'Unknown month: {name!r}') from ex


def parse_time(value: str) -> datetime.time:
    """Parses a 24h "HH:MM" string.

    Raises:
        status.InvalidTimeException: If the value is not a valid time.
    """
    try:
        return datetime.datetime.strptime(value.strip(), TIME_FORMAT).time()
    except (ValueError, AttributeError) as ex:
        raise status.InvalidTimeException(f'Invalid time: {value!r}') from ex


def duration_minutes(start: str, end: str) -> int:
    """Returns the number of minutes between two "HH:MM" times on the same day."""
    s = parse_time(start)
    e = parse_time(end)
    return (e.hour * 60 + e.minute) - (s.hour * 60 + s.minute)


def calculate_duration(start: Optional[str], end: Optional[str]) -> str:
    """Formats the time between start and end as e.g. "4t 30min".

    Missing values yield "0t 0min".
    """
    if not start or not end:
        return '0t 0min'
    minutes = duration_minutes(start, end)
    hours, minutes = divmod(minutes, 60)
    return f'{hours}t {minutes}min'


def weekday_name(day: int, month: Optional[int] = None, today: Optional[datetime.date] = None) -> str:
    """Returns the Danish weekday name for a day of a month.

    The date is built as the first day of the month plus ``day - 1`` days, so a
    day past the end of the month rolls over into the following month.

    Args:
        day: Day of the month, 1..31.
        month: Month number 1..12. Defaults to the month of ``today``.
        today: Reference date supplying the year (and month). Defaults to today.
    """
    today = today or datetime.date.today()
    first = today.replace(day=1)
    if month is not None:
        first = first.replace(month=month)
    date = first + datetime.timedelta(days=day - 1)
    return WEEKDAY_NAMES[date.weekday()]


@dataclass
class TimeEntry:
    """One time registration as entered in the form."""
    day: Optional[int]
    month: str
    start_time: str
    end_time: str
    activity_type: str = ''
    description: str = ''

    @property
    def duration(self) -> str:
        return calculate_duration(self.start_time, self.end_time)

    def validate(self) -> None:
        """Checks the entry before anything is written.

        Raises:
            status.TimeEntryIncompleteException: If day, start or end time is missing.
            status.InvalidDayException: If the day is outside 1..31.
            status.InvalidTimeException: If a time is not HH:MM.
            status.TimeEntryInvalidException: If end is not after start.
        """
        if self.day is None or not self.start_time or not self.end_time:
            raise status.TimeEntryIncompleteException

        if not isinstance(self.day, int) or not FIRST_DAY <= self.day <= LAST_DAY:
            raise status.InvalidDayException(f'Day must be {FIRST_DAY}..{LAST_DAY}, got {self.day!r}.')

        if duration_minutes(self.start_time, self.end_time) <= 0:
            raise status.TimeEntryInvalidException(
                f'End time {self.end_time} is not after start time {self.start_time}.')

    def weekday(self, source: WeekdaySource = WeekdaySource.CurrentMonth,
                today: Optional[datetime.date] = None) -> str:
        """Returns the weekday name written into the row for this entry.

        With ``WeekdaySource.CurrentMonth`` the weekday is taken from the current
        real-world month regardless of the selected month, which is what the
        existing sheet expects.
        """
        if source == WeekdaySource.SelectedMonth:
            return weekday_name(self.day, month=month_index(self.month) + 1, today=today)
        return weekday_name(self.day, today=today)

"""
Tests for TimeSheet.core.entry: month and weekday names, durations and validation.

Run:
    python -m unittest tests.test_entry
"""
import datetime
import unittest

from TimeSheet.core import entry
from TimeSheet.core.entry import TimeEntry, WeekdaySource
from TimeSheet.status import status


class MonthNameTests(unittest.TestCase):

    def test_month_names(self):
        self.assertEqual(entry.month_name(0), 'Januar')
        self.assertEqual(entry.month_name(2), 'Marts')
        self.assertEqual(entry.month_name(11), 'December')

    def test_month_index_round_trip(self):
        for i, name in enumerate(entry.MONTH_NAMES):
            self.assertEqual(entry.month_index(name), i)

    def test_invalid_month_index(self):
        for v in (-1, 12, '2', None):
            with self.assertRaises(status.TimeEntryInvalidException):
                entry.month_name(v)

    def test_unknown_month_name(self):
        with self.assertRaises(status.TimeEntryInvalidException):
            entry.month_index('March')


class DurationTests(unittest.TestCase):

    def test_hours_and_minutes(self):
        self.assertEqual(entry.calculate_duration('08:00', '12:30'), '4t 30min')
        self.assertEqual(entry.calculate_duration('09:15', '10:00'), '0t 45min')
        self.assertEqual(entry.calculate_duration('00:00', '23:59'), '23t 59min')

    def test_missing_values(self):
        self.assertEqual(entry.calculate_duration('', '12:30'), '0t 0min')
        self.assertEqual(entry.calculate_duration('08:00', None), '0t 0min')

    def test_parse_time_rejects_garbage(self):
        for v in ('8', '25:00', '12:60', 'abc'):
            with self.assertRaises(status.TimeEntryInvalidException):
                entry.parse_time(v)


class WeekdayTests(unittest.TestCase):

    def test_current_month_is_used_by_default(self):
        # June 2024 starts on a Saturday
        today = datetime.date(2024, 6, 5)
        self.assertEqual(entry.weekday_name(1, today=today), 'Lørdag')
        self.assertEqual(entry.weekday_name(3, today=today), 'Mandag')
        self.assertEqual(entry.weekday_name(15, today=today), 'Lørdag')

    def test_explicit_month(self):
        today = datetime.date(2024, 6, 5)
        self.assertEqual(entry.weekday_name(15, month=3, today=today), 'Fredag')

    def test_day_past_month_end_rolls_over(self):
        # 31 June is computed as 1 July 2024, a Monday
        today = datetime.date(2024, 6, 5)
        self.assertEqual(entry.weekday_name(31, today=today), 'Mandag')

    def test_entry_weekday_sources(self):
        today = datetime.date(2024, 6, 5)
        e = TimeEntry(day=15, month='Marts', start_time='08:00', end_time='12:30')
        self.assertEqual(e.weekday(WeekdaySource.CurrentMonth, today=today), 'Lørdag')
        self.assertEqual(e.weekday(WeekdaySource.SelectedMonth, today=today), 'Fredag')


class TimeEntryValidationTests(unittest.TestCase):

    def _entry(self, **kwargs):
        data = dict(day=15, month='Marts', start_time='08:00', end_time='12:30',
                    activity_type='Vikar', description='dækket time')
        data.update(kwargs)
        return TimeEntry(**data)

    def test_valid_entry(self):
        e = self._entry()
        e.validate()
        self.assertEqual(e.duration, '4t 30min')

    def test_missing_required_fields(self):
        for kwargs in ({'day': None}, {'start_time': ''}, {'end_time': ''}):
            with self.subTest(**kwargs):
                with self.assertRaises(status.TimeEntryIncompleteException):
                    self._entry(**kwargs).validate()

    def test_end_not_after_start(self):
        for start, end in (('12:30', '08:00'), ('08:00', '08:00')):
            with self.subTest(start=start, end=end):
                with self.assertRaises(status.TimeEntryInvalidException):
                    self._entry(start_time=start, end_time=end).validate()

    def test_day_out_of_range(self):
        for day in (0, 32, -1):
            with self.subTest(day=day):
                with self.assertRaises(status.TimeEntryInvalidException):
                    self._entry(day=day).validate()

    def test_optional_fields_may_be_empty(self):
        self._entry(activity_type='', description='').validate()

    def test_validation_messages(self):
        with self.assertRaises(status.TimeEntryIncompleteException) as ctx:
            self._entry(day=None).validate()
        self.assertEqual(ctx.exception.status_message, 'Udfyld venligst alle påkrævede felter')

        with self.assertRaises(status.TimeEntryInvalidException) as ctx:
            self._entry(start_time='12:30', end_time='08:00').validate()
        self.assertEqual(ctx.exception.status_message, 'Slut tidspunkt skal være efter starttidspunkt')

    def test_day_and_format_messages(self):
        with self.assertRaises(status.InvalidDayException) as ctx:
            self._entry(day=32).validate()
        self.assertEqual(ctx.exception.status_message, 'Vælg en dag mellem 1 og 31')

        with self.assertRaises(status.InvalidTimeException) as ctx:
            self._entry(start_time='8.30').validate()
        self.assertEqual(ctx.exception.status_message, 'Angiv tidspunkter som TT:MM, f.eks. 08:30')

        with self.assertRaises(status.InvalidMonthException):
            entry.month_index('Smarch')


if __name__ == '__main__':
    unittest.main()

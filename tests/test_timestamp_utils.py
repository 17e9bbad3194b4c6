"""
Unit tests for the UTC+09:00 date helpers.
"""

from datetime import datetime, timezone

import pytest

from emotion_monitor.utils.timestamp_utils import JST, previous_business_day, to_date_month


class TestPreviousBusinessDay:

    @pytest.mark.unit
    @pytest.mark.parametrize('today, expected', [
        ('2024-10-07', '2024-10-04'),  # Monday -> Friday
        ('2024-10-08', '2024-10-07'),  # Tuesday
        ('2024-10-09', '2024-10-08'),  # Wednesday
        ('2024-10-10', '2024-10-09'),  # Thursday
        ('2024-10-11', '2024-10-10'),  # Friday
        ('2024-10-12', '2024-10-11'),  # Saturday
        ('2024-10-13', '2024-10-12'),  # Sunday
    ])
    def test_every_weekday(self, today, expected):
        now = datetime.strptime(today, '%Y-%m-%d').replace(hour=9, tzinfo=JST)
        assert previous_business_day(now) == expected

    @pytest.mark.unit
    def test_weekday_is_taken_in_local_time(self):
        # Sunday 16:00 UTC is already Monday 01:00 at UTC+09:00
        now = datetime(2024, 10, 6, 16, 0, tzinfo=timezone.utc)
        assert previous_business_day(now) == '2024-10-04'

    @pytest.mark.unit
    def test_naive_datetime_is_treated_as_utc(self):
        assert previous_business_day(datetime(2024, 10, 6, 16, 0)) == '2024-10-04'

    @pytest.mark.unit
    def test_defaults_to_now(self):
        assert len(previous_business_day()) == len('YYYY-MM-DD')


class TestDateMonth:

    @pytest.mark.unit
    @pytest.mark.parametrize('timestamp, expected', [
        (1728831599, ('2024-10-13', '2024-10')),
        (1728831600, ('2024-10-14', '2024-10')),
        (1727708399, ('2024-09-30', '2024-09')),
        (1727708400, ('2024-10-01', '2024-10')),
    ])
    def test_local_boundaries(self, timestamp, expected):
        assert to_date_month(timestamp) == expected

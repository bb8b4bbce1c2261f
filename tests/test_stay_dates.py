"""
Tests for the date helpers

- Weekday mask matching (Monday = bit 0)
- Inclusive band containment
- Nightly date expansion
"""

import pytest
from datetime import date, timedelta

from app.services.stay_dates import (
    is_weekday_allowed,
    is_date_in_rate_band,
    nightly_dates,
    band_span_days,
)


class TestWeekdayMask:
    """Mask bit (dow + 6) % 7 with Sunday-based dow equals date.weekday()"""

    def test_all_days_mask_allows_every_day(self):
        start = date(2025, 5, 5)  # Monday
        for offset in range(14):
            assert is_weekday_allowed(start + timedelta(days=offset), 127) is True

    def test_weekdays_mask_blocks_weekend(self):
        assert is_weekday_allowed(date(2025, 5, 10), 31) is False  # Saturday
        assert is_weekday_allowed(date(2025, 5, 11), 31) is False  # Sunday

    def test_weekdays_mask_allows_monday_to_friday(self):
        for day in range(12, 17):  # Mon 12 May .. Fri 16 May
            assert is_weekday_allowed(date(2025, 5, day), 31) is True

    def test_single_bit_masks(self):
        monday = date(2025, 5, 12)
        sunday = date(2025, 5, 11)

        assert is_weekday_allowed(monday, 1) is True
        assert is_weekday_allowed(sunday, 1) is False
        assert is_weekday_allowed(sunday, 64) is True
        assert is_weekday_allowed(monday, 64) is False

    def test_empty_mask_allows_nothing(self):
        assert is_weekday_allowed(date(2025, 5, 12), 0) is False

    @pytest.mark.parametrize("mask", [1, 5, 31, 64, 96, 127])
    def test_bit_matches_weekday(self, mask):
        start = date(2025, 5, 5)
        for offset in range(7):
            day = start + timedelta(days=offset)
            sunday_based = (day.weekday() + 1) % 7
            expected = bool(mask & (1 << ((sunday_based + 6) % 7)))
            assert is_weekday_allowed(day, mask) is expected


class TestBandContainment:
    """Band ranges are inclusive on both ends"""

    def test_boundaries_are_included(self, make_band):
        band = make_band(band_start=date(2025, 5, 1), band_end=date(2025, 5, 31))

        assert is_date_in_rate_band(date(2025, 5, 1), band) is True
        assert is_date_in_rate_band(date(2025, 5, 31), band) is True
        assert is_date_in_rate_band(date(2025, 5, 15), band) is True

    def test_outside_dates_are_excluded(self, make_band):
        band = make_band(band_start=date(2025, 5, 1), band_end=date(2025, 5, 31))

        assert is_date_in_rate_band(date(2025, 4, 30), band) is False
        assert is_date_in_rate_band(date(2025, 6, 1), band) is False

    def test_span_days(self, make_band):
        band = make_band(band_start=date(2025, 5, 10), band_end=date(2025, 5, 15))
        assert band_span_days(band) == 5


class TestNightlyDates:
    """Checkout date is never a night"""

    def test_two_nights(self):
        assert nightly_dates(date(2025, 6, 1), date(2025, 6, 3)) == [
            date(2025, 6, 1),
            date(2025, 6, 2),
        ]

    def test_crosses_month_end(self):
        nights = nightly_dates(date(2025, 5, 30), date(2025, 6, 2))
        assert nights == [date(2025, 5, 30), date(2025, 5, 31), date(2025, 6, 1)]

    def test_same_day_has_no_nights(self):
        assert nightly_dates(date(2025, 6, 1), date(2025, 6, 1)) == []

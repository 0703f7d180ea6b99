"""Unit tests for cell coercion helpers."""
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from actiontrack.utils.transforms import cell_text, parse_day, parse_timestamp, to_day


class TestCellText:

    @pytest.mark.parametrize("value", [None, np.nan, pd.NaT, ""])
    def test_missing(self, value):
        assert cell_text(value) == ""

    def test_trims_text(self):
        assert cell_text("  Bakım  ") == "Bakım"

    def test_dates(self):
        assert cell_text(datetime(2024, 9, 25)) == "2024-09-25"
        assert cell_text(pd.Timestamp("2024-09-25 14:30")) == "2024-09-25T14:30:00"
        assert cell_text(date(2024, 9, 25)) == "2024-09-25"

    def test_integral_float(self):
        assert cell_text(16.0) == "16"
        assert cell_text(2.5) == "2.5"


class TestParseDay:

    @pytest.mark.parametrize("value, expected", [
        (16, 16),
        (16.0, 16),
        ("12", 12),
        (" 7. gün", 7),
        ("abc", 1),
        ("", 1),
        (None, 1),
        (np.nan, 1),
        (0, 1),
        ("0", 1),
        (True, 1),
        ("99999999999999999999", 1),
        (10**20, 1),
        (1e30, 1),
        (float("inf"), 1),
    ])
    def test_values(self, value, expected):
        assert parse_day(value) == expected


class TestParseTimestamp:

    def test_iso_date(self):
        assert parse_timestamp("2024-09-01") == pd.Timestamp(2024, 9, 1)

    def test_datetime_cell(self):
        assert parse_timestamp(datetime(2024, 9, 1, 10, 30)) == pd.Timestamp(2024, 9, 1, 10, 30)

    def test_timezone_dropped_after_utc_conversion(self):
        ts = parse_timestamp("2024-09-01T10:00:00+03:00")
        assert ts.tzinfo is None
        assert ts == pd.Timestamp(2024, 9, 1, 7, 0)

    @pytest.mark.parametrize("value", ["", "   ", "not a date", None, np.nan, 45500, 3.5])
    def test_unreadable(self, value):
        assert parse_timestamp(value) is None


def test_to_day_truncates_time():
    assert to_day("2024-09-01T23:59:00") == pd.Timestamp(2024, 9, 1)


def test_to_day_rejects_garbage():
    with pytest.raises(ValueError):
        to_day("soon")

"""Tests for UTC normalization and the UTC datetime column type."""

from datetime import date, datetime

import pytz

from gully_backend.core.time_utils import UTCDateTime, day_window, to_utc, utcnow

KOLKATA = pytz.timezone("Asia/Kolkata")


class TestToUtc:
    def test_naive_is_taken_as_utc(self) -> None:
        assert to_utc(datetime(2024, 3, 10, 9, 30)) == pytz.utc.localize(datetime(2024, 3, 10, 9, 30))

    def test_aware_is_converted(self) -> None:
        converted = to_utc(KOLKATA.localize(datetime(2024, 3, 10, 15, 0)))
        assert (converted.hour, converted.minute) == (9, 30)
        assert converted.utcoffset().total_seconds() == 0

    def test_utcnow_is_aware(self) -> None:
        assert utcnow().tzinfo is not None


def test_day_window_is_aware() -> None:
    start, end = day_window(date(2024, 3, 10))
    assert start == pytz.utc.localize(datetime(2024, 3, 10))
    assert end == pytz.utc.localize(datetime(2024, 3, 11))


class TestUTCDateTime:
    column_type = UTCDateTime()

    def test_binds_aware_utc(self) -> None:
        bound = self.column_type.process_bind_param(KOLKATA.localize(datetime(2024, 3, 10, 15, 0)), None)
        assert bound == pytz.utc.localize(datetime(2024, 3, 10, 9, 30))
        assert bound.tzinfo is not None

    def test_naive_row_loads_as_utc(self) -> None:
        loaded = self.column_type.process_result_value(datetime(2024, 3, 10, 9, 30), None)
        assert loaded == pytz.utc.localize(datetime(2024, 3, 10, 9, 30))

    def test_none_passes_through(self) -> None:
        assert self.column_type.process_bind_param(None, None) is None
        assert self.column_type.process_result_value(None, None) is None

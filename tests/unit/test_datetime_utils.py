"""Tests for bs_common.datetime_utils."""

from datetime import datetime, timezone

from src.bs_common.datetime_utils import end_of_day, ensure_utc, start_of_day

NOON = datetime(2024, 3, 5, 12, 34, 56, 789, tzinfo=timezone.utc)


class TestDayBounds:
    def test_start_of_day(self) -> None:
        assert start_of_day(NOON) == datetime(2024, 3, 5, tzinfo=timezone.utc)

    def test_end_of_day(self) -> None:
        assert end_of_day(NOON) == datetime(2024, 3, 5, 23, 59, 59, 999999, tzinfo=timezone.utc)


class TestEnsureUtc:
    def test_naive_treated_as_utc(self) -> None:
        assert ensure_utc(datetime(2024, 3, 5, 12)) == datetime(2024, 3, 5, 12, tzinfo=timezone.utc)

    def test_none(self) -> None:
        assert ensure_utc(None) is None

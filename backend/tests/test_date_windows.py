# Overview: Pytest coverage for filter-token window resolution and bucket generators.

from datetime import datetime, timedelta

import pytest

from storeledger.date_windows import (
    day_buckets,
    month_buckets,
    previous_week_range,
    resolve,
    resolve_previous,
    resolve_series,
    week_buckets,
    week_range,
    year_buckets,
)


# Wednesday afternoon
NOW = datetime(2026, 3, 18, 15, 30, 12, 345000)
END_OF_TODAY = datetime(2026, 3, 18, 23, 59, 59, 999000)
ONE_MS = timedelta(milliseconds=1)


class TestResolve:

    @pytest.mark.parametrize("moment", [
        datetime(2026, 3, 18, 0, 0, 0),
        datetime(2026, 3, 18, 12, 0, 0),
        datetime(2026, 3, 18, 23, 59, 59, 999999),
    ])
    def test_today_ignores_time_of_day(self, moment):
        window = resolve("today", moment)
        assert window.start == datetime(2026, 3, 18)
        assert window.end == END_OF_TODAY

    def test_last_week_spans_seven_calendar_days(self):
        window = resolve("last-week", NOW)
        assert window.start == datetime(2026, 3, 12)
        assert window.end == END_OF_TODAY

    def test_last_month_spans_thirty_days(self):
        window = resolve("last-month", NOW)
        assert window.start == datetime(2026, 2, 17)
        assert window.end == END_OF_TODAY

    def test_last_six_months_starts_on_first_of_month(self):
        window = resolve("last-6-months", NOW)
        assert window.start == datetime(2025, 10, 1)

    def test_last_year_starts_same_month_previous_year(self):
        window = resolve("last-year", NOW)
        assert window.start == datetime(2025, 3, 1)
        assert window.end == END_OF_TODAY

    @pytest.mark.parametrize("token", [None, "", "yesterday", "LAST-WEEK"])
    def test_unknown_token_falls_back_to_last_week(self, token):
        assert resolve(token, NOW) == resolve("last-week", NOW)

    def test_window_bounds_are_inclusive(self):
        window = resolve("today", NOW)
        assert window.contains(window.start)
        assert window.contains(window.end)
        assert not window.contains(window.end + ONE_MS)


class TestResolvePrevious:

    @pytest.mark.parametrize("token", ["today", "last-week", "last-month", "last-6-months", "last-year"])
    def test_previous_window_is_contiguous(self, token):
        current = resolve(token, NOW)
        previous = resolve_previous(token, NOW)
        assert previous.end == current.start - ONE_MS
        assert previous.start < previous.end

    def test_previous_today_is_yesterday(self):
        previous = resolve_previous("today", NOW)
        assert previous.start == datetime(2026, 3, 17)
        assert previous.end == datetime(2026, 3, 17, 23, 59, 59, 999000)

    def test_previous_last_week(self):
        previous = resolve_previous("last-week", NOW)
        assert previous.start == datetime(2026, 3, 5)

    def test_previous_last_month(self):
        previous = resolve_previous("last-month", NOW)
        assert previous.start == datetime(2026, 1, 18)

    def test_previous_last_six_months(self):
        previous = resolve_previous("last-6-months", NOW)
        assert previous.start == datetime(2025, 4, 1)
        assert previous.end == datetime(2025, 9, 30, 23, 59, 59, 999000)

    def test_previous_last_year(self):
        previous = resolve_previous("last-year", NOW)
        assert previous.start == datetime(2024, 3, 1)
        assert previous.end == datetime(2025, 2, 28, 23, 59, 59, 999000)

    def test_unknown_token_falls_back_to_last_week(self):
        assert resolve_previous("bogus", NOW) == resolve_previous("last-week", NOW)


class TestWeeks:

    def test_week_range_is_monday_to_sunday(self):
        week = week_range(NOW)
        assert week.start == datetime(2026, 3, 16)
        assert week.end == datetime(2026, 3, 22, 23, 59, 59, 999000)

    def test_week_range_on_sunday(self):
        week = week_range(datetime(2026, 3, 22, 10, 0))
        assert week.start == datetime(2026, 3, 16)

    def test_previous_week_range(self):
        week = previous_week_range(NOW)
        assert week.start == datetime(2026, 3, 9)
        assert week.end == datetime(2026, 3, 15, 23, 59, 59, 999000)


class TestBuckets:

    def test_day_buckets_oldest_first_with_weekday_labels(self):
        buckets = day_buckets(NOW, 7)
        assert [b.label for b in buckets] == ["Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed"]
        assert buckets[0].start == datetime(2026, 3, 12)
        assert buckets[-1].end == END_OF_TODAY

    def test_day_buckets_date_labels(self):
        buckets = day_buckets(NOW, 3, label="date")
        assert [b.label for b in buckets] == ["2026-03-16", "2026-03-17", "2026-03-18"]

    def test_week_buckets(self):
        buckets = week_buckets(NOW, 2)
        assert [b.start for b in buckets] == [datetime(2026, 3, 9), datetime(2026, 3, 16)]
        assert buckets[-1].label == "2026-W12"

    def test_month_buckets_cross_year_boundary(self):
        buckets = month_buckets(datetime(2026, 2, 10), 3)
        assert [b.label for b in buckets] == ["Dec", "Jan", "Feb"]
        assert buckets[0].start == datetime(2025, 12, 1)
        assert buckets[0].end == datetime(2025, 12, 31, 23, 59, 59, 999000)

    def test_year_buckets(self):
        buckets = year_buckets(NOW, 2)
        assert [b.label for b in buckets] == ["2025", "2026"]
        assert buckets[1].end == datetime(2026, 12, 31, 23, 59, 59, 999000)

    def test_buckets_are_contiguous(self):
        buckets = month_buckets(NOW, 12)
        for earlier, later in zip(buckets, buckets[1:]):
            assert later.start == earlier.end + ONE_MS


class TestResolveSeries:

    def test_last_7_days(self):
        assert len(resolve_series("last-7-days", NOW)) == 7

    def test_last_month_uses_dates(self):
        buckets = resolve_series("last-month", NOW)
        assert len(buckets) == 30
        assert buckets[-1].label == "2026-03-18"

    def test_last_year_uses_month_names(self):
        buckets = resolve_series("last-year", NOW)
        assert len(buckets) == 12
        assert buckets[0].label == "Apr"
        assert buckets[-1].label == "Mar"

    def test_unknown_falls_back_to_last_7_days(self):
        assert resolve_series("last-week", NOW) == resolve_series("last-7-days", NOW)


class TestSubMillisecondEdges:

    LAST_TICK = datetime(2026, 3, 17, 23, 59, 59, 999500)

    def test_window_holds_stamps_past_its_last_millisecond(self):
        yesterday = resolve_previous("today", NOW)
        assert yesterday.contains(self.LAST_TICK)
        assert not resolve("today", NOW).contains(self.LAST_TICK)

    def test_stop_is_next_midnight(self):
        assert resolve("today", NOW).stop == datetime(2026, 3, 19)

    def test_every_stamp_lands_in_one_day_bucket(self):
        buckets = day_buckets(NOW, 7)
        owners = [b.label for b in buckets if b.window.contains(self.LAST_TICK)]
        assert owners == ["Tue"]

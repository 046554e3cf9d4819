"""
Unit tests for time-series transforms.

Covers daily deltas, period bucketing and the helper windows.
"""

import pytest
from datetime import date, timedelta

from covid_normalization.core.time_series import (
    bucket_by_period, fatality_rate_series, filter_date_range, last_value_by_period,
    period_key, rolling_average_series, series_from_mapping, tail, to_delta_series
)
from covid_normalization.models.series_data import Granularity, PeriodBucket, TimePoint


class TestToDeltaSeries:
    """Tests for to_delta_series."""

    def test_downward_revision_clamps_to_zero(self, make_series):
        cumulative = make_series([100, 150, 140, 200])

        deltas = to_delta_series(cumulative)

        assert [p.value for p in deltas] == [0, 50, 0, 60]

    def test_dates_are_aligned(self, make_series):
        cumulative = make_series([1, 2, 3])

        deltas = to_delta_series(cumulative)

        assert [p.date for p in deltas] == [p.date for p in cumulative]

    def test_empty_series(self):
        assert to_delta_series([]) == []

    def test_single_point_is_zero(self, make_series):
        assert to_delta_series(make_series([500])) == [TimePoint(date(2021, 1, 1), 0.0)]

    @pytest.mark.parametrize("values", [
        [0, 0, 0],
        [10, 10, 25, 25, 90],
        [3, 7, 20, 21, 40, 1000],
    ])
    def test_non_decreasing_sum_matches_span(self, make_series, values):
        cumulative = make_series(values)

        deltas = to_delta_series(cumulative)

        assert len(deltas) == len(cumulative)
        assert deltas[0].value == 0
        assert sum(p.value for p in deltas) == values[-1] - values[0]

    def test_never_negative(self, make_series):
        deltas = to_delta_series(make_series([50, 10, 5, 60, 0]))
        assert all(p.value >= 0 for p in deltas)


class TestBucketByPeriod:
    """Tests for bucket_by_period."""

    def test_month_keys(self):
        series = [
            TimePoint(date(2021, 3, 30), 1),
            TimePoint(date(2021, 3, 31), 2),
            TimePoint(date(2021, 4, 1), 5),
        ]

        buckets = bucket_by_period(series, Granularity.MONTH)

        assert buckets == [PeriodBucket("3/2021", 3), PeriodBucket("4/2021", 5)]

    def test_quarter_keys(self):
        series = [
            TimePoint(date(2020, 12, 31), 4),
            TimePoint(date(2021, 1, 1), 1),
            TimePoint(date(2021, 4, 1), 2),
            TimePoint(date(2021, 6, 30), 3),
        ]

        buckets = bucket_by_period(series, Granularity.QUARTER)

        assert [b.key for b in buckets] == ["Q4 2020", "Q1 2021", "Q2 2021"]
        assert [b.total for b in buckets] == [4, 1, 5]

    def test_week_windows_start_at_first_date(self, make_series):
        series = make_series([1] * 15)

        buckets = bucket_by_period(series, Granularity.WEEK)

        assert buckets == [
            PeriodBucket("Week 1", 7),
            PeriodBucket("Week 2", 7),
            PeriodBucket("Week 3", 1),
        ]

    def test_first_seen_order(self):
        series = [
            TimePoint(date(2021, 5, 1), 1),
            TimePoint(date(2021, 2, 1), 1),
            TimePoint(date(2021, 5, 2), 1),
        ]

        buckets = bucket_by_period(series, Granularity.MONTH)

        assert [b.key for b in buckets] == ["5/2021", "2/2021"]

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_totals_are_conserved(self, granularity):
        start = date(2020, 11, 20)
        series = [TimePoint(start + timedelta(days=i), float(i % 13)) for i in range(200)]

        buckets = bucket_by_period(series, granularity)

        assert sum(b.total for b in buckets) == sum(p.value for p in series)
        assert bucket_by_period(series, granularity) == buckets

    def test_empty_series(self):
        assert bucket_by_period([], Granularity.MONTH) == []

    def test_accepts_string_granularity(self):
        series = [TimePoint(date(2021, 7, 4), 2)]
        assert bucket_by_period(series, "quarter") == [PeriodBucket("Q3 2021", 2)]

    def test_week_key_requires_anchor(self):
        with pytest.raises(ValueError):
            period_key(date(2021, 1, 1), Granularity.WEEK)

    def test_unknown_granularity(self):
        with pytest.raises(ValueError):
            period_key(date(2021, 1, 1), "year")


class TestSeriesHelpers:
    """Tests for mapping conversion and windows."""

    def test_series_from_mapping_sorts_and_sanitizes(self):
        mapping = {"3/2/21": "20", "3/1/21": None, "bogus": 5, "3/3/21": "x"}

        series = series_from_mapping(mapping)

        assert series == [
            TimePoint(date(2021, 3, 1), 0.0),
            TimePoint(date(2021, 3, 2), 20.0),
            TimePoint(date(2021, 3, 3), 0.0),
        ]

    def test_series_from_empty_mapping(self):
        assert series_from_mapping(None) == []
        assert series_from_mapping({}) == []

    def test_last_value_by_period(self):
        series = [
            TimePoint(date(2021, 1, 15), 100),
            TimePoint(date(2021, 1, 31), 180),
            TimePoint(date(2021, 2, 10), 200),
        ]

        buckets = last_value_by_period(series, Granularity.MONTH)

        assert buckets == [PeriodBucket("1/2021", 180), PeriodBucket("2/2021", 200)]

    def test_filter_date_range_is_inclusive(self, make_series):
        series = make_series([1, 2, 3, 4, 5])

        window = filter_date_range(series, date(2021, 1, 2), date(2021, 1, 4))

        assert [p.value for p in window] == [2, 3, 4]

    def test_tail(self, make_series):
        series = make_series([1, 2, 3])
        assert [p.value for p in tail(series, 2)] == [2, 3]
        assert tail(series, 0) == []
        assert len(tail(series, 10)) == 3

    def test_rolling_average_series(self, make_series):
        series = make_series([7, 14, 21])

        averages = rolling_average_series(series, window=2)

        assert [p.value for p in averages] == [7, 10.5, 17.5]
        assert [p.date for p in averages] == [p.date for p in series]

    def test_fatality_rate_series(self, make_series):
        cases = make_series([0, 200, 100])
        deaths = make_series([5, 4, 0])

        rates = fatality_rate_series(cases, deaths)

        assert [p.value for p in rates] == [0, 2.0, 0]

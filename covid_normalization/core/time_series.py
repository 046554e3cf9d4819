"""Time-series transforms: daily deltas, period buckets and windows."""

import math
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from covid_normalization.models.series_data import Granularity, PeriodBucket, TimePoint
from covid_normalization.utils.parsing import parse_record_date, sanitize_number
from covid_normalization.utils.statistics import rolling_mean


def series_from_mapping(mapping: Optional[Mapping[Any, Any]]) -> List[TimePoint]:
    """
    Convert a ``{date_key: raw_value}`` mapping into a sorted series.

    Keys that do not parse as dates are skipped; values are sanitized.
    """
    if not mapping:
        return []

    points = []
    for key, raw in mapping.items():
        point_date = parse_record_date(key)
        if point_date is None:
            continue
        points.append(TimePoint(date=point_date, value=sanitize_number(raw)))

    points.sort(key=lambda p: p.date)
    return points


def to_delta_series(cumulative: Sequence[TimePoint]) -> List[TimePoint]:
    """
    Derive day-over-day differences from a cumulative series.

    Downward revisions of the cumulative count clamp to 0, so the result is
    never negative. The first point has no prior reference and is always 0.

    Args:
        cumulative: Cumulative series ordered by date

    Returns:
        Delta series with the same length and dates as ``cumulative``
    """
    deltas: List[TimePoint] = []
    previous = None

    for point in cumulative:
        if previous is None:
            value = 0.0
        else:
            value = max(0.0, point.value - previous.value)
        deltas.append(TimePoint(date=point.date, value=value))
        previous = point

    return deltas


def period_key(point_date: date, granularity: Granularity, anchor: Optional[date] = None) -> str:
    """
    Get the bucket label of a date.

    Args:
        point_date: Date to label
        granularity: MONTH ('3/2021'), QUARTER ('Q1 2021') or WEEK ('Week 4')
        anchor: First day of week 1 (required for WEEK)
    """
    if granularity == Granularity.MONTH:
        return f"{point_date.month}/{point_date.year}"

    elif granularity == Granularity.QUARTER:
        quarter = math.ceil(point_date.month / 3)
        return f"Q{quarter} {point_date.year}"

    elif granularity == Granularity.WEEK:
        if anchor is None:
            raise ValueError("Week buckets require an anchor date")
        week = (point_date - anchor).days // 7 + 1
        return f"Week {week}"

    else:
        raise ValueError(f"Unsupported granularity: {granularity}")


def bucket_by_period(series: Sequence[TimePoint], granularity: Granularity) -> List[PeriodBucket]:
    """
    Sum point values per period.

    Every point lands in exactly one bucket, so bucket totals add up to the
    series total. Buckets are returned in first-seen key order. Weeks are
    7-day windows counted from the earliest date in ``series``.

    Args:
        series: Time points to aggregate
        granularity: Period granularity

    Returns:
        List of PeriodBucket
    """
    if not series:
        return []

    anchor = min(p.date for p in series)
    totals: Dict[str, float] = {}

    for point in series:
        key = period_key(point.date, granularity, anchor)
        totals[key] = totals.get(key, 0.0) + point.value

    return [PeriodBucket(key=key, total=total) for key, total in totals.items()]


def last_value_by_period(series: Sequence[TimePoint], granularity: Granularity) -> List[PeriodBucket]:
    """
    Keep the last value seen in each period.

    Used for cumulative series, where the end-of-period value is the
    period's running total.
    """
    if not series:
        return []

    anchor = min(p.date for p in series)
    latest: Dict[str, float] = {}

    for point in series:
        latest[period_key(point.date, granularity, anchor)] = point.value

    return [PeriodBucket(key=key, total=value) for key, value in latest.items()]


def filter_date_range(series: Sequence[TimePoint], start: Optional[date] = None,
                      end: Optional[date] = None) -> List[TimePoint]:
    """Keep points with start <= date <= end (either bound optional)."""
    return [
        p for p in series
        if (start is None or p.date >= start) and (end is None or p.date <= end)
    ]


def tail(series: Sequence[TimePoint], n: int) -> List[TimePoint]:
    """Last ``n`` points of a series."""
    if n <= 0:
        return []
    return list(series[-n:])


def rolling_average_series(series: Sequence[TimePoint], window: int = 7) -> List[TimePoint]:
    """Trailing rolling average aligned with the input dates."""
    averages = rolling_mean([p.value for p in series], window)
    return [TimePoint(date=p.date, value=avg) for p, avg in zip(series, averages)]


def fatality_rate_series(daily_cases: Sequence[TimePoint],
                         daily_deaths: Sequence[TimePoint]) -> List[TimePoint]:
    """
    Per-day deaths as a percentage of new cases.

    Days are matched by date; a day with zero cases or zero deaths has a
    rate of 0.
    """
    deaths_by_date = {p.date: p.value for p in daily_deaths}
    rates = []

    for point in daily_cases:
        deaths = deaths_by_date.get(point.date, 0.0)
        if point.value > 0 and deaths > 0:
            rate = deaths / point.value * 100
        else:
            rate = 0.0
        rates.append(TimePoint(date=point.date, value=rate))

    return rates

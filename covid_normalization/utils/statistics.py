"""Statistical utility functions for derived series."""

from typing import List, Sequence
import numpy as np

from covid_normalization.models.series_data import SeriesSummary, TimePoint


def rolling_mean(values: Sequence[float], window: int = 7) -> List[float]:
    """
    Calculate a trailing rolling mean.

    The first ``window - 1`` positions average over the points available so
    far instead of being dropped, so the output is aligned with the input.

    Args:
        values: Input values in time order
        window: Window size in points

    Returns:
        List of rolling means, same length as ``values``
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    if not values:
        return []

    arr = np.asarray(values, dtype=float)
    cumsum = np.concatenate(([0.0], np.cumsum(arr)))

    idx = np.arange(1, len(arr) + 1)
    start = np.maximum(0, idx - window)
    sums = cumsum[idx] - cumsum[start]
    counts = idx - start

    return [float(v) for v in sums / counts]


def summarize_series(series: Sequence[TimePoint]) -> SeriesSummary:
    """
    Calculate total, mean and peak for a series.

    Args:
        series: Time points (typically a delta series)

    Returns:
        SeriesSummary; all zeros for an empty series
    """
    if not series:
        return SeriesSummary(total=0.0, mean=0.0, peak_value=0.0, peak_date=None, count=0)

    arr = np.asarray([p.value for p in series], dtype=float)
    # argmax returns the first occurrence, so ties resolve to the earliest date
    peak_idx = int(np.argmax(arr))

    return SeriesSummary(
        total=float(arr.sum()),
        mean=float(arr.mean()),
        peak_value=float(arr[peak_idx]),
        peak_date=series[peak_idx].date,
        count=len(series),
    )

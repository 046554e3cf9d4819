"""Utility functions for normalization pipeline."""

from covid_normalization.utils.parsing import (
    sanitize_number,
    parse_record_date,
    symptom_display_name
)
from covid_normalization.utils.statistics import (
    rolling_mean,
    summarize_series
)
from covid_normalization.utils.time_utils import (
    rows_in_window,
    latest_valid_row
)

__all__ = [
    "sanitize_number",
    "parse_record_date",
    "symptom_display_name",
    "rolling_mean",
    "summarize_series",
    "rows_in_window",
    "latest_valid_row",
]

"""Data models for normalization pipeline."""

from covid_normalization.models.config import NormalizationConfig
from covid_normalization.models.series_data import (
    Granularity,
    TimePoint,
    PeriodBucket,
    NormalizedScore,
    EntityTotals,
    FlowLink,
    FlowGraph,
    DashboardSnapshot,
    ViewState,
)

__all__ = [
    "NormalizationConfig",
    "Granularity",
    "TimePoint",
    "PeriodBucket",
    "NormalizedScore",
    "EntityTotals",
    "FlowLink",
    "FlowGraph",
    "DashboardSnapshot",
    "ViewState",
]

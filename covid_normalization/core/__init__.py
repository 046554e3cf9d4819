"""Core normalization components."""

from covid_normalization.core.time_series import (
    to_delta_series,
    bucket_by_period,
    last_value_by_period,
    series_from_mapping,
)
from covid_normalization.core.scoring import normalize_across_entities
from covid_normalization.core.flow_graph import build_flow_graph
from covid_normalization.core.api_client import DataSourceError, DiseaseShClient, OpenDataClient
from covid_normalization.core.pipeline import DashboardPipeline

__all__ = [
    "to_delta_series",
    "bucket_by_period",
    "last_value_by_period",
    "series_from_mapping",
    "normalize_across_entities",
    "build_flow_graph",
    "DataSourceError",
    "DiseaseShClient",
    "OpenDataClient",
    "DashboardPipeline",
]

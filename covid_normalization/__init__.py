"""
COVID Normalization Layer

Transforms raw COVID-19 time-series records into the derived series,
period buckets, normalized scores and flow graphs that dashboard charts
consume.

DashboardPipeline configures structlog from its NormalizationConfig when it
is created. Callers using the lower-level functions on their own should call
covid_normalization.utils.logging.setup_logging(config) first.
"""

__version__ = "1.0.0"
__author__ = "COVID Dashboard Data Team"
__description__ = "COVID-19 dashboard data normalization pipeline"

from covid_normalization.core.pipeline import DashboardPipeline
from covid_normalization.core.time_series import bucket_by_period, to_delta_series
from covid_normalization.core.scoring import normalize_across_entities
from covid_normalization.core.flow_graph import build_flow_graph
from covid_normalization.models.config import NormalizationConfig
from covid_normalization.utils.parsing import sanitize_number

__all__ = [
    "DashboardPipeline",
    "NormalizationConfig",
    "sanitize_number",
    "to_delta_series",
    "bucket_by_period",
    "normalize_across_entities",
    "build_flow_graph",
]

"""Radar chart processor: cross-country metric comparison."""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional
import structlog

from covid_normalization.core.scoring import normalize_across_entities
from covid_normalization.models.series_data import MetricDefinition, RadarProfile
from covid_normalization.utils.parsing import is_blank, sanitize_number
from covid_normalization.utils.time_utils import latest_valid_row

logger = structlog.get_logger(__name__)


DEFAULT_METRICS = [
    MetricDefinition(key="population", name="Population", higher_is_better=True),
    MetricDefinition(key="cumulative_confirmed", name="Total Cases", higher_is_better=False),
    MetricDefinition(key="cumulative_deceased", name="Total Deaths", higher_is_better=False),
    MetricDefinition(key="gdp_per_capita_usd", name="GDP Per Capita", higher_is_better=True),
    MetricDefinition(key="life_expectancy", name="Life Expectancy", higher_is_better=True),
    MetricDefinition(key="population_density", name="Population Density", higher_is_better=False),
]

# Approximate demographics; these take precedence over CSV columns.
DEFAULT_DEMOGRAPHICS: Dict[str, Dict[str, float]] = {
    "US": {
        "population": 330_000_000,
        "gdp_per_capita_usd": 70_000,
        "life_expectancy": 79,
        "population_density": 36,
    },
    "IN": {
        "population": 1_400_000_000,
        "gdp_per_capita_usd": 2_500,
        "life_expectancy": 70,
        "population_density": 464,
    },
    "CA": {
        "population": 38_000_000,
        "gdp_per_capita_usd": 52_000,
        "life_expectancy": 82,
        "population_density": 4,
    },
}


def has_cumulative_totals(row: Mapping[str, Any]) -> bool:
    """Row carries non-empty cumulative confirmed and deceased values."""
    return not is_blank(row.get("cumulative_confirmed")) and not is_blank(row.get("cumulative_deceased"))


class RadarProcessor:
    """Builds normalized radar profiles for a set of locations."""

    def __init__(self, metrics: Optional[List[MetricDefinition]] = None,
                 demographics: Optional[Mapping[str, Mapping[str, float]]] = None,
                 start: Optional[date] = None, end: Optional[date] = None):
        self.metrics = list(metrics) if metrics is not None else list(DEFAULT_METRICS)
        self.demographics = demographics if demographics is not None else DEFAULT_DEMOGRAPHICS
        self.start = start
        self.end = end
        self.logger = logger.bind(component="radar_processor")

    def raw_metrics(self, code: str, rows: List[Dict[str, Any]]) -> Optional[Dict[str, float]]:
        """
        Collect raw metric values for one location.

        Values come from the demographics table first, then the latest row
        with cumulative totals inside the date window, else 0.

        Returns:
            metric_key -> value, or None when the location has no valid row
        """
        latest = latest_valid_row(rows, has_cumulative_totals, self.start, self.end)
        if latest is None:
            self.logger.warning("No valid time-series row in window, skipping", location=code)
            return None

        _, row = latest
        demo = self.demographics.get(code, {})
        values: Dict[str, float] = {}

        for metric in self.metrics:
            if metric.key in demo:
                values[metric.key] = sanitize_number(demo[metric.key])
            elif metric.key in row:
                values[metric.key] = sanitize_number(row[metric.key])
            else:
                self.logger.debug("Metric not found, using 0", location=code, metric=metric.key)
                values[metric.key] = 0.0

        return values

    def process(self, rows_by_location: Mapping[str, List[Dict[str, Any]]]) -> List[RadarProfile]:
        """
        Normalize radar metrics across every location with valid data.

        Args:
            rows_by_location: location code -> open-data CSV rows

        Returns:
            One RadarProfile per usable location, in input order
        """
        raw_by_entity: Dict[str, Dict[str, float]] = {}
        for code, rows in rows_by_location.items():
            values = self.raw_metrics(code, rows)
            if values is not None:
                raw_by_entity[code] = values

        directions = {m.key: m.higher_is_better for m in self.metrics}
        scores = normalize_across_entities(raw_by_entity, directions)

        profiles = []
        for code, values in raw_by_entity.items():
            profiles.append(RadarProfile(
                entity_id=code,
                raw_values=values,
                scores=[s for s in scores if s.entity_id == code],
            ))

        self.logger.info("Radar profiles built", locations=len(profiles))
        return profiles

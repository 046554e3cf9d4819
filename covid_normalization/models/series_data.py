"""Data models for derived chart series."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field


class Granularity(str, Enum):
    """Period granularity for bucketing time points."""
    MONTH = "month"
    QUARTER = "quarter"
    WEEK = "week"


@dataclass(frozen=True)
class TimePoint:
    """One dated value of a time series."""
    date: date
    value: float


@dataclass(frozen=True)
class PeriodBucket:
    """Aggregated total for one coarsened period label."""
    key: str
    total: float


@dataclass(frozen=True)
class NormalizedScore:
    """Metric value rescaled to [0, 1] across a comparison set."""
    entity_id: str
    metric_key: str
    value: float


@dataclass(frozen=True)
class EntityTotals:
    """Confirmed and deceased totals for one entity (flow graph input)."""
    entity_id: str
    confirmed: float
    deceased: float


@dataclass(frozen=True)
class FlowLink:
    """Weighted link between two flow graph nodes."""
    source: str
    target: str
    value: float


@dataclass(frozen=True)
class FlowGraph:
    """Two-layer flow graph: entities -> outcome categories."""
    nodes: Tuple[str, ...] = ()
    links: Tuple[FlowLink, ...] = ()

    def outgoing_total(self, node: str) -> float:
        """Sum of link values leaving ``node``."""
        return sum(link.value for link in self.links if link.source == node)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [{"name": name} for name in self.nodes],
            "links": [
                {"source": link.source, "target": link.target, "value": link.value}
                for link in self.links
            ],
        }


@dataclass(frozen=True)
class MetricDefinition:
    """Radar chart metric and its direction."""
    key: str
    name: str
    higher_is_better: bool


@dataclass(frozen=True)
class OutcomeSlice:
    """Pie chart slice."""
    label: str
    value: float


@dataclass(frozen=True)
class HeatmapCell:
    entity_id: str
    date: date
    value: float


@dataclass(frozen=True)
class SymptomTrendRow:
    """Search-trend values for one date."""
    date: date
    values: Dict[str, float]


@dataclass(frozen=True)
class SeriesSummary:
    """Descriptive statistics for a time series."""
    total: float
    mean: float
    peak_value: float
    peak_date: Optional[date] = None
    count: int = 0


@dataclass
class CountryTimeline:
    """Cumulative disease.sh history for one entity ('all' for global)."""
    entity_id: str
    cases: List[TimePoint] = field(default_factory=list)
    deaths: List[TimePoint] = field(default_factory=list)
    recovered: List[TimePoint] = field(default_factory=list)

    def metric(self, name: str) -> List[TimePoint]:
        """Return the cumulative series for 'cases', 'deaths' or 'recovered'."""
        if name not in ("cases", "deaths", "recovered"):
            raise ValueError(f"Unsupported metric: {name}")
        return getattr(self, name)


@dataclass(frozen=True)
class TimelineView:
    """Every derived series the timeline charts consume for one entity."""
    entity_id: str
    timeline: CountryTimeline
    daily_cases: List[TimePoint]
    daily_deaths: List[TimePoint]
    recent_daily_cases: List[TimePoint]
    rolling_daily_cases: List[TimePoint]
    monthly_cases: List[PeriodBucket]
    quarterly_deaths: List[PeriodBucket]
    weekly_cases: List[PeriodBucket]
    fatality_rate: List[TimePoint]
    outcome_breakdown: List[OutcomeSlice]
    case_summary: SeriesSummary


@dataclass(frozen=True)
class RadarProfile:
    """Raw and normalized radar metrics for one entity."""
    entity_id: str
    raw_values: Dict[str, float]
    scores: List[NormalizedScore]


@dataclass(frozen=True)
class HeatmapData:
    cells: List[HeatmapCell]
    max_value: float


@dataclass(frozen=True)
class SymptomTrends:
    entity_id: str
    rows: List[SymptomTrendRow]
    display_names: Dict[str, str]


@dataclass
class ViewState:
    """UI selection owned by the caller, never by the pipeline."""
    country: str = "all"
    metric: str = "cases"
    view: str = "all"

    def visible_metrics(self) -> List[str]:
        """Metrics drawn by the multi-line chart for the current view."""
        if self.view == "all":
            return ["cases", "deaths", "recovered"]
        return [self.view]


@dataclass
class RawDataBundle:
    """Raw payloads collected during the gather phase."""
    global_history: Optional[Dict[str, Any]] = None
    country_histories: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    vaccine_coverage: Optional[Any] = None
    location_rows: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardSnapshot:
    """Immutable result of one pipeline refresh."""
    generated_at: datetime
    global_view: Optional[TimelineView]
    country_views: Dict[str, TimelineView]
    daily_vaccinations: List[TimePoint]
    radar_profiles: List[RadarProfile]
    flow_graph: FlowGraph
    heatmap: HeatmapData
    symptom_trends: Optional[SymptomTrends]
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when no source produced usable data."""
        return (
            self.global_view is None
            and not self.country_views
            and not self.radar_profiles
            and not self.flow_graph.nodes
            and not self.heatmap.cells
        )

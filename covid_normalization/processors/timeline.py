"""Timeline processor for disease.sh cumulative histories."""

from typing import Any, Dict, List, Mapping, Optional
import structlog

from covid_normalization.core.time_series import (
    bucket_by_period, fatality_rate_series, last_value_by_period,
    rolling_average_series, series_from_mapping, tail, to_delta_series
)
from covid_normalization.models.series_data import (
    CountryTimeline, Granularity, OutcomeSlice, TimelineView, TimePoint
)
from covid_normalization.utils.statistics import summarize_series

logger = structlog.get_logger(__name__)


class TimelineProcessor:
    """Turns a disease.sh history payload into every timeline chart series."""

    def __init__(self, bar_window_days: int = 30, weekly_window_weeks: int = 8,
                 rolling_window_days: int = 7):
        self.bar_window_days = bar_window_days
        self.weekly_window_weeks = weekly_window_weeks
        self.rolling_window_days = rolling_window_days
        self.logger = logger.bind(component="timeline_processor")

    def parse_timeline(self, entity_id: str, payload: Optional[Mapping[str, Any]]) -> CountryTimeline:
        """
        Parse a global or per-country history payload.

        Country payloads nest the series under 'timeline'; global payloads
        carry them at the top level.
        """
        if not payload:
            return CountryTimeline(entity_id=entity_id)

        series = payload.get("timeline", payload)
        if not isinstance(series, Mapping):
            self.logger.warning("Malformed history payload", entity=entity_id)
            return CountryTimeline(entity_id=entity_id)

        cases = series_from_mapping(series.get("cases"))
        deaths = series_from_mapping(series.get("deaths"))
        reported_recovered = {p.date: p.value for p in series_from_mapping(series.get("recovered"))}

        return CountryTimeline(
            entity_id=entity_id,
            cases=cases,
            deaths=deaths,
            recovered=reconstruct_recovered(cases, deaths, reported_recovered),
        )

    def process(self, entity_id: str, payload: Optional[Mapping[str, Any]]) -> TimelineView:
        """
        Derive the timeline chart series for one entity.

        Args:
            entity_id: 'all' for global, otherwise the country name
            payload: Raw disease.sh history payload

        Returns:
            TimelineView with daily, rolling, bucketed and outcome data
        """
        timeline = self.parse_timeline(entity_id, payload)

        daily_cases = to_delta_series(timeline.cases)
        daily_deaths = to_delta_series(timeline.deaths)

        weekly_window = tail(daily_cases, self.weekly_window_weeks * 7)

        view = TimelineView(
            entity_id=entity_id,
            timeline=timeline,
            daily_cases=daily_cases,
            daily_deaths=daily_deaths,
            recent_daily_cases=tail(daily_cases, self.bar_window_days),
            rolling_daily_cases=rolling_average_series(daily_cases, self.rolling_window_days),
            monthly_cases=last_value_by_period(timeline.cases, Granularity.MONTH),
            quarterly_deaths=bucket_by_period(daily_deaths, Granularity.QUARTER),
            weekly_cases=bucket_by_period(weekly_window, Granularity.WEEK),
            fatality_rate=fatality_rate_series(daily_cases, daily_deaths),
            outcome_breakdown=outcome_breakdown(timeline),
            case_summary=summarize_series(daily_cases),
        )

        self.logger.debug("Processed timeline",
                          entity=entity_id,
                          points=len(timeline.cases))
        return view


def reconstruct_recovered(cases: List[TimePoint], deaths: List[TimePoint],
                          reported: Dict[Any, float]) -> List[TimePoint]:
    """
    Rebuild the recovered series aligned with ``cases``.

    The reported value is kept when 0 < recovered <= cases; otherwise
    recovered is estimated as max(0, cases - deaths).
    """
    deaths_by_date = {p.date: p.value for p in deaths}
    recovered = []

    for point in cases:
        api_value = reported.get(point.date, 0.0)
        if 0 < api_value <= point.value:
            value = api_value
        else:
            value = max(0.0, point.value - deaths_by_date.get(point.date, 0.0))
        recovered.append(TimePoint(date=point.date, value=value))

    return recovered


def outcome_breakdown(timeline: CountryTimeline) -> List[OutcomeSlice]:
    """
    Active/Recovered/Deaths split on the latest date, zero slices dropped.
    """
    if not timeline.cases:
        return []

    latest = timeline.cases[-1].date
    cases = timeline.cases[-1].value
    deaths = next((p.value for p in reversed(timeline.deaths) if p.date == latest), 0.0)
    recovered = next((p.value for p in reversed(timeline.recovered) if p.date == latest), 0.0)
    active = max(0.0, cases - deaths - recovered)

    slices = [
        OutcomeSlice(label="Active", value=active),
        OutcomeSlice(label="Recovered", value=recovered),
        OutcomeSlice(label="Deaths", value=deaths),
    ]
    return [s for s in slices if s.value > 0]

"""Dashboard pipeline orchestrator: gather raw data, then derive chart data."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed
import structlog

from covid_normalization.models.config import NormalizationConfig
from covid_normalization.models.series_data import (
    DashboardSnapshot, HeatmapData, RawDataBundle, TimelineView, ViewState
)
from covid_normalization.core.api_client import DiseaseShClient, OpenDataClient
from covid_normalization.core.time_series import series_from_mapping, to_delta_series
from covid_normalization.processors.timeline import TimelineProcessor
from covid_normalization.processors.radar import RadarProcessor
from covid_normalization.processors.flow import FlowProcessor
from covid_normalization.processors.heatmap import HeatmapProcessor
from covid_normalization.processors.symptoms import SymptomTrendProcessor
from covid_normalization.utils.logging import setup_logging

logger = structlog.get_logger(__name__)

GLOBAL_ENTITY = "all"


class DashboardPipeline:
    """
    Two-phase pipeline behind every dashboard chart.

    Phase 1 (``gather``) fetches each source concurrently and joins on all of
    them. Phase 2 (``build_snapshot``) runs the cross-entity computations,
    which need the complete entity set, and returns an immutable snapshot.
    """

    def __init__(self, config: NormalizationConfig,
                 disease_client: Optional[DiseaseShClient] = None,
                 open_data_client: Optional[OpenDataClient] = None):
        self.config = config
        self.logger = logger.bind(component="dashboard_pipeline")

        # Setup logging
        setup_logging(config)

        client_options = dict(
            timeout=config.http_timeout_seconds,
            max_retries=config.http_max_retries,
            rate_limit_delay=config.rate_limit_delay,
        )
        self.disease_client = disease_client or DiseaseShClient(config.disease_api_base_url, **client_options)
        self.open_data_client = open_data_client or OpenDataClient(config.open_data_base_url, **client_options)

        window = dict(start=config.data_start_date, end=config.data_end_date)
        self.timeline_processor = TimelineProcessor(
            bar_window_days=config.bar_window_days,
            weekly_window_weeks=config.weekly_window_weeks,
            rolling_window_days=config.rolling_window_days,
        )
        self.radar_processor = RadarProcessor(**window)
        self.flow_processor = FlowProcessor(**window)
        self.heatmap_processor = HeatmapProcessor(**window)
        self.symptom_processor = SymptomTrendProcessor(config.symptom_keys, **window)

        self.logger.info("Dashboard pipeline initialized",
                         countries=config.countries,
                         locations=config.location_codes)

    def _fetch_tasks(self) -> Dict[str, Callable[[], Any]]:
        """Map source keys to fetch callables."""
        lastdays = self.config.lookback_days
        tasks: Dict[str, Callable[[], Any]] = {
            "global": lambda: self.disease_client.get_global_history(lastdays),
        }

        for country in self.config.countries:
            tasks[f"country:{country}"] = (
                lambda c=country: self.disease_client.get_country_history(c, lastdays)
            )

        if self.config.fetch_vaccine_coverage:
            tasks["vaccine"] = lambda: self.disease_client.get_vaccine_coverage(lastdays)

        for code in self.config.location_codes:
            tasks[f"location:{code}"] = lambda c=code: self.open_data_client.get_location_rows(c)

        return tasks

    def _store(self, bundle: RawDataBundle, key: str, result: Any) -> None:
        kind, _, name = key.partition(":")
        if kind == "global":
            bundle.global_history = result
        elif kind == "country":
            bundle.country_histories[name] = result
        elif kind == "vaccine":
            bundle.vaccine_coverage = result
        elif kind == "location":
            bundle.location_rows[name] = result

    def gather(self) -> RawDataBundle:
        """
        Fetch every configured source and wait for all of them.

        A failing source is logged and recorded in ``bundle.errors``; the
        remaining sources are still collected.

        Returns:
            RawDataBundle with every payload that arrived
        """
        tasks = self._fetch_tasks()
        results: Dict[str, Any] = {}
        errors: Dict[str, str] = {}

        self.logger.info("Gathering raw data", sources=len(tasks))

        if self.config.enable_parallel_fetch:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                future_to_key = {executor.submit(fn): key for key, fn in tasks.items()}

                for future in as_completed(future_to_key):
                    key = future_to_key[future]
                    try:
                        results[key] = future.result()
                    except Exception as e:
                        self.logger.error("Source fetch failed", source=key, error=str(e))
                        errors[key] = str(e)
        else:
            for key, fn in tasks.items():
                try:
                    results[key] = fn()
                except Exception as e:
                    self.logger.error("Source fetch failed", source=key, error=str(e))
                    errors[key] = str(e)

        # Store in task order so entity order is stable regardless of completion order
        bundle = RawDataBundle(errors=errors)
        for key in tasks:
            if key in results:
                self._store(bundle, key, results[key])

        self.logger.info("Raw data gathered",
                         succeeded=len(results),
                         failed=len(errors))
        return bundle

    def build_snapshot(self, bundle: RawDataBundle) -> DashboardSnapshot:
        """
        Derive every chart structure from a completed bundle.

        Args:
            bundle: Output of ``gather`` (all sources joined)

        Returns:
            DashboardSnapshot; structures are empty where data is missing
        """
        global_view = None
        if bundle.global_history:
            global_view = self.timeline_processor.process(GLOBAL_ENTITY, bundle.global_history)

        country_views = {
            country: self.timeline_processor.process(country, payload)
            for country, payload in bundle.country_histories.items()
            if payload
        }

        coverage = bundle.vaccine_coverage
        if isinstance(coverage, dict) and "timeline" in coverage:
            coverage = coverage["timeline"]
        if not isinstance(coverage, dict):
            coverage = None
        daily_vaccinations = to_delta_series(series_from_mapping(coverage))

        rows = bundle.location_rows
        symptom_trends = None
        if rows:
            first_code = next(iter(rows))
            symptom_trends = self.symptom_processor.process(first_code, rows[first_code])

        snapshot = DashboardSnapshot(
            generated_at=datetime.now(timezone.utc),
            global_view=global_view,
            country_views=country_views,
            daily_vaccinations=daily_vaccinations,
            radar_profiles=self.radar_processor.process(rows),
            flow_graph=self.flow_processor.process(rows),
            heatmap=self.heatmap_processor.process(rows) if rows else HeatmapData(cells=[], max_value=0.0),
            symptom_trends=symptom_trends,
            errors=dict(bundle.errors),
        )

        if snapshot.is_empty:
            self.logger.warning("Snapshot contains no usable data", errors=len(bundle.errors))
        else:
            self.logger.info("Snapshot built",
                             countries=len(country_views),
                             radar_profiles=len(snapshot.radar_profiles),
                             flow_links=len(snapshot.flow_graph.links))
        return snapshot

    def refresh(self) -> DashboardSnapshot:
        """Gather all sources, then build a fresh snapshot."""
        return self.build_snapshot(self.gather())

    def close(self):
        """Close HTTP sessions."""
        self.logger.info("Shutting down dashboard pipeline...")
        self.disease_client.close()
        self.open_data_client.close()


def select_timeline(snapshot: DashboardSnapshot, view_state: ViewState) -> Optional[TimelineView]:
    """
    Resolve the selected country to a timeline view.

    Falls back to the global view when the country is 'all' or was not
    fetched.
    """
    if view_state.country != GLOBAL_ENTITY:
        view = snapshot.country_views.get(view_state.country)
        if view is not None:
            return view
    return snapshot.global_view

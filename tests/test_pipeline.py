"""
Integration tests for the dashboard pipeline with mocked data sources.
"""

import pytest
from datetime import date
from unittest.mock import Mock

from covid_normalization.core.api_client import DataSourceError, DiseaseShClient, OpenDataClient
from covid_normalization.core.pipeline import DashboardPipeline, select_timeline
from covid_normalization.models.series_data import RawDataBundle, ViewState


@pytest.fixture
def disease_client(sample_global_history, sample_country_history):
    client = Mock(spec=DiseaseShClient)
    client.get_global_history.return_value = sample_global_history
    client.get_country_history.return_value = sample_country_history
    client.get_vaccine_coverage.return_value = {"3/1/21": 100, "3/2/21": 160, "3/3/21": 150}
    return client


@pytest.fixture
def open_data_client(sample_location_rows):
    client = Mock(spec=OpenDataClient)
    client.get_location_rows.side_effect = lambda code: sample_location_rows[code]
    return client


@pytest.fixture
def pipeline(test_config, disease_client, open_data_client):
    return DashboardPipeline(test_config, disease_client=disease_client, open_data_client=open_data_client)


class TestGather:
    """Tests for the gather phase."""

    def test_collects_every_source(self, pipeline, disease_client, sample_location_rows):
        bundle = pipeline.gather()

        assert bundle.global_history is not None
        assert list(bundle.country_histories) == ["USA", "India"]
        assert list(bundle.location_rows) == ["US", "IN"]
        assert bundle.vaccine_coverage is not None
        assert bundle.errors == {}
        disease_client.get_global_history.assert_called_once_with(365)

    def test_failed_source_is_recorded(self, pipeline, disease_client):
        def country_history(country, lastdays):
            if country == "India":
                raise DataSourceError("timeout")
            return {"country": country, "timeline": {"cases": {}, "deaths": {}}}

        disease_client.get_country_history.side_effect = country_history

        bundle = pipeline.gather()

        assert list(bundle.country_histories) == ["USA"]
        assert bundle.errors == {"country:India": "timeout"}

    @pytest.mark.parametrize("parallel", [True, False])
    def test_unexpected_source_error_is_recorded(self, test_config, disease_client,
                                                 open_data_client, parallel):
        test_config.enable_parallel_fetch = parallel
        disease_client.get_vaccine_coverage.side_effect = ValueError("bad header")
        pipeline = DashboardPipeline(test_config, disease_client=disease_client, open_data_client=open_data_client)

        bundle = pipeline.gather()

        assert bundle.errors == {"vaccine": "bad header"}
        assert bundle.vaccine_coverage is None
        assert bundle.global_history is not None
        assert list(bundle.location_rows) == ["US", "IN"]

    def test_sequential_fetch(self, test_config, disease_client, open_data_client):
        test_config.enable_parallel_fetch = False
        pipeline = DashboardPipeline(test_config, disease_client=disease_client, open_data_client=open_data_client)

        bundle = pipeline.gather()

        assert list(bundle.location_rows) == ["US", "IN"]

    def test_vaccine_fetch_can_be_disabled(self, test_config, disease_client, open_data_client):
        test_config.fetch_vaccine_coverage = False
        pipeline = DashboardPipeline(test_config, disease_client=disease_client, open_data_client=open_data_client)

        bundle = pipeline.gather()

        assert bundle.vaccine_coverage is None
        disease_client.get_vaccine_coverage.assert_not_called()


class TestBuildSnapshot:
    """Tests for the compute phase."""

    def test_refresh_builds_every_structure(self, pipeline):
        snapshot = pipeline.refresh()

        assert not snapshot.is_empty
        assert snapshot.global_view.entity_id == "all"
        assert set(snapshot.country_views) == {"USA", "India"}
        assert [p.value for p in snapshot.daily_vaccinations] == [0, 60, 0]
        assert [p.entity_id for p in snapshot.radar_profiles] == ["US", "IN"]
        assert set(snapshot.flow_graph.nodes) == {"US", "IN", "Deaths", "Non-Fatal Cases"}
        assert len(snapshot.heatmap.cells) == 3
        assert snapshot.symptom_trends.entity_id == "US"

    def test_empty_bundle_gives_empty_snapshot(self, pipeline):
        snapshot = pipeline.build_snapshot(RawDataBundle(errors={"global": "down"}))

        assert snapshot.is_empty
        assert snapshot.global_view is None
        assert snapshot.daily_vaccinations == []
        assert snapshot.radar_profiles == []
        assert snapshot.flow_graph.nodes == ()
        assert snapshot.symptom_trends is None
        assert snapshot.errors == {"global": "down"}

    def test_country_vaccine_payload(self, pipeline):
        bundle = RawDataBundle(vaccine_coverage={"country": "USA", "timeline": {"1/1/21": 5, "1/2/21": 9}})

        snapshot = pipeline.build_snapshot(bundle)

        assert [(p.date, p.value) for p in snapshot.daily_vaccinations] == [
            (date(2021, 1, 1), 0), (date(2021, 1, 2), 4),
        ]

    def test_snapshots_are_independent(self, pipeline):
        first = pipeline.refresh()
        second = pipeline.refresh()

        assert first is not second
        assert first.flow_graph == second.flow_graph


class TestSelectTimeline:

    def test_selects_country(self, pipeline):
        snapshot = pipeline.refresh()
        assert select_timeline(snapshot, ViewState(country="USA")).entity_id == "USA"

    def test_falls_back_to_global(self, pipeline):
        snapshot = pipeline.refresh()
        assert select_timeline(snapshot, ViewState()).entity_id == "all"
        assert select_timeline(snapshot, ViewState(country="Peru")).entity_id == "all"

    def test_visible_metrics(self):
        assert ViewState().visible_metrics() == ["cases", "deaths", "recovered"]
        assert ViewState(view="deaths").visible_metrics() == ["deaths"]

"""Pytest configuration and fixtures for COVID normalization tests."""

import pytest
from datetime import date, timedelta
from typing import Dict, List
from unittest.mock import MagicMock

from covid_normalization.models.series_data import TimePoint


# ============================================================================
# CONFIG FIXTURES
# ============================================================================

@pytest.fixture
def test_config(monkeypatch):
    """Configuration isolated from the host environment."""
    from covid_normalization.models.config import NormalizationConfig

    monkeypatch.delenv("COVID_COUNTRIES", raising=False)
    return NormalizationConfig(
        _env_file=None,
        countries=["USA", "India"],
        location_codes=["US", "IN"],
        max_workers=2,
        http_max_retries=1,
        log_format="text",
    )


# ============================================================================
# SERIES FIXTURES
# ============================================================================

@pytest.fixture
def make_series():
    """Build a daily series starting at 2021-01-01 from a list of values."""
    def _make(values: List[float], start: date = date(2021, 1, 1)) -> List[TimePoint]:
        return [TimePoint(date=start + timedelta(days=i), value=v) for i, v in enumerate(values)]
    return _make


# ============================================================================
# DISEASE.SH PAYLOAD FIXTURES
# ============================================================================

@pytest.fixture
def sample_global_history():
    """disease.sh /historical/all payload (M/D/YY keys)."""
    return {
        "cases": {"3/1/21": 1000, "3/2/21": 1100, "3/3/21": 1080, "3/4/21": 1300},
        "deaths": {"3/1/21": 10, "3/2/21": 12, "3/3/21": 15, "3/4/21": 20},
        "recovered": {"3/1/21": 0, "3/2/21": 900, "3/3/21": 5000, "3/4/21": 1000},
    }


@pytest.fixture
def sample_country_history(sample_global_history):
    """disease.sh /historical/{country} payload."""
    return {
        "country": "USA",
        "province": ["mainland"],
        "timeline": sample_global_history,
    }


# ============================================================================
# OPEN DATA FIXTURES
# ============================================================================

@pytest.fixture
def sample_location_rows() -> Dict[str, List[Dict[str, str]]]:
    """covid19-open-data CSV rows for two locations."""
    return {
        "US": [
            {"date": "2020-03-01", "new_confirmed": "5", "cumulative_confirmed": "100",
             "cumulative_deceased": "10", "search_trends_cough": "1.5", "search_trends_fever": ""},
            {"date": "2020-03-02", "new_confirmed": "", "cumulative_confirmed": "",
             "cumulative_deceased": "", "search_trends_cough": "", "search_trends_fever": ""},
            {"date": "2020-03-03", "new_confirmed": "40", "cumulative_confirmed": "150",
             "cumulative_deceased": "20", "search_trends_cough": "2.0", "search_trends_fever": "0.5"},
            {"date": "2023-01-01", "new_confirmed": "999", "cumulative_confirmed": "9999",
             "cumulative_deceased": "999", "search_trends_cough": "9", "search_trends_fever": "9"},
        ],
        "IN": [
            {"date": "2020-03-01", "new_confirmed": "7", "cumulative_confirmed": "50",
             "cumulative_deceased": "0"},
        ],
    }


@pytest.fixture
def mock_session():
    """requests.Session stand-in with a mutable headers dict."""
    session = MagicMock()
    session.headers = {}
    return session

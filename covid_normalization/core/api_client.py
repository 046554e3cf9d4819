"""
HTTP clients for the public COVID-19 data sources.

- disease.sh: JSON historical cumulative counts (global and per country)
  and vaccine coverage. https://disease.sh/docs/
- covid19-open-data: one CSV per location with daily, cumulative,
  demographic and search-trend columns.
"""

import csv
import io
import math
import time
import requests
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_RETRY_AFTER = 30


class DataSourceError(Exception):
    """Remote data source request failed."""
    pass


def retry_after_seconds(value: Optional[str], default: int = DEFAULT_RETRY_AFTER) -> int:
    """
    Seconds to wait from a Retry-After header.

    Accepts delay-seconds or an HTTP-date; anything unparseable gives the
    default. Dates in the past give 0.
    """
    if value is None:
        return default

    text = str(value).strip()
    if text.isascii() and text.isdigit():
        return int(text)

    try:
        retry_at = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return default
    if retry_at is None:
        return default
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    delay = (retry_at - datetime.now(timezone.utc)).total_seconds()
    return max(0, int(math.ceil(delay)))


class _BaseClient:
    """Shared session, rate limiting and retry logic."""

    def __init__(self,
                 base_url: str,
                 timeout: int = 30,
                 max_retries: int = 3,
                 rate_limit_delay: float = 0.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay

        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'covid-normalization/1.0.0',
        })

        self._last_request_time = 0.0

    def _rate_limit(self):
        """Apply rate limiting between requests."""
        if self.rate_limit_delay <= 0:
            return
        elapsed = time.time() - self._last_request_time
        if elapsed < self.rate_limit_delay:
            time.sleep(self.rate_limit_delay - elapsed)
        self._last_request_time = time.time()

    def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> requests.Response:
        """Make a GET request with retry logic."""
        url = f"{self.base_url}{endpoint}"

        for attempt in range(self.max_retries):
            try:
                self._rate_limit()

                response = self.session.get(url, params=params, timeout=self.timeout)

                if response.status_code == 429:
                    wait_time = retry_after_seconds(response.headers.get('Retry-After'))
                    logger.warning("Rate limited, waiting", url=url, wait_time=wait_time)
                    time.sleep(wait_time)
                    continue

                if 400 <= response.status_code < 500:
                    logger.error("Data source rejected request",
                                 url=url,
                                 status_code=response.status_code)
                    raise DataSourceError(f"Request to {url} failed with status {response.status_code}")

                response.raise_for_status()
                return response

            except requests.RequestException as e:
                logger.warning("Data source request failed",
                               url=url,
                               attempt=attempt + 1,
                               error=str(e))

                if attempt == self.max_retries - 1:
                    raise DataSourceError(f"Request to {url} failed after {self.max_retries} attempts: {e}") from e

                time.sleep(2 ** attempt)  # Exponential backoff

        raise DataSourceError(f"Request to {url} was rate limited on every attempt")

    def close(self):
        self.session.close()


class DiseaseShClient(_BaseClient):
    """
    disease.sh client for historical cumulative COVID-19 counts.

    Historical payloads map 'M/D/YY' date keys to cumulative totals:
        global:  {"cases": {...}, "deaths": {...}, "recovered": {...}}
        country: {"country": "USA", "timeline": {"cases": {...}, ...}}
    """

    def __init__(self, base_url: str = "https://disease.sh/v3", **kwargs):
        super().__init__(base_url, **kwargs)
        self.session.headers.update({'Accept': 'application/json'})

        logger.info("disease.sh client initialized", base_url=self.base_url)

    def _get_json(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        response = self._make_request(endpoint, params)
        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid JSON from {endpoint}: {e}") from e

    def get_global_history(self, lastdays: int = 365) -> Dict[str, Any]:
        """Get global cumulative cases/deaths/recovered for the last N days."""
        return self._get_json("/covid-19/historical/all", {"lastdays": lastdays})

    def get_country_history(self, country: str, lastdays: int = 365) -> Dict[str, Any]:
        """Get one country's cumulative history for the last N days."""
        return self._get_json(f"/covid-19/historical/{quote(country)}", {"lastdays": lastdays})

    def get_vaccine_coverage(self, lastdays: int = 365, country: Optional[str] = None) -> Any:
        """
        Get cumulative vaccine doses administered.

        Returns:
            {date: doses} globally, or {"country": ..., "timeline": {date: doses}}
            for a single country
        """
        if country:
            endpoint = f"/covid-19/vaccine/coverage/countries/{quote(country)}"
        else:
            endpoint = "/covid-19/vaccine/coverage"
        return self._get_json(endpoint, {"lastdays": lastdays})


class OpenDataClient(_BaseClient):
    """covid19-open-data client returning per-location CSV rows."""

    def __init__(self,
                 base_url: str = "https://storage.googleapis.com/covid19-open-data/v3/location",
                 **kwargs):
        super().__init__(base_url, **kwargs)
        self.session.headers.update({'Accept': 'text/csv'})

        logger.info("Open data client initialized", base_url=self.base_url)

    def get_location_rows(self, code: str) -> List[Dict[str, str]]:
        """
        Get every CSV row for a location.

        Args:
            code: Location key, e.g. 'US', 'IN', 'CA'

        Returns:
            List of row dicts keyed by CSV header; values are raw strings
        """
        response = self._make_request(f"/{quote(code)}.csv")
        reader = csv.DictReader(io.StringIO(response.text))
        rows = list(reader)

        logger.debug("Fetched location rows", code=code, rows=len(rows))
        return rows

"""Configuration for the COVID normalization pipeline."""

from datetime import date
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SYMPTOM_KEYS = [
    "search_trends_cough",
    "search_trends_fever",
    "search_trends_shortness_of_breath",
    "search_trends_anosmia",
    "search_trends_ageusia",
    "search_trends_fatigue",
    "search_trends_anxiety",
    "search_trends_sore_throat",
    "search_trends_headache",
]


class NormalizationConfig(BaseSettings):
    """Configuration for the COVID dashboard data pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="COVID_",
        extra="ignore",
    )

    # Data Source Settings
    disease_api_base_url: str = Field(default="https://disease.sh/v3", description="disease.sh API base URL")
    open_data_base_url: str = Field(
        default="https://storage.googleapis.com/covid19-open-data/v3/location",
        description="covid19-open-data per-location CSV base URL",
    )
    http_timeout_seconds: int = Field(default=30, description="HTTP request timeout in seconds")
    http_max_retries: int = Field(default=3, description="Maximum retry attempts per request")
    rate_limit_delay: float = Field(default=0.0, description="Minimum delay between requests in seconds")

    # Entity Selection
    countries: List[str] = Field(default=["USA", "India", "Brazil"], description="disease.sh country names")
    location_codes: List[str] = Field(default=["US", "IN", "CA"], description="covid19-open-data location codes")
    fetch_vaccine_coverage: bool = Field(default=True, description="Fetch global vaccine coverage history")

    # Time Window Settings
    lookback_days: int = Field(default=365, description="Days of history requested from disease.sh")
    data_start_date: date = Field(default=date(2020, 2, 29), description="First date accepted from open-data rows")
    data_end_date: date = Field(default=date(2022, 6, 17), description="Last date accepted from open-data rows")
    bar_window_days: int = Field(default=30, description="Days shown in daily bar charts")
    weekly_window_weeks: int = Field(default=8, description="Weeks shown in the weekly trend chart")
    rolling_window_days: int = Field(default=7, description="Rolling average window in days")

    # Chart Settings
    symptom_keys: List[str] = Field(default_factory=lambda: list(DEFAULT_SYMPTOM_KEYS),
                                    description="Search-trend columns shown in the symptom streamgraph")

    # Performance Settings
    enable_parallel_fetch: bool = Field(default=True, description="Fetch entities concurrently")
    max_workers: int = Field(default=4, description="Maximum worker threads for fetching")

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    def validate_date_window(self) -> bool:
        """Validate the open-data date window."""
        return self.data_start_date <= self.data_end_date

    def validate_countries(self) -> bool:
        """Validate that at least one entity is configured for each source."""
        return bool(self.countries) and bool(self.location_codes)

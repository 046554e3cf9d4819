"""Symptom search-trend processor for the streamgraph."""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence
import structlog

from covid_normalization.models.config import DEFAULT_SYMPTOM_KEYS
from covid_normalization.models.series_data import SymptomTrendRow, SymptomTrends
from covid_normalization.utils.parsing import sanitize_number, symptom_display_name
from covid_normalization.utils.time_utils import rows_in_window

logger = structlog.get_logger(__name__)


class SymptomTrendProcessor:
    """Extracts dated search-trend values for a single location."""

    def __init__(self, symptom_keys: Optional[Sequence[str]] = None,
                 start: Optional[date] = None, end: Optional[date] = None):
        self.symptom_keys = list(symptom_keys) if symptom_keys is not None else list(DEFAULT_SYMPTOM_KEYS)
        self.start = start
        self.end = end
        self.logger = logger.bind(component="symptom_trend_processor")

    def process(self, code: str, rows: List[Dict[str, Any]]) -> SymptomTrends:
        """
        Build streamgraph rows for one location.

        Rows without any positive symptom value are dropped; the rest are
        sorted by date.
        """
        trend_rows: List[SymptomTrendRow] = []

        for row_date, row in rows_in_window(rows, self.start, self.end):
            values = {key: sanitize_number(row.get(key)) for key in self.symptom_keys}
            if any(v > 0 for v in values.values()):
                trend_rows.append(SymptomTrendRow(date=row_date, values=values))

        trend_rows.sort(key=lambda r: r.date)

        if not trend_rows:
            self.logger.warning("No search trend data in window", location=code)

        return SymptomTrends(
            entity_id=code,
            rows=trend_rows,
            display_names={key: symptom_display_name(key) for key in self.symptom_keys},
        )

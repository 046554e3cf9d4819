"""Heatmap processor: daily new cases per location."""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional
import structlog

from covid_normalization.models.series_data import HeatmapCell, HeatmapData
from covid_normalization.utils.parsing import is_blank, sanitize_number
from covid_normalization.utils.time_utils import rows_in_window

logger = structlog.get_logger(__name__)


class HeatmapProcessor:
    """Collects (location, date, new_confirmed) cells inside the date window."""

    def __init__(self, value_key: str = "new_confirmed",
                 start: Optional[date] = None, end: Optional[date] = None):
        self.value_key = value_key
        self.start = start
        self.end = end
        self.logger = logger.bind(component="heatmap_processor")

    def process(self, rows_by_location: Mapping[str, List[Dict[str, Any]]]) -> HeatmapData:
        cells: List[HeatmapCell] = []

        for code, rows in rows_by_location.items():
            for row_date, row in rows_in_window(rows, self.start, self.end):
                raw = row.get(self.value_key)
                if is_blank(raw):
                    continue
                cells.append(HeatmapCell(entity_id=code, date=row_date, value=sanitize_number(raw)))

        if not cells:
            self.logger.warning("No heatmap data in window", key=self.value_key)

        max_value = max((c.value for c in cells), default=0.0)
        return HeatmapData(cells=cells, max_value=max_value)

"""Flow (sankey) processor: location -> outcome totals."""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional
import structlog

from covid_normalization.core.flow_graph import build_flow_graph
from covid_normalization.models.series_data import EntityTotals, FlowGraph
from covid_normalization.processors.radar import has_cumulative_totals
from covid_normalization.utils.parsing import sanitize_number
from covid_normalization.utils.time_utils import latest_valid_row

logger = structlog.get_logger(__name__)


def has_non_negative_totals(row: Mapping[str, Any]) -> bool:
    return (
        has_cumulative_totals(row)
        and sanitize_number(row["cumulative_confirmed"]) >= 0
        and sanitize_number(row["cumulative_deceased"]) >= 0
    )


class FlowProcessor:
    """Builds the sankey flow graph from each location's latest totals."""

    def __init__(self, start: Optional[date] = None, end: Optional[date] = None):
        self.start = start
        self.end = end
        self.logger = logger.bind(component="flow_processor")

    def entity_totals(self, code: str, rows: List[Dict[str, Any]]) -> Optional[EntityTotals]:
        """Totals from the latest valid row in the window, or None."""
        latest = latest_valid_row(rows, has_non_negative_totals, self.start, self.end)
        if latest is None:
            self.logger.warning("No valid totals in window, skipping", location=code)
            return None

        _, row = latest
        return EntityTotals(
            entity_id=code,
            confirmed=sanitize_number(row["cumulative_confirmed"]),
            deceased=sanitize_number(row["cumulative_deceased"]),
        )

    def process(self, rows_by_location: Mapping[str, List[Dict[str, Any]]]) -> FlowGraph:
        """
        Args:
            rows_by_location: location code -> open-data CSV rows

        Returns:
            FlowGraph over every location with valid totals
        """
        totals = []
        for code, rows in rows_by_location.items():
            entity = self.entity_totals(code, rows)
            if entity is not None:
                totals.append(entity)

        graph = build_flow_graph(totals)
        self.logger.info("Flow graph built", nodes=len(graph.nodes), links=len(graph.links))
        return graph

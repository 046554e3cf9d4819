"""Date window helpers for open-data CSV rows."""

from datetime import date
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from covid_normalization.utils.parsing import parse_record_date

Row = Dict[str, Any]


def in_window(value: date, start: Optional[date] = None, end: Optional[date] = None) -> bool:
    """Check start <= value <= end, either bound optional."""
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def rows_in_window(rows: Iterable[Row], start: Optional[date] = None,
                   end: Optional[date] = None) -> Iterator[Tuple[date, Row]]:
    """
    Yield (date, row) for rows whose 'date' parses and falls in the window.

    Args:
        rows: CSV rows with a 'date' column
        start: First accepted date (inclusive)
        end: Last accepted date (inclusive)
    """
    for row in rows:
        row_date = parse_record_date(row.get("date"))
        if row_date is None:
            continue
        if in_window(row_date, start, end):
            yield row_date, row


def latest_valid_row(rows: List[Row], is_valid: Callable[[Row], bool],
                     start: Optional[date] = None,
                     end: Optional[date] = None) -> Optional[Tuple[date, Row]]:
    """
    Find the most recent row in the window that passes ``is_valid``.

    Rows are scanned by date rather than file order.

    Returns:
        (date, row) or None when no row qualifies
    """
    best: Optional[Tuple[date, Row]] = None

    for row_date, row in rows_in_window(rows, start, end):
        if not is_valid(row):
            continue
        if best is None or row_date >= best[0]:
            best = (row_date, row)

    return best

"""Parsing helpers that neutralize dirty external field values."""

import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional


# disease.sh keys look like '3/14/21'; open-data rows use ISO dates.
DATE_FORMATS = ("%m/%d/%y", "%Y-%m-%d", "%m/%d/%Y")

# Leading decimal literal; ASCII digits only, no underscores or inf/nan words.
NUMBER_PREFIX = re.compile(r"\s*[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")


def sanitize_number(raw: Any) -> float:
    """
    Parse a raw JSON/CSV field as a float.

    Strings are read up to their longest leading numeric prefix, so '42abc'
    gives 42.0 and '1,234' gives 1.0.

    Args:
        raw: Field value (str, int, float, Decimal, None, '')

    Returns:
        The parsed value, or 0.0 when the value is missing, non-numeric or
        not finite. Never raises.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    try:
        if isinstance(raw, (int, float, Decimal)):
            value = float(raw)
        else:
            match = NUMBER_PREFIX.match(str(raw))
            if match is None:
                return 0.0
            value = float(match.group(0))
    except (TypeError, ValueError, OverflowError):
        return 0.0

    if not math.isfinite(value):
        return 0.0
    return value


def parse_record_date(raw: Any) -> Optional[date]:
    """
    Parse a date key from either data source.

    Returns:
        A calendar date, or None when the key is empty or unparseable.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    if not text:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def is_blank(raw: Any) -> bool:
    """True for None and empty/whitespace strings."""
    return raw is None or (isinstance(raw, str) and not raw.strip())


def symptom_display_name(key: str) -> str:
    """'search_trends_sore_throat' -> 'Sore Throat'"""
    words = key.replace("search_trends_", "").split("_")
    return " ".join(word[:1].upper() + word[1:] for word in words if word)

"""
Helpers shared by the summary builders.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from backoffice.normalization import parse_canonical_date

# Look-back windows offered by the dashboard range selector, in days
RANGE_DAYS = {
    'week': 7,
    'month': 30,
    'quarter': 90,
    'halfYear': 180,
    'year': 365,
}


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like a dashboard would display it (2.25 -> 2.3, not 2.2)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def safe_int(value: Any) -> int:
    """Counts missing from a record count as zero."""
    if value is None:
        return 0
    try:
        return int(value)
    except (ValueError, TypeError):
        return 0


def filter_by_range(
    records: Iterable[Mapping[str, Any]],
    time_range: Optional[str],
    today: Optional[date] = None
) -> List[Mapping[str, Any]]:
    """
    Keep records dated less than the range's number of days before today.

    ``all`` (or None) keeps every record. Future-dated records are kept;
    records whose date does not parse are dropped.
    """
    if not time_range or time_range == 'all':
        return list(records)

    days = RANGE_DAYS.get(time_range)
    if days is None:
        raise ValueError(f"Unknown time range: {time_range}")

    today = today or date.today()
    kept = []
    for record in records:
        parsed = parse_canonical_date(record.get('date'))
        if parsed is not None and (today - parsed).days < days:
            kept.append(record)
    return kept


def matches_search(record: Mapping[str, Any], search: Optional[str], fields: Iterable[str]) -> bool:
    """Case-insensitive substring match over the given text fields."""
    if not search:
        return True
    needle = search.lower()
    return any(needle in str(record.get(field) or '').lower() for field in fields)


def sort_key_by_date(record: Mapping[str, Any]) -> date:
    """Sort key placing unparseable dates before every real date."""
    return parse_canonical_date(record.get('date')) or date.min


def count_by(records: Iterable[Mapping[str, Any]], field: str, keys: Iterable[str]) -> Dict[str, int]:
    counts = {key: 0 for key in keys}
    for record in records:
        value = record.get(field)
        if value in counts:
            counts[value] += 1
    return counts

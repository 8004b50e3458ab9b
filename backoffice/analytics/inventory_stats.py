"""
Inventory discrepancy summary.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from backoffice.analytics.common import safe_int
from backoffice.normalization import parse_canonical_date


def stock_difference(record: Mapping[str, Any]) -> int:
    """Actual minus system stock; negative means stock is missing."""
    return safe_int(record.get('actual_stock')) - safe_int(record.get('system_stock'))


def compute_inventory_summary(
    records: Iterable[Mapping[str, Any]],
    now: Optional[Union[date, datetime]] = None
) -> Dict[str, Any]:
    records = list(records)
    today = now or date.today()
    if isinstance(today, datetime):
        today = today.date()

    current_month = 0
    for record in records:
        parsed = parse_canonical_date(record.get('date'))
        if parsed and (parsed.year, parsed.month) == (today.year, today.month):
            current_month += 1

    differences = [stock_difference(r) for r in records]

    return {
        'total_records': len(records),
        'current_month_records': current_month,
        'total_absolute_difference': sum(abs(d) for d in differences),
        'shortage_count': sum(1 for d in differences if d < 0),
        'surplus_count': sum(1 for d in differences if d > 0),
    }

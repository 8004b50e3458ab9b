"""
Exception Statistics
====================
Month-over-month exception counts and rates, plus the SKU / courier / daily
breakdown shown on the dashboard.

Statistics (compute_exception_stats):
- Current and previous calendar month windows, bounds inclusive
- Per-window totals and per-type counts (NoTracking, OutOfStock, WrongShipment)
- Shipment volume per window = sum of FedEx + UPS totals of express records
- Change rate = (current - previous) / previous * 100, 1 decimal;
  a previous count of 0 gives 100 (or 0 when the current count is 0 too)
- Exception rate = exceptions / shipment volume * 100, 0 without volume
- Monthly average over the full history of exception records

Records are plain mappings with snake_case keys, as returned by the
repository. Dates that do not parse as MM/DD/YYYY fall outside every window.
"""

import calendar
import logging
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from backoffice.analytics.common import round_half_up, safe_int
from backoffice.normalization import parse_canonical_date

logger = logging.getLogger(__name__)

EXCEPTION_TYPES = ('NoTracking', 'OutOfStock', 'WrongShipment')

# Exception type -> snake_case key used in the reports
TYPE_KEYS = {
    'NoTracking': 'no_tracking',
    'OutOfStock': 'out_of_stock',
    'WrongShipment': 'wrong_shipment',
}

CHANGE_RATE_SENTINEL = 100

TOP_SKU_LIMIT = 10
DAILY_BUCKET_LIMIT = 30

COURIER_UPS = 'UPS'
COURIER_FEDEX = 'FedEx'
COURIER_UNKNOWN = 'unknown'

UPS_TRACKING_RE = re.compile(r'^[A-Za-z0-9]{18}$')
FEDEX_TRACKING_RE = re.compile(r'^(\d{12}|\d{15})$', re.ASCII)

DateWindow = Tuple[date, date]


# =====================================================================
# DATE WINDOWS
# =====================================================================

def month_window(year: int, month: int) -> DateWindow:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_windows(now: Union[date, datetime]) -> Tuple[DateWindow, DateWindow]:
    """Windows for the calendar month containing ``now`` and the one before it."""
    today = now.date() if isinstance(now, datetime) else now
    current = month_window(today.year, today.month)
    if today.month == 1:
        previous = month_window(today.year - 1, 12)
    else:
        previous = month_window(today.year, today.month - 1)
    return current, previous


def in_window(record: Mapping[str, Any], window: DateWindow) -> bool:
    parsed = parse_canonical_date(record.get('date'))
    if parsed is None:
        return False
    start, end = window
    return start <= parsed <= end


# =====================================================================
# MONTHLY STATISTICS
# =====================================================================

def change_rate(current: int, previous: int) -> float:
    """Percentage change from previous to current, 1 decimal."""
    if previous == 0:
        return CHANGE_RATE_SENTINEL if current > 0 else 0
    return round_half_up((current - previous) / previous * 100)


def exception_rate(exception_count: int, shipment_volume: int) -> float:
    if shipment_volume > 0:
        return round_half_up(exception_count / shipment_volume * 100)
    return 0


def _window_stats(
    exceptions: Sequence[Mapping[str, Any]],
    volumes: Sequence[Mapping[str, Any]],
    window: DateWindow
) -> Dict[str, Any]:
    window_exceptions = [r for r in exceptions if in_window(r, window)]
    window_volumes = [r for r in volumes if in_window(r, window)]

    stats = {key: 0 for key in TYPE_KEYS.values()}
    for record in window_exceptions:
        key = TYPE_KEYS.get(record.get('exception_type'))
        if key:
            stats[key] += 1

    shipment_volume = sum(
        safe_int(r.get('fedex_total')) + safe_int(r.get('ups_total'))
        for r in window_volumes
    )

    stats['total_exceptions'] = len(window_exceptions)
    stats['shipment_volume'] = shipment_volume
    stats['exception_rate'] = exception_rate(len(window_exceptions), shipment_volume)
    return stats


def monthly_average(exceptions: Sequence[Mapping[str, Any]]) -> Union[int, float]:
    """
    Average exceptions per month across the whole history.

    The span runs from the month of the earliest parsed date to the month of
    the latest, inclusive. A span of one month returns the raw count.
    """
    parsed = [d for d in (parse_canonical_date(r.get('date')) for r in exceptions) if d]
    if not parsed:
        return 0

    earliest, latest = min(parsed), max(parsed)
    month_span = (latest.year - earliest.year) * 12 + (latest.month - earliest.month) + 1
    total = len(exceptions)

    if month_span <= 1:
        return total
    return round_half_up(total / month_span)


def compute_exception_stats(
    exceptions: Iterable[Mapping[str, Any]],
    volumes: Iterable[Mapping[str, Any]],
    now: Optional[Union[date, datetime]] = None
) -> Dict[str, Any]:
    """
    Build the month-over-month exception report.

    Args:
        exceptions: Exception records (date, exception_type)
        volumes: Express volume records (date, fedex_total, ups_total)
        now: Reference instant for the windows (defaults to today)

    Returns:
        Dict with current_month, last_month, change_rate and monthly_average
    """
    exceptions = list(exceptions)
    volumes = list(volumes)
    current_window, previous_window = month_windows(now or date.today())

    current = _window_stats(exceptions, volumes, current_window)
    previous = _window_stats(exceptions, volumes, previous_window)

    rates = {'total': change_rate(current['total_exceptions'], previous['total_exceptions'])}
    for key in TYPE_KEYS.values():
        rates[key] = change_rate(current[key], previous[key])

    logger.debug(
        f"Exception stats: {current['total_exceptions']} this month, "
        f"{previous['total_exceptions']} last month"
    )

    return {
        'current_month': current,
        'last_month': previous,
        'change_rate': rates,
        'monthly_average': monthly_average(exceptions),
    }


# =====================================================================
# ANALYSIS
# =====================================================================

def classify_courier(tracking_number: Optional[str]) -> str:
    """Guess the courier from the shape of a tracking number."""
    if not tracking_number:
        return COURIER_UNKNOWN

    number = tracking_number.strip()
    if number.startswith('1Z') or UPS_TRACKING_RE.match(number):
        return COURIER_UPS
    if FEDEX_TRACKING_RE.match(number):
        return COURIER_FEDEX
    return COURIER_UNKNOWN


def _empty_type_counts() -> Dict[str, int]:
    return {key: 0 for key in TYPE_KEYS.values()}


def top_skus(exceptions: Sequence[Mapping[str, Any]], limit: int = TOP_SKU_LIMIT) -> List[Dict[str, Any]]:
    """SKUs with the most exceptions; ties keep first-encountered order."""
    by_sku: Dict[str, Dict[str, Any]] = {}
    for record in exceptions:
        sku = record.get('sku')
        if not sku:
            continue
        entry = by_sku.setdefault(sku, {'sku': sku, 'count': 0, **_empty_type_counts()})
        entry['count'] += 1
        key = TYPE_KEYS.get(record.get('exception_type'))
        if key:
            entry[key] += 1

    ranked = sorted(by_sku.values(), key=lambda entry: entry['count'], reverse=True)
    return ranked[:limit]


def daily_stats(exceptions: Sequence[Mapping[str, Any]], limit: int = DAILY_BUCKET_LIMIT) -> List[Dict[str, Any]]:
    """Per-date counts for the most recent dates, newest first."""
    buckets: Dict[str, Dict[str, Any]] = {}
    for record in exceptions:
        day = record.get('date') or ''
        bucket = buckets.setdefault(day, {'date': day, 'total': 0, **_empty_type_counts()})
        bucket['total'] += 1
        key = TYPE_KEYS.get(record.get('exception_type'))
        if key:
            bucket[key] += 1

    def recency(bucket):
        parsed = parse_canonical_date(bucket['date'])
        return (parsed is not None, parsed or date.min)

    return sorted(buckets.values(), key=recency, reverse=True)[:limit]


def compute_exception_analysis(exceptions: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Build the SKU / courier / type / daily exception breakdown.

    Returns:
        Dict with top_skus, courier_stats, type_stats and daily_stats
    """
    exceptions = list(exceptions)

    courier_stats = {'fedex': 0, 'ups': 0, 'unknown': 0}
    for record in exceptions:
        courier = classify_courier(record.get('tracking_number'))
        if courier == COURIER_UPS:
            courier_stats['ups'] += 1
        elif courier == COURIER_FEDEX:
            courier_stats['fedex'] += 1
        else:
            courier_stats['unknown'] += 1

    type_stats = {exception_type: 0 for exception_type in EXCEPTION_TYPES}
    for record in exceptions:
        if record.get('exception_type') in type_stats:
            type_stats[record['exception_type']] += 1

    return {
        'top_skus': top_skus(exceptions),
        'courier_stats': courier_stats,
        'type_stats': type_stats,
        'daily_stats': daily_stats(exceptions),
    }

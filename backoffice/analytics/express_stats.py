"""
Express Volume Summary
======================
Totals, A008 share, average completion time and per-day throughput for the
daily courier volume records.

Throughput (unit-time efficiency) for a day is
    orders / (hours between the 09:00 work start and completion * headcount)
and is only defined when completion is after 09:00 and headcount > 0.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from backoffice.analytics.common import filter_by_range, round_half_up, safe_int, sort_key_by_date

logger = logging.getLogger(__name__)

WORK_START_MINUTES = 9 * 60

COUNT_FIELDS = (
    'legacy_system_total',
    'new_system_total',
    'fedex_total',
    'ups_total',
    'fedex_a008_count',
    'ups_a008_count',
    'battery_panel_count',
    'fedex_storage_count',
    'ups_storage_count',
)


def minutes_of_day(time_str: Optional[str]) -> Optional[int]:
    """Minutes since midnight for an ``H:mm`` string, None if it is not one."""
    if not time_str:
        return None
    parts = time_str.split(':')
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]) * 60 + int(parts[1])
    except ValueError:
        return None


def format_minutes(total_minutes: float) -> str:
    hours = int(total_minutes // 60)
    minutes = int(total_minutes % 60)
    return f"{hours:02d}:{minutes:02d}"


def unit_time_efficiency(orders: int, completion_time: Optional[str], headcount: int) -> Optional[float]:
    """Orders handled per person-hour since the work start, None when undefined."""
    completed = minutes_of_day(completion_time)
    if completed is None or headcount <= 0 or completed <= WORK_START_MINUTES:
        return None
    hours = (completed - WORK_START_MINUTES) / 60
    return orders / (hours * headcount)


def _daily_entry(record: Mapping[str, Any]) -> Dict[str, Any]:
    fedex = safe_int(record.get('fedex_total'))
    ups = safe_int(record.get('ups_total'))
    orders = fedex + ups
    a008 = safe_int(record.get('fedex_a008_count')) + safe_int(record.get('ups_a008_count'))
    efficiency = unit_time_efficiency(
        orders, record.get('completion_time'), safe_int(record.get('headcount'))
    )

    return {
        'date': record.get('date'),
        'total_orders': orders,
        'fedex_total': fedex,
        'ups_total': ups,
        'total_a008': a008,
        'a008_percentage': round_half_up(a008 / orders * 100) if orders > 0 else 0,
        'completion_time': record.get('completion_time') or None,
        'headcount': safe_int(record.get('headcount')),
        'unit_time_efficiency': round_half_up(efficiency, 2) if efficiency is not None else None,
    }


def compute_express_summary(
    records: Iterable[Mapping[str, Any]],
    time_range: str = 'all',
    today: Optional[date] = None
) -> Dict[str, Any]:
    """
    Summarise express volume records over a look-back range.

    Args:
        records: Express volume records
        time_range: all, week, month, quarter, halfYear or year
        today: Reference date for the range (defaults to date.today())

    Returns:
        Dict of totals, averages and the ascending per-day trend
    """
    selected = sorted(filter_by_range(records, time_range, today), key=sort_key_by_date)

    totals = {field: sum(safe_int(r.get(field)) for r in selected) for field in COUNT_FIELDS}
    total_orders = totals['fedex_total'] + totals['ups_total']
    total_a008 = totals['fedex_a008_count'] + totals['ups_a008_count']

    completion_minutes = [
        m for m in (minutes_of_day(r.get('completion_time')) for r in selected)
        if m is not None
    ]
    average_minutes = sum(completion_minutes) / len(completion_minutes) if completion_minutes else 0

    daily_trend = [_daily_entry(r) for r in selected]
    # Averaged over unrounded values, as in the per-day computation
    efficiencies = [
        e for e in (
            unit_time_efficiency(
                safe_int(r.get('fedex_total')) + safe_int(r.get('ups_total')),
                r.get('completion_time'),
                safe_int(r.get('headcount'))
            )
            for r in selected
        )
        if e is not None
    ]

    return {
        'time_range': time_range,
        'record_count': len(selected),
        'total_orders': total_orders,
        **totals,
        'total_a008': total_a008,
        'a008_percentage': round_half_up(total_a008 / total_orders * 100) if total_orders > 0 else 0,
        'average_completion_time': format_minutes(average_minutes),
        'average_unit_time_efficiency': (
            round_half_up(sum(efficiencies) / len(efficiencies), 2) if efficiencies else None
        ),
        'daily_trend': daily_trend,
    }

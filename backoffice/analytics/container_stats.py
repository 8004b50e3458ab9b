"""
Container Summary and Work-Week Grouping
========================================
Counts per container type and status, and the display grouping of arrivals
by work week.

A work week runs Monday to Friday. Its label is extended to Saturday (or
Sunday) only when records fall on those days. The grouping is computed per
request and never stored.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping

from backoffice.analytics.common import count_by, sort_key_by_date
from backoffice.normalization import parse_canonical_date

CONTAINER_TYPES = ('FullContainer', 'LooseCargo', 'Pallet')
CONTAINER_STATUSES = ('Completed', 'PendingUnload', 'PendingVerification', 'HasIssue')

FRIDAY = 4
UNKNOWN_WEEK = 'unknown'


def compute_container_summary(records: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    records = list(records)
    return {
        'total': len(records),
        'by_type': count_by(records, 'type', CONTAINER_TYPES),
        'by_status': count_by(records, 'status', CONTAINER_STATUSES),
        'with_issue_note': sum(1 for r in records if (r.get('issue_note') or '').strip()),
    }


def week_key(monday: date) -> str:
    iso_year, iso_week, _ = monday.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def week_label(monday: date, last_weekday: int) -> str:
    end = monday + timedelta(days=max(last_weekday, FRIDAY))
    return f"{monday:%m/%d} - {end:%m/%d/%Y}"


def group_by_work_week(records: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Group records by the week of their date, newest week first.

    Returns:
        List of {week_key, label, record_count, records}; records without a
        parseable date are collected in a trailing ``unknown`` group
    """
    weeks: Dict[date, Dict[str, Any]] = {}
    unknown: List[Mapping[str, Any]] = []

    for record in records:
        parsed = parse_canonical_date(record.get('date'))
        if parsed is None:
            unknown.append(record)
            continue

        monday = parsed - timedelta(days=parsed.weekday())
        week = weeks.setdefault(monday, {'last_weekday': FRIDAY, 'records': []})
        week['last_weekday'] = max(week['last_weekday'], parsed.weekday())
        week['records'].append(record)

    groups = []
    for monday in sorted(weeks, reverse=True):
        week = weeks[monday]
        week_records = sorted(week['records'], key=sort_key_by_date, reverse=True)
        groups.append({
            'week_key': week_key(monday),
            'label': week_label(monday, week['last_weekday']),
            'record_count': len(week_records),
            'records': week_records,
        })

    if unknown:
        groups.append({
            'week_key': UNKNOWN_WEEK,
            'label': UNKNOWN_WEEK,
            'record_count': len(unknown),
            'records': unknown,
        })

    return groups

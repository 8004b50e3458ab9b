"""
Date and Time Normalization
===========================
Converts the date and time strings typed into the back-office forms into
the two canonical textual forms every record is stored and displayed in:

- dates: ``MM/DD/YYYY``
- times: ``HH:mm``

Both normalizers are lenient: input they do not recognise is handed back
unchanged, they never raise. ``parse_canonical_date`` is the inverse used
for sorting, windowing and filtering.
"""

import logging
import re
from datetime import date
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

BARE_HOUR_RE = re.compile(r'^\d{1,2}$', re.ASCII)
HOUR_MINUTE_RE = re.compile(r'^\d{1,2}:\d{2}$', re.ASCII)
CANONICAL_TIME_RE = re.compile(r'^\d{2}:\d{2}$', re.ASCII)


def _format_canonical(month: str, day: str, year) -> str:
    return f"{month.zfill(2)}/{day.zfill(2)}/{year}"


def normalize_date(value: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """
    Normalize a date string to ``MM/DD/YYYY``.

    Recognised shapes, checked in order:
        ``2024-03-05T10:00:00Z``  ISO timestamp, calendar fields kept as written
        ``4/8``                    month/day, completed with the current year
        ``4/8/25``, ``4/8/2025``   month/day/year, two-digit years become 20YY

    Args:
        value: Raw date string (None and "" are returned unchanged)
        today: Reference date for the current year (defaults to date.today())

    Returns:
        The canonical date string, or the input unchanged if unrecognised
    """
    if not value:
        return value

    try:
        if 'T' in value:
            parsed = date_parser.isoparse(value)
            return _format_canonical(str(parsed.month), str(parsed.day), parsed.year)

        if '/' in value:
            parts = value.split('/')
            if len(parts) == 2:
                year = (today or date.today()).year
                return _format_canonical(parts[0], parts[1], year)
            if len(parts) == 3:
                year = parts[2]
                if len(year) == 2:
                    year = f"20{year}"
                return _format_canonical(parts[0], parts[1], year)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Failed to normalize date {value!r}: {e}")

    return value


def normalize_time(value: Optional[str]) -> Optional[str]:
    """
    Normalize a time string to ``HH:mm``.

    ``9`` becomes ``09:00`` and ``9:05`` becomes ``09:05``. Strings already
    shaped ``HH:mm`` are returned as they are, without range checks.
    Anything else (including out-of-range hours such as ``25``) is returned
    unchanged.
    """
    if not value:
        return value

    time_str = str(value).strip()

    if BARE_HOUR_RE.match(time_str):
        hour = int(time_str)
        if 0 <= hour <= 23:
            return f"{hour:02d}:00"

    if HOUR_MINUTE_RE.match(time_str):
        hour_str, minute_str = time_str.split(':')
        hour, minute = int(hour_str), int(minute_str)
        if 0 <= hour <= 23 and 0 <= minute <= 59:
            return f"{hour:02d}:{minute:02d}"

    if CANONICAL_TIME_RE.match(time_str):
        return time_str

    return value


def parse_canonical_date(value: Optional[str]) -> Optional[date]:
    """Parse ``MM/DD/YYYY`` into a date; None if the string is not in that form."""
    if not value:
        return None

    parts = value.split('/')
    if len(parts) != 3:
        return None

    try:
        month, day, year = (int(part) for part in parts)
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None

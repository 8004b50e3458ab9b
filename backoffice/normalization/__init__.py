"""
Normalization Module
====================
Canonical date (MM/DD/YYYY) and time (HH:mm) string handling shared by the
request schemas, the analytics and the list filters.
"""

from .dates import (
    normalize_date,
    normalize_time,
    parse_canonical_date
)

__all__ = [
    'normalize_date',
    'normalize_time',
    'parse_canonical_date'
]

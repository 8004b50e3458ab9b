"""
Analytics Module
================
In-memory summaries computed per request over the records of a collection.

Submodules:
- exception_stats: month-over-month exception report and breakdown
- express_stats: courier volume totals and throughput
- inventory_stats: stock discrepancy summary
- container_stats: container counts and work-week grouping
"""

from .exception_stats import (
    EXCEPTION_TYPES,
    classify_courier,
    compute_exception_stats,
    compute_exception_analysis
)

from .express_stats import compute_express_summary

from .inventory_stats import (
    stock_difference,
    compute_inventory_summary
)

from .container_stats import (
    CONTAINER_TYPES,
    CONTAINER_STATUSES,
    compute_container_summary,
    group_by_work_week
)

from .common import (
    RANGE_DAYS,
    filter_by_range,
    matches_search
)

__all__ = [
    # Exceptions
    'EXCEPTION_TYPES',
    'classify_courier',
    'compute_exception_stats',
    'compute_exception_analysis',
    # Express
    'compute_express_summary',
    # Inventory
    'stock_difference',
    'compute_inventory_summary',
    # Containers
    'CONTAINER_TYPES',
    'CONTAINER_STATUSES',
    'compute_container_summary',
    'group_by_work_week',
    # Filtering
    'RANGE_DAYS',
    'filter_by_range',
    'matches_search'
]

"""
Storage Module
==============
Record tables and the generic repository used by every API resource.
"""

from .tables import (
    metadata,
    express_records,
    exception_records,
    container_records,
    inventory_exception_records
)

from .repository import RecordRepository

__all__ = [
    'metadata',
    'express_records',
    'exception_records',
    'container_records',
    'inventory_exception_records',
    'RecordRepository'
]

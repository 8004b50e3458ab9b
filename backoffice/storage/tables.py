"""
Record Tables
=============
SQLAlchemy Core definitions of the four back-office record collections.

Records are flat and independent: express volumes, exceptions, containers
and inventory discrepancies share ``date`` and ``customer_code`` values but
no foreign keys. Dates are stored as canonical ``MM/DD/YYYY`` strings.
"""

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, Text

metadata = MetaData()

# Column widths, shared with the request schemas
DATE_LENGTH = 32
TIME_LENGTH = 16
CODE_LENGTH = 64
SKU_LENGTH = 128
NAME_LENGTH = 255


def _record_columns():
    """Columns every record table carries."""
    return [
        Column('id', String(32), primary_key=True),
        Column('date', String(DATE_LENGTH), nullable=False, index=True),
        Column('created_at', DateTime(timezone=True), nullable=False, index=True),
    ]


express_records = Table(
    'express_records', metadata,
    *_record_columns(),
    Column('legacy_system_total', Integer, nullable=False),
    Column('new_system_total', Integer, nullable=False),
    Column('fedex_total', Integer, nullable=False),
    Column('ups_total', Integer, nullable=False),
    Column('fedex_a008_count', Integer, nullable=False),
    Column('ups_a008_count', Integer, nullable=False),
    Column('battery_panel_count', Integer, nullable=False),
    Column('fedex_storage_count', Integer, nullable=False),
    Column('ups_storage_count', Integer, nullable=False),
    Column('completion_time', String(TIME_LENGTH), nullable=False),
    Column('headcount', Integer, nullable=False),
    Column('note', Text, nullable=False, default=''),
)

exception_records = Table(
    'exception_records', metadata,
    *_record_columns(),
    Column('exception_type', String(32), nullable=False, index=True),
    Column('customer_code', String(CODE_LENGTH), nullable=False),
    Column('tracking_number', String(CODE_LENGTH), nullable=False),
    Column('sku', String(SKU_LENGTH), nullable=False),
    Column('note', Text, nullable=False, default=''),
)

container_records = Table(
    'container_records', metadata,
    *_record_columns(),
    Column('container_number', String(CODE_LENGTH), nullable=False),
    Column('type', String(32), nullable=False),
    Column('customer_code', String(CODE_LENGTH), nullable=False),
    Column('arrival_time', String(TIME_LENGTH), nullable=False, default=''),
    Column('status', String(32), nullable=False),
    Column('issue_note', Text, nullable=False),
)

inventory_exception_records = Table(
    'inventory_exception_records', metadata,
    *_record_columns(),
    Column('customer_code', String(CODE_LENGTH), nullable=False),
    Column('sku', String(SKU_LENGTH), nullable=False),
    Column('product_name', String(NAME_LENGTH), nullable=False),
    Column('actual_stock', Integer, nullable=False),
    Column('system_stock', Integer, nullable=False),
    Column('location', String(CODE_LENGTH), nullable=False),
    Column('note', Text, nullable=False, default=''),
)

"""
Record Repository
=================
Generic CRUD over one record table. Every write is a single statement, so
concurrent writes to the same id are last-write-wins.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Table, delete, insert, select, update

from backoffice.db_utils import DatabaseManager

logger = logging.getLogger(__name__)

IMMUTABLE_COLUMNS = ('id', 'created_at')


class RecordRepository:
    """CRUD access to one record table through the shared DatabaseManager."""

    def __init__(self, db: DatabaseManager, table: Table):
        self.db = db
        self.table = table

    def _writable(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {
            key: value for key, value in values.items()
            if key in self.table.c and key not in IMMUTABLE_COLUMNS
        }

    def list_all(self) -> List[Dict[str, Any]]:
        """All records, newest first."""
        query = select(self.table).order_by(self.table.c.created_at.desc())
        with self.db.get_connection() as conn:
            return [dict(row) for row in conn.execute(query).mappings()]

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        query = select(self.table).where(self.table.c.id == record_id)
        with self.db.get_connection() as conn:
            row = conn.execute(query).mappings().first()
        return dict(row) if row else None

    def create(self, values: Dict[str, Any], created_at: Optional[datetime] = None) -> Dict[str, Any]:
        """Insert a record, assigning its id and creation time."""
        record = self._writable(values)
        record['id'] = uuid.uuid4().hex
        record['created_at'] = created_at or datetime.now(timezone.utc)

        with self.db.get_connection() as conn:
            conn.execute(insert(self.table).values(**record))

        logger.info(f"Created {self.table.name} record {record['id']}")
        return self.get(record['id'])

    def replace(self, record_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Replace every mutable field; None if the id does not exist."""
        statement = (
            update(self.table)
            .where(self.table.c.id == record_id)
            .values(**self._writable(values))
        )
        with self.db.get_connection() as conn:
            result = conn.execute(statement)
            if result.rowcount == 0:
                return None

        logger.info(f"Updated {self.table.name} record {record_id}")
        return self.get(record_id)

    def delete(self, record_id: str) -> bool:
        """Delete by id; False if the id does not exist."""
        statement = delete(self.table).where(self.table.c.id == record_id)
        with self.db.get_connection() as conn:
            result = conn.execute(statement)

        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted {self.table.name} record {record_id}")
        return deleted

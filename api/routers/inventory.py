"""
Inventory Exceptions Router
===========================
CRUD for inventory discrepancy records (actual vs. system stock) and their
summary. Responses carry the derived ``difference`` field.
"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional, List

from api.deps import get_db
from api.schemas import (
    InventoryRecord, InventoryRecordCreate, InventorySummary,
    MessageResponse, TimeRange
)
from backoffice.analytics import compute_inventory_summary, filter_by_range, matches_search
from backoffice.db_utils import DatabaseManager
from backoffice.storage import RecordRepository, inventory_exception_records

router = APIRouter(prefix="/api/inventory", tags=["Inventory Exceptions"])
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "找不到此库存异常记录"
DELETED_MESSAGE = "库存异常记录删除成功"

SEARCH_FIELDS = ('customer_code', 'sku', 'product_name', 'location')


def _repository(db: DatabaseManager) -> RecordRepository:
    return RecordRepository(db, inventory_exception_records)


@router.get("/stats/summary", response_model=InventorySummary)
def get_inventory_summary(db: DatabaseManager = Depends(get_db)):
    """
    Discrepancy totals: records this month, total absolute difference, and
    how many records show a shortage or a surplus.
    """
    try:
        return compute_inventory_summary(_repository(db).list_all(), now=datetime.now())

    except Exception as e:
        logger.error(f"Error computing inventory summary: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("", response_model=List[InventoryRecord])
def list_inventory_records(
    time_range: TimeRange = Query(TimeRange.ALL, alias="range", description="Look-back window"),
    search: Optional[str] = Query(None, description="Customer code, SKU, product name or location contains"),
    db: DatabaseManager = Depends(get_db)
):
    """
    List inventory discrepancy records, newest first.
    """
    try:
        records = filter_by_range(_repository(db).list_all(), time_range.value)
    except Exception as e:
        logger.error(f"Error listing inventory records: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return [r for r in records if matches_search(r, search, SEARCH_FIELDS)]


@router.get("/{record_id}", response_model=InventoryRecord)
def get_inventory_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        record = _repository(db).get(record_id)
    except Exception as e:
        logger.error(f"Error fetching inventory record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.post("", response_model=InventoryRecord, status_code=201)
def create_inventory_record(payload: InventoryRecordCreate, db: DatabaseManager = Depends(get_db)):
    try:
        return _repository(db).create(payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error creating inventory record: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{record_id}", response_model=InventoryRecord)
def update_inventory_record(
    record_id: str,
    payload: InventoryRecordCreate,
    db: DatabaseManager = Depends(get_db)
):
    try:
        record = _repository(db).replace(record_id, payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error updating inventory record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_inventory_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        deleted = _repository(db).delete(record_id)
    except Exception as e:
        logger.error(f"Error deleting inventory record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return MessageResponse(message=DELETED_MESSAGE)

"""
Express Volume Router
=====================
CRUD for the daily courier volume records and their dashboard summary.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from api.deps import get_db
from api.schemas import (
    ExpressRecord, ExpressRecordCreate, ExpressSummary,
    MessageResponse, TimeRange
)
from backoffice.analytics import compute_express_summary, filter_by_range
from backoffice.db_utils import DatabaseManager
from backoffice.storage import RecordRepository, express_records

router = APIRouter(prefix="/api/express", tags=["Express Volumes"])
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "找不到此数据"
DELETED_MESSAGE = "数据删除成功"


def _repository(db: DatabaseManager) -> RecordRepository:
    return RecordRepository(db, express_records)


@router.get("/stats/summary", response_model=ExpressSummary)
def get_express_summary(
    time_range: TimeRange = Query(TimeRange.ALL, alias="range", description="Look-back window"),
    db: DatabaseManager = Depends(get_db)
):
    """
    Courier volume summary for the dashboard.

    Returns FedEx/UPS and system totals, the A008 share, the average
    completion time, throughput per person-hour since 09:00, and the
    per-day trend in date order.
    """
    try:
        return compute_express_summary(_repository(db).list_all(), time_range.value)

    except Exception as e:
        logger.error(f"Error computing express summary: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("", response_model=List[ExpressRecord])
def list_express_records(
    time_range: TimeRange = Query(TimeRange.ALL, alias="range", description="Look-back window"),
    db: DatabaseManager = Depends(get_db)
):
    """
    List express volume records, newest first.
    """
    try:
        return filter_by_range(_repository(db).list_all(), time_range.value)
    except Exception as e:
        logger.error(f"Error listing express records: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{record_id}", response_model=ExpressRecord)
def get_express_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        record = _repository(db).get(record_id)
    except Exception as e:
        logger.error(f"Error fetching express record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.post("", response_model=ExpressRecord, status_code=201)
def create_express_record(payload: ExpressRecordCreate, db: DatabaseManager = Depends(get_db)):
    """
    Record one day of courier volumes. Date and completion time are
    normalized to MM/DD/YYYY and HH:mm.
    """
    try:
        return _repository(db).create(payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error creating express record: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{record_id}", response_model=ExpressRecord)
def update_express_record(
    record_id: str,
    payload: ExpressRecordCreate,
    db: DatabaseManager = Depends(get_db)
):
    try:
        record = _repository(db).replace(record_id, payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error updating express record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_express_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        deleted = _repository(db).delete(record_id)
    except Exception as e:
        logger.error(f"Error deleting express record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return MessageResponse(message=DELETED_MESSAGE)

"""
Exception Records Router
========================
CRUD for shipment exception records plus the month-over-month statistics
and the SKU / courier / daily analysis.
"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional, List

from api.deps import get_db
from api.schemas import (
    ExceptionRecord, ExceptionRecordCreate, ExceptionType,
    ExceptionStatsReport, ExceptionAnalysis,
    MessageResponse, TimeRange
)
from backoffice.analytics import (
    compute_exception_stats,
    compute_exception_analysis,
    filter_by_range,
    matches_search
)
from backoffice.db_utils import DatabaseManager
from backoffice.storage import RecordRepository, exception_records, express_records

router = APIRouter(prefix="/api/exception", tags=["Exceptions"])
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "找不到此异常记录"
DELETED_MESSAGE = "异常记录删除成功"

SEARCH_FIELDS = ('customer_code', 'tracking_number', 'sku', 'note')


def _repository(db: DatabaseManager) -> RecordRepository:
    return RecordRepository(db, exception_records)


# =====================================================================
# STATISTICS
# =====================================================================

@router.get("/stats/summary", response_model=ExceptionStatsReport)
def get_exception_stats(db: DatabaseManager = Depends(get_db)):
    """
    Month-over-month exception report.

    Compares the current calendar month with the previous one: per-type
    counts, change rates, exception rate against FedEx + UPS volume, and
    the historical monthly average.
    """
    try:
        exceptions = _repository(db).list_all()
        volumes = RecordRepository(db, express_records).list_all()
        return compute_exception_stats(exceptions, volumes, now=datetime.now())

    except Exception as e:
        logger.error(f"Error computing exception stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/analysis", response_model=ExceptionAnalysis)
def get_exception_analysis(db: DatabaseManager = Depends(get_db)):
    """
    Exception breakdown: top 10 SKUs, courier split by tracking number
    shape, counts per type, and the 30 most recent days.
    """
    try:
        return compute_exception_analysis(_repository(db).list_all())

    except Exception as e:
        logger.error(f"Error computing exception analysis: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


# =====================================================================
# CRUD
# =====================================================================

@router.get("", response_model=List[ExceptionRecord])
def list_exception_records(
    time_range: TimeRange = Query(TimeRange.ALL, alias="range", description="Look-back window"),
    exception_type: Optional[ExceptionType] = Query(None, alias="type", description="Filter by exception type"),
    search: Optional[str] = Query(None, description="Customer code, tracking number, SKU or note contains"),
    db: DatabaseManager = Depends(get_db)
):
    """
    List exception records, newest first.
    """
    try:
        records = filter_by_range(_repository(db).list_all(), time_range.value)
    except Exception as e:
        logger.error(f"Error listing exception records: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if exception_type:
        records = [r for r in records if r['exception_type'] == exception_type.value]
    return [r for r in records if matches_search(r, search, SEARCH_FIELDS)]


@router.get("/{record_id}", response_model=ExceptionRecord)
def get_exception_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        record = _repository(db).get(record_id)
    except Exception as e:
        logger.error(f"Error fetching exception record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.post("", response_model=ExceptionRecord, status_code=201)
def create_exception_record(payload: ExceptionRecordCreate, db: DatabaseManager = Depends(get_db)):
    """
    Record a shipment exception. The date is stored as MM/DD/YYYY.
    """
    try:
        return _repository(db).create(payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error creating exception record: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{record_id}", response_model=ExceptionRecord)
def update_exception_record(
    record_id: str,
    payload: ExceptionRecordCreate,
    db: DatabaseManager = Depends(get_db)
):
    """
    Replace every field of an exception record.
    """
    try:
        record = _repository(db).replace(record_id, payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error updating exception record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_exception_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        deleted = _repository(db).delete(record_id)
    except Exception as e:
        logger.error(f"Error deleting exception record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return MessageResponse(message=DELETED_MESSAGE)

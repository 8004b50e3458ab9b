"""
Container Router
================
CRUD for container / loose cargo / pallet arrival records, their summary
counts, and the work-week grouping used by the arrivals board.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional, List

from api.deps import get_db
from api.schemas import (
    ContainerRecord, ContainerRecordCreate, ContainerStatus, ContainerType,
    ContainerSummary, ContainerWeek,
    MessageResponse, TimeRange
)
from backoffice.analytics import (
    compute_container_summary,
    group_by_work_week,
    filter_by_range,
    matches_search
)
from backoffice.db_utils import DatabaseManager
from backoffice.storage import RecordRepository, container_records

router = APIRouter(prefix="/api/container", tags=["Containers"])
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "找不到此集装箱记录"
DELETED_MESSAGE = "集装箱记录删除成功"

SEARCH_FIELDS = ('container_number', 'customer_code', 'issue_note')


def _repository(db: DatabaseManager) -> RecordRepository:
    return RecordRepository(db, container_records)


def _filtered_records(
    db: DatabaseManager,
    time_range: TimeRange,
    status: Optional[ContainerStatus],
    container_type: Optional[ContainerType],
    search: Optional[str]
) -> list:
    records = filter_by_range(_repository(db).list_all(), time_range.value)
    if status:
        records = [r for r in records if r['status'] == status.value]
    if container_type:
        records = [r for r in records if r['type'] == container_type.value]
    return [r for r in records if matches_search(r, search, SEARCH_FIELDS)]


@router.get("/stats/summary", response_model=ContainerSummary)
def get_container_summary(db: DatabaseManager = Depends(get_db)):
    """
    Container counts per type and status, and how many carry an issue note.
    """
    try:
        return compute_container_summary(_repository(db).list_all())

    except Exception as e:
        logger.error(f"Error computing container summary: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/weekly", response_model=List[ContainerWeek])
def get_containers_by_week(
    time_range: TimeRange = Query(TimeRange.ALL, alias="range", description="Look-back window"),
    status: Optional[ContainerStatus] = Query(None, description="Filter by status"),
    container_type: Optional[ContainerType] = Query(None, alias="type", description="Filter by container type"),
    search: Optional[str] = Query(None, description="Container number, customer code or issue contains"),
    db: DatabaseManager = Depends(get_db)
):
    """
    Containers grouped by work week (Monday to Friday, extended to the
    weekend when needed), newest week first.
    """
    try:
        records = _filtered_records(db, time_range, status, container_type, search)
        return group_by_work_week(records)

    except Exception as e:
        logger.error(f"Error grouping containers by week: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("", response_model=List[ContainerRecord])
def list_container_records(
    time_range: TimeRange = Query(TimeRange.ALL, alias="range", description="Look-back window"),
    status: Optional[ContainerStatus] = Query(None, description="Filter by status"),
    container_type: Optional[ContainerType] = Query(None, alias="type", description="Filter by container type"),
    search: Optional[str] = Query(None, description="Container number, customer code or issue contains"),
    db: DatabaseManager = Depends(get_db)
):
    """
    List container records, newest first.
    """
    try:
        return _filtered_records(db, time_range, status, container_type, search)
    except Exception as e:
        logger.error(f"Error listing container records: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{record_id}", response_model=ContainerRecord)
def get_container_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        record = _repository(db).get(record_id)
    except Exception as e:
        logger.error(f"Error fetching container record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.post("", response_model=ContainerRecord, status_code=201)
def create_container_record(payload: ContainerRecordCreate, db: DatabaseManager = Depends(get_db)):
    """
    Record a container arrival. Date and arrival time are normalized to
    MM/DD/YYYY and HH:mm.
    """
    try:
        return _repository(db).create(payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error creating container record: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{record_id}", response_model=ContainerRecord)
def update_container_record(
    record_id: str,
    payload: ContainerRecordCreate,
    db: DatabaseManager = Depends(get_db)
):
    try:
        record = _repository(db).replace(record_id, payload.model_dump(mode='json'))
    except Exception as e:
        logger.error(f"Error updating container record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_container_record(record_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        deleted = _repository(db).delete(record_id)
    except Exception as e:
        logger.error(f"Error deleting container record {record_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return MessageResponse(message=DELETED_MESSAGE)

"""
Record Repository Tests
=======================
CRUD against an in-memory SQLite database.
"""

from datetime import datetime, timedelta, timezone

from backoffice.storage import RecordRepository, exception_records


def exception_values(sku="SKU-1", day="03/01/2025"):
    return {
        "date": day,
        "exception_type": "NoTracking",
        "customer_code": "C001",
        "tracking_number": "123456789012",
        "sku": sku,
        "note": "",
    }


def test_create_assigns_id_and_created_at(db):
    repo = RecordRepository(db, exception_records)
    record = repo.create(exception_values())

    assert len(record["id"]) == 32
    assert record["created_at"] is not None
    assert record["sku"] == "SKU-1"
    assert repo.get(record["id"]) == record


def test_create_ignores_client_supplied_id(db):
    repo = RecordRepository(db, exception_records)
    record = repo.create({**exception_values(), "id": "mine", "unknown_column": 1})
    assert record["id"] != "mine"
    assert repo.get("mine") is None


def test_list_all_newest_first(db):
    repo = RecordRepository(db, exception_records)
    base = datetime(2025, 3, 1, tzinfo=timezone.utc)
    older = repo.create(exception_values("OLD"), created_at=base)
    newer = repo.create(exception_values("NEW"), created_at=base + timedelta(hours=1))
    middle = repo.create(exception_values("MID"), created_at=base + timedelta(minutes=30))

    assert [r["id"] for r in repo.list_all()] == [newer["id"], middle["id"], older["id"]]


def test_replace(db):
    repo = RecordRepository(db, exception_records)
    record = repo.create(exception_values())

    updated = repo.replace(record["id"], {**exception_values("SKU-2"), "id": "other"})

    assert updated["id"] == record["id"]
    assert updated["sku"] == "SKU-2"
    assert updated["created_at"] == record["created_at"]


def test_replace_unknown_id(db):
    repo = RecordRepository(db, exception_records)
    assert repo.replace("does-not-exist", exception_values()) is None


def test_delete(db):
    repo = RecordRepository(db, exception_records)
    record = repo.create(exception_values())

    assert repo.delete(record["id"]) is True
    assert repo.get(record["id"]) is None
    assert repo.delete(record["id"]) is False
    assert repo.list_all() == []

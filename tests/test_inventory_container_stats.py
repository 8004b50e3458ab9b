"""
Inventory & Container Summary Tests
===================================
"""

from datetime import date

from backoffice.analytics import (
    compute_container_summary,
    compute_inventory_summary,
    group_by_work_week,
    stock_difference
)


def inventory(day, actual, system):
    return {"date": day, "sku": "SKU-1", "actual_stock": actual, "system_stock": system}


def container(day, container_type="FullContainer", status="Completed", issue_note="ok"):
    return {
        "date": day,
        "container_number": f"CN-{day}",
        "type": container_type,
        "status": status,
        "issue_note": issue_note,
    }


# =====================================================================
# INVENTORY
# =====================================================================

def test_stock_difference():
    assert stock_difference(inventory("03/01/2025", 8, 10)) == -2
    assert stock_difference(inventory("03/01/2025", 12, 10)) == 2


def test_inventory_summary():
    records = [
        inventory("03/01/2025", 8, 10),
        inventory("03/20/2025", 12, 10),
        inventory("02/01/2025", 5, 5),
    ]
    summary = compute_inventory_summary(records, now=date(2025, 3, 15))

    assert summary == {
        "total_records": 3,
        "current_month_records": 2,
        "total_absolute_difference": 4,
        "shortage_count": 1,
        "surplus_count": 1,
    }


# =====================================================================
# CONTAINERS
# =====================================================================

def test_container_summary_counts_every_type_and_status():
    records = [
        container("03/10/2025", "FullContainer", "Completed"),
        container("03/11/2025", "Pallet", "HasIssue", issue_note="damaged pallet"),
        container("03/12/2025", "Pallet", "PendingUnload", issue_note="  "),
    ]
    summary = compute_container_summary(records)

    assert summary["total"] == 3
    assert summary["by_type"] == {"FullContainer": 1, "LooseCargo": 0, "Pallet": 2}
    assert summary["by_status"] == {
        "Completed": 1,
        "PendingUnload": 1,
        "PendingVerification": 0,
        "HasIssue": 1,
    }
    assert summary["with_issue_note"] == 2


def test_group_by_work_week():
    records = [
        container("03/10/2025"),  # Monday
        container("03/05/2025"),
        container("03/15/2025"),  # Saturday
        container("03/03/2025"),
        container("03/14/2025"),
        container("not a date"),
    ]
    weeks = group_by_work_week(records)

    assert [week["week_key"] for week in weeks] == ["2025-W11", "2025-W10", "unknown"]

    latest = weeks[0]
    assert latest["label"] == "03/10 - 03/15/2025"
    assert latest["record_count"] == 3
    assert [r["date"] for r in latest["records"]] == ["03/15/2025", "03/14/2025", "03/10/2025"]

    assert weeks[1]["label"] == "03/03 - 03/07/2025"
    assert weeks[2]["record_count"] == 1


def test_work_week_label_extends_to_sunday():
    weeks = group_by_work_week([container("03/11/2025"), container("03/16/2025")])
    assert len(weeks) == 1
    assert weeks[0]["label"] == "03/10 - 03/16/2025"


def test_work_week_across_year_end():
    weeks = group_by_work_week([container("01/02/2026")])
    assert weeks[0]["week_key"] == "2026-W01"
    assert weeks[0]["label"] == "12/29 - 01/02/2026"


def test_group_by_work_week_empty():
    assert group_by_work_week([]) == []


def test_oversized_dates_are_treated_as_unparseable():
    huge = "01/01/100000000000000000000"

    summary = compute_inventory_summary([inventory(huge, 1, 2)], now=date(2025, 3, 15))
    assert summary["current_month_records"] == 0
    assert summary["shortage_count"] == 1

    weeks = group_by_work_week([container(huge), container("03/10/2025")])
    assert [week["week_key"] for week in weeks] == ["2025-W11", "unknown"]

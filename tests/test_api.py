"""
Back-Office API Tests
=====================
End-to-end requests through FastAPI against an in-memory database.
"""

from datetime import date

import pytest


def exception_payload(**overrides):
    payload = {
        "date": "4/8/25",
        "exceptionType": "NoTracking",
        "customerCode": "C001",
        "trackingNumber": "1Z999AA10123456784",
        "sku": "SKU-1",
    }
    payload.update(overrides)
    return payload


def express_payload(**overrides):
    # snake_case field names are accepted as well as camelCase
    payload = {
        "date": "3/10/2025",
        "legacy_system_total": 120,
        "new_system_total": 30,
        "fedex_total": 100,
        "ups_total": 50,
        "fedex_a008_count": 10,
        "ups_a008_count": 5,
        "battery_panel_count": 2,
        "fedex_storage_count": 1,
        "ups_storage_count": 0,
        "completion_time": "17",
        "headcount": 5,
    }
    payload.update(overrides)
    return payload


def container_payload(**overrides):
    payload = {
        "date": "3/14/25",
        "containerNumber": "MSKU1234567",
        "type": "FullContainer",
        "customerCode": "C002",
        "arrivalTime": "9",
        "status": "PendingUnload",
        "issueNote": "none",
    }
    payload.update(overrides)
    return payload


def inventory_payload(**overrides):
    payload = {
        "date": "03/01/2025",
        "customerCode": "C003",
        "sku": "SKU-9",
        "productName": "Widget",
        "actualStock": 8,
        "systemStock": 10,
        "location": "A-01-02",
    }
    payload.update(overrides)
    return payload


# =====================================================================
# STATUS
# =====================================================================

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data


def test_server_status(client):
    response = client.get("/api/status")
    assert response.status_code == 200
    assert response.json() == {"status": "online", "message": "服务器运行正常"}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["db"] == "ok"


def test_unknown_route_returns_message(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert "message" in response.json()


# =====================================================================
# EXCEPTIONS
# =====================================================================

def test_exception_crud_round_trip(client):
    response = client.post("/api/exception", json=exception_payload())
    assert response.status_code == 201
    created = response.json()
    assert created["date"] == "04/08/2025"
    assert created["exceptionType"] == "NoTracking"
    assert created["note"] == ""
    assert created["id"]
    assert created["createdAt"]
    record_id = created["id"]

    response = client.get(f"/api/exception/{record_id}")
    assert response.status_code == 200
    assert response.json() == created

    response = client.put(
        f"/api/exception/{record_id}",
        json=exception_payload(sku="SKU-2", exceptionType="WrongShipment")
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["sku"] == "SKU-2"
    assert updated["exceptionType"] == "WrongShipment"
    assert updated["createdAt"] == created["createdAt"]

    response = client.get("/api/exception")
    assert [r["id"] for r in response.json()] == [record_id]

    response = client.delete(f"/api/exception/{record_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "异常记录删除成功"}

    response = client.get(f"/api/exception/{record_id}")
    assert response.status_code == 404
    assert response.json() == {"message": "找不到此异常记录"}


@pytest.mark.parametrize("method", ["get", "delete"])
def test_exception_unknown_id(client, method):
    response = getattr(client, method)("/api/exception/not-a-real-id")
    assert response.status_code == 404
    assert response.json() == {"message": "找不到此异常记录"}


def test_exception_update_unknown_id(client):
    response = client.put("/api/exception/0123456789abcdef", json=exception_payload())
    assert response.status_code == 404
    assert response.json() == {"message": "找不到此异常记录"}


@pytest.mark.parametrize("payload", [
    exception_payload(exceptionType="Lost"),
    exception_payload(sku=""),
    exception_payload(date=""),
    {"date": "03/01/2025"},
])
def test_exception_validation_returns_400(client, payload):
    response = client.post("/api/exception", json=payload)
    assert response.status_code == 400
    assert response.json()["message"]


def test_exception_list_filters(client):
    client.post("/api/exception", json=exception_payload(sku="RED-1"))
    client.post("/api/exception", json=exception_payload(sku="BLUE-1", exceptionType="OutOfStock"))

    response = client.get("/api/exception", params={"type": "OutOfStock"})
    assert [r["sku"] for r in response.json()] == ["BLUE-1"]

    response = client.get("/api/exception", params={"search": "red"})
    assert [r["sku"] for r in response.json()] == ["RED-1"]

    response = client.get("/api/exception", params={"range": "decade"})
    assert response.status_code == 400


def test_exception_stats_empty(client):
    response = client.get("/api/exception/stats/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["currentMonth"]["totalExceptions"] == 0
    assert data["lastMonth"]["totalExceptions"] == 0
    assert data["changeRate"]["total"] == 0
    assert data["monthlyAverage"] == 0


def test_exception_stats_current_month(client):
    today = f"{date.today():%m/%d/%Y}"
    client.post("/api/exception", json=exception_payload(date=today))
    client.post("/api/express", json=express_payload(date=today, fedex_total=40, ups_total=10))

    data = client.get("/api/exception/stats/summary").json()
    assert data["currentMonth"]["totalExceptions"] == 1
    assert data["currentMonth"]["noTracking"] == 1
    assert data["currentMonth"]["shipmentVolume"] == 50
    assert data["currentMonth"]["exceptionRate"] == 2.0
    assert data["changeRate"]["total"] == 100
    assert data["monthlyAverage"] == 1


def test_exception_analysis(client):
    client.post("/api/exception", json=exception_payload())
    client.post("/api/exception", json=exception_payload(trackingNumber="123456789012", exceptionType="OutOfStock"))

    response = client.get("/api/exception/stats/analysis")
    assert response.status_code == 200
    data = response.json()
    assert data["courierStats"] == {"fedex": 1, "ups": 1, "unknown": 0}
    assert data["typeStats"]["OutOfStock"] == 1
    assert data["topSkus"][0]["sku"] == "SKU-1"
    assert data["topSkus"][0]["count"] == 2
    assert data["dailyStats"][0]["date"] == "04/08/2025"


# =====================================================================
# EXPRESS
# =====================================================================

def test_express_create_normalizes_date_and_time(client):
    response = client.post("/api/express", json=express_payload())
    assert response.status_code == 201
    data = response.json()
    assert data["date"] == "03/10/2025"
    assert data["completionTime"] == "17:00"
    assert data["headcount"] == 5


def test_express_rejects_negative_counts(client):
    response = client.post("/api/express", json=express_payload(ups_total=-1))
    assert response.status_code == 400


def test_express_not_found_message(client):
    response = client.delete("/api/express/missing")
    assert response.status_code == 404
    assert response.json() == {"message": "找不到此数据"}


def test_express_delete_message(client):
    record_id = client.post("/api/express", json=express_payload()).json()["id"]
    response = client.delete(f"/api/express/{record_id}")
    assert response.json() == {"message": "数据删除成功"}


def test_express_summary(client):
    client.post("/api/express", json=express_payload())
    client.post("/api/express", json=express_payload(date="3/11/2025", completion_time="9:00"))

    response = client.get("/api/express/stats/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["timeRange"] == "all"
    assert data["recordCount"] == 2
    assert data["totalOrders"] == 300
    assert data["averageCompletionTime"] == "13:00"
    assert data["averageUnitTimeEfficiency"] == 3.75
    assert [day["date"] for day in data["dailyTrend"]] == ["03/10/2025", "03/11/2025"]


# =====================================================================
# CONTAINERS
# =====================================================================

def test_container_create_and_update(client):
    response = client.post("/api/container", json=container_payload())
    assert response.status_code == 201
    created = response.json()
    assert created["date"] == "03/14/2025"
    assert created["arrivalTime"] == "09:00"

    response = client.put(
        f"/api/container/{created['id']}",
        json=container_payload(status="HasIssue", issueNote="seal broken")
    )
    assert response.status_code == 200
    assert response.json()["status"] == "HasIssue"
    assert response.json()["issueNote"] == "seal broken"


def test_container_arrival_time_optional(client):
    payload = container_payload()
    del payload["arrivalTime"]
    response = client.post("/api/container", json=payload)
    assert response.status_code == 201
    assert response.json()["arrivalTime"] == ""


def test_container_not_found_message(client):
    response = client.get("/api/container/missing")
    assert response.status_code == 404
    assert response.json() == {"message": "找不到此集装箱记录"}


def test_container_summary_and_weekly(client):
    client.post("/api/container", json=container_payload(date="3/10/2025"))
    client.post("/api/container", json=container_payload(date="3/15/2025", type="Pallet"))
    client.post("/api/container", json=container_payload(date="3/3/2025", status="Completed"))

    summary = client.get("/api/container/stats/summary").json()
    assert summary["total"] == 3
    assert summary["byType"]["Pallet"] == 1
    assert summary["byStatus"]["Completed"] == 1

    weeks = client.get("/api/container/stats/weekly").json()
    assert [week["label"] for week in weeks] == ["03/10 - 03/15/2025", "03/03 - 03/07/2025"]
    assert weeks[0]["recordCount"] == 2
    assert weeks[0]["records"][0]["date"] == "03/15/2025"

    weeks = client.get("/api/container/stats/weekly", params={"type": "Pallet"}).json()
    assert len(weeks) == 1
    assert weeks[0]["recordCount"] == 1


# =====================================================================
# INVENTORY
# =====================================================================

def test_inventory_difference_is_derived(client):
    response = client.post("/api/inventory", json=inventory_payload())
    assert response.status_code == 201
    created = response.json()
    assert created["difference"] == -2

    response = client.put(f"/api/inventory/{created['id']}", json=inventory_payload(actualStock=15))
    assert response.json()["difference"] == 5


def test_inventory_not_found_and_delete_messages(client):
    response = client.get("/api/inventory/missing")
    assert response.status_code == 404
    assert response.json() == {"message": "找不到此库存异常记录"}

    record_id = client.post("/api/inventory", json=inventory_payload()).json()["id"]
    response = client.delete(f"/api/inventory/{record_id}")
    assert response.json() == {"message": "库存异常记录删除成功"}


def test_inventory_summary(client):
    today = f"{date.today():%m/%d/%Y}"
    client.post("/api/inventory", json=inventory_payload(date=today))
    client.post("/api/inventory", json=inventory_payload(actualStock=13))

    response = client.get("/api/inventory/stats/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["totalRecords"] == 2
    assert data["totalAbsoluteDifference"] == 5
    assert data["shortageCount"] == 1
    assert data["surplusCount"] == 1


# =====================================================================
# FIELD LIMITS & MALFORMED DATES
# =====================================================================

@pytest.mark.parametrize("payload", [
    exception_payload(date="x" * 40),
    exception_payload(date="1/1/" + "9" * 28),
    exception_payload(customerCode="C" * 65),
    exception_payload(trackingNumber="1" * 65),
    exception_payload(sku="S" * 129),
])
def test_exception_over_long_fields_return_400(client, payload):
    response = client.post("/api/exception", json=payload)
    assert response.status_code == 400
    assert response.json()["message"]


def test_over_long_fields_on_other_resources_return_400(client):
    response = client.post("/api/express", json=express_payload(completion_time="9" * 17))
    assert response.status_code == 400

    response = client.post("/api/container", json=container_payload(containerNumber="M" * 65))
    assert response.status_code == 400

    response = client.post("/api/inventory", json=inventory_payload(productName="W" * 256))
    assert response.status_code == 400


def test_oversized_year_does_not_break_statistics(client):
    huge = "1/1/100000000000000000000"
    response = client.post("/api/exception", json=exception_payload(date=huge))
    assert response.status_code == 201
    assert response.json()["date"] == "01/01/100000000000000000000"
    client.post("/api/container", json=container_payload(date=huge))
    client.post("/api/inventory", json=inventory_payload(date=huge))

    response = client.get("/api/exception/stats/summary")
    assert response.status_code == 200
    assert response.json()["currentMonth"]["totalExceptions"] == 0

    assert client.get("/api/exception/stats/analysis").status_code == 200
    assert client.get("/api/exception", params={"range": "month"}).json() == []
    assert client.get("/api/container/stats/weekly").json()[0]["weekKey"] == "unknown"
    assert client.get("/api/inventory/stats/summary").status_code == 200

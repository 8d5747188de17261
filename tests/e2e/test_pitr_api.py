from __future__ import annotations

import json

from fastapi.testclient import TestClient

from app.main import create_app

client = TestClient(create_app())

WINDOW = {
    "available": True,
    "earliestPitrTime": "2024-01-30T18:00:00Z",
    "latestPitrTime": "2024-03-02T08:00:00Z",
    "intervals": [
        {"startTime": "2024-02-20 12:00:00", "endTime": "2024-03-02 08:00:00"},
        {"startTime": "2024-01-30T18:00:00Z", "endTime": "2024-02-10T06:30:00Z"},
        {"startTime": "2024-02-10T06:30:00.400Z", "endTime": "2024-02-10T06:45:00Z"},
    ],
    "status": "segmented",
    "unavailableReason": None,
}

UNAVAILABLE = {
    "available": False,
    "earliestPitrTime": None,
    "latestPitrTime": None,
    "intervals": [],
    "status": "unavailable",
    "unavailableReason": "No WAL archive",
}


def test_healthz():
    assert client.get("/healthz").json() == {"status": "ok"}


def test_timeline_merges_and_echoes_descriptor_fields():
    response = client.post("/pitr/timeline", json=WINDOW)
    assert response.status_code == 200
    body = response.json()
    assert body["timeline_status"] == "segmented"
    assert body["status"] == "segmented"
    assert body["earliest"] == "2024-01-30T18:00:00.000Z"
    assert body["latest"] == "2024-03-02T08:00:00.000Z"
    assert body["intervals"] == [
        {"startTime": "2024-01-30T18:00:00.000Z", "endTime": "2024-02-10T06:45:00.000Z"},
        {"startTime": "2024-02-20T12:00:00.000Z", "endTime": "2024-03-02T08:00:00.000Z"},
    ]


def test_timeline_unavailable():
    body = client.post("/pitr/timeline", json=UNAVAILABLE).json()
    assert body["timeline_status"] == "unavailable"
    assert body["unavailable_reason"] == "No WAL archive"
    assert body["intervals"] == []
    assert body["span_label"] == "N/A"


def test_validate_target_time():
    body = client.post("/pitr/validate", json={"window": WINDOW, "target_time": "2024-02-10 06:45:00"}).json()
    assert body["target_time"] == "2024-02-10T06:45:00.000Z"
    assert body["result"]["is_valid"] is True
    assert body["result"]["message"] is None


def test_validate_day_and_clamped_time_in_gap():
    payload = {"window": WINDOW, "day": "2024-02-15", "hour": 30, "minute": 10, "second": 5}
    body = client.post("/pitr/validate", json=payload).json()
    assert body["target_time"] == "2024-02-15T23:10:05.000Z"
    result = body["result"]
    assert result["is_valid"] is False
    assert result["code"] == "PITR_TARGET_IN_GAP"
    assert result["nearest_before"] == "2024-02-10T06:45:00.000Z"
    assert result["nearest_after"] == "2024-02-20T12:00:00.000Z"


def test_validate_overflowing_hour_is_clamped():
    # 1e400 decodes to float infinity
    raw = json.dumps({"window": WINDOW, "day": "2024-02-05", "hour": "HOUR", "minute": 5}).replace('"HOUR"', "1e400")
    response = client.post("/pitr/validate", content=raw, headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    body = response.json()
    assert body["target_time"] == "2024-02-05T23:05:00.000Z"
    assert body["result"]["is_valid"] is True


def test_validate_requires_candidate():
    response = client.post("/pitr/validate", json={"window": WINDOW})
    assert response.status_code == 422


def test_validate_unavailable_window():
    body = client.post("/pitr/validate", json={"window": UNAVAILABLE, "target_time": "2024-02-01T00:00:00Z"}).json()
    assert body["result"]["code"] == "PITR_UNAVAILABLE"


def test_calendar_grid_and_labels():
    payload = {"window": WINDOW, "month": "2024-02-14", "selected_day": "2024-02-10", "today": "2024-02-29"}
    body = client.post("/pitr/calendar", json=payload).json()
    assert body["month"] == "2024-02-01"
    assert body["month_label"] == "February 2024"
    assert body["can_go_previous"] is True
    assert body["can_go_next"] is True
    days = body["days"]
    assert len(days) == 42
    # February 2024 starts on a Thursday
    assert [cell["in_month"] for cell in days[:5]] == [False, False, False, False, True]
    in_month = [cell for cell in days if cell["in_month"]]
    assert len(in_month) == 29
    assert all(cell["in_range"] for cell in in_month)
    assert in_month[9]["is_selected"] is True
    assert in_month[28]["is_today"] is True
    assert not any(cell["in_range"] for cell in days if not cell["in_month"])
    assert body["allowed_ranges"] == [{"min": "2024-02-10T00:00:00.000Z", "max": "2024-02-10T06:45:00.000Z"}]
    assert body["allowed_ranges_label"] == "00:00:00–06:45:00 UTC"


def test_calendar_defaults_to_latest_month():
    body = client.post("/pitr/calendar", json={"window": WINDOW, "today": "2024-06-01"}).json()
    assert body["month"] == "2024-03-01"
    assert body["can_go_next"] is False
    in_range = [cell["date"] for cell in body["days"] if cell["in_month"] and cell["in_range"]]
    assert in_range == [1, 2]


def test_restore_request_built_for_valid_target():
    payload = {
        "window": WINDOW,
        "restore": {
            "targetTime": "2024-02-25T10:00:00+01:00",
            "newClusterName": "orders-restored",
            "nodeRegions": ["fsn1"],
            "nodeSize": "cx23",
            "postgresVersion": "16",
        },
    }
    response = client.post("/pitr/restore-request", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["targetTime"] == "2024-02-25T09:00:00.000Z"
    assert body["createNewCluster"] is True
    assert body["newClusterName"] == "orders-restored"


def test_restore_request_rejects_gap_target():
    payload = {"window": WINDOW, "restore": {"targetTime": "2024-02-15T00:00:00Z"}}
    response = client.post("/pitr/restore-request", json=payload)
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "PITR_TARGET_IN_GAP"
    assert detail["requestedTargetTime"] == "2024-02-15T00:00:00Z"
    assert detail["nearestBefore"] == "2024-02-10T06:45:00.000Z"
    assert detail["earliestPitrTime"] == "2024-01-30T18:00:00.000Z"
    assert detail["latestPitrTime"] == "2024-03-02T08:00:00.000Z"


def test_restore_request_field_rules():
    base = {"targetTime": "2024-02-25T10:00:00Z"}
    for bad in (
        {"newClusterName": "9lives"},
        {"nodeRegions": ["a", "b"]},
        {"nodeSize": "cx99"},
        {"postgresVersion": "12"},
        {"createNewCluster": False},
    ):
        response = client.post("/pitr/restore-request", json={"window": WINDOW, "restore": {**base, **bad}})
        assert response.status_code == 422, bad

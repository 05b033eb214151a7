"""HTTP tests for the /api/v1/bluetooth endpoints."""

from datetime import datetime

from fitsync.services.health_sync_service import HealthSyncService

BASE = "/api/v1/bluetooth"


async def _pair(client, payload):
    return await client.post(f"{BASE}/devices/pair", json=payload)


async def test_full_round_trip(client, pair_payload):
    response = await _pair(client, pair_payload)
    assert response.status_code == 201
    device = response.json()
    assert device["deviceId"] == "watch-1"
    assert device["deviceType"] == "smartwatch"
    assert device["isConnected"] is True

    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"timestamp": "2024-01-05T08:00:00Z", "steps": 1000, "heartRate": 72}]
    })
    assert response.status_code == 200
    body = response.json()
    assert body["sessionId"].startswith("sync_")
    assert {k: v for k, v in body.items() if k != "sessionId"} == {
        "dataPoints": 2,
        "healthDataCount": 1,
        "workoutDataCount": 0,
        "sleepDataCount": 0,
    }

    response = await client.get(f"{BASE}/devices/watch-1/health-data")
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["date"].startswith("2024-01-05")
    assert rows[0]["steps"] == 1000
    assert rows[0]["heartRate"] == 72


async def test_pairing_again_returns_200_and_no_duplicate(client, pair_payload):
    assert (await _pair(client, pair_payload)).status_code == 201
    await client.put(f"{BASE}/devices/watch-1/status", json={"isConnected": False})

    response = await _pair(client, pair_payload)
    assert response.status_code == 200
    assert response.json()["isConnected"] is True

    devices = (await client.get(f"{BASE}/devices")).json()
    assert len(devices) == 1


async def test_pair_rejects_unknown_device_type(client, pair_payload):
    response = await _pair(client, {**pair_payload, "deviceType": "toaster"})
    assert response.status_code == 422
    assert "error" in response.json()


async def test_update_status(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.put(f"{BASE}/devices/watch-1/status", json={
        "isConnected": False, "batteryLevel": 15, "signalStrength": 40
    })
    assert response.status_code == 200
    body = response.json()
    assert body["isConnected"] is False
    assert body["batteryLevel"] == 15
    assert body["signalStrength"] == 40
    assert body["lastDisconnected"] is not None


async def test_update_status_out_of_range_battery_rejected(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.put(f"{BASE}/devices/watch-1/status", json={
        "isConnected": True, "batteryLevel": 150
    })
    assert response.status_code == 422


async def test_update_status_unknown_device_404(client):
    response = await client.put(f"{BASE}/devices/ghost/status", json={"isConnected": True})
    assert response.status_code == 404
    assert response.json() == {"error": "Device not found"}


async def test_unpair_cascade(client, pair_payload):
    await _pair(client, pair_payload)
    await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"date": "2024-01-05", "steps": 10}]
    })

    response = await client.delete(f"{BASE}/devices/watch-1")
    assert response.status_code == 200
    assert response.json() == {"message": "Device unpaired successfully"}

    assert (await client.get(f"{BASE}/devices")).json() == []
    assert (await client.get(f"{BASE}/devices/watch-1/health-data")).json() == []

    response = await client.delete(f"{BASE}/devices/watch-1")
    assert response.status_code == 404


async def test_sync_unknown_device_404(client):
    response = await client.post(f"{BASE}/devices/ghost/sync", json={"healthData": [{"steps": 1}]})
    assert response.status_code == 404
    assert response.json() == {"error": "Device not found"}
    assert (await client.get(f"{BASE}/sync-sessions")).json() == []


async def test_sync_is_idempotent_on_data_but_appends_sessions(client, pair_payload):
    await _pair(client, pair_payload)
    batch = {"healthData": [{"timestamp": "2024-01-05T08:00:00Z", "steps": 1000}]}

    first = (await client.post(f"{BASE}/devices/watch-1/sync", json=batch)).json()
    second = (await client.post(f"{BASE}/devices/watch-1/sync", json=batch)).json()

    assert second["dataPoints"] > 0
    assert first["sessionId"] != second["sessionId"]
    assert len((await client.get(f"{BASE}/devices/watch-1/health-data")).json()) == 1

    history = (await client.get(f"{BASE}/devices/watch-1/sync-history")).json()
    assert [s["sessionId"] for s in history] == [second["sessionId"], first["sessionId"]]
    assert all(s["status"] == "completed" for s in history)


async def test_same_day_samples_collapse_to_last(client, pair_payload):
    await _pair(client, pair_payload)
    await client.post(f"{BASE}/devices/watch-1/sync", json={"healthData": [
        {"timestamp": "2024-01-05T06:00:00Z", "steps": 100, "calories": 50},
        {"timestamp": "2024-01-05T22:00:00Z", "steps": 9000, "calories": 2200},
    ]})

    rows = (await client.get(f"{BASE}/devices/watch-1/health-data")).json()
    assert len(rows) == 1
    assert rows[0]["steps"] == 9000
    assert rows[0]["calories"] == 2200


async def test_counters_for_mixed_batch(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "syncType": "full",
        "healthData": [
            {"date": "2024-01-01", "steps": 5000, "heartRate": 65, "calories": 2100,
             "distance": 3.5, "activeMinutes": 40},
            {"date": "2024-01-02", "bloodOxygen": 97, "temperature": 36.6, "stressLevel": 30,
             "workouts": [
                 {"type": "cardio", "duration": 30, "intensity": "high"},
                 {"type": "strength", "duration": 20, "intensity": "medium"},
             ]},
            {"date": "2024-01-03", "sleepStages": {"deep": 90, "light": 200, "rem": 100, "awake": 15}},
        ],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["dataPoints"] == 8
    assert body["healthDataCount"] == 3
    assert body["workoutDataCount"] == 2
    assert body["sleepDataCount"] == 1

    session = (await client.get(f"{BASE}/sync-sessions")).json()[0]
    assert session["syncType"] == "full"
    assert session["bytesTransferred"] == 512
    assert session["endTime"] is not None


async def test_malformed_timestamp_does_not_fail_sync(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"timestamp": "31/31/2024 25:00", "steps": 42}]
    })
    assert response.status_code == 200

    rows = (await client.get(f"{BASE}/devices/watch-1/health-data")).json()
    assert len(rows) == 1
    assert rows[0]["date"].startswith(datetime.utcnow().strftime("%Y-%m-%d"))

    session = (await client.get(f"{BASE}/devices/watch-1/sync-history")).json()[0]
    assert session["syncErrors"][0]["code"] == "INVALID_DATE"


async def test_unknown_sample_fields_are_ignored(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"date": "2024-01-05", "steps": 5, "favouriteColour": "blue"}]
    })
    assert response.status_code == 200
    assert response.json()["dataPoints"] == 1


async def test_out_of_range_metric_is_rejected(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"date": "2024-01-05", "heartRate": 400}]
    })
    assert response.status_code == 422
    assert (await client.get(f"{BASE}/sync-sessions")).json() == []


async def test_storage_failure_returns_500_and_leaves_session_in_progress(client, pair_payload, monkeypatch):
    await _pair(client, pair_payload)

    async def failing_upsert(self, *args, **kwargs):
        raise RuntimeError("storage unavailable")

    monkeypatch.setattr(HealthSyncService, "_upsert_health_data", failing_upsert)

    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"date": "2024-01-05", "steps": 1}]
    })
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to sync device data"}

    sessions = (await client.get(f"{BASE}/sync-sessions")).json()
    assert len(sessions) == 1
    assert sessions[0]["status"] == "in-progress"
    assert sessions[0]["endTime"] is None


async def test_health_data_date_filters_and_limit(client, pair_payload):
    await _pair(client, pair_payload)
    await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"date": f"2024-01-{day:02d}", "steps": day} for day in range(1, 8)]
    })

    response = await client.get(
        f"{BASE}/devices/watch-1/health-data",
        params={"startDate": "2024-01-02", "endDate": "2024-01-04"},
    )
    assert [r["steps"] for r in response.json()] == [4, 3, 2]

    response = await client.get(f"{BASE}/devices/watch-1/health-data", params={"limit": 3})
    assert [r["steps"] for r in response.json()] == [7, 6, 5]


async def test_health_data_invalid_date_bound_400(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.get(f"{BASE}/devices/watch-1/health-data", params={"startDate": "soon"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid startDate: soon"}


async def test_sync_sessions_span_devices(client, pair_payload):
    await _pair(client, pair_payload)
    await _pair(client, {**pair_payload, "deviceId": "band-1", "deviceType": "fitness-band"})
    await client.post(f"{BASE}/devices/watch-1/sync", json={"healthData": []})
    await client.post(f"{BASE}/devices/band-1/sync", json={"healthData": []})

    sessions = (await client.get(f"{BASE}/sync-sessions")).json()
    assert {s["deviceId"] for s in sessions} == {"watch-1", "band-1"}

    limited = (await client.get(f"{BASE}/sync-sessions", params={"limit": 1})).json()
    assert len(limited) == 1
    assert limited[0]["deviceId"] == "band-1"


async def test_same_day_sample_missing_a_field_keeps_earlier_value(client, pair_payload):
    await _pair(client, pair_payload)
    await client.post(f"{BASE}/devices/watch-1/sync", json={"healthData": [
        {"timestamp": "2024-01-05T06:00:00Z", "steps": 100, "heartRate": 70},
        {"timestamp": "2024-01-05T22:00:00Z", "steps": 9000},
    ]})

    rows = (await client.get(f"{BASE}/devices/watch-1/health-data")).json()
    assert len(rows) == 1
    assert rows[0]["steps"] == 9000
    assert rows[0]["heartRate"] == 70


async def test_offset_outside_calendar_falls_back_per_sample(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.post(f"{BASE}/devices/watch-1/sync", json={"healthData": [
        {"timestamp": "0001-01-01T00:00:00+01:00", "steps": 1},
        {"timestamp": "2024-01-05T08:00:00Z", "steps": 2},
    ]})
    assert response.status_code == 200
    assert response.json()["healthDataCount"] == 2

    rows = (await client.get(f"{BASE}/devices/watch-1/health-data")).json()
    assert rows[0]["date"].startswith(datetime.utcnow().strftime("%Y-%m-%d"))
    assert rows[0]["steps"] == 1
    assert rows[1]["date"].startswith("2024-01-05")

    session = (await client.get(f"{BASE}/devices/watch-1/sync-history")).json()[0]
    assert session["status"] == "completed"
    assert [e["code"] for e in session["syncErrors"]] == ["INVALID_DATE"]


async def test_boolean_timestamp_is_treated_as_invalid(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.post(f"{BASE}/devices/watch-1/sync", json={
        "healthData": [{"timestamp": True, "steps": 1}]
    })
    assert response.status_code == 200

    rows = (await client.get(f"{BASE}/devices/watch-1/health-data")).json()
    assert len(rows) == 1
    assert rows[0]["date"].startswith(datetime.utcnow().strftime("%Y-%m-%d"))

    session = (await client.get(f"{BASE}/devices/watch-1/sync-history")).json()[0]
    assert session["syncErrors"][0]["code"] == "INVALID_DATE"


async def test_health_data_date_bound_outside_calendar_400(client, pair_payload):
    await _pair(client, pair_payload)
    response = await client.get(
        f"{BASE}/devices/watch-1/health-data",
        params={"startDate": "0001-01-01T00:00:00+01:00"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid startDate: 0001-01-01T00:00:00+01:00"}

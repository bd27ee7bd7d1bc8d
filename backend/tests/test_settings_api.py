SETTINGS_PAYLOAD = {
    "periodDuration": 45,
    "schoolStartTime": "08:00",
    "lunchPeriod": 4,
    "lunchDuration": 60,
}


def test_period_settings_default_until_saved(client):
    response = client.get("/api/period-settings")

    assert response.status_code == 200
    body = response.json()
    assert body["periodDuration"] == 60
    assert body["schoolStartTime"] == "08:00"
    assert body["lunchPeriod"] == 5
    assert body["lunchDuration"] == 60
    assert body["version"] == 0


def test_period_settings_replace_bumps_version(client):
    first = client.put("/api/period-settings", json=SETTINGS_PAYLOAD, headers={"X-Operator": "Office"})
    assert first.status_code == 200
    assert first.json()["version"] == 1
    assert first.json()["periodDuration"] == 45

    second = client.put(
        "/api/period-settings",
        json={
            "periodDurationMinutes": 40,
            "schoolStartTime": "09:00",
            "lunchAfterPeriod": 5,
            "lunchDurationMinutes": 30,
        },
    )
    assert second.status_code == 200
    assert second.json()["version"] == 2

    current = client.get("/api/period-settings").json()
    assert current["periodDuration"] == 40
    assert current["schoolStartTime"] == "09:00"
    assert current["version"] == 2

    logs = client.get("/api/activity/logs", params={"entity_type": "period_settings"}).json()
    assert len(logs) == 2
    assert {item["actor"] for item in logs} == {"Office", None}


def test_period_settings_rejects_out_of_range_values(client):
    response = client.put("/api/period-settings", json={**SETTINGS_PAYLOAD, "periodDuration": 15})
    assert response.status_code == 422

    response = client.put("/api/period-settings", json={**SETTINGS_PAYLOAD, "schoolStartTime": "8am"})
    assert response.status_code == 422

    assert client.get("/api/period-settings").json()["version"] == 0


def test_period_slots_follow_current_settings(client):
    client.put("/api/period-settings", json=SETTINGS_PAYLOAD)

    response = client.get("/api/period-settings/periods")

    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 9
    assert slots[4] == {
        "period": 0,
        "startTime": "11:00",
        "endTime": "12:00",
        "isLunch": True,
        "isDiary": False,
        "label": "Lunch",
        "display": "11:00 AM - 12:00 PM",
    }
    assert slots[-1]["endTime"] == "15:00"
    assert slots[-1]["isDiary"] is True
    assert [slot["period"] for slot in slots if slot["isDiary"]] == [8]


def test_unavailable_settings_table_returns_503(client, drop_table):
    drop_table("period_settings")

    response = client.get("/api/period-settings")
    assert response.status_code == 503
    assert response.json() == {"message": "Period settings are unavailable", "details": {}}

    saved = client.put("/api/period-settings", json=SETTINGS_PAYLOAD)
    assert saved.status_code == 503
    assert saved.json()["message"] == "Period settings could not be saved"
    assert client.get("/api/period-settings/periods").status_code == 503

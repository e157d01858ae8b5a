# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import text

from tests.helpers import auth_headers

CHILD_PAYLOAD = {
    "name": "Ayu",
    "gender": "FEMALE",
    "age": 20,
    "height": 82.0,
    "weight": 11.1,
    "foodAllergies": ["peanut"],
    "mealDuration": "LESS_THAN_10",
    "texturePreference": "SEMI_CHUNKY",
    "eatingPatternChange": "SLIGHTLY",
    "weightEnergyLevel": "NORMAL_WEIGHT",
}


def _create_child(client, owner, **overrides):
    return client.post("/children", json={**CHILD_PAYLOAD, **overrides}, headers=auth_headers(owner))


def _create_log(client, owner, child_id, **overrides):
    payload = {
        "childId": child_id,
        "foodName": "Chicken porridge",
        "mealTime": "LUNCH",
        "childResponse": "FINISHED",
        **overrides,
    }
    return client.post("/meal-logs", json=payload, headers=auth_headers(owner))


# ---------------------- CHILDREN ----------------------
def test_create_and_fetch_child(client, user):
    res = _create_child(client, user)
    assert res.status_code == 201
    child = res.json()["child"]
    assert child["name"] == "Ayu"
    assert child["foodAllergies"] == ["peanut"]
    assert child["texturePreference"] == "SEMI_CHUNKY"

    fetched = client.get(f"/children/{child['id']}", headers=auth_headers(user)).json()["child"]
    assert fetched["mealLogs"] == []

    listed = client.get("/children", headers=auth_headers(user)).json()["children"]
    assert [c["id"] for c in listed] == [child["id"]]


def test_create_child_validation(client, user):
    missing = client.post("/children", json={"name": "Ayu"}, headers=auth_headers(user))
    assert missing.status_code == 400
    assert missing.json() == {"error": "Missing required fields"}

    bad_gender = _create_child(client, user, gender="OTHER")
    assert bad_gender.status_code == 400
    assert bad_gender.json() == {"error": "Invalid gender"}


def test_children_are_private(client, user, other_user):
    child_id = _create_child(client, user).json()["child"]["id"]

    assert client.get("/children", headers=auth_headers(other_user)).json()["children"] == []
    assert client.get(f"/children/{child_id}", headers=auth_headers(other_user)).status_code == 403
    assert client.put(f"/children/{child_id}", json={"name": "X"}, headers=auth_headers(other_user)).status_code == 403
    assert client.delete(f"/children/{child_id}", headers=auth_headers(other_user)).status_code == 403
    assert client.get("/children/999", headers=auth_headers(user)).status_code == 404
    assert client.get("/children").status_code == 401


def test_partial_update_child(client, user):
    child_id = _create_child(client, user).json()["child"]["id"]

    res = client.put(
        f"/children/{child_id}",
        json={"weight": 11.8, "texturePreference": "SOLID_FINGER_FOOD"},
        headers=auth_headers(user),
    )
    assert res.status_code == 200
    child = res.json()["child"]
    assert child["weight"] == 11.8
    assert child["texturePreference"] == "SOLID_FINGER_FOOD"
    assert child["name"] == "Ayu"

    bad = client.put(f"/children/{child_id}", json={"mealDuration": "FOREVER"}, headers=auth_headers(user))
    assert bad.status_code == 400


def test_delete_child_removes_meal_logs(client, user):
    child_id = _create_child(client, user).json()["child"]["id"]
    log_id = _create_log(client, user, child_id).json()["mealLog"]["id"]

    assert client.delete(f"/children/{child_id}", headers=auth_headers(user)).status_code == 200
    assert client.get(f"/meal-logs/{log_id}", headers=auth_headers(user)).status_code == 404


# ---------------------- MEAL LOGS ----------------------
def test_create_meal_log(client, user):
    child_id = _create_child(client, user).json()["child"]["id"]

    res = _create_log(client, user, child_id, notes="Ate slowly", loggedAt="2024-03-05T12:00:00")
    assert res.status_code == 201
    log = res.json()["mealLog"]
    assert log["notes"] == "Ate slowly"
    assert log["loggedAt"].startswith("2024-03-05T12:00:00")
    assert log["child"]["id"] == child_id


def test_meal_log_notes_are_encrypted_at_rest(client, db, user):
    child_id = _create_child(client, user).json()["child"]["id"]
    log_id = _create_log(client, user, child_id, notes="secret note").json()["mealLog"]["id"]

    raw = db.execute(text("SELECT notes FROM meal_logs WHERE id = :id"), {"id": log_id}).scalar()
    assert raw != "secret note"


def test_meal_log_validation_and_ownership(client, user, other_user):
    child_id = _create_child(client, user).json()["child"]["id"]

    assert _create_log(client, user, child_id, mealTime="BRUNCH").json() == {"error": "Invalid meal time"}
    assert _create_log(client, user, child_id, foodName="").status_code == 400
    assert _create_log(client, other_user, child_id).status_code == 403

    log_id = _create_log(client, user, child_id).json()["mealLog"]["id"]
    assert client.get(f"/meal-logs/{log_id}", headers=auth_headers(other_user)).status_code == 403


def test_list_meal_logs_with_filters(client, user):
    child_id = _create_child(client, user).json()["child"]["id"]
    _create_log(client, user, child_id, mealTime="BREAKFAST", loggedAt="2024-03-04T07:00:00")
    _create_log(client, user, child_id, childResponse="REFUSED", loggedAt="2024-03-05T12:00:00")
    _create_log(client, user, child_id, mealTime="DINNER", loggedAt="2024-03-06T18:00:00")

    headers = auth_headers(user)
    assert client.get("/meal-logs", headers=headers).status_code == 400

    everything = client.get(f"/meal-logs?childId={child_id}", headers=headers).json()["mealLogs"]
    assert [log["mealTime"] for log in everything] == ["DINNER", "LUNCH", "BREAKFAST"]

    refused = client.get(f"/meal-logs?childId={child_id}&childResponse=REFUSED", headers=headers).json()["mealLogs"]
    assert len(refused) == 1

    ranged = client.get(
        f"/meal-logs?childId={child_id}&startDate=2024-03-05T00:00:00&endDate=2024-03-06T23:59:59",
        headers=headers,
    ).json()["mealLogs"]
    assert len(ranged) == 2

    bad = client.get(f"/meal-logs?childId={child_id}&mealTime=SNACK", headers=headers)
    assert bad.status_code == 400


def test_update_and_delete_meal_log(client, user):
    child_id = _create_child(client, user).json()["child"]["id"]
    log_id = _create_log(client, user, child_id).json()["mealLog"]["id"]
    headers = auth_headers(user)

    updated = client.put(f"/meal-logs/{log_id}", json={"childResponse": "PARTIALLY"}, headers=headers)
    assert updated.json()["mealLog"]["childResponse"] == "PARTIALLY"
    assert updated.json()["mealLog"]["foodName"] == "Chicken porridge"

    assert client.delete(f"/meal-logs/{log_id}", headers=headers).status_code == 200
    assert client.get(f"/meal-logs/{log_id}", headers=headers).status_code == 404

    child = client.get(f"/children/{child_id}", headers=headers).json()["child"]
    assert child["mealLogs"] == []

from datetime import timedelta

import pytest

from schemas.base import utcnow
from schemas.plant import PlantDraft
from services import plant_service
from services.uploads import PLACEHOLDER_PLANT_IMAGE

NEW_PLANT = {
    "name": "Pothos",
    "scientificName": "Epipremnum aureum",
    "location": "Kitchen",
    "wateringFrequency": "7",
    "fertilizingFrequency": "30",
    "sunlight": "Bright, indirect light",
    "humidity": "Medium Humidity",
    "notes": "Trailing off the shelf.",
}


def test_list_returns_seeded_plants_in_camel_case(client, auth_headers):
    resp = client.get("/plants", headers=auth_headers)

    assert resp.status_code == 200
    plants = resp.json()
    assert [p["name"] for p in plants] == ["Monstera Deliciosa", "Snake Plant", "Fiddle Leaf Fig"]
    assert {"scientificName", "wateringFrequency", "lastWatered", "fertilizerDetails"} <= set(plants[0])
    assert "watering_frequency" not in plants[0]


def test_create_plant_from_form(client, auth_headers):
    resp = client.post("/plants", data=NEW_PLANT, headers=auth_headers)

    assert resp.status_code == 201
    plant = resp.json()
    assert plant["id"] is not None
    assert plant["light"] == "Bright"
    assert plant["health"] == "healthy"
    assert plant["image"] == PLACEHOLDER_PLANT_IMAGE
    assert plant["groomingFrequency"] == 30
    assert plant["lastWatered"] == plant["lastFertilized"] == plant["lastGroomed"]

    listed = client.get("/plants", headers=auth_headers).json()
    assert listed[0]["id"] == plant["id"]


def test_create_plant_with_photo_serves_upload(client, auth_headers):
    resp = client.post(
        "/plants",
        data=NEW_PLANT,
        files={"photo": ("my pothos.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    image = resp.json()["image"]
    assert image.startswith("/uploads/plants/")
    assert image.endswith("my_pothos.png")

    served = client.get(image)
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"


@pytest.mark.parametrize("name", [None, "   "])
def test_create_plant_requires_name(client, auth_headers, name):
    data = dict(NEW_PLANT)
    if name is None:
        data.pop("name")
    else:
        data["name"] = name

    resp = client.post("/plants", data=data, headers=auth_headers)
    assert resp.status_code == 400


def test_update_plant_overwrites_sent_fields(client, auth_headers):
    plant = client.get("/plants", headers=auth_headers).json()[0]

    resp = client.put(
        f"/plants/{plant['id']}",
        json={"health": "attention", "notes": "Yellow leaves", "wateringFrequency": 5},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == plant["id"]
    assert body["health"] == "attention"
    assert body["wateringFrequency"] == 5
    assert body["name"] == plant["name"]


def test_update_unknown_plant(client, auth_headers):
    resp = client.put("/plants/9999", json={"name": "Ghost"}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Plant not found"


def test_delete_plant(client, auth_headers):
    plant_id = client.get("/plants", headers=auth_headers).json()[0]["id"]

    assert client.delete(f"/plants/{plant_id}", headers=auth_headers).status_code == 204
    assert plant_id not in [p["id"] for p in client.get("/plants", headers=auth_headers).json()]
    assert client.delete(f"/plants/{plant_id}", headers=auth_headers).status_code == 404


@pytest.mark.parametrize(
    "activity,field",
    [("water", "lastWatered"), ("fertilize", "lastFertilized"), ("groom", "lastGroomed")],
)
def test_log_activity_updates_only_its_cycle(client, auth_headers, activity, field):
    plant = client.get("/plants", headers=auth_headers).json()[-1]

    resp = client.post(f"/plants/{plant['id']}/activity", json={"activity": activity}, headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body[field] > plant[field]
    for other in {"lastWatered", "lastFertilized", "lastGroomed"} - {field}:
        assert body[other] == plant[other]


@pytest.mark.parametrize("payload", [{"activity": "prune"}, {}])
def test_log_activity_rejects_unknown_activity(client, auth_headers, payload):
    plant_id = client.get("/plants", headers=auth_headers).json()[0]["id"]

    resp = client.post(f"/plants/{plant_id}/activity", json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid activity"


def test_log_activity_unknown_plant(client, auth_headers):
    resp = client.post("/plants/9999/activity", json={"activity": "water"}, headers=auth_headers)
    assert resp.status_code == 404


def test_concurrent_activity_last_write_wins(app):
    store = app.state.store
    plant = plant_service.create_plant(store, PlantDraft(name="Calathea"))
    first = utcnow() + timedelta(minutes=1)
    second = first + timedelta(minutes=1)

    plant_service.log_activity(store, plant.id, "water", now=second)
    plant_service.log_activity(store, plant.id, "water", now=first)

    assert store.plants.get(plant.id).last_watered == first


def test_list_failure_returns_500(client, auth_headers, app, monkeypatch):
    def boom():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(app.state.store.plants, "list", boom)

    resp = client.get("/plants", headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json()["message"] == "Error fetching plants"


def test_ping(client):
    body = client.get("/ping").json()
    assert body["ok"] is True
    assert body["store_backend"] == "memory"


@pytest.mark.parametrize("value", ["0", "-5", "3651", "10000000"])
@pytest.mark.parametrize("field", ["wateringFrequency", "fertilizingFrequency", "groomingFrequency"])
def test_create_plant_rejects_out_of_range_frequency(client, auth_headers, field, value):
    resp = client.post("/plants", data={**NEW_PLANT, field: value}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing or invalid fields."


@pytest.mark.parametrize("value", [0, -5, 3651, 10_000_000])
def test_update_plant_rejects_out_of_range_frequency(client, auth_headers, value):
    plant = client.get("/plants", headers=auth_headers).json()[0]

    resp = client.put(f"/plants/{plant['id']}", json={"wateringFrequency": value}, headers=auth_headers)

    assert resp.status_code == 400
    stored = client.get("/plants", headers=auth_headers).json()[0]
    assert stored["wateringFrequency"] == plant["wateringFrequency"]


def test_update_plant_accepts_frequency_at_the_cap(client, auth_headers):
    plant_id = client.get("/plants", headers=auth_headers).json()[0]["id"]

    resp = client.put(f"/plants/{plant_id}", json={"groomingFrequency": 3650}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["groomingFrequency"] == 3650


@pytest.mark.parametrize("field", ["name", "lastWatered", "wateringFrequency"])
def test_update_plant_with_null_required_field_is_400(client, auth_headers, field):
    plant = client.get("/plants", headers=auth_headers).json()[0]

    resp = client.put(f"/plants/{plant['id']}", json={field: None}, headers=auth_headers)

    assert resp.status_code == 400
    assert client.get("/plants", headers=auth_headers).json()[0] == plant

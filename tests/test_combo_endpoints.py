from fooddelivery.models import Combo

VALID_BODY = {
    "name": "Test Combo",
    "description": "A test combo",
    "restaurantId": "R1",
    "items": "1x Test Item, 1x Another Item",
    "comboPrice": 299,
    "originalPrice": 399,
    "category": "special",
    "tags": ["test"],
    "isFeatured": False,
    "isActive": True,
}


def test_list_restaurants(client, seed_sample):
    r = client.get("/api/restaurants")
    assert r.status_code == 200
    assert [x["restaurant_id"] for x in r.json()] == ["R1", "R2"]


def test_list_combos_featured_first(client, seed_sample):
    r = client.get("/api/combos")
    assert r.status_code == 200
    data = r.json()
    assert data[0]["combo_id"] == "c1"
    assert {c["combo_id"] for c in data} == {"c1", "c2", "c3", "c4"}


def test_restaurant_filter_matches_both_shapes(client, seed_sample):
    r = client.get("/api/combos", params={"restaurantId": "R1"})
    assert r.status_code == 200
    data = r.json()
    assert sorted(c["combo_id"] for c in data) == ["c1", "c2"]
    # reported as the id even while the row still holds the whole document
    assert all(c["restaurant_id"] == "R1" for c in data)


def test_category_filter(client, seed_sample):
    r = client.get("/api/combos", params={"category": "couple"})
    assert [c["combo_id"] for c in r.json()] == ["c2"]


def test_get_combo(client, seed_sample):
    r = client.get("/api/combos/c3")
    assert r.status_code == 200
    body = r.json()
    assert body["restaurant_id"] == "R2"
    assert body["savings"] == 51


def test_get_combo_missing(client, seed_sample):
    assert client.get("/api/combos/nope").status_code == 404


def test_create_combo_requires_token(client, seed_sample):
    r = client.post("/api/combos", json=VALID_BODY)
    assert r.status_code == 401
    r = client.post("/api/combos", json=VALID_BODY, headers={"Authorization": "Bearer invalid-token"})
    assert r.status_code == 401


def test_create_combo_missing_fields(client, seed_sample, auth_headers):
    body = {k: v for k, v in VALID_BODY.items() if k != "description"}
    r = client.post("/api/combos", json=body, headers=auth_headers)
    assert r.status_code == 400


def test_create_combo_unknown_restaurant(client, seed_sample, auth_headers):
    body = dict(VALID_BODY, restaurantId="507f1f77bcf86cd799439011")
    r = client.post("/api/combos", json=body, headers=auth_headers)
    assert r.status_code == 404


def test_create_combo(client, seed_sample, auth_headers, db_session):
    r = client.post("/api/combos", json=VALID_BODY, headers=auth_headers)
    assert r.status_code == 201, r.text
    out = r.json()
    assert out["restaurant_id"] == "R1"
    assert out["discount"] == 25
    row = db_session.get(Combo, out["combo_id"])
    assert row.restaurant_id == "R1"
    assert len(out["combo_id"]) == 24


def test_create_combo_with_restaurant_object_stores_id(client, seed_sample, auth_headers, db_session):
    body = dict(VALID_BODY, restaurantId={"_id": "R2", "name": "Wok Express"})
    r = client.post("/api/combos", json=body, headers=auth_headers)
    assert r.status_code == 201, r.text
    row = db_session.get(Combo, r.json()["combo_id"])
    assert row.restaurant_id == "R2"


def test_repair_endpoint(client, seed_sample, auth_headers):
    assert client.post("/api/maintenance/repair-combos").status_code == 401

    r = client.post("/api/maintenance/repair-combos", headers=auth_headers)
    assert r.status_code == 200
    rep = r.json()
    assert rep["processed"] == 4
    assert rep["corrected"] == 2
    assert rep["ok"] is False
    assert [a["combo_id"] for a in rep["anomalies"]] == ["c4"]

    again = client.post("/api/maintenance/repair-combos", headers=auth_headers).json()
    assert again["corrected"] == 0


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["db_ok"] is True

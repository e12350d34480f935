ROUTE = {
    "originCity": "Kaliningrad",
    "destinationCity": "Gdansk",
    "distance": 160,
    "estimatedTime": "3 h",
    "priceComfort": 150,
    "priceBusiness": 220,
    "priceMinivan": 260,
}

VEHICLE = {"class": "Comfort", "brand": "Skoda", "model": "Superb", "year": 2021, "seats": 4}


def test_route_crud(client, admin_client):
    created = admin_client.post("/api/routes", json=ROUTE)
    assert created.status_code == 201
    route_id = created.json()["id"]
    assert created.json()["popularityRating"] == 1

    updated = admin_client.put("/api/routes", json={"id": route_id, "priceComfort": 170})
    assert updated.status_code == 200
    assert updated.json()["priceComfort"] == 170
    assert updated.json()["priceBusiness"] == 220

    assert client.get(f"/api/routes/{route_id}").status_code == 200
    assert admin_client.delete("/api/routes", params={"id": route_id}).status_code == 200
    assert client.get(f"/api/routes/{route_id}").status_code == 404


def test_inactive_route_hidden(client, admin_client):
    route = admin_client.post("/api/routes", json={**ROUTE, "isActive": False}).json()

    assert client.get("/api/routes").json() == []
    assert client.get(f"/api/routes/{route['id']}").status_code == 404
    assert len(admin_client.get("/api/routes", params={"showAll": "true"}).json()) == 1


def test_route_validation(admin_client):
    response = admin_client.post("/api/routes", json={**ROUTE, "distance": -1})
    assert response.status_code == 400
    assert "distance" in response.json()["details"]


def test_vehicle_crud(client, admin_client):
    created = admin_client.post("/api/vehicles", json=VEHICLE)
    assert created.status_code == 201
    vehicle = created.json()
    assert vehicle["class"] == "Comfort"

    updated = admin_client.put("/api/vehicles", json={"id": vehicle["id"], "class": "Business", "seats": 3})
    assert updated.json()["class"] == "Business"
    assert updated.json()["seats"] == 3

    assert [v["id"] for v in client.get("/api/vehicles").json()] == [vehicle["id"]]
    assert admin_client.delete("/api/vehicles", params={"id": vehicle["id"]}).status_code == 200
    assert client.get("/api/vehicles").json() == []


def test_vehicle_update_ignores_null_required_field(admin_client):
    vehicle = admin_client.post("/api/vehicles", json=VEHICLE).json()
    updated = admin_client.put("/api/vehicles", json={"id": vehicle["id"], "brand": None})
    assert updated.status_code == 200
    assert updated.json()["brand"] == "Skoda"


def test_vehicle_mutations_require_admin(client):
    assert client.post("/api/vehicles", json=VEHICLE).status_code == 401
    assert client.delete("/api/vehicles", params={"id": 1}).status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/health/db").json()["database"] == "connected"

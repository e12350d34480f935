def test_application_request_contact_method(client):
    ok = client.post(
        "/api/application-requests",
        json={"name": "Ivan", "phone": "+7 900 000 00 00", "contactMethod": "telegram"},
    )
    assert ok.status_code == 201
    assert ok.json()["status"] == "new"

    bad = client.post(
        "/api/application-requests",
        json={"name": "Ivan", "phone": "+7 900 000 00 00", "contactMethod": "email"},
    )
    assert bad.status_code == 400
    assert "contactMethod" in bad.json()["details"]


def test_application_requests_pagination_and_status(client, admin_client):
    for n in range(12):
        client.post(
            "/api/application-requests",
            json={"name": f"Lead {n}", "phone": "123", "contactMethod": "call"},
        )

    first_page = admin_client.get("/api/application-requests").json()
    assert len(first_page["requests"]) == 10
    assert first_page["pagination"] == {"total": 12, "page": 1, "limit": 10, "pages": 2}
    assert first_page["requests"][0]["name"] == "Lead 11"

    second_page = admin_client.get("/api/application-requests", params={"page": 2}).json()
    assert len(second_page["requests"]) == 2

    lead_id = first_page["requests"][0]["id"]
    response = admin_client.patch("/api/application-requests", json={"id": lead_id, "status": "processed"})
    assert response.status_code == 200
    assert response.json()["status"] == "processed"

    filtered = admin_client.get("/api/application-requests", params={"status": "processed"}).json()
    assert filtered["pagination"]["total"] == 1
    assert filtered["requests"][0]["id"] == lead_id


def test_lead_lists_require_admin(client):
    assert client.get("/api/application-requests").status_code == 401
    assert client.get("/api/transfer-requests").status_code == 401
    assert client.get("/api/contact-requests").status_code == 401


def test_transfer_request_with_vehicle(client, admin_client):
    vehicle = admin_client.post(
        "/api/vehicles",
        json={"class": "Business", "brand": "Mercedes", "model": "E-Class", "year": 2022, "seats": 3},
    ).json()

    response = client.post(
        "/api/transfer-requests",
        json={
            "customerName": "Olga",
            "customerPhone": "+7 900 111 22 33",
            "origin": "Kaliningrad",
            "destination": "Gdansk",
            "date": "2026-11-01T09:00:00Z",
            "returnDate": "",
            "vehicleId": vehicle["id"],
            "contactMethod": "whatsapp",
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["returnDate"] is None
    assert body["vehicle"]["class"] == "Business"

    listed = admin_client.get("/api/transfer-requests").json()
    assert listed["transferRequests"][0]["vehicle"]["brand"] == "Mercedes"


def test_transfer_request_unknown_vehicle(client):
    response = client.post(
        "/api/transfer-requests",
        json={
            "customerName": "Olga",
            "customerPhone": "123",
            "date": "2026-11-01T09:00:00Z",
            "vehicleId": 999,
        },
    )
    assert response.status_code == 400


def test_deleting_vehicle_keeps_transfer_request(client, admin_client):
    vehicle = admin_client.post(
        "/api/vehicles",
        json={"class": "Minivan", "brand": "VW", "model": "Multivan", "year": 2021, "seats": 7},
    ).json()
    lead = client.post(
        "/api/transfer-requests",
        json={"customerName": "Olga", "customerPhone": "123", "date": "2026-11-01T09:00:00Z",
              "vehicleId": vehicle["id"]},
    ).json()

    assert admin_client.delete("/api/vehicles", params={"id": vehicle["id"]}).status_code == 200

    listed = admin_client.get("/api/transfer-requests").json()["transferRequests"]
    assert listed[0]["id"] == lead["id"]
    assert listed[0]["vehicleId"] is None


def test_contact_request_lifecycle(client, admin_client):
    bad = client.post("/api/contact-requests", json={"name": "Petr", "email": "nope", "message": "Hi"})
    assert bad.status_code == 400

    created = client.post(
        "/api/contact-requests",
        json={"name": "Petr", "email": "petr@example.com", "message": "Hi"},
    )
    assert created.status_code == 201
    lead_id = created.json()["id"]

    updated = admin_client.put("/api/contact-requests", json={"id": lead_id, "status": "answered"})
    assert updated.json()["status"] == "answered"

    assert admin_client.delete("/api/contact-requests", params={"id": lead_id}).status_code == 200
    assert admin_client.get("/api/contact-requests").json()["pagination"]["total"] == 0

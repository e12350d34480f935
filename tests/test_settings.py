import asyncio
from types import SimpleNamespace

from transfer_site.models import SiteSettings
from transfer_site.routes.site_settings import DEFAULT_VEHICLE_PRICE, build_vehicle_options
from transfer_site.services.singletons import get_or_create_default


def test_site_settings_created_with_defaults(client):
    response = client.get("/api/settings")
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == 1
    assert body["companyName"] == "RoyalTransfer"
    assert body["headerLogoUrl"] is None


def test_site_settings_partial_update(client, admin_client):
    response = admin_client.put("/api/settings", json={"phone": "+7 911 000 00 00", "headerLogoUrl": ""})
    assert response.status_code == 200
    assert response.json()["phone"] == "+7 911 000 00 00"

    body = client.get("/api/settings").json()
    assert body["phone"] == "+7 911 000 00 00"
    assert body["companyName"] == "RoyalTransfer"


def test_site_settings_empty_body(admin_client):
    response = admin_client.post("/api/settings", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "No data provided"


def test_site_settings_require_admin(client):
    assert client.put("/api/settings", json={"phone": "1"}).status_code == 401


def test_home_settings(client, admin_client):
    assert client.get("/api/home").json()["feature1Icon"] == "MapPin"

    response = admin_client.post("/api/home", json={"title": "New hero title"})
    assert response.status_code == 200
    assert client.get("/api/home").json()["title"] == "New hero title"


def test_transfer_config_uses_active_vehicles(client, admin_client):
    admin_client.post(
        "/api/vehicles",
        json={"class": "Business Class", "brand": "Mercedes", "model": "E-Class", "year": 2022, "seats": 3},
    )
    admin_client.post(
        "/api/vehicles",
        json={"class": "Retired", "brand": "Lada", "model": "Niva", "year": 2001, "seats": 4, "isActive": False},
    )

    body = client.get("/api/transfers").json()
    assert body["useVehiclesFromDb"] is True
    assert len(body["vehicles"]) == 1
    option = body["vehicles"][0]
    assert option["value"] == "business-class"
    assert option["desc"] == "Mercedes E-Class"
    assert option["price"] == DEFAULT_VEHICLE_PRICE


def test_transfer_config_custom_options(client, admin_client):
    response = admin_client.put(
        "/api/transfers",
        json={
            "useVehiclesFromDb": False,
            "vehicleOptions": [{"value": "comfort", "label": "Comfort", "price": "от 200 EUR"}],
            "customImageUrls": {"comfort": "https://example.com/comfort.jpg"},
        },
    )
    assert response.status_code == 200

    vehicles = client.get("/api/transfers").json()["vehicles"]
    assert vehicles == [{
        "value": "comfort",
        "label": "Comfort",
        "price": "от 200 EUR",
        "image": "https://example.com/comfort.jpg",
        "desc": None,
        "vehicleId": None,
    }]


def test_build_vehicle_options_ignores_malformed_json():
    config = SimpleNamespace(use_vehicles_from_db=False, vehicle_options="{not json", custom_image_urls=None)
    assert build_vehicle_options(config, []) == []


def test_benefits_crud_and_renumbering(client, admin_client):
    ids = []
    for n in range(3):
        response = admin_client.post(
            "/api/benefits",
            json={"title": f"Benefit {n}", "description": "Text", "icon": "Star"},
        )
        assert response.status_code == 201
        ids.append(response.json()["id"])

    body = client.get("/api/benefits").json()
    assert [benefit["order"] for benefit in body["benefits"]] == [1, 2, 3]
    assert body["stats"]["support"] == "24/7"

    assert admin_client.delete("/api/benefits", params={"id": ids[0]}).status_code == 200

    benefits = client.get("/api/benefits").json()["benefits"]
    assert [benefit["id"] for benefit in benefits] == ids[1:]
    assert [benefit["order"] for benefit in benefits] == [1, 2]


def test_benefit_update_and_stats(client, admin_client):
    benefit = admin_client.post(
        "/api/benefits", json={"title": "Fast", "description": "Text", "icon": "Clock"}
    ).json()

    updated = admin_client.put(f"/api/benefits/{benefit['id']}", json={"title": "Faster"})
    assert updated.json()["title"] == "Faster"

    stats = admin_client.put("/api/benefits/stats", json={"clients": "7000+"})
    assert stats.status_code == 200
    assert client.get("/api/benefits").json()["stats"]["clients"] == "7000+"


class _StaleFirstRead:
    """Session whose first query misses a row another request has just committed."""

    def __init__(self, session):
        self._session = session
        self._missed = False

    def __getattr__(self, name):
        return getattr(self._session, name)

    async def execute(self, statement):
        if not self._missed:
            self._missed = True
            return SimpleNamespace(scalar_one_or_none=lambda: None)
        return await self._session.execute(statement)


def test_default_row_created_by_concurrent_request(session_factory):
    async def run():
        async with session_factory() as other:
            await get_or_create_default(other, SiteSettings)
            await other.commit()

        async with session_factory() as session:
            row = await get_or_create_default(_StaleFirstRead(session), SiteSettings)
            return row.id, row.company_name

    assert asyncio.run(run()) == (1, "RoyalTransfer")

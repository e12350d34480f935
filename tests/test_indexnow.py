import asyncio

import httpx

from transfer_site.config import settings
from transfer_site.services import indexnow


def test_key_verification(client, monkeypatch):
    monkeypatch.setattr(settings, "INDEXNOW_KEY", "abc123")

    response = client.get("/api/indexnow", params={"key": "abc123"})
    assert response.status_code == 200
    assert response.text == "abc123"

    assert client.get("/api/indexnow", params={"key": "other"}).status_code == 404


def test_submit_without_key(admin_client, monkeypatch):
    monkeypatch.setattr(settings, "INDEXNOW_KEY", "")
    response = admin_client.post("/api/indexnow", json={"urls": ["https://royaltransfer.org/blog"]})
    assert response.status_code == 503


def test_build_payload_truncates(monkeypatch):
    monkeypatch.setattr(settings, "INDEXNOW_KEY", "abc123")
    monkeypatch.setattr(settings, "BASE_URL", "https://example.org")

    payload = indexnow.build_payload([f"https://example.org/{n}" for n in range(10005)])
    assert payload["host"] == "example.org"
    assert len(payload["urlList"]) == indexnow.MAX_URLS_PER_REQUEST
    assert payload["keyLocation"] == "https://example.org/api/indexnow?key=abc123"


def test_submit_reports_each_server(admin_client, monkeypatch):
    monkeypatch.setattr(settings, "INDEXNOW_KEY", "abc123")

    async def fake_submit(client, server, payload):
        if "yandex" in server:
            return {"server": server, "status": None, "error": "timeout"}
        return {"server": server, "status": 202, "error": None}

    monkeypatch.setattr(indexnow, "_submit", fake_submit)
    response = admin_client.post("/api/indexnow", json={"urls": ["https://royaltransfer.org/blog"]})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["submitted"] == 1
    assert {result["server"] for result in body["results"]} == set(indexnow.INDEXNOW_SERVERS)


def test_submit_handles_transport_errors():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await indexnow._submit(client, "https://www.bing.com/indexnow", {"key": "k"})

    result = asyncio.run(run())
    assert result["status"] is None
    assert "unreachable" in result["error"]

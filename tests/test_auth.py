from transfer_site.utils.jwt_auth import COOKIE_NAME


def test_login_sets_cookie_and_session(client):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["accessToken"]
    assert COOKIE_NAME in response.cookies

    session = client.get("/api/auth/session").json()
    assert session == {"authenticated": True, "username": "admin", "role": "admin"}


def test_wrong_password(client):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_logout_clears_session(client):
    client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert client.post("/api/auth/logout").status_code == 200

    client.cookies.clear()
    assert client.get("/api/auth/session").json()["authenticated"] is False


def test_invalid_bearer_token(client):
    response = client.post(
        "/api/blog",
        json={"title": "Post", "content": "Body"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_login_rate_limited(client):
    statuses = [
        client.post("/api/auth/login", json={"username": "admin", "password": "wrong"}).status_code
        for _ in range(6)
    ]
    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429


def test_error_responses_carry_cors_headers(client):
    response = client.post(
        "/api/blog",
        json={"title": "Post", "content": "Body"},
        headers={"Origin": "http://localhost:3000"},
    )
    assert response.status_code == 401
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"

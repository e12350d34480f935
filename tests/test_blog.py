def _post(admin_client, **fields):
    payload = {"title": "Trip to Berlin", "content": "Full article", "excerpt": "Short"}
    payload.update(fields)
    response = admin_client.post("/api/blog", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_post_derives_slug(admin_client):
    post = _post(admin_client)
    assert post["slug"] == "trip-to-berlin"
    assert post["isPublished"] is False
    assert post["publishedAt"] is None


def test_create_post_with_taken_slug_gets_suffix(admin_client):
    first = _post(admin_client)
    second = _post(admin_client)
    assert second["slug"] != first["slug"]
    assert second["slug"].startswith("trip-to-berlin-")


def test_published_at_is_stamped_once(admin_client):
    post = _post(admin_client)

    published = admin_client.put(f"/api/blog/{post['id']}", json={"isPublished": True}).json()
    assert published["publishedAt"] is not None

    unpublished = admin_client.put(f"/api/blog/{post['id']}", json={"isPublished": False}).json()
    assert unpublished["publishedAt"] == published["publishedAt"]

    republished = admin_client.put(f"/api/blog/{post['id']}", json={"isPublished": True}).json()
    assert republished["publishedAt"] == published["publishedAt"]


def test_update_slug_conflict(admin_client):
    _post(admin_client, title="First post", slug="first-post")
    second = _post(admin_client, title="Second post", slug="second-post")

    response = admin_client.put(f"/api/blog/{second['id']}", json={"slug": "first-post"})
    assert response.status_code == 400
    assert response.json()["error"] == "Blog post with this slug already exists"


def test_drafts_hidden_from_public(client, admin_client):
    draft = _post(admin_client, title="Draft post")
    _post(admin_client, title="Live post", isPublished=True)

    public = client.get("/api/blog").json()
    assert [post["title"] for post in public] == ["Live post"]
    assert client.get(f"/api/blog/{draft['id']}").status_code == 404
    assert client.get(f"/api/blog/slug/{draft['slug']}").status_code == 404

    everything = admin_client.get("/api/blog", params={"showAll": "true"}).json()
    assert len(everything) == 2


def test_show_all_ignored_without_admin(client, admin_client):
    _post(admin_client, title="Draft post")
    assert client.get("/api/blog", params={"showAll": "true"}).json() == []


def test_featured_posts_limit(client, admin_client):
    for n in range(5):
        _post(admin_client, title=f"Published post {n}", isPublished=True)

    featured = client.get("/api/blog/featured").json()
    assert len(featured) == 3


def test_delete_post(client, admin_client):
    post = _post(admin_client, isPublished=True)
    assert admin_client.delete(f"/api/blog/{post['id']}").status_code == 200
    assert client.get(f"/api/blog/{post['id']}").status_code == 404


def test_create_post_validation(admin_client):
    response = admin_client.post("/api/blog", json={"title": "", "content": ""})
    assert response.status_code == 400
    assert set(response.json()["details"]) >= {"title", "content"}


def test_create_post_with_taken_explicit_slug(admin_client):
    _post(admin_client, slug="berlin-guide")
    response = admin_client.post(
        "/api/blog", json={"title": "Other", "content": "Body", "slug": "berlin-guide"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Blog post with this slug already exists"

def test_create_gallery_rejects_bad_slug(admin_client):
    response = admin_client.post("/api/galleries", json={"title": "Ab", "slug": "ab"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert "title" in body["details"]
    assert "slug" in body["details"]


def test_create_gallery_defaults_to_unpublished(admin_client):
    response = admin_client.post("/api/galleries", json={"title": "Trip to Gdansk", "slug": "trip-to-gdansk"})
    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "trip-to-gdansk"
    assert body["isPublished"] is False


def test_duplicate_gallery_slug(admin_client, create_gallery):
    create_gallery(slug="trip-to-gdansk")
    response = admin_client.post("/api/galleries", json={"title": "Another trip", "slug": "trip-to-gdansk"})
    assert response.status_code == 400
    assert response.json()["error"] == "gallery with this slug already exists"


def test_create_gallery_requires_admin(client):
    response = client.post("/api/galleries", json={"title": "Trip", "slug": "trip"})
    assert response.status_code == 401


def test_unpublished_gallery_hidden_from_public(client, admin_client, create_gallery):
    gallery = create_gallery(slug="draft-gallery", is_published=False)
    photo = admin_client.post(
        f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/secret.jpg"}
    ).json()

    assert client.get(f"/api/galleries/{gallery['id']}").status_code == 404
    assert client.get("/api/galleries/slug/draft-gallery").status_code == 404
    assert client.get("/api/galleries").json() == []
    assert client.get(f"/api/galleries/{gallery['id']}/photos").status_code == 404
    assert client.get(f"/api/galleries/photos/{photo['id']}").status_code == 404

    assert admin_client.get(f"/api/galleries/{gallery['id']}/photos").status_code == 200
    assert admin_client.get(f"/api/galleries/photos/{photo['id']}").status_code == 200


def test_list_galleries_has_cover_and_count(client, admin_client, create_gallery):
    gallery = create_gallery()
    admin_client.post(f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/1.jpg"})
    admin_client.post(f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/2.jpg"})

    items = client.get("/api/galleries").json()
    assert len(items) == 1
    assert items[0]["photoCount"] == 2
    assert items[0]["coverPhoto"]["url"] == "https://example.com/1.jpg"


def test_update_gallery_slug_conflict(admin_client, create_gallery):
    create_gallery(slug="first-gallery")
    second = create_gallery(slug="second-gallery")

    response = admin_client.patch(f"/api/galleries/{second['id']}", json={"slug": "first-gallery"})
    assert response.status_code == 400

    response = admin_client.patch(f"/api/galleries/{second['id']}", json={"title": "Renamed gallery"})
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed gallery"
    assert response.json()["slug"] == "second-gallery"


def test_delete_gallery_removes_photos(client, admin_client, create_gallery):
    gallery = create_gallery()
    photo = admin_client.post(
        f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/1.jpg"}
    ).json()

    response = admin_client.delete(f"/api/galleries/{gallery['id']}")
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert client.get(f"/api/galleries/{gallery['id']}").status_code == 404
    assert client.get(f"/api/galleries/photos/{photo['id']}").status_code == 404


def test_add_photo_appends_order(admin_client, create_gallery):
    gallery = create_gallery()
    first = admin_client.post(f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/a.jpg"})
    second = admin_client.post(f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/b.jpg"})

    assert first.status_code == 201
    assert first.json()["order"] == 0
    assert second.json()["order"] == 1


def test_add_photo_rejects_bad_url(admin_client, create_gallery):
    gallery = create_gallery()
    response = admin_client.post(f"/api/galleries/{gallery['id']}/photos", json={"url": "not a url"})
    assert response.status_code == 400
    assert "url" in response.json()["details"]


def test_add_photo_to_missing_gallery(admin_client):
    response = admin_client.post("/api/galleries/999/photos", json={"url": "https://example.com/a.jpg"})
    assert response.status_code == 404


def test_batch_partial_success(admin_client, create_gallery):
    gallery = create_gallery()
    admin_client.post(f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/first.jpg"})

    response = admin_client.post(
        f"/api/galleries/{gallery['id']}/photos/batch",
        json={"urls": [
            "https://example.com/1.jpg",
            "bad-url",
            "https://example.com/2.jpg",
            "ftp//broken",
        ]},
    )
    assert response.status_code == 201
    body = response.json()

    assert [photo["order"] for photo in body["created"]] == [1, 2]
    assert [error["index"] for error in body["errors"]] == [1, 3]
    assert body["errors"][0]["url"] == "bad-url"
    assert "url" in body["errors"][0]["errors"]


def test_batch_all_invalid(admin_client, create_gallery):
    gallery = create_gallery()
    response = admin_client.post(
        f"/api/galleries/{gallery['id']}/photos/batch",
        json={"urls": ["nope", "also nope"]},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert len(body["details"]) == 2

    photos = admin_client.get(f"/api/galleries/{gallery['id']}/photos").json()
    assert photos == []


def test_reorder_photos(admin_client, create_gallery):
    gallery = create_gallery()
    ids = [
        admin_client.post(
            f"/api/galleries/{gallery['id']}/photos", json={"url": f"https://example.com/{n}.jpg"}
        ).json()["id"]
        for n in range(3)
    ]

    response = admin_client.put(
        f"/api/galleries/{gallery['id']}/photos/reorder",
        json={"photoIds": [ids[2], ids[0]]},
    )
    assert response.status_code == 200

    photos = admin_client.get(f"/api/galleries/{gallery['id']}/photos").json()
    assert [photo["id"] for photo in photos] == [ids[2], ids[0], ids[1]]
    assert [photo["order"] for photo in photos] == [0, 1, 2]


def test_reorder_rejects_foreign_photo(admin_client, create_gallery):
    first = create_gallery(slug="first-gallery")
    second = create_gallery(slug="second-gallery")
    foreign = admin_client.post(
        f"/api/galleries/{second['id']}/photos", json={"url": "https://example.com/x.jpg"}
    ).json()

    response = admin_client.put(
        f"/api/galleries/{first['id']}/photos/reorder",
        json={"photoIds": [foreign["id"]]},
    )
    assert response.status_code == 400


def test_reorder_rejects_duplicates(admin_client, create_gallery):
    gallery = create_gallery()
    response = admin_client.put(
        f"/api/galleries/{gallery['id']}/photos/reorder",
        json={"photoIds": [1, 1]},
    )
    assert response.status_code == 400


def test_update_and_delete_photo(admin_client, create_gallery):
    gallery = create_gallery()
    photo = admin_client.post(
        f"/api/galleries/{gallery['id']}/photos", json={"url": "https://example.com/a.jpg"}
    ).json()

    response = admin_client.patch(f"/api/galleries/photos/{photo['id']}", json={"title": "Harbour"})
    assert response.status_code == 200
    assert response.json()["title"] == "Harbour"

    assert admin_client.delete(f"/api/galleries/photos/{photo['id']}").status_code == 200
    assert admin_client.get(f"/api/galleries/photos/{photo['id']}").status_code == 404

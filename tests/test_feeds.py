from datetime import datetime, timezone
from types import SimpleNamespace
from xml.etree import ElementTree

from transfer_site.config import settings
from transfer_site.services import feeds


def test_sitemap_index(client):
    response = client.get("/api/sitemap-index")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.headers["cache-control"] == "public, max-age=86400"
    assert f"<loc>{settings.BASE_URL}/api/sitemaps/gallery</loc>" in response.text


def test_unknown_sitemap_type(client):
    response = client.get("/api/sitemaps/unknown")
    assert response.status_code == 404


def test_blog_sitemap_lists_published_posts(client, admin_client):
    admin_client.post("/api/blog", json={"title": "Live post", "content": "Body", "isPublished": True})
    admin_client.post("/api/blog", json={"title": "Draft post", "content": "Body"})

    response = client.get("/api/sitemaps/blog")
    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=3600"
    assert f"{settings.BASE_URL}/blog/live-post" in response.text
    assert "draft-post" not in response.text
    assert "/images/default-blog.jpg" in response.text


def test_gallery_sitemap_has_photo_images(client, admin_client, create_gallery):
    gallery = create_gallery(slug="sea-views")
    admin_client.post(
        f"/api/galleries/{gallery['id']}/photos",
        json={"url": "https://example.com/sea.jpg?w=1&h=2"},
    )

    response = client.get("/api/sitemaps/gallery")
    assert "<image:loc>https://example.com/sea.jpg?w=1&amp;h=2</image:loc>" in response.text
    assert f"{settings.BASE_URL}/gallery/sea-views" in response.text


def test_rss_feed(client, admin_client):
    admin_client.post(
        "/api/blog",
        json={"title": "Cats & Dogs", "content": "<p>Body ]]> end</p>", "isPublished": True},
    )

    response = client.get("/api/feed/rss")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/rss+xml")
    assert response.headers["cache-control"] == "public, max-age=1800"
    assert "<title>Cats &amp; Dogs</title>" in response.text
    assert "]]]]><![CDATA[>" in response.text
    assert "<language>ru-ru</language>" in response.text


def test_merchant_feed_lists_active_routes(client, admin_client):
    admin_client.post(
        "/api/routes",
        json={"originCity": "Kaliningrad", "destinationCity": "Gdansk", "distance": 160,
              "estimatedTime": "3 h", "priceComfort": 150},
    )
    admin_client.post(
        "/api/routes",
        json={"originCity": "Kaliningrad", "destinationCity": "Riga", "distance": 400,
              "estimatedTime": "6 h", "priceComfort": 300, "isActive": False},
    )

    response = client.get("/api/feed/google-merchant")
    assert response.status_code == 200
    assert "<g:price>150.00 EUR</g:price>" in response.text
    assert "Riga" not in response.text


def test_pages_sitemap_and_robots(client):
    sitemap = client.get("/sitemap.xml")
    assert sitemap.status_code == 200
    assert f"<loc>{settings.BASE_URL}/privacy-policy</loc>" in sitemap.text

    robots = client.get("/robots.txt")
    assert robots.status_code == 200
    assert robots.headers["content-type"].startswith("text/plain")
    assert "Disallow: /api/" in robots.text
    assert f"Sitemap: {settings.BASE_URL}/api/sitemap-index" in robots.text


def test_format_lastmod_treats_naive_as_utc():
    assert feeds.format_lastmod(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05Z"
    assert feeds.format_lastmod(None) is None


def test_routes_sitemap_default_image():
    route = SimpleNamespace(
        id=7,
        origin_city="Kaliningrad",
        destination_city="Vilnius",
        description=None,
        image_url=None,
        updated_at=datetime(2026, 5, 1, tzinfo=timezone.utc),
    )
    xml = feeds.build_routes_sitemap([route], "https://example.org")
    assert "<loc>https://example.org/routes/7</loc>" in xml
    assert "https://example.org/images/routes/route-7.jpg" in xml
    assert "<lastmod>2026-05-01T00:00:00Z</lastmod>" in xml


def test_feeds_drop_characters_invalid_in_xml(client, admin_client, create_gallery):
    admin_client.post(
        "/api/blog",
        json={"title": "Trip\x0bto Riga", "content": "body\x01", "excerpt": "Short\x1f", "isPublished": True},
    )
    gallery = create_gallery(slug="night-drive")
    admin_client.post(
        f"/api/galleries/{gallery['id']}/photos",
        json={"url": "https://example.com/night.jpg", "title": "Night\x08"},
    )

    for path in ("/api/feed/rss", "/api/sitemaps/blog", "/api/sitemaps/gallery"):
        response = client.get(path)
        assert response.status_code == 200
        ElementTree.fromstring(response.content)

    assert "Tripto Riga" in client.get("/api/feed/rss").text

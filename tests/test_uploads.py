import io
from pathlib import Path

from PIL import Image

from transfer_site.config import settings
from transfer_site.routes import uploads
from transfer_site.services.cloudinary_service import RemoteUploadError
from transfer_site.utils.image_converter import convert_to_webp


def _png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_upload_saved_locally(client):
    response = client.post(
        "/api/uploads",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"folder": "uploads/blog"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["storage"] == "local"
    assert body["url"].startswith("/uploads/blog/")
    assert body["url"].endswith(".png")
    assert (Path(settings.UPLOAD_ROOT) / body["url"].lstrip("/")).exists()


def test_upload_default_folder(client):
    response = client.post("/api/uploads", files={"file": ("clip.mp4", b"\x00\x01", "video/mp4")})
    assert response.status_code == 201
    assert response.json()["url"].startswith("/uploads/reviews/")


def test_upload_rejects_unknown_folder(client):
    response = client.post(
        "/api/uploads",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"folder": "../etc"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid folder"


def test_upload_rejects_non_media(client):
    response = client.post("/api/uploads", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid file type"


def test_upload_rejects_empty_file(client):
    response = client.post("/api/uploads", files={"file": ("photo.png", b"", "image/png")})
    assert response.status_code == 400


def test_remote_upload(client, monkeypatch):
    captured = {}

    async def fake_upload(content, folder, title=None, description=None, tags=None):
        captured["folder"] = folder
        captured["content"] = content
        return {"url": "https://res.cloudinary.com/demo/image/upload/x.webp"}

    monkeypatch.setattr(uploads, "upload_image", fake_upload)
    response = client.post(
        "/api/uploads",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"folder": "uploads/gallery", "usePostImage": "true"},
    )
    assert response.status_code == 201
    assert response.json() == {
        "url": "https://res.cloudinary.com/demo/image/upload/x.webp",
        "storage": "remote",
    }
    assert captured["folder"] == "uploads/gallery"


def test_remote_failure_falls_back_to_local(client, monkeypatch):
    async def failing_upload(*args, **kwargs):
        raise RemoteUploadError("Cloudinary is down")

    monkeypatch.setattr(uploads, "upload_image", failing_upload)
    response = client.post(
        "/api/uploads",
        files={"file": ("photo.png", _png_bytes(), "image/png")},
        data={"usePostImage": "true"},
    )
    assert response.status_code == 201
    assert response.json()["storage"] == "local"


def test_remote_url_upload(client, monkeypatch):
    captured = {}

    async def fake_upload(file, folder, title=None, description=None, tags=None):
        captured.update(file=file, folder=folder, title=title, tags=tags)
        return {"url": "https://res.cloudinary.com/demo/image/upload/copied.jpg"}

    monkeypatch.setattr(uploads, "upload_image", fake_upload)
    response = client.post(
        "/api/uploads/remote-url",
        json={"imageUrl": "https://example.com/car.jpg", "title": "Car", "tags": ["fleet", "car"]},
    )
    assert response.status_code == 201
    assert response.json() == {
        "url": "https://res.cloudinary.com/demo/image/upload/copied.jpg",
        "storage": "remote",
    }
    assert captured == {
        "file": "https://example.com/car.jpg",
        "folder": "uploads/reviews",
        "title": "Car",
        "tags": "fleet,car",
    }


def test_remote_url_upload_requires_valid_url(client):
    missing = client.post("/api/uploads/remote-url", json={"title": "Car"})
    assert missing.status_code == 400
    assert "imageUrl" in missing.json()["details"]

    invalid = client.post("/api/uploads/remote-url", json={"imageUrl": "not a url"})
    assert invalid.status_code == 400


def test_remote_url_upload_failure(client, monkeypatch):
    async def failing_upload(*args, **kwargs):
        raise RemoteUploadError("Cloudinary is down")

    monkeypatch.setattr(uploads, "upload_image", failing_upload)
    response = client.post("/api/uploads/remote-url", json={"imageUrl": "https://example.com/car.jpg"})
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to upload image from URL"


def test_conversion_error_keeps_original_bytes(monkeypatch):
    def exploding_open(*args, **kwargs):
        raise Image.DecompressionBombError("too many pixels")

    monkeypatch.setattr(Image, "open", exploding_open)
    original = _png_bytes()
    assert convert_to_webp(original) == (original, False)

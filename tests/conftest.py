import asyncio
import os

# Development mode enables the built-in admin/admin credentials and a dev JWT secret
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from transfer_site import models  # noqa: F401
from transfer_site.config import settings
from transfer_site.database import Base, get_db
from transfer_site.main import app
from transfer_site.utils.rate_limit import limiter


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory

    asyncio.run(engine.dispose())


@pytest.fixture(autouse=True)
def override_db(session_factory, tmp_path, monkeypatch):
    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    monkeypatch.setattr(settings, "UPLOAD_ROOT", str(tmp_path / "public"))
    limiter.reset()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def admin_client():
    test_client = TestClient(app)
    response = test_client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert response.status_code == 200
    test_client.headers["Authorization"] = f"Bearer {response.json()['accessToken']}"
    return test_client


@pytest.fixture
def create_gallery(admin_client):
    def _create(slug="summer-trip", title="Summer trip", is_published=True):
        response = admin_client.post(
            "/api/galleries",
            json={"title": title, "slug": slug, "isPublished": is_published},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create

# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from main import app
from tests.factories import make_user


@pytest.fixture(autouse=True)
def app_env(monkeypatch, tmp_path):
    """Every test gets its own storage root and deterministic settings."""
    storage_root = tmp_path / "storage"
    storage_root.mkdir()
    monkeypatch.setenv("STORAGE_ROOT", str(storage_root))
    monkeypatch.setenv("APP_URL", "http://api.test")
    monkeypatch.setenv("FRONTEND_URL", "http://admin.test")
    monkeypatch.setenv("JWT_SECRET", "test-secret-with-enough-bytes-for-hs256")
    monkeypatch.setenv("MAIL_MAILER", "log")
    monkeypatch.delenv("MAX_IMAGE_BYTES", raising=False)
    monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MIN", raising=False)
    monkeypatch.delenv("PASSWORD_RESET_TTL_MIN", raising=False)
    return storage_root


@pytest.fixture
def current_user():
    return make_user()


@pytest.fixture
def client(current_user):
    """
    Client for the catalog routes with authentication replaced by a fixed
    user. The lifespan (DB pool) is not started; tests mock the data layer.
    """
    app.dependency_overrides[auth_dependencies.get_current_user] = lambda: current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def png_bytes():
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

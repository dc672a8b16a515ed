"""
Fixtures compartidas: app con snapshot en un directorio temporal y un
usuario ya logueado.
"""
import pytest
from fastapi.testclient import TestClient

from agrokit.core.config import Settings
from agrokit.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DB_FILE=str(tmp_path / "agrokit.db"),
        SECRET_KEY="clave-de-pruebas",
        PUBLIC_DIR=str(tmp_path / "sin_public"),
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def token(client):
    client.post("/api/auth/register", json={"username": "ana", "password": "secreta123"})
    r = client.post("/api/auth/login", json={"username": "ana", "password": "secreta123"})
    return r.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}

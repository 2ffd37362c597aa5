import pytest
from fastapi.testclient import TestClient

from notes_api.config import Settings
from notes_api.main import create_app


@pytest.fixture()
def settings(tmp_path):
    # isolate data dir per test; low bcrypt cost keeps the suite fast
    return Settings(
        jwt_secret="dev-secret-for-tests",
        bcrypt_rounds=4,
        data_dir=tmp_path,
    )


@pytest.fixture()
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture()
def signup_and_login(client):
    def _do(username: str, password: str = "pass1234") -> dict:
        r = client.post("/signup", json={"username": username, "password": password})
        assert r.status_code == 200
        r = client.post("/login", json={"username": username, "password": password})
        assert r.status_code == 200
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _do

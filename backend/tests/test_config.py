from pathlib import Path

import pytest

from notes_api.config import Settings, load_settings
from notes_api.errors import ConfigError
from notes_api.main import create_app


def test_missing_secret_refuses_to_start(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ConfigError):
        load_settings()
    with pytest.raises(ConfigError):
        create_app()


def test_empty_secret_refuses_to_start(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "")
    with pytest.raises(ConfigError):
        load_settings()


def test_settings_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3")
    monkeypatch.setenv("BCRYPT_ROUNDS", "5")
    monkeypatch.setenv("JWT_EXP_SECONDS", "60")
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    s = load_settings()
    assert s.jwt_secret == "s3"
    assert s.bcrypt_rounds == 5
    assert s.token_ttl_seconds == 60
    assert s.jwt_algorithm == "HS256"
    assert s.data_dir == Path(tmp_path)


def test_defaults(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3")
    for name in ("BCRYPT_ROUNDS", "JWT_EXP_SECONDS", "JWT_ALGORITHM"):
        monkeypatch.delenv(name, raising=False)
    s = load_settings()
    assert s.token_ttl_seconds == 3600
    assert s.bcrypt_rounds == 12


@pytest.mark.parametrize(
    "name,value",
    [("BCRYPT_ROUNDS", "lots"), ("BCRYPT_ROUNDS", "2"), ("JWT_ALGORITHM", "none"), ("JWT_ALGORITHM", "RS256")],
)
def test_bad_values_are_fatal(monkeypatch, name, value):
    monkeypatch.setenv("JWT_SECRET", "s3")
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_repr_hides_secret():
    s = Settings(jwt_secret="super-secret-value")
    assert "super-secret-value" not in repr(s)

"""Process configuration.

Settings are read from the environment exactly once, at startup, and then
passed to ``create_app``. Nothing below the app factory reads ``os.environ``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from notes_api.errors import ConfigError

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    bcrypt_rounds: int = 12
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.jwt_secret:
            raise ConfigError("JWT_SECRET is not set")
        if self.jwt_algorithm not in HMAC_ALGORITHMS:
            raise ConfigError(f"JWT_ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}")
        if self.token_ttl_seconds <= 0:
            raise ConfigError("JWT_EXP_SECONDS must be positive")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigError("BCRYPT_ROUNDS must be between 4 and 31")

    def __repr__(self) -> str:
        # keep the secret out of tracebacks and logs
        return (
            f"Settings(jwt_algorithm={self.jwt_algorithm!r}, token_ttl_seconds={self.token_ttl_seconds}, "
            f"bcrypt_rounds={self.bcrypt_rounds}, data_dir={str(self.data_dir)!r}, log_level={self.log_level!r})"
        )


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer") from None


def load_settings() -> Settings:
    """Build Settings from the environment, failing fast on anything missing or malformed."""
    return Settings(
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256").upper(),
        token_ttl_seconds=_int("JWT_EXP_SECONDS", 3600),
        bcrypt_rounds=_int("BCRYPT_ROUNDS", 12),
        data_dir=Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR))),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )

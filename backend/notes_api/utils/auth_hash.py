"""Password hashing helpers using passlib.

``PasswordHasher`` wraps a passlib ``CryptContext``:

- ``hash(plain) -> str`` returns a self-describing, salted digest
  (``$2b$<rounds>$...``), different on every call for the same input.
- ``verify(plain, hashed) -> bool`` checks a plaintext against a stored digest.
  passlib compares digests in constant time. Unknown or malformed stored
  hashes verify as ``False`` instead of raising.

bcrypt is used with the configured cost factor. If the bcrypt backend cannot
be initialised the context falls back to pbkdf2_sha256 with passlib's default
rounds.
"""
from __future__ import annotations

import warnings

from passlib.context import CryptContext


def _build_context(rounds: int) -> CryptContext:
    try:
        ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        # force backend load now rather than on the first signup
        ctx.hash("backend-probe")
        return ctx
    except Exception as exc:
        warnings.warn(
            "bcrypt backend not available or failed to initialize; falling back to pbkdf2_sha256. "
            f"Original error: {exc}",
            RuntimeWarning,
        )
        return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._ctx = _build_context(rounds)

    def hash(self, plain: str) -> str:
        """Hash a plaintext password and return the encoded hash string."""
        if plain is None:
            raise ValueError("Password must not be None")
        return self._ctx.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """Verify a plaintext password against a stored hash.

        Returns True if the password matches, False otherwise.
        """
        if plain is None or not hashed:
            return False
        try:
            return self._ctx.verify(plain, hashed)
        except (ValueError, TypeError):
            # unidentifiable or corrupt hash
            return False

    def dummy_verify(self) -> None:
        """Burn one verification's worth of time for logins with an unknown username."""
        self._ctx.dummy_verify()

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from notes_api.errors import InvalidToken, MissingToken
from notes_api.utils.logger import logger

bearer = HTTPBearer(auto_error=False)

_REQUIRED_CLAIMS = {"require_exp": True, "require_iat": True, "require_sub": True}


@dataclass(frozen=True)
class Identity:
    account_id: str
    username: str


class TokenService:
    """Issues and verifies HMAC-signed, expiring bearer tokens (JWT)."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600):
        if not secret:
            raise ValueError("Signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue(self, account_id: str, username: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        exp = now + timedelta(seconds=self.ttl_seconds)
        payload = {
            "sub": account_id,
            "username": username,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """Return the identity carried by ``token``.

        Bad signatures, expired tokens, malformed tokens and missing claims
        all raise the same ``InvalidToken``.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm], options=_REQUIRED_CLAIMS)
        except JWTError as exc:
            raise InvalidToken(str(exc)) from None

        sub = payload.get("sub")
        username = payload.get("username")
        if not sub or not isinstance(username, str) or not username:
            raise InvalidToken("token is missing identity claims")
        return Identity(account_id=str(sub), username=username)


def get_current_identity(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Identity:
    """Auth gate for every protected route.

    Reads ``Authorization: Bearer <token>``, verifies it and attaches the
    identity to ``request.state``. Handlers receive the identity only through
    this dependency.
    """
    if creds is None:
        logger.warning(f"Rejected {request.method} {request.url.path}: missing bearer token")
        raise MissingToken("no bearer credentials")

    tokens: TokenService = request.app.state.tokens
    try:
        identity = tokens.verify(creds.credentials)
    except InvalidToken as exc:
        logger.warning(f"Rejected {request.method} {request.url.path}: invalid token ({exc.detail})")
        raise

    request.state.identity = identity
    return identity

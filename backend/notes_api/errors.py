from __future__ import annotations

from http import HTTPStatus
from typing import Any


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class AppError(Exception):
    code: str = "app_error"
    status: HTTPStatus = HTTPStatus.BAD_REQUEST
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None) -> None:
        # detail is for server-side logs only, never sent to the client
        super().__init__(detail or self.code)
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code}


class ValidationError(AppError):
    code = "validation_error"
    status = HTTPStatus.BAD_REQUEST


class DuplicateUsername(AppError):
    code = "duplicate_username"
    status = HTTPStatus.BAD_REQUEST


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST


class _Unauthorized(AppError):
    # MissingToken and InvalidToken share one payload so clients cannot tell them apart
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class MissingToken(_Unauthorized):
    pass


class InvalidToken(_Unauthorized):
    pass


class NotFound(AppError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND

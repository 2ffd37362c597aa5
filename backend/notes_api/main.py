from __future__ import annotations

import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notes_api.api import auth, notes
from notes_api.config import Settings, load_settings
from notes_api.errors import AppError, ValidationError
from notes_api.storage.notes_store import NotesStore
from notes_api.storage.users_store import UsersStore
from notes_api.utils.auth_hash import PasswordHasher
from notes_api.utils.jwt_auth import TokenService
from notes_api.utils.logger import clear_request_id, get_request_id, logger, set_request_id, setup_logging


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError) -> JSONResponse:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.detail or exc.code}")
        return JSONResponse(status_code=int(exc.status), content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"Rejected malformed request {request.method} {request.url.path}")
        return JSONResponse(status_code=400, content=ValidationError().to_dict())


def _install_request_logging(app: FastAPI) -> None:
    # unexpected errors are turned into the generic 500 here, while the request id is still bound
    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        set_request_id(request.headers.get("X-Request-ID") or str(uuid.uuid4()))
        t0 = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(f"Unhandled error on {request.method} {request.url.path}")
                response = JSONResponse(status_code=500, content={"error": "internal_error"})
            dt = (time.perf_counter() - t0) * 1000.0
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {dt:.1f} ms")
            response.headers["X-Request-ID"] = get_request_id()
            return response
        finally:
            clear_request_id()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Without explicit settings they are loaded from the
    environment, which raises ConfigError if JWT_SECRET is missing."""
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Secure Notes API")
    app.state.settings = settings
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )
    app.state.users = UsersStore(settings.data_dir)
    app.state.notes = NotesStore(settings.data_dir)

    _install_error_handlers(app)
    _install_request_logging(app)
    app.include_router(auth.router)
    app.include_router(notes.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    logger.info(f"Notes API configured: {settings!r}")
    return app


def run() -> None:
    import uvicorn

    uvicorn.run("notes_api.main:create_app", factory=True, host="0.0.0.0", port=8000)

from __future__ import annotations

from fastapi import APIRouter, Depends

from notes_api.api.deps import get_hasher, get_tokens, get_users
from notes_api.errors import InvalidCredentials, ValidationError
from notes_api.models.auth import AccountOut, LoginRequest, SignupRequest, TokenResponse
from notes_api.storage.users_store import UsersStore, validate_username
from notes_api.utils.auth_hash import PasswordHasher
from notes_api.utils.jwt_auth import TokenService
from notes_api.utils.logger import logger

router = APIRouter(tags=["auth"])

MIN_PASSWORD_LENGTH = 5
MAX_PASSWORD_LENGTH = 128


@router.post("/signup", response_model=AccountOut)
def signup(
    req: SignupRequest,
    users: UsersStore = Depends(get_users),
    hasher: PasswordHasher = Depends(get_hasher),
) -> AccountOut:
    validate_username(req.username)
    if not MIN_PASSWORD_LENGTH <= len(req.password) <= MAX_PASSWORD_LENGTH:
        raise ValidationError("password length out of range")

    # never store plaintext; a duplicate name is caught atomically by the store
    account = users.create(req.username, hasher.hash(req.password))
    logger.info(f"Account created: {account.id}")
    return AccountOut(id=account.id, username=account.username)


@router.post("/login", response_model=TokenResponse)
def login(
    req: LoginRequest,
    users: UsersStore = Depends(get_users),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_tokens),
) -> TokenResponse:
    rec = users.find_by_username(req.username)
    if rec is None:
        hasher.dummy_verify()
        logger.info("Login failed: unknown username")
        raise InvalidCredentials("unknown username")

    if not hasher.verify(req.password, rec.password_hash):
        logger.info(f"Login failed: bad password for account {rec.id}")
        raise InvalidCredentials("bad password")

    logger.info(f"Login succeeded for account {rec.id}")
    return TokenResponse(token=tokens.issue(rec.id, rec.username))

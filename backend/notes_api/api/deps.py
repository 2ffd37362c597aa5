from __future__ import annotations

from fastapi import Depends, Request

from notes_api.errors import InvalidToken
from notes_api.storage.notes_store import NotesStore, OwnedNotes
from notes_api.storage.users_store import UsersStore
from notes_api.utils.auth_hash import PasswordHasher
from notes_api.utils.jwt_auth import Identity, TokenService, get_current_identity


def get_users(request: Request) -> UsersStore:
    return request.app.state.users


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


def get_owned_notes(request: Request, identity: Identity = Depends(get_current_identity)) -> OwnedNotes:
    # the only way a route can reach notes: already scoped to the verified caller
    store: NotesStore = request.app.state.notes
    try:
        return store.for_owner(identity.account_id)
    except ValueError:
        raise InvalidToken("subject is not an account id") from None

from __future__ import annotations

import json
import os
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from notes_api.errors import DuplicateUsername, ValidationError

USERNAME_RE = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]{0,63}")


def validate_username(username: str) -> str:
    # usernames become file names; this also rules out path traversal
    if not isinstance(username, str) or not USERNAME_RE.fullmatch(username):
        raise ValidationError("invalid username")
    return username


@dataclass(frozen=True)
class Account:
    id: str
    username: str
    password_hash: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
        }


class UsersStore:
    """Account records, one JSON file per username under ``<base>/accounts``."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
        self.accounts_dir = base_dir / "accounts"

    def _account_path(self, username: str) -> Path:
        return self.accounts_dir / f"{validate_username(username)}.json"

    def find_by_username(self, username: str) -> Optional[Account]:
        try:
            p = self._account_path(username)
        except ValidationError:
            return None
        if not p.exists():
            return None
        raw = json.loads(p.read_text(encoding="utf-8"))
        return Account(
            id=raw["id"],
            username=raw["username"],
            password_hash=raw["password_hash"],
            created_at=raw["created_at"],
        )

    def create(self, username: str, password_hash: str) -> Account:
        """Insert a new account; raises DuplicateUsername if the name is taken.

        The record is fully written to a private temp file and then hard-linked
        into place. ``os.link`` fails if the target exists, so of two
        concurrent signups for the same name exactly one wins.
        """
        p = self._account_path(username)
        p.parent.mkdir(parents=True, exist_ok=True)

        rec = Account(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        tmp = p.with_name(f".{p.stem}.{rec.id}.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(rec.to_dict(), f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        try:
            os.link(tmp, p)
        except FileExistsError:
            raise DuplicateUsername(f"username {username!r} already exists") from None
        finally:
            tmp.unlink(missing_ok=True)
        return rec

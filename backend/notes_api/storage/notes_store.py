from __future__ import annotations

import json
import os
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Union

from notes_api.errors import NotFound, ValidationError
from notes_api.utils.logger import logger

TITLE_MAX_LENGTH = 50
TEXT_MAX_LENGTH = 300

NoteId = Union[uuid.UUID, str]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _later_than(previous_iso: str) -> str:
    # modified_at must move forward even if the clock hasn't ticked since the last write
    now = _utc_now()
    previous = datetime.fromisoformat(previous_iso)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now.isoformat(timespec="microseconds")


def _safe_owner_dir(base_dir: Path, owner_id: str) -> Path:
    # owner ids are account uuids issued by UsersStore; anything else never reaches disk
    try:
        canonical = str(uuid.UUID(str(owner_id)))
    except ValueError:
        raise ValueError("Invalid owner_id") from None
    return base_dir / "notes" / canonical


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


def validate_note(title: str, text: str) -> None:
    if not isinstance(title, str) or not title or len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"title must be 1..{TITLE_MAX_LENGTH} characters")
    if not isinstance(text, str) or not text or len(text) > TEXT_MAX_LENGTH:
        raise ValidationError(f"text must be 1..{TEXT_MAX_LENGTH} characters")


@dataclass(frozen=True)
class Note:
    id: uuid.UUID
    owner_id: str
    title: str
    text: str
    created_at: str
    modified_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "owner_id": self.owner_id,
            "title": self.title,
            "text": self.text,
            "created_at": self.created_at,
            "modified_at": self.modified_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        return cls(
            id=uuid.UUID(raw["id"]),
            owner_id=raw["owner_id"],
            title=raw["title"],
            text=raw["text"],
            created_at=raw["created_at"],
            modified_at=raw["modified_at"],
        )


class NotesStore:
    """File-backed note collection: ``<base>/notes/<owner_id>/<note_id>.json``.

    The store itself exposes no note operations. Callers obtain an
    ``OwnedNotes`` view through ``for_owner`` and every read or write goes
    through that view's owner directory.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
        # serializes read-modify-write cycles; concurrent updates stay last-write-wins
        self._write_lock = threading.Lock()

    def for_owner(self, owner_id: str) -> "OwnedNotes":
        return OwnedNotes(self, owner_id)


class OwnedNotes:
    """All notes of a single owner. There is no way to address a note outside it."""

    def __init__(self, store: NotesStore, owner_id: str):
        if not owner_id:
            raise ValueError("owner_id is required")
        self._store = store
        self.owner_id = str(owner_id)
        self._dir = _safe_owner_dir(store.base_dir, self.owner_id)

    def _note_path(self, note_id: NoteId) -> Path:
        try:
            nid = uuid.UUID(str(note_id))
        except ValueError:
            raise NotFound(f"malformed note id {note_id!r}") from None
        return self._dir / f"{nid}.json"

    def _read(self, path: Path) -> Note:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise NotFound(f"note {path.stem} not found for owner {self.owner_id}") from None
        note = Note.from_dict(raw)
        if note.owner_id != self.owner_id:
            raise NotFound(f"note {path.stem} not owned by {self.owner_id}")
        return note

    def list(self) -> list[Note]:
        if not self._dir.exists():
            return []
        out: list[Note] = []
        for p in self._dir.glob("*.json"):
            try:
                note = Note.from_dict(json.loads(p.read_text(encoding="utf-8")))
            except FileNotFoundError:
                # deleted between glob and read
                continue
            except (ValueError, KeyError, TypeError):
                logger.warning(f"Skipping corrupt note record {p.name} for owner {self.owner_id}")
                continue
            if note.owner_id == self.owner_id:
                out.append(note)
        out.sort(key=lambda n: n.created_at)
        return out

    def get(self, note_id: NoteId) -> Note:
        return self._read(self._note_path(note_id))

    def create(self, title: str, text: str) -> Note:
        validate_note(title, text)
        now = _utc_now().isoformat(timespec="microseconds")
        note = Note(
            id=uuid.uuid4(),
            owner_id=self.owner_id,
            title=title,
            text=text,
            created_at=now,
            modified_at=now,
        )
        _atomic_write_json(self._note_path(note.id), note.to_dict())
        return note

    def update(self, note_id: NoteId, title: str, text: str) -> Note:
        validate_note(title, text)
        path = self._note_path(note_id)
        with self._store._write_lock:
            existing = self._read(path)
            updated = Note(
                id=existing.id,
                owner_id=existing.owner_id,
                title=title,
                text=text,
                created_at=existing.created_at,
                modified_at=_later_than(existing.modified_at),
            )
            _atomic_write_json(path, updated.to_dict())
        return updated

    def delete(self, note_id: NoteId) -> None:
        path = self._note_path(note_id)
        with self._store._write_lock:
            self._read(path)
            path.unlink()

    def search(self, query: str) -> list[Note]:
        if not isinstance(query, str) or not query:
            raise ValidationError("search query must not be empty")
        needle = query.casefold()
        return [n for n in self.list() if needle in n.title.casefold()]

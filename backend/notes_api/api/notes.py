from fastapi import APIRouter, Depends, Query

from notes_api.api.deps import get_owned_notes
from notes_api.models.notes import DeletedOut, NoteIn, NoteOut
from notes_api.storage.notes_store import OwnedNotes
from notes_api.utils.logger import logger

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[NoteOut])
def list_notes(notes: OwnedNotes = Depends(get_owned_notes)) -> list[NoteOut]:
    return [NoteOut(**n.to_dict()) for n in notes.list()]


@router.post("", response_model=NoteOut)
def create_note(payload: NoteIn, notes: OwnedNotes = Depends(get_owned_notes)) -> NoteOut:
    note = notes.create(title=payload.title, text=payload.text)
    logger.info(f"Note {note.id} created by {notes.owner_id}")
    return NoteOut(**note.to_dict())


# declared before /{note_id} so "search" is not parsed as an id
@router.get("/search", response_model=list[NoteOut])
def search_notes(title: str = Query(...), notes: OwnedNotes = Depends(get_owned_notes)) -> list[NoteOut]:
    return [NoteOut(**n.to_dict()) for n in notes.search(title)]


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: str, notes: OwnedNotes = Depends(get_owned_notes)) -> NoteOut:
    return NoteOut(**notes.get(note_id).to_dict())


@router.put("/{note_id}", response_model=NoteOut)
def update_note(note_id: str, payload: NoteIn, notes: OwnedNotes = Depends(get_owned_notes)) -> NoteOut:
    updated = notes.update(note_id, title=payload.title, text=payload.text)
    logger.info(f"Note {note_id} updated by {notes.owner_id}")
    return NoteOut(**updated.to_dict())


@router.delete("/{note_id}", response_model=DeletedOut)
def delete_note(note_id: str, notes: OwnedNotes = Depends(get_owned_notes)) -> DeletedOut:
    notes.delete(note_id)
    logger.info(f"Note {note_id} deleted by {notes.owner_id}")
    return DeletedOut()

from pydantic import BaseModel


class NoteIn(BaseModel):
    title: str
    text: str


class NoteOut(BaseModel):
    id: str
    owner_id: str
    title: str
    text: str
    created_at: str
    modified_at: str


class DeletedOut(BaseModel):
    deleted: bool = True

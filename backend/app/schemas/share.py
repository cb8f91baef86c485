# backend/app/schemas/share.py
from pydantic import BaseModel

from backend.app.schemas.note import NoteResponse


class ShareResponse(BaseModel):
    token: str
    share_url: str


class PublicSharedNoteResponse(BaseModel):
    note: NoteResponse

# backend/app/schemas/note.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    title: str = Field("", max_length=255)
    content: str = ""


class NoteUpdate(BaseModel):
    title: str = Field(..., max_length=255)
    content: str


class NoteFlagsUpdate(BaseModel):
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None
    is_deleted: Optional[bool] = None


class NoteSearchRequest(BaseModel):
    query: str


class NoteResponse(BaseModel):
    id: int
    title: str
    content: str
    is_pinned: bool
    is_archived: bool
    is_deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Listing without content (no decryption needed)
class NoteMetadata(BaseModel):
    id: int
    title: Optional[str]
    is_pinned: bool
    is_archived: bool
    is_deleted: bool
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

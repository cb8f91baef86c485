# backend/app/schemas/encrypted_note.py
"""
Zero-knowledge notes. Every field is an opaque client-produced string
(base64 or hex, the server does not care) and is echoed back verbatim.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class EncryptedNoteIn(BaseModel):
    title_ciphertext: str
    content_ciphertext: str
    title_nonce: str = Field(..., max_length=64)
    content_nonce: str = Field(..., max_length=64)
    note_salt: str = Field(..., max_length=128)


class EncryptedNoteMetadata(BaseModel):
    id: int
    title_ciphertext: str
    title_nonce: str
    note_salt: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EncryptedNoteResponse(EncryptedNoteMetadata):
    content_ciphertext: str
    content_nonce: str

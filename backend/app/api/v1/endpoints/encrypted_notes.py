# backend/app/api/v1/endpoints/encrypted_notes.py
"""Zero-knowledge notes: the server stores and returns opaque client ciphertext."""
from typing import List

from fastapi import APIRouter, Depends, status

from backend.app.api import deps
from backend.app.models.user import User
from backend.app.schemas.encrypted_note import (
    EncryptedNoteIn,
    EncryptedNoteMetadata,
    EncryptedNoteResponse,
)
from backend.app.schemas.user import StatusResponse
from backend.app.services.note_service import EncryptedNoteInput, NoteService

router = APIRouter(dependencies=[Depends(deps.require_encrypted_notes_enabled)])


def _to_input(note_in: EncryptedNoteIn) -> EncryptedNoteInput:
    return EncryptedNoteInput(**note_in.model_dump())


@router.post("", response_model=EncryptedNoteResponse, status_code=status.HTTP_201_CREATED)
async def create_encrypted_note(
        note_in: EncryptedNoteIn,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.create_encrypted(current_user.id, _to_input(note_in))


@router.get("", response_model=List[EncryptedNoteMetadata])
async def read_encrypted_notes(
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.list_encrypted(current_user.id)


@router.get("/{note_id}", response_model=EncryptedNoteResponse)
async def read_encrypted_note(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.get_encrypted(current_user.id, note_id)


@router.put("/{note_id}", response_model=EncryptedNoteResponse)
async def update_encrypted_note(
        note_id: int,
        note_in: EncryptedNoteIn,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.update_encrypted(current_user.id, note_id, _to_input(note_in))


@router.delete("/{note_id}", response_model=StatusResponse)
async def delete_encrypted_note(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    await notes.delete_encrypted(current_user.id, note_id)
    return {"status": "deleted"}

# backend/app/api/v1/endpoints/notes.py
from typing import List

from fastapi import APIRouter, Depends, status

from backend.app.api import deps
from backend.app.models.user import User
from backend.app.schemas.note import (
    NoteCreate,
    NoteFlagsUpdate,
    NoteMetadata,
    NoteResponse,
    NoteSearchRequest,
    NoteUpdate,
)
from backend.app.schemas.user import StatusResponse
from backend.app.services.note_service import NoteService

router = APIRouter()


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
        note_in: NoteCreate,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.create(current_user.id, note_in.title, note_in.content)


@router.get("", response_model=List[NoteResponse])
async def read_notes(
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.list_all(current_user.id)


@router.get("/meta", response_model=List[NoteMetadata])
async def read_notes_metadata(
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.metadata(current_user.id)


@router.post("/search", response_model=List[NoteResponse])
async def search_notes(
        request: NoteSearchRequest,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.search(current_user.id, request.query)


@router.get("/{note_id}", response_model=NoteResponse)
async def read_note(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.get(current_user.id, note_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
        note_id: int,
        note_in: NoteUpdate,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.update(current_user.id, note_id, note_in.title, note_in.content)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note_flags(
        note_id: int,
        flags: NoteFlagsUpdate,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.update_flags(
        current_user.id,
        note_id,
        is_pinned=flags.is_pinned,
        is_archived=flags.is_archived,
        is_deleted=flags.is_deleted,
    )


@router.post("/{note_id}/duplicate", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_note(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    return await notes.duplicate(current_user.id, note_id)


@router.delete("/{note_id}", response_model=StatusResponse)
async def delete_note(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        notes: NoteService = Depends(deps.get_note_service),
):
    await notes.delete_forever(current_user.id, note_id)
    return {"status": "deleted"}

# backend/app/api/v1/router.py
from fastapi import APIRouter
from backend.app.api.v1.endpoints import admin, auth, encrypted_notes, me, notes, share

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(notes.router, prefix="/notes", tags=["notes"])
api_router.include_router(share.router, tags=["share"])
api_router.include_router(encrypted_notes.router, prefix="/encrypted-notes", tags=["encrypted-notes"])

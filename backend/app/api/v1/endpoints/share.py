# backend/app/api/v1/endpoints/share.py
from fastapi import APIRouter, Depends

from backend.app.api import deps
from backend.app.core.config import Settings, get_settings
from backend.app.models.user import User
from backend.app.schemas.share import PublicSharedNoteResponse, ShareResponse
from backend.app.schemas.user import StatusResponse
from backend.app.services.share_service import ShareService

router = APIRouter()


@router.post("/notes/{note_id}/share", response_model=ShareResponse)
async def create_share(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        shares: ShareService = Depends(deps.get_share_service),
        settings: Settings = Depends(get_settings),
):
    token = await shares.create_share(current_user.id, note_id)
    share_url = f"{settings.APP_BASE_URL}{settings.API_V1_STR}/share/{token}"
    return {"token": token, "share_url": share_url}


@router.delete("/notes/{note_id}/share", response_model=StatusResponse)
async def disable_share(
        note_id: int,
        current_user: User = Depends(deps.get_current_approved_user),
        shares: ShareService = Depends(deps.get_share_service),
):
    await shares.disable_share(current_user.id, note_id)
    return {"status": "share_disabled"}


# Public: no session, the token is the credential
@router.get("/share/{token}", response_model=PublicSharedNoteResponse)
async def read_shared_note(token: str, shares: ShareService = Depends(deps.get_share_service)):
    return {"note": await shares.resolve_share(token)}

# backend/app/api/v1/endpoints/admin.py
from fastapi import APIRouter, Depends

from backend.app.api import deps
from backend.app.schemas.user import PendingUsersResponse, StatusResponse
from backend.app.services.admin_service import AdminService

router = APIRouter(dependencies=[Depends(deps.get_current_admin)])


@router.get("/pending-users", response_model=PendingUsersResponse)
async def list_pending(admin: AdminService = Depends(deps.get_admin_service)):
    return {"pending_users": await admin.list_pending()}


@router.post("/users/{user_id}/approve", response_model=StatusResponse)
async def approve_user(user_id: int, admin: AdminService = Depends(deps.get_admin_service)):
    await admin.approve(user_id)
    return {"status": "approved"}


@router.post("/users/{user_id}/suspend", response_model=StatusResponse)
async def suspend_user(user_id: int, admin: AdminService = Depends(deps.get_admin_service)):
    await admin.suspend(user_id)
    return {"status": "suspended"}


@router.delete("/users/{user_id}", response_model=StatusResponse)
async def delete_user(user_id: int, admin: AdminService = Depends(deps.get_admin_service)):
    await admin.delete(user_id)
    return {"status": "deleted"}

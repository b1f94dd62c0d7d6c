"""
Admin User Management Endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from corporate_advisor.core.models.io.admin import AdminUserDetail, AdminUserRead, AdminUserUpdate
from corporate_advisor.server.services.deps import AdminUserDep, SessionDep, StorageDep
from corporate_advisor.services.users import UserService

router = APIRouter()


@router.get(
    "",
    response_model=List[AdminUserRead],
    summary="List Users",
    description="Users with their plan and project count, optionally filtered by e-mail or name.",
)
async def list_users(
    admin: AdminUserDep,
    session: SessionDep,
    q: Optional[str] = Query(None, description="Search by e-mail or name"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> List[AdminUserRead]:
    return await UserService(session).list_for_admin(q, limit, offset)


@router.get(
    "/{user_id}",
    response_model=AdminUserDetail,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, admin: AdminUserDep, session: SessionDep) -> AdminUserDetail:
    return await UserService(session).detail_for_admin(user_id)


@router.patch(
    "/{user_id}",
    response_model=AdminUserRead,
    summary="Update User",
    description="Change the role or the subscription plan of a user.",
    responses={400: {"description": "Invalid role or plan"}, 404: {"description": "User not found"}},
)
async def update_user(user_id: str, data: AdminUserUpdate, admin: AdminUserDep, session: SessionDep) -> AdminUserRead:
    return await UserService(session).update_by_admin(user_id, data)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    description="Delete a user with their projects, subscription, usage, credit history and inquiries.",
    responses={400: {"description": "Cannot delete yourself"}, 404: {"description": "User not found"}},
)
async def delete_user(user_id: str, admin: AdminUserDep, session: SessionDep, storage: StorageDep) -> None:
    await UserService(session, storage).delete_by_admin(user_id, admin)

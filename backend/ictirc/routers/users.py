"""User administration router."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from ictirc.dependencies import ClientIp, CurrentIdentity, DbSession, UserServiceDep
from ictirc.models.enums import UserRole
from ictirc.schemas.common import Pagination
from ictirc.schemas.users import (
    UpdateRoleRequest,
    UserInfo,
    UserListResponse,
    UserResponse,
)

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(
    identity: CurrentIdentity,
    user_service: UserServiceDep,
    role: Optional[UserRole] = None,
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> UserListResponse:
    """Users ordered by role rank, then newest first."""
    users, total = await user_service.list_users(
        identity.id, role=role, search=search, page=page, limit=limit
    )
    return UserListResponse(
        users=[UserInfo.model_validate(u) for u in users],
        pagination=Pagination.build(total, page, limit),
    )


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: UUID,
    request: UpdateRoleRequest,
    identity: CurrentIdentity,
    user_service: UserServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> UserResponse:
    user = await user_service.update_user_role(
        identity.id, user_id, request.role, ip_address=ip_address
    )
    await db.commit()
    return UserResponse(user=UserInfo.model_validate(user))


@router.post("/users/{user_id}/toggle-active", response_model=UserResponse)
async def toggle_user_active(
    user_id: UUID,
    identity: CurrentIdentity,
    user_service: UserServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> UserResponse:
    user = await user_service.toggle_user_active(identity.id, user_id, ip_address=ip_address)
    await db.commit()
    return UserResponse(user=UserInfo.model_validate(user))

"""User and invitation schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr

from ictirc.models.enums import InviteStatus, UserRole
from ictirc.schemas.common import Pagination, SuccessResponse


class UserInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime


class UserResponse(SuccessResponse):
    user: UserInfo


class SyncUserResponse(SuccessResponse):
    user: UserInfo
    created: bool
    role_display_name: str


class UserListResponse(SuccessResponse):
    users: list[UserInfo]
    pagination: Pagination


class UpdateRoleRequest(BaseModel):
    role: UserRole


class RouteAccessResponse(SuccessResponse):
    path: str
    allowed: bool
    role: UserRole


class InviteInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: UserRole
    status: InviteStatus
    expires_at: datetime
    invited_by_id: Optional[UUID] = None
    created_at: datetime


class CreatedInviteInfo(InviteInfo):
    """Returned once at creation; the token is the only way to redeem the invite."""

    token: str


class CreateInviteRequest(BaseModel):
    email: EmailStr
    role: UserRole = UserRole.AUTHOR


class CreateInviteResponse(SuccessResponse):
    invite: CreatedInviteInfo


class InviteListResponse(SuccessResponse):
    invites: list[InviteInfo]


class AcceptInviteRequest(BaseModel):
    token: str


class ExpireInvitesResponse(SuccessResponse):
    expired: int

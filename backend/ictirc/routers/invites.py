"""Invitation router."""

from uuid import UUID

from fastapi import APIRouter, status

from ictirc.dependencies import ClientIp, CurrentIdentity, DbSession, InviteServiceDep
from ictirc.exceptions import InviteExpiredError
from ictirc.schemas.common import SuccessResponse
from ictirc.schemas.users import (
    AcceptInviteRequest,
    CreatedInviteInfo,
    CreateInviteRequest,
    CreateInviteResponse,
    ExpireInvitesResponse,
    InviteInfo,
    InviteListResponse,
    UserInfo,
    UserResponse,
)

router = APIRouter()


@router.get("/invites", response_model=InviteListResponse)
async def list_pending_invites(
    identity: CurrentIdentity,
    invite_service: InviteServiceDep,
) -> InviteListResponse:
    invites = await invite_service.list_pending_invites(identity.id)
    return InviteListResponse(invites=[InviteInfo.model_validate(i) for i in invites])


@router.post(
    "/invites",
    response_model=CreateInviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invite(
    request: CreateInviteRequest,
    identity: CurrentIdentity,
    invite_service: InviteServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> CreateInviteResponse:
    invite = await invite_service.create_invite(
        identity.id, str(request.email), request.role, ip_address=ip_address
    )
    await db.commit()
    return CreateInviteResponse(invite=CreatedInviteInfo.model_validate(invite))


@router.post("/invites/accept", response_model=UserResponse)
async def accept_invite(
    request: AcceptInviteRequest,
    identity: CurrentIdentity,
    invite_service: InviteServiceDep,
    db: DbSession,
) -> UserResponse:
    """
    Redeem an invite as the freshly signed-up caller.

    An overdue invite is stored as EXPIRED before the error is returned.
    """
    try:
        user = await invite_service.accept_invite(request.token, identity.id)
    except InviteExpiredError:
        await db.commit()
        raise
    await db.commit()
    return UserResponse(user=UserInfo.model_validate(user))


@router.post("/invites/expire", response_model=ExpireInvitesResponse)
async def expire_overdue_invites(
    identity: CurrentIdentity,
    invite_service: InviteServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> ExpireInvitesResponse:
    expired = await invite_service.expire_overdue_invites(identity.id, ip_address=ip_address)
    await db.commit()
    return ExpireInvitesResponse(expired=expired)


@router.delete("/invites/{invite_id}", response_model=SuccessResponse)
async def cancel_invite(
    invite_id: UUID,
    identity: CurrentIdentity,
    invite_service: InviteServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> SuccessResponse:
    await invite_service.cancel_invite(identity.id, invite_id, ip_address=ip_address)
    await db.commit()
    return SuccessResponse()

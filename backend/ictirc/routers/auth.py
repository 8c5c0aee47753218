"""Session bootstrap and route access checks."""

from fastapi import APIRouter, Query

from ictirc.dependencies import CurrentIdentity, CurrentUserRequired, DbSession, UserServiceDep
from ictirc.exceptions import ValidationError
from ictirc.rbac import can_access_route, role_display_name
from ictirc.schemas.users import RouteAccessResponse, SyncUserResponse, UserInfo

router = APIRouter()


@router.post("/auth/sync", response_model=SyncUserResponse)
async def sync_user(
    identity: CurrentIdentity,
    user_service: UserServiceDep,
    db: DbSession,
) -> SyncUserResponse:
    """Create the caller's User row on first login; returns it either way."""
    if not identity.email:
        raise ValidationError("Token carries no email address")

    user, created = await user_service.sync_user(identity.id, identity.email, identity.name)
    await db.commit()

    return SyncUserResponse(
        user=UserInfo.model_validate(user),
        created=created,
        role_display_name=role_display_name(user.role),
    )


@router.get("/auth/access", response_model=RouteAccessResponse)
async def check_route_access(
    current_user: CurrentUserRequired,
    path: str = Query(..., min_length=1),
) -> RouteAccessResponse:
    """Whether the caller's role may open a dashboard path."""
    allowed = current_user.is_active and can_access_route(current_user.role, path)
    return RouteAccessResponse(path=path, allowed=allowed, role=current_user.role)

"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.database import get_db
from ictirc.exceptions import AuthorizationError, MissingTokenError
from ictirc.factories.service_factories import (
    get_archive_service,
    get_audit_service,
    get_invite_service,
    get_notification_service,
    get_paper_workflow_service,
    get_review_service,
    get_submission_service,
    get_user_service,
)
from ictirc.models.user import User
from ictirc.repositories.category_repository import CategoryRepository
from ictirc.repositories.user_repository import UserRepository
from ictirc.services.archive_service import ArchiveService
from ictirc.services.audit_service import AuditService
from ictirc.services.auth_service import AuthenticatedUser, get_auth_service
from ictirc.services.invite_service import InviteService
from ictirc.services.notification_service import NotificationService
from ictirc.services.paper_workflow_service import PaperWorkflowService
from ictirc.services.review_service import ReviewService
from ictirc.services.submission_service import SubmissionService
from ictirc.services.user_service import UserService
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]


# ============================================================================
# Repositories (request-scoped)
# ============================================================================


def get_user_repository(db: DbSession) -> UserRepository:
    """Get UserRepository with database session."""
    return UserRepository(db)


def get_category_repository(db: DbSession) -> CategoryRepository:
    """Get CategoryRepository with database session."""
    return CategoryRepository(db)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
CategoryRepoDep = Annotated[CategoryRepository, Depends(get_category_repository)]


# ============================================================================
# Services
# ============================================================================


def get_paper_workflow_service_dep(db: DbSession) -> PaperWorkflowService:
    """Get PaperWorkflowService with database session."""
    return get_paper_workflow_service(db)


def get_review_service_dep(db: DbSession) -> ReviewService:
    return get_review_service(db)


def get_user_service_dep(db: DbSession) -> UserService:
    return get_user_service(db)


def get_invite_service_dep(db: DbSession) -> InviteService:
    return get_invite_service(db)


def get_archive_service_dep(db: DbSession) -> ArchiveService:
    return get_archive_service(db)


def get_audit_service_dep(db: DbSession) -> AuditService:
    return get_audit_service(db)


def get_submission_service_dep(db: DbSession) -> SubmissionService:
    return get_submission_service(db)


PaperWorkflowServiceDep = Annotated[PaperWorkflowService, Depends(get_paper_workflow_service_dep)]
ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service_dep)]
UserServiceDep = Annotated[UserService, Depends(get_user_service_dep)]
InviteServiceDep = Annotated[InviteService, Depends(get_invite_service_dep)]
ArchiveServiceDep = Annotated[ArchiveService, Depends(get_archive_service_dep)]
AuditServiceDep = Annotated[AuditService, Depends(get_audit_service_dep)]
SubmissionServiceDep = Annotated[SubmissionService, Depends(get_submission_service_dep)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


# ============================================================================
# Authentication Dependencies
# ============================================================================


async def get_current_identity(
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> AuthenticatedUser:
    """Verify the bearer token without touching the database."""
    if not authorization:
        raise MissingTokenError()
    return await get_auth_service().verify_token(authorization)


CurrentIdentity = Annotated[AuthenticatedUser, Depends(get_current_identity)]


async def get_current_user_required(identity: CurrentIdentity, users: UserRepoDep) -> User:
    """
    Resolve the caller's User row.

    Rows are created by ``POST /auth/sync`` or by accepting an invite, never
    implicitly here, so a fresh signup can still redeem an invite.
    """
    user = await users.get_by_id(identity.id)
    if user is None:
        log.warning("authenticated identity has no user row", user_id=identity.id)
        raise AuthorizationError("User not found")
    return user


CurrentUserRequired = Annotated[User, Depends(get_current_user_required)]


# ============================================================================
# Request metadata
# ============================================================================


def get_client_ip(request: Request) -> str | None:
    """Client address for audit rows, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


ClientIp = Annotated[str | None, Depends(get_client_ip)]

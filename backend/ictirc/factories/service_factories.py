"""Factory functions for business logic services."""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.config import get_settings
from ictirc.factories.client_factories import get_email_client, get_storage_client
from ictirc.repositories import (
    ArchivedPaperRepository,
    AuditLogRepository,
    CategoryRepository,
    ConferenceRepository,
    DoiSequenceRepository,
    InviteRepository,
    IssueRepository,
    PaperRepository,
    ReviewRepository,
    UserRepository,
    VolumeRepository,
)
from ictirc.services.archive_service import ArchiveService
from ictirc.services.audit_service import AuditService
from ictirc.services.doi_service import DoiService
from ictirc.services.invite_service import InviteService
from ictirc.services.notification_service import NotificationService
from ictirc.services.paper_workflow_service import PaperWorkflowService
from ictirc.services.publication_service import PublicationService
from ictirc.services.review_service import ReviewService
from ictirc.services.submission_service import SubmissionService
from ictirc.services.user_service import UserService


def get_audit_service(db_session: AsyncSession) -> AuditService:
    """
    Create AuditService bound to the request session.

    Note: Not cached because depends on request-scoped db session.
    """
    return AuditService(session=db_session, audit_repository=AuditLogRepository(db_session))


def get_doi_service(db_session: AsyncSession) -> DoiService:
    return DoiService(sequence_repository=DoiSequenceRepository(db_session))


def get_paper_workflow_service(db_session: AsyncSession) -> PaperWorkflowService:
    """
    Create PaperWorkflowService with dependencies.

    The DOI service is shared with the publication service so both draw
    from the same sequence repository and session.

    Args:
        db_session: Database session

    Returns:
        PaperWorkflowService instance
    """
    doi_service = get_doi_service(db_session)
    return PaperWorkflowService(
        session=db_session,
        paper_repository=PaperRepository(db_session),
        audit_service=get_audit_service(db_session),
        doi_service=doi_service,
        publication_service=PublicationService(doi_service),
    )


def get_review_service(db_session: AsyncSession) -> ReviewService:
    return ReviewService(
        session=db_session,
        review_repository=ReviewRepository(db_session),
        paper_repository=PaperRepository(db_session),
        user_repository=UserRepository(db_session),
        audit_service=get_audit_service(db_session),
    )


def get_user_service(db_session: AsyncSession) -> UserService:
    return UserService(
        session=db_session,
        user_repository=UserRepository(db_session),
        audit_service=get_audit_service(db_session),
    )


def get_invite_service(db_session: AsyncSession) -> InviteService:
    settings = get_settings()
    return InviteService(
        session=db_session,
        invite_repository=InviteRepository(db_session),
        user_repository=UserRepository(db_session),
        audit_service=get_audit_service(db_session),
        ttl_days=settings.invite_ttl_days,
    )


def get_archive_service(db_session: AsyncSession) -> ArchiveService:
    return ArchiveService(
        session=db_session,
        conference_repository=ConferenceRepository(db_session),
        volume_repository=VolumeRepository(db_session),
        issue_repository=IssueRepository(db_session),
        archived_paper_repository=ArchivedPaperRepository(db_session),
        audit_service=get_audit_service(db_session),
    )


def get_submission_service(db_session: AsyncSession) -> SubmissionService:
    settings = get_settings()
    return SubmissionService(
        paper_repository=PaperRepository(db_session),
        category_repository=CategoryRepository(db_session),
        storage_client=get_storage_client(),
        audit_service=get_audit_service(db_session),
        max_upload_bytes=settings.max_upload_bytes,
    )


@lru_cache(maxsize=1)
def get_notification_service() -> NotificationService:
    """
    Create singleton notification service.

    Returns:
        NotificationService instance
    """
    return NotificationService(email_client=get_email_client())

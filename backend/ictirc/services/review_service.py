"""Reviewer assignment and review comments on live papers."""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from ictirc.models.enums import UserRole
from ictirc.models.paper import Paper
from ictirc.models.review import PaperComment, ReviewerAssignment
from ictirc.rbac import Permission, require_permission
from ictirc.repositories.paper_repository import PaperRepository
from ictirc.repositories.review_repository import ReviewRepository
from ictirc.repositories.user_repository import UserRepository
from ictirc.services.audit_service import AuditAction, AuditService
from ictirc.utils.logger import get_logger

log = get_logger(__name__)

ASSIGNABLE_ROLES = frozenset({UserRole.REVIEWER, UserRole.EDITOR})


class ReviewService:
    """
    Who reviews a paper and what they said about it.

    Assigning and removing reviewers needs ``paper:update``; reading and
    writing comments needs ``paper:review``, so authors never see them.
    """

    def __init__(
        self,
        session: AsyncSession,
        review_repository: ReviewRepository,
        paper_repository: PaperRepository,
        user_repository: UserRepository,
        audit_service: AuditService,
    ):
        self.session = session
        self.review_repository = review_repository
        self.paper_repository = paper_repository
        self.user_repository = user_repository
        self.audit_service = audit_service

    async def _get_paper(self, paper_id: UUID | str) -> Paper:
        paper = await self.paper_repository.get_by_id(paper_id)
        if paper is None:
            raise ResourceNotFoundError("Paper", str(paper_id))
        return paper

    async def list_reviewers(
        self, actor_id: UUID | str, paper_id: UUID | str
    ) -> list[ReviewerAssignment]:
        await require_permission(self.session, actor_id, Permission.PAPER_READ)
        await self._get_paper(paper_id)
        return await self.review_repository.list_assignments(paper_id)

    async def assign_reviewer(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        reviewer_id: UUID | str,
        ip_address: Optional[str] = None,
    ) -> ReviewerAssignment:
        """
        Attach an active REVIEWER or EDITOR to a paper.

        Raises:
            ValidationError: reviewer missing, deactivated or of another role
            ConflictError: reviewer already assigned to this paper
        """
        actor = await require_permission(self.session, actor_id, Permission.PAPER_UPDATE)
        paper = await self._get_paper(paper_id)

        reviewer = await self.user_repository.get_by_id(reviewer_id)
        if reviewer is None or not reviewer.is_active or reviewer.role not in ASSIGNABLE_ROLES:
            raise ValidationError("Invalid reviewer", details={"reviewer_id": str(reviewer_id)})

        if await self.review_repository.find_assignment(paper.id, reviewer.id) is not None:
            raise ConflictError("Reviewer already assigned")

        try:
            async with self.session.begin_nested():
                assignment = await self.review_repository.create_assignment(
                    paper_id=paper.id, reviewer_id=reviewer.id, assigned_by_id=actor.id
                )
        except IntegrityError:
            raise ConflictError("Reviewer already assigned") from None

        await self.audit_service.record(
            AuditAction.ASSIGN_REVIEWER,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"reviewer_id": str(reviewer.id), "reviewer_email": reviewer.email},
            ip_address=ip_address,
        )
        log.info("reviewer assigned", paper_id=str(paper.id), reviewer_id=str(reviewer.id))
        return assignment

    async def unassign_reviewer(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        assignment_id: UUID | str,
        ip_address: Optional[str] = None,
    ) -> None:
        actor = await require_permission(self.session, actor_id, Permission.PAPER_UPDATE)
        paper = await self._get_paper(paper_id)

        assignment = await self.review_repository.get_assignment(assignment_id)
        # An assignment reached through another paper's URL does not exist here
        if assignment is None or assignment.paper_id != paper.id:
            raise ResourceNotFoundError("ReviewerAssignment", str(assignment_id))

        reviewer_id = str(assignment.reviewer_id)
        await self.review_repository.delete_assignment(assignment)
        await self.audit_service.record(
            AuditAction.UNASSIGN_REVIEWER,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"reviewer_id": reviewer_id, "assignment_id": str(assignment_id)},
            ip_address=ip_address,
        )
        log.info("reviewer unassigned", paper_id=str(paper.id), reviewer_id=reviewer_id)

    async def list_comments(
        self, actor_id: UUID | str, paper_id: UUID | str
    ) -> list[PaperComment]:
        await require_permission(self.session, actor_id, Permission.PAPER_REVIEW)
        await self._get_paper(paper_id)
        return await self.review_repository.list_comments(paper_id)

    async def add_comment(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        content: str,
        ip_address: Optional[str] = None,
    ) -> PaperComment:
        actor = await require_permission(self.session, actor_id, Permission.PAPER_REVIEW)
        paper = await self._get_paper(paper_id)

        content = content.strip()
        if not content:
            raise ValidationError("Comment content is required")

        comment = await self.review_repository.create_comment(
            paper_id=paper.id, author_id=actor.id, content=content
        )
        await self.audit_service.record(
            AuditAction.ADD_PAPER_COMMENT,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"comment_id": str(comment.id)},
            ip_address=ip_address,
        )
        return comment

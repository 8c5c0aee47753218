"""Repository for reviewer assignments and review comments."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.review import PaperComment, ReviewerAssignment
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class ReviewRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_assignment(self, assignment_id: UUID | str) -> Optional[ReviewerAssignment]:
        result = await self.session.execute(
            select(ReviewerAssignment).where(ReviewerAssignment.id == assignment_id)
        )
        return result.scalar_one_or_none()

    async def find_assignment(
        self, paper_id: UUID | str, reviewer_id: UUID | str
    ) -> Optional[ReviewerAssignment]:
        result = await self.session.execute(
            select(ReviewerAssignment).where(
                ReviewerAssignment.paper_id == paper_id,
                ReviewerAssignment.reviewer_id == reviewer_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_assignments(self, paper_id: UUID | str) -> list[ReviewerAssignment]:
        """Assignments for a paper, most recent first."""
        result = await self.session.execute(
            select(ReviewerAssignment)
            .where(ReviewerAssignment.paper_id == paper_id)
            .order_by(ReviewerAssignment.assigned_at.desc())
        )
        return list(result.scalars().all())

    async def create_assignment(
        self,
        paper_id: UUID,
        reviewer_id: UUID,
        assigned_by_id: Optional[UUID] = None,
    ) -> ReviewerAssignment:
        """
        Attach a reviewer to a paper.

        Raises IntegrityError on flush if the pair already exists.
        Caller is responsible for committing the transaction.
        """
        assignment = ReviewerAssignment(
            paper_id=paper_id, reviewer_id=reviewer_id, assigned_by_id=assigned_by_id
        )
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment)
        log.debug("reviewer assigned", paper_id=str(paper_id), reviewer_id=str(reviewer_id))
        return assignment

    async def delete_assignment(self, assignment: ReviewerAssignment) -> None:
        await self.session.delete(assignment)
        await self.session.flush()

    async def list_comments(self, paper_id: UUID | str) -> list[PaperComment]:
        """Comments on a paper, newest first."""
        result = await self.session.execute(
            select(PaperComment)
            .where(PaperComment.paper_id == paper_id)
            .order_by(PaperComment.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_comment(self, paper_id: UUID, author_id: UUID, content: str) -> PaperComment:
        comment = PaperComment(paper_id=paper_id, author_id=author_id, content=content)
        self.session.add(comment)
        await self.session.flush()
        await self.session.refresh(comment)
        return comment

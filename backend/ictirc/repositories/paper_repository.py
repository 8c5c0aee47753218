"""Repository for live Paper and Author operations."""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.enums import PaperStatus
from ictirc.models.paper import Author, Paper, PaperAuthor
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class PaperRepository:
    """
    Repository for Paper CRUD operations.

    Status and DOI writes are conditional updates: each returns False when
    the row no longer matches the expected state, leaving the caller to
    report a stale-state conflict.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, paper_id: UUID | str) -> Optional[Paper]:
        """Get paper by ID with its ordered authors."""
        result = await self.session.execute(select(Paper).where(Paper.id == paper_id))
        return result.scalar_one_or_none()

    async def list_papers(
        self,
        status: Optional[PaperStatus] = None,
        category_id: Optional[UUID] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Paper], int]:
        """List papers newest first with optional filters."""
        filters = []
        if status is not None:
            filters.append(Paper.status == status)
        if category_id is not None:
            filters.append(Paper.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(Paper.title.ilike(pattern), Paper.abstract.ilike(pattern)))

        count_result = await self.session.execute(
            select(func.count()).select_from(Paper).where(*filters)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(Paper)
            .where(*filters)
            .order_by(Paper.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        papers = list(result.scalars().all())
        log.debug("papers listed", count=len(papers), total=total)
        return papers, total

    async def create(
        self,
        title: str,
        abstract: str,
        keywords: list[str],
        category_id: Optional[UUID] = None,
        submitter_id: Optional[UUID] = None,
    ) -> Paper:
        """
        Create a SUBMITTED paper.

        Caller is responsible for committing the transaction.
        """
        paper = Paper(
            title=title,
            abstract=abstract,
            keywords=keywords,
            category_id=category_id,
            submitter_id=submitter_id,
            status=PaperStatus.SUBMITTED,
        )
        self.session.add(paper)
        await self.session.flush()
        log.debug("paper created", paper_id=str(paper.id))
        return paper

    async def set_raw_file_url(self, paper: Paper, url: str) -> None:
        paper.raw_file_url = url
        await self.session.flush()

    async def delete(self, paper_id: UUID | str) -> bool:
        """
        Delete a paper; author links go with it via ON DELETE CASCADE.

        Returns True if a row was deleted.
        """
        result = await self.session.execute(delete(Paper).where(Paper.id == paper_id))
        await self.session.flush()
        deleted = (result.rowcount or 0) > 0
        log.debug("paper delete", paper_id=str(paper_id), deleted=deleted)
        return deleted

    async def transition_status(
        self,
        paper: Paper,
        expected: PaperStatus,
        values: dict[str, Any],
    ) -> bool:
        """
        Apply ``values`` only if the paper is still in ``expected`` status.

        ``values`` must contain the new ``status`` and may carry ``doi`` and
        ``published_at``. When a DOI is written the row must also still be
        DOI-less.
        """
        conditions = [Paper.id == paper.id, Paper.status == expected]
        if "doi" in values:
            conditions.append(Paper.doi.is_(None))

        result = await self.session.execute(
            update(Paper)
            .where(*conditions)
            .values(**values, updated_at=datetime.now(timezone.utc))
            .returning(Paper.id)
        )
        if result.scalar_one_or_none() is None:
            log.warning("conditional status update matched no rows", paper_id=str(paper.id))
            return False
        await self.session.flush()
        await self.session.refresh(paper)
        return True

    async def set_doi_if_absent(self, paper: Paper, doi: str) -> bool:
        """Write ``doi`` only while the stored DOI is still null."""
        result = await self.session.execute(
            update(Paper)
            .where(Paper.id == paper.id, Paper.doi.is_(None))
            .values(doi=doi, updated_at=datetime.now(timezone.utc))
            .returning(Paper.id)
        )
        if result.scalar_one_or_none() is None:
            return False
        await self.session.flush()
        await self.session.refresh(paper)
        return True

    async def revoke_doi(self, paper: Paper, expected_doi: str) -> bool:
        """Null the DOI, reject the paper and clear its publish stamp."""
        result = await self.session.execute(
            update(Paper)
            .where(Paper.id == paper.id, Paper.doi == expected_doi)
            .values(
                doi=None,
                status=PaperStatus.REJECTED,
                published_at=None,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(Paper.id)
        )
        if result.scalar_one_or_none() is None:
            return False
        await self.session.flush()
        await self.session.refresh(paper)
        return True

    async def update_publication_step(
        self, paper: Paper, step: int, note: Optional[str]
    ) -> Paper:
        await self.session.execute(
            update(Paper)
            .where(Paper.id == paper.id)
            .values(
                publication_step=step,
                publication_note=note,
                updated_at=datetime.now(timezone.utc),
            )
        )
        await self.session.flush()
        await self.session.refresh(paper)
        return paper

    # Authors

    async def upsert_author(
        self, name: str, email: str, affiliation: Optional[str] = None
    ) -> Author:
        """Insert an author or refresh name/affiliation of the one with ``email``."""
        stmt = (
            pg_insert(Author)
            .values(id=uuid4(), name=name, email=email, affiliation=affiliation)
            .on_conflict_do_update(
                index_elements=[Author.email],
                set_={"name": name, "affiliation": affiliation},
            )
            .returning(Author)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def add_author(
        self,
        paper_id: UUID,
        author_id: UUID,
        order: int,
        is_corresponding_author: bool = False,
    ) -> PaperAuthor:
        link = PaperAuthor(
            paper_id=paper_id,
            author_id=author_id,
            order=order,
            is_corresponding_author=is_corresponding_author,
        )
        self.session.add(link)
        await self.session.flush()
        return link

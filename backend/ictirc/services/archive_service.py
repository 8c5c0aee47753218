"""Conference → Volume → Issue → ArchivedPaper hierarchy management."""

from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.exceptions import BaseAPIException, ConflictError, ResourceNotFoundError
from ictirc.models.archived_paper import ArchivedPaper
from ictirc.models.conference import Conference
from ictirc.models.issue import Issue
from ictirc.models.user import User
from ictirc.models.volume import Volume
from ictirc.rbac import Permission, require_permission
from ictirc.repositories.archived_paper_repository import ArchivedPaperRepository
from ictirc.repositories.conference_repository import ConferenceRepository
from ictirc.repositories.issue_repository import IssueRepository
from ictirc.repositories.volume_repository import VolumeRepository
from ictirc.services.audit_service import AuditAction, AuditService
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class BatchItemError:
    title: Optional[str]
    error: str


@dataclass
class BatchCreateResult:
    created: list[ArchivedPaper] = field(default_factory=list)
    errors: list[BatchItemError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class ArchiveService:
    """
    Maintains the archive tree.

    Reads are public. Mutations require the matching ``archive:*``
    permission and write an audit row. A parent that still has children
    cannot be deleted.
    """

    def __init__(
        self,
        session: AsyncSession,
        conference_repository: ConferenceRepository,
        volume_repository: VolumeRepository,
        issue_repository: IssueRepository,
        archived_paper_repository: ArchivedPaperRepository,
        audit_service: AuditService,
    ):
        self.session = session
        self.conferences = conference_repository
        self.volumes = volume_repository
        self.issues = issue_repository
        self.papers = archived_paper_repository
        self.audit_service = audit_service

    async def _audit(
        self,
        action: AuditAction,
        target: Any,
        target_type: str,
        actor: User,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        await self.audit_service.record(
            action,
            target_id=str(target.id),
            target_type=target_type,
            actor=actor,
            details=details,
            ip_address=ip_address,
        )

    # ------------------------------------------------------------------
    # Conferences
    # ------------------------------------------------------------------

    async def list_conferences(self, published_only: bool = False) -> list[Conference]:
        return await self.conferences.list_conferences(published_only=published_only)

    async def get_conference(self, conference_id: UUID | str) -> Conference:
        conference = await self.conferences.get_by_id(conference_id)
        if conference is None:
            raise ResourceNotFoundError("Conference", str(conference_id))
        return conference

    async def create_conference(
        self, actor_id: UUID | str, data: dict[str, Any], ip_address: Optional[str] = None
    ) -> Conference:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_CONFERENCE_MANAGE)
        conference = await self.conferences.create(**data)
        await self._audit(
            AuditAction.CREATE_CONFERENCE, conference, "Conference", actor,
            {"name": conference.name}, ip_address,
        )
        return conference

    async def update_conference(
        self,
        actor_id: UUID | str,
        conference_id: UUID | str,
        data: dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Conference:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_CONFERENCE_MANAGE)
        conference = await self.get_conference(conference_id)
        conference = await self.conferences.update(conference, **data)
        await self._audit(
            AuditAction.UPDATE_CONFERENCE, conference, "Conference", actor,
            {"fields": sorted(data)}, ip_address,
        )
        return conference

    async def delete_conference(
        self, actor_id: UUID | str, conference_id: UUID | str, ip_address: Optional[str] = None
    ) -> None:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_CONFERENCE_MANAGE)
        conference = await self.get_conference(conference_id)

        linked = await self.conferences.count_issues(conference.id)
        if linked:
            raise ConflictError(
                f"Cannot delete conference with {linked} linked issue(s). Unlink issues first.",
                details={"issue_count": linked},
            )

        await self.conferences.delete(conference)
        await self._audit(
            AuditAction.DELETE_CONFERENCE, conference, "Conference", actor,
            {"name": conference.name}, ip_address,
        )

    # ------------------------------------------------------------------
    # Volumes
    # ------------------------------------------------------------------

    async def list_volumes(self) -> list[Volume]:
        return await self.volumes.list_volumes()

    async def get_volume(self, volume_id: UUID | str) -> Volume:
        volume = await self.volumes.get_by_id(volume_id)
        if volume is None:
            raise ResourceNotFoundError("Volume", str(volume_id))
        return volume

    async def _ensure_volume_unique(
        self, volume_number: int, year: int, exclude_id: Optional[UUID] = None
    ) -> None:
        if await self.volumes.find_by_number(volume_number, year, exclude_id) is not None:
            raise ConflictError(f"Volume {volume_number} for year {year} already exists")

    async def create_volume(
        self, actor_id: UUID | str, data: dict[str, Any], ip_address: Optional[str] = None
    ) -> Volume:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_VOLUME_CREATE)
        await self._ensure_volume_unique(data["volume_number"], data["year"])

        volume = await self.volumes.create(**data)
        await self._audit(
            AuditAction.CREATE_VOLUME, volume, "Volume", actor,
            {"volume_number": volume.volume_number, "year": volume.year}, ip_address,
        )
        return volume

    async def update_volume(
        self,
        actor_id: UUID | str,
        volume_id: UUID | str,
        data: dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Volume:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_VOLUME_UPDATE)
        volume = await self.get_volume(volume_id)

        number = data.get("volume_number", volume.volume_number)
        year = data.get("year", volume.year)
        if (number, year) != (volume.volume_number, volume.year):
            await self._ensure_volume_unique(number, year, exclude_id=volume.id)

        volume = await self.volumes.update(volume, **data)
        await self._audit(
            AuditAction.UPDATE_VOLUME, volume, "Volume", actor,
            {"fields": sorted(data)}, ip_address,
        )
        return volume

    async def delete_volume(
        self, actor_id: UUID | str, volume_id: UUID | str, ip_address: Optional[str] = None
    ) -> None:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_VOLUME_DELETE)
        volume = await self.get_volume(volume_id)

        issue_count = await self.volumes.count_issues(volume.id)
        if issue_count:
            raise ConflictError(
                f"Cannot delete volume with {issue_count} issue(s). Delete issues first.",
                details={"issue_count": issue_count},
            )

        await self.volumes.delete(volume)
        await self._audit(
            AuditAction.DELETE_VOLUME, volume, "Volume", actor,
            {"volume_number": volume.volume_number, "year": volume.year}, ip_address,
        )

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def list_issues(
        self, volume_id: Optional[UUID] = None, conference_id: Optional[UUID] = None
    ) -> list[Issue]:
        return await self.issues.list_issues(volume_id=volume_id, conference_id=conference_id)

    async def get_issue(self, issue_id: UUID | str) -> Issue:
        issue = await self.issues.get_by_id(issue_id)
        if issue is None:
            raise ResourceNotFoundError("Issue", str(issue_id))
        return issue

    async def _ensure_issue_unique(
        self, volume_id: UUID, issue_number: int, exclude_id: Optional[UUID] = None
    ) -> None:
        if await self.issues.find_by_number(volume_id, issue_number, exclude_id) is not None:
            raise ConflictError(f"Issue {issue_number} already exists for this volume")

    async def create_issue(
        self, actor_id: UUID | str, data: dict[str, Any], ip_address: Optional[str] = None
    ) -> Issue:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_ISSUE_CREATE)
        volume = await self.get_volume(data["volume_id"])
        if data.get("conference_id") is not None:
            await self.get_conference(data["conference_id"])
        await self._ensure_issue_unique(volume.id, data["issue_number"])

        issue = await self.issues.create(**data)
        await self._audit(
            AuditAction.CREATE_ISSUE, issue, "Issue", actor,
            {"volume_id": str(volume.id), "issue_number": issue.issue_number}, ip_address,
        )
        return issue

    async def update_issue(
        self,
        actor_id: UUID | str,
        issue_id: UUID | str,
        data: dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Issue:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_ISSUE_UPDATE)
        issue = await self.get_issue(issue_id)

        volume_id = data.get("volume_id", issue.volume_id)
        if volume_id != issue.volume_id:
            await self.get_volume(volume_id)
        if data.get("conference_id") is not None:
            await self.get_conference(data["conference_id"])
        number = data.get("issue_number", issue.issue_number)
        if (volume_id, number) != (issue.volume_id, issue.issue_number):
            await self._ensure_issue_unique(volume_id, number, exclude_id=issue.id)

        issue = await self.issues.update(issue, **data)
        await self._audit(
            AuditAction.UPDATE_ISSUE, issue, "Issue", actor,
            {"fields": sorted(data)}, ip_address,
        )
        return issue

    async def delete_issue(
        self, actor_id: UUID | str, issue_id: UUID | str, ip_address: Optional[str] = None
    ) -> None:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_ISSUE_DELETE)
        issue = await self.get_issue(issue_id)

        paper_count = await self.issues.count_papers(issue.id)
        if paper_count:
            raise ConflictError(
                f"Cannot delete issue with {paper_count} paper(s). Delete papers first.",
                details={"paper_count": paper_count},
            )

        await self.issues.delete(issue)
        await self._audit(
            AuditAction.DELETE_ISSUE, issue, "Issue", actor,
            {"volume_id": str(issue.volume_id), "issue_number": issue.issue_number}, ip_address,
        )

    # ------------------------------------------------------------------
    # Archived papers
    # ------------------------------------------------------------------

    async def list_issue_papers(self, issue_id: UUID | str) -> list[ArchivedPaper]:
        issue = await self.get_issue(issue_id)
        return await self.papers.list_for_issue(issue.id)

    async def search_archived_papers(
        self, search: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> tuple[list[ArchivedPaper], int]:
        return await self.papers.search(search=search, limit=limit, offset=(page - 1) * limit)

    async def get_archived_paper(self, paper_id: UUID | str) -> ArchivedPaper:
        paper = await self.papers.get_by_id(paper_id)
        if paper is None:
            raise ResourceNotFoundError("ArchivedPaper", str(paper_id))
        return paper

    async def _create_archived_paper(
        self, actor: User, data: dict[str, Any], ip_address: Optional[str]
    ) -> ArchivedPaper:
        fields = dict(data)
        authors = fields.pop("authors", [])
        await self.get_issue(fields["issue_id"])

        paper = await self.papers.create(authors=authors, uploader_id=actor.id, **fields)
        await self._audit(
            AuditAction.CREATE_ARCHIVED_PAPER, paper, "ArchivedPaper", actor,
            {"title": paper.title, "issue_id": str(paper.issue_id)}, ip_address,
        )
        return paper

    async def create_archived_paper(
        self, actor_id: UUID | str, data: dict[str, Any], ip_address: Optional[str] = None
    ) -> ArchivedPaper:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_PAPER_UPLOAD)
        return await self._create_archived_paper(actor, data, ip_address)

    async def batch_create_archived_papers(
        self,
        actor_id: UUID | str,
        items: list[dict[str, Any]],
        ip_address: Optional[str] = None,
    ) -> BatchCreateResult:
        """
        Create each item in its own savepoint.

        A failing item is rolled back alone and reported by title; the rest
        are kept.
        """
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_PAPER_UPLOAD)
        result = BatchCreateResult()

        for item in items:
            try:
                async with self.session.begin_nested():
                    paper = await self._create_archived_paper(actor, item, ip_address)
                result.created.append(paper)
            except BaseAPIException as e:
                result.errors.append(BatchItemError(title=item.get("title"), error=e.message))
            except SQLAlchemyError as e:
                log.warning("batch item failed", title=item.get("title"), error=str(e))
                result.errors.append(
                    BatchItemError(title=item.get("title"), error="Failed to create archived paper")
                )

        log.info("archive batch processed", created=len(result.created), failed=len(result.errors))
        return result

    async def update_archived_paper(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        data: dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> ArchivedPaper:
        """Update fields; a supplied author list replaces the stored one."""
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_PAPER_UPDATE)
        paper = await self.get_archived_paper(paper_id)

        fields = dict(data)
        authors = fields.pop("authors", None)
        if "issue_id" in fields and fields["issue_id"] != paper.issue_id:
            await self.get_issue(fields["issue_id"])

        paper = await self.papers.update(paper, authors=authors, **fields)
        await self._audit(
            AuditAction.UPDATE_ARCHIVED_PAPER, paper, "ArchivedPaper", actor,
            {"fields": sorted(data)}, ip_address,
        )
        return paper

    async def delete_archived_paper(
        self, actor_id: UUID | str, paper_id: UUID | str, ip_address: Optional[str] = None
    ) -> None:
        actor = await require_permission(self.session, actor_id, Permission.ARCHIVE_PAPER_DELETE)
        paper = await self.get_archived_paper(paper_id)

        await self.papers.delete(paper)
        await self._audit(
            AuditAction.DELETE_ARCHIVED_PAPER, paper, "ArchivedPaper", actor,
            {"title": paper.title}, ip_address,
        )

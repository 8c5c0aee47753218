"""Paper review workflow: status transitions, DOI lifecycle and deletion."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.clients.email_client import StatusChangeEmail
from ictirc.exceptions import (
    ConflictError,
    DoiAlreadyAssignedError,
    InvalidTransitionError,
    ResourceNotFoundError,
    StaleStateError,
)
from ictirc.models.enums import PaperStatus, UserRole
from ictirc.models.paper import Paper
from ictirc.rbac import Permission, require_permission, require_role
from ictirc.repositories.paper_repository import PaperRepository
from ictirc.services.audit_service import AuditAction, AuditService
from ictirc.services.doi_service import DoiService
from ictirc.services.publication_service import PublicationService
from ictirc.utils.logger import get_logger
from ictirc.workflow import (
    DOI_ELIGIBLE_STATUSES,
    is_listed_transition,
    is_transition_allowed,
    required_permission,
    should_notify,
)

log = get_logger(__name__)


@dataclass
class StatusChangeOutcome:
    paper: Paper
    previous_status: PaperStatus
    notification: Optional[StatusChangeEmail] = None


class PaperWorkflowService:
    """
    Applies privileged changes to live papers.

    Every mutation follows the same order: authorize the actor, load the
    paper, validate, write with a conditional update, then record an audit
    row in the same session. Nothing is committed here.
    """

    def __init__(
        self,
        session: AsyncSession,
        paper_repository: PaperRepository,
        audit_service: AuditService,
        doi_service: DoiService,
        publication_service: PublicationService,
    ):
        self.session = session
        self.paper_repository = paper_repository
        self.audit_service = audit_service
        self.doi_service = doi_service
        self.publication_service = publication_service

    async def _get_paper(self, paper_id: UUID | str) -> Paper:
        paper = await self.paper_repository.get_by_id(paper_id)
        if paper is None:
            raise ResourceNotFoundError("Paper", str(paper_id))
        return paper

    async def get_paper(self, actor_id: UUID | str, paper_id: UUID | str) -> Paper:
        await require_permission(self.session, actor_id, Permission.PAPER_READ)
        return await self._get_paper(paper_id)

    async def list_papers(
        self,
        actor_id: UUID | str,
        status: Optional[PaperStatus] = None,
        category_id: Optional[UUID] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Paper], int]:
        await require_permission(self.session, actor_id, Permission.PAPER_READ)
        return await self.paper_repository.list_papers(
            status=status,
            category_id=category_id,
            search=search,
            limit=limit,
            offset=(page - 1) * limit,
        )

    async def update_status(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        new_status: PaperStatus,
        ip_address: Optional[str] = None,
    ) -> StatusChangeOutcome:
        """
        Move a paper to ``new_status``.

        Raises:
            AuthorizationError: actor lacks the permission the target requires
            ResourceNotFoundError: paper does not exist
            InvalidTransitionError: transition not listed and actor is not DEAN
            StaleStateError: the paper changed between read and write
        """
        actor = await require_permission(self.session, actor_id, required_permission(new_status))
        paper = await self._get_paper(paper_id)
        previous_status = paper.status

        if not is_transition_allowed(previous_status, new_status, actor.role):
            raise InvalidTransitionError(str(previous_status), str(new_status))
        if not is_listed_transition(previous_status, new_status):
            log.warning(
                "dean override transition",
                paper_id=str(paper.id),
                from_status=str(previous_status),
                to_status=str(new_status),
                actor_id=str(actor.id),
            )

        values: dict = {"status": new_status}
        if new_status == PaperStatus.PUBLISHED:
            values.update(
                await self.publication_service.publication_values(paper, datetime.now(timezone.utc))
            )

        updated = await self.paper_repository.transition_status(paper, previous_status, values)
        if not updated:
            raise StaleStateError(
                "Paper was modified concurrently; reload and retry",
                details={"paper_id": str(paper.id), "expected_status": str(previous_status)},
            )

        await self.audit_service.record(
            AuditAction.UPDATE_PAPER_STATUS,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"from": str(previous_status), "to": str(new_status), "doi": paper.doi},
            ip_address=ip_address,
        )
        log.info(
            "paper status updated",
            paper_id=str(paper.id),
            from_status=str(previous_status),
            to_status=str(new_status),
            doi=paper.doi,
        )

        return StatusChangeOutcome(
            paper=paper,
            previous_status=previous_status,
            notification=self._build_notification(paper, new_status),
        )

    def _build_notification(
        self, paper: Paper, new_status: PaperStatus
    ) -> Optional[StatusChangeEmail]:
        if not should_notify(new_status):
            return None
        link = paper.corresponding_author
        if link is None or not link.author.email:
            log.debug("no corresponding author to notify", paper_id=str(paper.id))
            return None
        return StatusChangeEmail(
            to=link.author.email,
            paper_title=paper.title,
            author_name=link.author.name,
            submission_id=str(paper.id),
            new_status=new_status,
            doi=paper.doi,
            notify_admin=True,
        )

    async def assign_doi(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        ip_address: Optional[str] = None,
    ) -> Paper:
        """
        Give an accepted or published paper its DOI.

        A paper that already has a DOI is refused with DoiAlreadyAssignedError
        carrying that DOI; the sequence is not touched in that case.
        """
        actor = await require_permission(self.session, actor_id, Permission.PAPER_PUBLISH)
        paper = await self._get_paper(paper_id)

        if paper.doi is not None:
            raise DoiAlreadyAssignedError(paper.doi)
        if paper.status not in DOI_ELIGIBLE_STATUSES:
            raise ConflictError(
                "Paper must be accepted before DOI assignment",
                details={"status": str(paper.status)},
            )

        doi = await self.doi_service.allocate(datetime.now(timezone.utc).year)
        if not await self.paper_repository.set_doi_if_absent(paper, doi):
            # Lost the race: another request wrote a DOI first
            await self.session.refresh(paper)
            if paper.doi is not None:
                raise DoiAlreadyAssignedError(paper.doi)
            raise StaleStateError("Paper was modified concurrently; reload and retry")

        await self.audit_service.record(
            AuditAction.ASSIGN_DOI,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"doi": doi},
            ip_address=ip_address,
        )
        log.info("doi assigned", paper_id=str(paper.id), doi=doi)
        return paper

    async def revoke_doi(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        reason: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> tuple[Paper, str]:
        """Null a paper's DOI and reject it. Returns the paper and the revoked DOI."""
        actor = await require_role(self.session, actor_id, UserRole.DEAN)
        paper = await self._get_paper(paper_id)

        revoked_doi = paper.doi
        if revoked_doi is None:
            raise ConflictError("Paper does not have a DOI")
        previous_status = paper.status

        if not await self.paper_repository.revoke_doi(paper, revoked_doi):
            raise StaleStateError("Paper was modified concurrently; reload and retry")

        await self.audit_service.record(
            AuditAction.REVOKE_DOI,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={
                "revoked_doi": revoked_doi,
                "reason": reason,
                "previous_status": str(previous_status),
            },
            ip_address=ip_address,
        )
        log.warning("doi revoked", paper_id=str(paper.id), doi=revoked_doi, reason=reason)
        return paper, revoked_doi

    async def delete_paper(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        reason: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        actor = await require_role(self.session, actor_id, UserRole.DEAN)
        paper = await self._get_paper(paper_id)
        title = paper.title

        await self.paper_repository.delete(paper.id)
        await self.audit_service.record(
            AuditAction.DELETE_PAPER,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"title": title, "reason": reason},
            ip_address=ip_address,
        )
        log.warning("paper deleted", paper_id=str(paper.id), reason=reason)

    async def update_publication_step(
        self,
        actor_id: UUID | str,
        paper_id: UUID | str,
        step: int,
        note: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Paper:
        actor = await require_permission(self.session, actor_id, Permission.PAPER_UPDATE)
        paper = await self._get_paper(paper_id)
        previous_step = paper.publication_step

        paper = await self.paper_repository.update_publication_step(paper, step, note)
        await self.audit_service.record(
            AuditAction.UPDATE_PUBLICATION_STEP,
            target_id=str(paper.id),
            target_type="Paper",
            actor=actor,
            details={"from_step": previous_step, "step": step, "note": note},
            ip_address=ip_address,
        )
        return paper

"""Live paper workflow router: listing, status changes, DOI lifecycle, review."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Query, status

from ictirc.dependencies import (
    ClientIp,
    CurrentIdentity,
    DbSession,
    NotificationServiceDep,
    PaperWorkflowServiceDep,
    ReviewServiceDep,
)
from ictirc.models.enums import PaperStatus
from ictirc.schemas.common import Pagination, SuccessResponse
from ictirc.schemas.papers import (
    AddCommentRequest,
    AssignReviewerRequest,
    CommentInfo,
    CommentListResponse,
    CommentResponse,
    DeletePaperRequest,
    DoiResponse,
    PaperInfo,
    PaperListResponse,
    PaperResponse,
    PublicationStepRequest,
    ReviewerAssignmentInfo,
    ReviewerAssignmentResponse,
    ReviewerListResponse,
    RevokeDoiRequest,
    RevokeDoiResponse,
    StatusChangeResponse,
    UpdateStatusRequest,
)

router = APIRouter()


@router.get("/papers", response_model=PaperListResponse)
async def list_papers(
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
    status: Optional[PaperStatus] = None,
    category_id: Optional[UUID] = None,
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaperListResponse:
    papers, total = await workflow.list_papers(
        identity.id,
        status=status,
        category_id=category_id,
        search=search,
        page=page,
        limit=limit,
    )
    return PaperListResponse(
        papers=[PaperInfo.model_validate(p) for p in papers],
        pagination=Pagination.build(total, page, limit),
    )


@router.get("/papers/{paper_id}", response_model=PaperResponse)
async def get_paper(
    paper_id: UUID,
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
) -> PaperResponse:
    paper = await workflow.get_paper(identity.id, paper_id)
    return PaperResponse(paper=PaperInfo.model_validate(paper))


@router.patch("/papers/{paper_id}/status", response_model=StatusChangeResponse)
async def update_paper_status(
    paper_id: UUID,
    request: UpdateStatusRequest,
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
    notification_service: NotificationServiceDep,
    background_tasks: BackgroundTasks,
    db: DbSession,
    ip_address: ClientIp,
) -> StatusChangeResponse:
    """
    Move a paper through the review workflow.

    Publishing stamps ``published_at`` and allocates a DOI when the paper
    has none. The author email is queued only after the change commits.
    """
    outcome = await workflow.update_status(
        identity.id, paper_id, request.status, ip_address=ip_address
    )
    await db.commit()

    if outcome.notification is not None:
        background_tasks.add_task(
            notification_service.notify_status_change, outcome.notification
        )

    return StatusChangeResponse(
        paper=PaperInfo.model_validate(outcome.paper),
        previous_status=outcome.previous_status,
    )


@router.patch("/papers/{paper_id}/publication-step", response_model=PaperResponse)
async def update_publication_step(
    paper_id: UUID,
    request: PublicationStepRequest,
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> PaperResponse:
    paper = await workflow.update_publication_step(
        identity.id, paper_id, request.step, request.note, ip_address=ip_address
    )
    await db.commit()
    return PaperResponse(paper=PaperInfo.model_validate(paper))


@router.post("/papers/{paper_id}/doi", response_model=DoiResponse)
async def assign_doi(
    paper_id: UUID,
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> DoiResponse:
    paper = await workflow.assign_doi(identity.id, paper_id, ip_address=ip_address)
    await db.commit()
    return DoiResponse(doi=paper.doi, paper=PaperInfo.model_validate(paper))


@router.delete("/papers/{paper_id}/doi", response_model=RevokeDoiResponse)
async def revoke_doi(
    paper_id: UUID,
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
    db: DbSession,
    ip_address: ClientIp,
    request: Optional[RevokeDoiRequest] = None,
) -> RevokeDoiResponse:
    """Null the DOI and reject the paper. Dean only."""
    paper, revoked_doi = await workflow.revoke_doi(
        identity.id, paper_id, reason=request.reason if request else None, ip_address=ip_address
    )
    await db.commit()
    return RevokeDoiResponse(revoked_doi=revoked_doi, paper=PaperInfo.model_validate(paper))


@router.delete("/papers/{paper_id}", response_model=SuccessResponse)
async def delete_paper(
    paper_id: UUID,
    identity: CurrentIdentity,
    workflow: PaperWorkflowServiceDep,
    db: DbSession,
    ip_address: ClientIp,
    request: Optional[DeletePaperRequest] = None,
) -> SuccessResponse:
    """Hard-delete a paper and its author links. Dean only."""
    await workflow.delete_paper(
        identity.id, paper_id, reason=request.reason if request else None, ip_address=ip_address
    )
    await db.commit()
    return SuccessResponse()


@router.get("/papers/{paper_id}/reviewers", response_model=ReviewerListResponse)
async def list_reviewers(
    paper_id: UUID,
    identity: CurrentIdentity,
    reviews: ReviewServiceDep,
) -> ReviewerListResponse:
    assignments = await reviews.list_reviewers(identity.id, paper_id)
    return ReviewerListResponse(
        reviewers=[ReviewerAssignmentInfo.model_validate(a) for a in assignments]
    )


@router.post(
    "/papers/{paper_id}/reviewers",
    response_model=ReviewerAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_reviewer(
    paper_id: UUID,
    request: AssignReviewerRequest,
    identity: CurrentIdentity,
    reviews: ReviewServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> ReviewerAssignmentResponse:
    assignment = await reviews.assign_reviewer(
        identity.id, paper_id, request.reviewer_id, ip_address=ip_address
    )
    await db.commit()
    return ReviewerAssignmentResponse(
        assignment=ReviewerAssignmentInfo.model_validate(assignment)
    )


@router.delete("/papers/{paper_id}/reviewers/{assignment_id}", response_model=SuccessResponse)
async def unassign_reviewer(
    paper_id: UUID,
    assignment_id: UUID,
    identity: CurrentIdentity,
    reviews: ReviewServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> SuccessResponse:
    await reviews.unassign_reviewer(identity.id, paper_id, assignment_id, ip_address=ip_address)
    await db.commit()
    return SuccessResponse()


@router.get("/papers/{paper_id}/comments", response_model=CommentListResponse)
async def list_comments(
    paper_id: UUID,
    identity: CurrentIdentity,
    reviews: ReviewServiceDep,
) -> CommentListResponse:
    comments = await reviews.list_comments(identity.id, paper_id)
    return CommentListResponse(comments=[CommentInfo.model_validate(c) for c in comments])


@router.post(
    "/papers/{paper_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    paper_id: UUID,
    request: AddCommentRequest,
    identity: CurrentIdentity,
    reviews: ReviewServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> CommentResponse:
    comment = await reviews.add_comment(identity.id, paper_id, request.content, ip_address=ip_address)
    await db.commit()
    return CommentResponse(comment=CommentInfo.model_validate(comment))

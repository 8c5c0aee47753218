"""Archive hierarchy router: conferences, volumes, issues and archived papers.

Reads are public; writes require an authenticated caller with the matching
archive permission.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from ictirc.dependencies import ArchiveServiceDep, ClientIp, CurrentIdentity, DbSession
from ictirc.schemas.archive import (
    ArchivedPaperCreate,
    ArchivedPaperInfo,
    ArchivedPaperListResponse,
    ArchivedPaperResponse,
    ArchivedPaperUpdate,
    BatchCreateRequest,
    BatchCreateResponse,
    BatchItemErrorInfo,
    ConferenceCreate,
    ConferenceInfo,
    ConferenceListResponse,
    ConferenceResponse,
    ConferenceUpdate,
    IssueCreate,
    IssueInfo,
    IssueListResponse,
    IssueResponse,
    IssueUpdate,
    VolumeCreate,
    VolumeInfo,
    VolumeListResponse,
    VolumeResponse,
    VolumeUpdate,
)
from ictirc.schemas.common import Pagination, SuccessResponse

router = APIRouter(prefix="/archive")


# ============================================================================
# Conferences
# ============================================================================


@router.get("/conferences", response_model=ConferenceListResponse)
async def list_conferences(
    archive: ArchiveServiceDep,
    published_only: bool = False,
) -> ConferenceListResponse:
    conferences = await archive.list_conferences(published_only=published_only)
    return ConferenceListResponse(
        conferences=[ConferenceInfo.model_validate(c) for c in conferences]
    )


@router.get("/conferences/{conference_id}", response_model=ConferenceResponse)
async def get_conference(conference_id: UUID, archive: ArchiveServiceDep) -> ConferenceResponse:
    conference = await archive.get_conference(conference_id)
    return ConferenceResponse(conference=ConferenceInfo.model_validate(conference))


@router.post(
    "/conferences",
    response_model=ConferenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conference(
    request: ConferenceCreate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> ConferenceResponse:
    conference = await archive.create_conference(
        identity.id, request.model_dump(), ip_address=ip_address
    )
    await db.commit()
    return ConferenceResponse(conference=ConferenceInfo.model_validate(conference))


@router.patch("/conferences/{conference_id}", response_model=ConferenceResponse)
async def update_conference(
    conference_id: UUID,
    request: ConferenceUpdate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> ConferenceResponse:
    conference = await archive.update_conference(
        identity.id, conference_id, request.model_dump(exclude_unset=True), ip_address=ip_address
    )
    await db.commit()
    return ConferenceResponse(conference=ConferenceInfo.model_validate(conference))


@router.delete("/conferences/{conference_id}", response_model=SuccessResponse)
async def delete_conference(
    conference_id: UUID,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> SuccessResponse:
    await archive.delete_conference(identity.id, conference_id, ip_address=ip_address)
    await db.commit()
    return SuccessResponse()


# ============================================================================
# Volumes
# ============================================================================


@router.get("/volumes", response_model=VolumeListResponse)
async def list_volumes(archive: ArchiveServiceDep) -> VolumeListResponse:
    volumes = await archive.list_volumes()
    return VolumeListResponse(volumes=[VolumeInfo.model_validate(v) for v in volumes])


@router.get("/volumes/{volume_id}", response_model=VolumeResponse)
async def get_volume(volume_id: UUID, archive: ArchiveServiceDep) -> VolumeResponse:
    volume = await archive.get_volume(volume_id)
    return VolumeResponse(volume=VolumeInfo.model_validate(volume))


@router.post("/volumes", response_model=VolumeResponse, status_code=status.HTTP_201_CREATED)
async def create_volume(
    request: VolumeCreate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> VolumeResponse:
    volume = await archive.create_volume(identity.id, request.model_dump(), ip_address=ip_address)
    await db.commit()
    return VolumeResponse(volume=VolumeInfo.model_validate(volume))


@router.patch("/volumes/{volume_id}", response_model=VolumeResponse)
async def update_volume(
    volume_id: UUID,
    request: VolumeUpdate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> VolumeResponse:
    volume = await archive.update_volume(
        identity.id, volume_id, request.model_dump(exclude_unset=True), ip_address=ip_address
    )
    await db.commit()
    return VolumeResponse(volume=VolumeInfo.model_validate(volume))


@router.delete("/volumes/{volume_id}", response_model=SuccessResponse)
async def delete_volume(
    volume_id: UUID,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> SuccessResponse:
    await archive.delete_volume(identity.id, volume_id, ip_address=ip_address)
    await db.commit()
    return SuccessResponse()


# ============================================================================
# Issues
# ============================================================================


@router.get("/issues", response_model=IssueListResponse)
async def list_issues(
    archive: ArchiveServiceDep,
    volume_id: Optional[UUID] = None,
    conference_id: Optional[UUID] = None,
) -> IssueListResponse:
    issues = await archive.list_issues(volume_id=volume_id, conference_id=conference_id)
    return IssueListResponse(issues=[IssueInfo.model_validate(i) for i in issues])


@router.get("/issues/{issue_id}", response_model=IssueResponse)
async def get_issue(issue_id: UUID, archive: ArchiveServiceDep) -> IssueResponse:
    issue = await archive.get_issue(issue_id)
    return IssueResponse(issue=IssueInfo.model_validate(issue))


@router.get("/issues/{issue_id}/papers", response_model=ArchivedPaperListResponse)
async def list_issue_papers(issue_id: UUID, archive: ArchiveServiceDep) -> ArchivedPaperListResponse:
    """Papers of an issue in page order; papers without a page range come last."""
    papers = await archive.list_issue_papers(issue_id)
    return ArchivedPaperListResponse(papers=[ArchivedPaperInfo.model_validate(p) for p in papers])


@router.post("/issues", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(
    request: IssueCreate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> IssueResponse:
    issue = await archive.create_issue(identity.id, request.model_dump(), ip_address=ip_address)
    await db.commit()
    return IssueResponse(issue=IssueInfo.model_validate(issue))


@router.patch("/issues/{issue_id}", response_model=IssueResponse)
async def update_issue(
    issue_id: UUID,
    request: IssueUpdate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> IssueResponse:
    issue = await archive.update_issue(
        identity.id, issue_id, request.model_dump(exclude_unset=True), ip_address=ip_address
    )
    await db.commit()
    return IssueResponse(issue=IssueInfo.model_validate(issue))


@router.delete("/issues/{issue_id}", response_model=SuccessResponse)
async def delete_issue(
    issue_id: UUID,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> SuccessResponse:
    await archive.delete_issue(identity.id, issue_id, ip_address=ip_address)
    await db.commit()
    return SuccessResponse()


# ============================================================================
# Archived papers
# ============================================================================


@router.get("/papers", response_model=ArchivedPaperListResponse)
async def search_archived_papers(
    archive: ArchiveServiceDep,
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> ArchivedPaperListResponse:
    papers, total = await archive.search_archived_papers(search=search, page=page, limit=limit)
    return ArchivedPaperListResponse(
        papers=[ArchivedPaperInfo.model_validate(p) for p in papers],
        pagination=Pagination.build(total, page, limit),
    )


@router.get("/papers/{paper_id}", response_model=ArchivedPaperResponse)
async def get_archived_paper(paper_id: UUID, archive: ArchiveServiceDep) -> ArchivedPaperResponse:
    paper = await archive.get_archived_paper(paper_id)
    return ArchivedPaperResponse(paper=ArchivedPaperInfo.model_validate(paper))


@router.post(
    "/papers",
    response_model=ArchivedPaperResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_archived_paper(
    request: ArchivedPaperCreate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> ArchivedPaperResponse:
    paper = await archive.create_archived_paper(
        identity.id, request.model_dump(), ip_address=ip_address
    )
    await db.commit()
    return ArchivedPaperResponse(paper=ArchivedPaperInfo.model_validate(paper))


@router.post("/papers/batch", response_model=BatchCreateResponse)
async def batch_create_archived_papers(
    request: BatchCreateRequest,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> BatchCreateResponse:
    """Create many archived papers; failures are reported per item and do not abort the batch."""
    result = await archive.batch_create_archived_papers(
        identity.id, [item.model_dump() for item in request.papers], ip_address=ip_address
    )
    await db.commit()
    return BatchCreateResponse(
        success=result.success,
        papers=[ArchivedPaperInfo.model_validate(p) for p in result.created],
        errors=[BatchItemErrorInfo(title=e.title, error=e.error) for e in result.errors],
    )


@router.patch("/papers/{paper_id}", response_model=ArchivedPaperResponse)
async def update_archived_paper(
    paper_id: UUID,
    request: ArchivedPaperUpdate,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> ArchivedPaperResponse:
    paper = await archive.update_archived_paper(
        identity.id, paper_id, request.model_dump(exclude_unset=True), ip_address=ip_address
    )
    await db.commit()
    return ArchivedPaperResponse(paper=ArchivedPaperInfo.model_validate(paper))


@router.delete("/papers/{paper_id}", response_model=SuccessResponse)
async def delete_archived_paper(
    paper_id: UUID,
    identity: CurrentIdentity,
    archive: ArchiveServiceDep,
    db: DbSession,
    ip_address: ClientIp,
) -> SuccessResponse:
    await archive.delete_archived_paper(identity.id, paper_id, ip_address=ip_address)
    await db.commit()
    return SuccessResponse()

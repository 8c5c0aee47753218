"""Schemas for the live paper workflow endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ictirc.models.enums import PaperStatus, UserRole
from ictirc.schemas.common import Pagination, SuccessResponse


class AuthorInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    affiliation: Optional[str] = None


class PaperAuthorInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order: int
    is_corresponding_author: bool
    author: AuthorInfo


class PaperInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    abstract: str
    keywords: list[str]
    category_id: Optional[UUID] = None
    status: PaperStatus
    doi: Optional[str] = None
    published_at: Optional[datetime] = None
    raw_file_url: Optional[str] = None
    publication_step: int = 0
    publication_note: Optional[str] = None
    authors: list[PaperAuthorInfo] = []
    created_at: datetime
    updated_at: datetime


class PaperResponse(SuccessResponse):
    paper: PaperInfo


class PaperListResponse(SuccessResponse):
    papers: list[PaperInfo]
    pagination: Pagination


class UpdateStatusRequest(BaseModel):
    status: PaperStatus


class StatusChangeResponse(SuccessResponse):
    paper: PaperInfo
    previous_status: PaperStatus


class DoiResponse(SuccessResponse):
    doi: str
    paper: PaperInfo


class RevokeDoiRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class RevokeDoiResponse(SuccessResponse):
    revoked_doi: str
    paper: PaperInfo


class DeletePaperRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class PublicationStepRequest(BaseModel):
    step: int = Field(..., ge=0)
    note: Optional[str] = Field(None, max_length=2000)


class ReviewerInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: Optional[str] = None
    role: UserRole


class ReviewerAssignmentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    paper_id: UUID
    assigned_at: datetime
    reviewer: ReviewerInfo


class AssignReviewerRequest(BaseModel):
    reviewer_id: UUID


class ReviewerAssignmentResponse(SuccessResponse):
    assignment: ReviewerAssignmentInfo


class ReviewerListResponse(SuccessResponse):
    reviewers: list[ReviewerAssignmentInfo]


class CommentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    paper_id: UUID
    content: str
    created_at: datetime
    author: ReviewerInfo


class AddCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)


class CommentResponse(SuccessResponse):
    comment: CommentInfo


class CommentListResponse(SuccessResponse):
    comments: list[CommentInfo]

"""Schemas for the archive hierarchy endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from ictirc.models.enums import PaperStatus
from ictirc.schemas.common import Pagination, SuccessResponse


# Conferences


class ConferenceCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    full_name: Optional[str] = None
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    venue: Optional[str] = Field(None, max_length=255)
    theme: Optional[str] = None
    is_published: bool = True


class ConferenceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    full_name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    venue: Optional[str] = Field(None, max_length=255)
    theme: Optional[str] = None
    is_published: Optional[bool] = None


class ConferenceInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    full_name: Optional[str] = None
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    venue: Optional[str] = None
    theme: Optional[str] = None
    is_published: bool


class ConferenceResponse(SuccessResponse):
    conference: ConferenceInfo


class ConferenceListResponse(SuccessResponse):
    conferences: list[ConferenceInfo]


# Volumes


class VolumeCreate(BaseModel):
    volume_number: int = Field(..., ge=1)
    year: int = Field(..., ge=1900, le=2100)
    description: Optional[str] = None
    cover_image_url: Optional[str] = None


class VolumeUpdate(BaseModel):
    volume_number: Optional[int] = Field(None, ge=1)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    description: Optional[str] = None
    cover_image_url: Optional[str] = None


class VolumeInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    volume_number: int
    year: int
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    created_at: datetime


class VolumeResponse(SuccessResponse):
    volume: VolumeInfo


class VolumeListResponse(SuccessResponse):
    volumes: list[VolumeInfo]


# Issues


class IssueCreate(BaseModel):
    volume_id: UUID
    conference_id: Optional[UUID] = None
    issue_number: int = Field(..., ge=1)
    month: Optional[str] = Field(None, max_length=20)
    published_date: datetime
    issn: Optional[str] = Field(None, pattern=r"^\d{4}-\d{3}[\dX]$")
    theme: Optional[str] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None


class IssueUpdate(BaseModel):
    volume_id: Optional[UUID] = None
    conference_id: Optional[UUID] = None
    issue_number: Optional[int] = Field(None, ge=1)
    month: Optional[str] = Field(None, max_length=20)
    published_date: Optional[datetime] = None
    issn: Optional[str] = Field(None, pattern=r"^\d{4}-\d{3}[\dX]$")
    theme: Optional[str] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None


class IssueInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    volume_id: UUID
    conference_id: Optional[UUID] = None
    issue_number: int
    month: Optional[str] = None
    published_date: datetime
    issn: Optional[str] = None
    theme: Optional[str] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None


class IssueResponse(SuccessResponse):
    issue: IssueInfo


class IssueListResponse(SuccessResponse):
    issues: list[IssueInfo]


# Archived papers


class ArchivedAuthorInput(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    affiliation: Optional[str] = Field(None, max_length=255)
    is_corresponding: bool = False


class ArchivedPaperCreate(BaseModel):
    issue_id: UUID
    category_id: Optional[UUID] = None
    title: str = Field(..., min_length=1)
    abstract: str = Field(..., min_length=1)
    keywords: list[str] = []
    doi: Optional[str] = None
    pdf_url: str
    docx_url: Optional[str] = None
    page_start: Optional[int] = Field(None, ge=1)
    page_end: Optional[int] = Field(None, ge=1)
    published_date: datetime
    submitted_date: Optional[datetime] = None
    accepted_date: Optional[datetime] = None
    authors: list[ArchivedAuthorInput] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_page_range(self) -> "ArchivedPaperCreate":
        if self.page_start and self.page_end and self.page_end < self.page_start:
            raise ValueError("page_end must not be before page_start")
        return self


class ArchivedPaperUpdate(BaseModel):
    issue_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    title: Optional[str] = Field(None, min_length=1)
    abstract: Optional[str] = Field(None, min_length=1)
    keywords: Optional[list[str]] = None
    doi: Optional[str] = None
    pdf_url: Optional[str] = None
    docx_url: Optional[str] = None
    page_start: Optional[int] = Field(None, ge=1)
    page_end: Optional[int] = Field(None, ge=1)
    published_date: Optional[datetime] = None
    submitted_date: Optional[datetime] = None
    accepted_date: Optional[datetime] = None
    authors: Optional[list[ArchivedAuthorInput]] = None


class ArchivedAuthorInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    email: Optional[str] = None
    affiliation: Optional[str] = None
    order: int
    is_corresponding: bool


class ArchivedPaperInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    issue_id: UUID
    category_id: Optional[UUID] = None
    title: str
    abstract: str
    keywords: list[str]
    doi: Optional[str] = None
    pdf_url: str
    docx_url: Optional[str] = None
    page_start: Optional[int] = None
    page_end: Optional[int] = None
    published_date: datetime
    submitted_date: Optional[datetime] = None
    accepted_date: Optional[datetime] = None
    status: PaperStatus
    authors: list[ArchivedAuthorInfo] = []
    uploaded_at: datetime


class ArchivedPaperResponse(SuccessResponse):
    paper: ArchivedPaperInfo


class ArchivedPaperListResponse(SuccessResponse):
    papers: list[ArchivedPaperInfo]
    pagination: Optional[Pagination] = None


class BatchCreateRequest(BaseModel):
    papers: list[ArchivedPaperCreate] = Field(..., min_length=1, max_length=200)


class BatchItemErrorInfo(BaseModel):
    title: Optional[str] = None
    error: str


class BatchCreateResponse(SuccessResponse):
    papers: list[ArchivedPaperInfo]
    errors: list[BatchItemErrorInfo] = []

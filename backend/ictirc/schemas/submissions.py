"""Schemas for manuscript submission."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ictirc.schemas.common import SuccessResponse


class SubmissionAuthor(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    affiliation: str = Field(..., min_length=2, max_length=200)


class PaperSubmission(BaseModel):
    """Structured part of a submission; the manuscript file travels separately."""

    title: str = Field(..., min_length=10, max_length=300)
    abstract: str = Field(..., min_length=100)
    keywords: list[str] = Field(..., min_length=3)
    category_id: UUID
    authors: list[SubmissionAuthor] = Field(..., min_length=1, max_length=10)

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        return [k.strip() for k in value if k and k.strip()]

    @field_validator("authors")
    @classmethod
    def unique_author_emails(cls, value: list[SubmissionAuthor]) -> list[SubmissionAuthor]:
        seen: set[str] = set()
        for author in value:
            email = str(author.email).lower()
            if email in seen:
                raise ValueError(f"Duplicate author email: {email}")
            seen.add(email)
        return value


class SubmissionResponse(SuccessResponse):
    paper_id: UUID


class CategoryInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: Optional[str] = None


class CategoryListResponse(SuccessResponse):
    categories: list[CategoryInfo]

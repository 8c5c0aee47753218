"""Common schemas used across the application."""

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Base for successful responses."""

    success: bool = True


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, total_pages=(total + limit - 1) // limit)

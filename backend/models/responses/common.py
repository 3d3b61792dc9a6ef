from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PagePagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    @classmethod
    def for_slice(cls, page: int, limit: int, total: int) -> "PagePagination":
        offset = (page - 1) * limit
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=-(-total // limit),
            has_next=offset + limit < total,
            has_prev=page > 1,
        )


class OffsetPagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    limit: int
    offset: int
    total: Optional[int] = None
    has_more: bool = Field(alias="hasMore")


class SuccessResult(BaseModel):
    success: bool
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

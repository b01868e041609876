"""
Shared Pydantic Schemas

Small schemas embedded in several responses:
- PaginationMeta: the pagination block of every list response
- BookMinimal: just enough book data to identify a book inside a review
"""

from pydantic import BaseModel, ConfigDict, Field


class PaginationMeta(BaseModel):
    """
    Pagination metadata returned next to `items`.

    Example:
        {"current": 2, "pages": 5, "total": 47, "limit": 10}
    """

    current: int = Field(..., ge=1, description="Current page number")
    pages: int = Field(..., ge=0, description="Total number of pages")
    total: int = Field(..., ge=0, description="Total number of matching items")
    limit: int = Field(..., ge=1, description="Items per page")


class BookMinimal(BaseModel):
    """Minimal book info for embedding in review and wishlist responses."""

    id: int = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    cover_image: str | None = Field(default=None, description="Cover image URL")
    average_rating: float = Field(default=0.0, description="Average review rating")

    model_config = ConfigDict(from_attributes=True)

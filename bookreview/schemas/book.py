"""
Book Pydantic Schemas

Handles:
- ISBN validation (ISBN-10 or ISBN-13, stored without hyphens)
- Genre and availability enumerations
- Price validation
- Pagination for list responses
"""

import re
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookreview.models.book import Availability, BookGenre
from bookreview.schemas.common import PaginationMeta
from bookreview.schemas.user import UserPublicResponse


def normalize_isbn(v: str | None) -> str | None:
    """
    Validate ISBN format and strip hyphens and spaces.

    Accepts:
    - ISBN-10: 9 digits followed by a digit or 'X'
    - ISBN-13: 13 digits
    """
    if v is None:
        return v

    cleaned = re.sub(r"[-\s]", "", v).upper()
    if not cleaned:
        return None

    if len(cleaned) == 10:
        if not re.match(r"^\d{9}[\dX]$", cleaned):
            raise ValueError(
                "Invalid ISBN-10 format. Must be 10 characters: "
                "9 digits followed by a digit or 'X'"
            )
    elif len(cleaned) == 13:
        if not cleaned.isdigit():
            raise ValueError("Invalid ISBN-13 format. Must be exactly 13 digits")
    else:
        raise ValueError(
            "ISBN must be either 10 or 13 characters (excluding hyphens)"
        )

    return cleaned


def _strip_items(items: list[str], max_length: int, label: str) -> list[str]:
    cleaned = [item.strip() for item in items if item and item.strip()]
    for item in cleaned:
        if len(item) > max_length:
            raise ValueError(f"Each {label} must be at most {max_length} characters")
    return cleaned


class BookBase(BaseModel):
    """
    Base schema with shared book fields.

    Contains validation for:
    - ISBN format (ISBN-10 or ISBN-13)
    - Price (must not be negative)
    - Page count (must be positive)
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Book title",
        examples=["Dune", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Author name",
        examples=["Frank Herbert"],
    )

    isbn: str | None = Field(
        default=None,
        max_length=20,
        description="ISBN-10 or ISBN-13",
        examples=["978-0441013593", "0-441-01359-7"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Book description or summary",
    )

    genre: BookGenre = Field(..., description="Primary genre", examples=["Sci-Fi"])

    sub_genres: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    published_date: date | None = Field(default=None, examples=["1965-08-01"])
    publisher: str | None = Field(default=None, max_length=100)

    page_count: int = Field(
        ...,
        ge=1,
        le=50000,
        description="Number of pages",
        examples=[412],
    )

    language: str = Field(default="English", max_length=50)
    cover_image: str | None = Field(default=None, description="Cover image URL")

    price_amount: Decimal | None = Field(
        default=None,
        ge=0,
        le=Decimal("9999.99"),
        description="Book price",
        examples=["12.99"],
    )
    price_currency: str = Field(default="USD", min_length=3, max_length=3)

    availability: Availability = Field(default=Availability.AVAILABLE)

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str | None) -> str | None:
        return normalize_isbn(v)

    @field_validator("title", "author", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Validate and normalize required text fields."""
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace")
        return v.strip()

    @field_validator("tags", "sub_genres")
    @classmethod
    def clean_lists(cls, v: list[str]) -> list[str]:
        return _strip_items(v, 50, "entry")


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "isbn": "978-0441013593",
        "description": "Desert planet, spice and politics.",
        "genre": "Sci-Fi",
        "page_count": 412
    }
    """

    pass


class BookUpdate(BaseModel):
    """
    Schema for updating a book.

    All fields are optional; only provided fields are changed.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    author: str | None = Field(default=None, min_length=1, max_length=100)
    isbn: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    genre: BookGenre | None = None
    sub_genres: list[str] | None = None
    tags: list[str] | None = None
    published_date: date | None = None
    publisher: str | None = Field(default=None, max_length=100)
    page_count: int | None = Field(default=None, ge=1, le=50000)
    language: str | None = Field(default=None, max_length=50)
    cover_image: str | None = None
    price_amount: Decimal | None = Field(default=None, ge=0, le=Decimal("9999.99"))
    price_currency: str | None = Field(default=None, min_length=3, max_length=3)
    availability: Availability | None = None

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str | None) -> str | None:
        return normalize_isbn(v)


class BookResponse(BaseModel):
    """
    Schema for book responses.

    Includes the derived rating fields and the user who added the book.
    """

    id: int
    title: str
    author: str
    isbn: str | None = None
    description: str
    genre: str
    sub_genres: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    published_date: date | None = None
    publisher: str | None = None
    page_count: int
    language: str
    cover_image: str | None = None
    price_amount: Decimal | None = None
    price_currency: str
    availability: str

    average_rating: float = Field(..., ge=0, le=5, description="Mean rating, one decimal")
    ratings_count: int = Field(..., ge=0, description="Number of reviews")

    featured: bool
    verified: bool

    added_by: UserPublicResponse | None = None

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookListResponse(BaseModel):
    """
    Schema for paginated book list responses.

    Example:
        {"items": [...], "pagination": {"current": 1, "pages": 3, "total": 30, "limit": 12}}
    """

    items: list[BookResponse] = Field(..., description="Books on this page")
    pagination: PaginationMeta


class FeaturedToggleResponse(BaseModel):
    message: str
    featured: bool

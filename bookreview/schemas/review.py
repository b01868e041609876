"""
Review Pydantic Schemas

Schemas for book reviews, their social data and per-book rating views.

Schemas:
- ReviewCreate / ReviewCreateWithBook: Create a review (book in path or body)
- ReviewUpdate: Partial update of an existing review
- ReviewResponse: Full review data including derived counters
- ReviewListResponse: Paginated list of reviews
- BookDetailResponse: Book page (book, reviews, caller's review, histogram)
- BookRatingStats: Aggregate rating view of one book
- LikeResponse / HelpfulVoteRequest / HelpfulVoteResponse: toggles

Business Rules:
- Rating must be 1-5 (validated at schema level)
- One review per user per book (enforced at database level)
- Users can only edit their own reviews
"""

from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bookreview.models.review import ReadingProgress
from bookreview.schemas.book import BookResponse
from bookreview.schemas.common import BookMinimal, PaginationMeta
from bookreview.schemas.user import UserPublicResponse

PRO_CON_MAX_LENGTH = 200
RECOMMENDED_FOR_MAX_LENGTH = 100


def _clean_list(items: list[str] | None, max_length: int) -> list[str] | None:
    if items is None:
        return None
    cleaned = [item.strip() for item in items if item and item.strip()]
    for item in cleaned:
        if len(item) > max_length:
            raise ValueError(f"Each entry must be at most {max_length} characters")
    return cleaned


class ReviewFieldsMixin(BaseModel):
    """Validators shared by create and update schemas."""

    @field_validator("title", "content", check_fields=False)
    @classmethod
    def text_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty or whitespace")
        return v

    @field_validator("pros", "cons", check_fields=False)
    @classmethod
    def clean_pros_cons(cls, v: list[str] | None) -> list[str] | None:
        return _clean_list(v, PRO_CON_MAX_LENGTH)

    @field_validator("recommended_for", check_fields=False)
    @classmethod
    def clean_recommended_for(cls, v: list[str] | None) -> list[str] | None:
        return _clean_list(v, RECOMMENDED_FOR_MAX_LENGTH)

    @model_validator(mode="after")
    def end_not_before_start(self) -> Self:
        start = getattr(self, "reading_start_date", None)
        end = getattr(self, "reading_end_date", None)
        if start is not None and end is not None and end < start:
            raise ValueError("reading_end_date cannot be before reading_start_date")
        return self


class ReviewCreate(ReviewFieldsMixin):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "title": "Amazing book!",
        "content": "One of the best books I've ever read...",
        "pros": ["World building"],
        "cons": ["Slow start"]
    }
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )
    title: str = Field(..., min_length=1, max_length=100, examples=["A masterpiece!"])
    content: str = Field(..., min_length=1, max_length=2000)

    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    recommended_for: list[str] = Field(default_factory=list)

    spoiler_warning: bool = False
    reading_progress: ReadingProgress = ReadingProgress.COMPLETED
    reading_start_date: date | None = None
    reading_end_date: date | None = None


class ReviewCreateWithBook(ReviewCreate):
    """Review creation where the book is named in the body (POST /reviews)."""

    book_id: int = Field(..., ge=1, description="ID of the reviewed book")


class ReviewUpdate(ReviewFieldsMixin):
    """
    Schema for updating an existing review.

    All fields are optional for partial updates.
    """

    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    content: str | None = Field(default=None, min_length=1, max_length=2000)
    pros: list[str] | None = None
    cons: list[str] | None = None
    recommended_for: list[str] | None = None
    spoiler_warning: bool | None = None
    reading_progress: ReadingProgress | None = None
    reading_start_date: date | None = None
    reading_end_date: date | None = None


class ReviewEditResponse(BaseModel):
    edited_at: datetime
    previous_content: str

    model_config = ConfigDict(from_attributes=True)


class ReviewResponse(BaseModel):
    """
    Schema for review responses.

    Includes:
    - Review data (rating, title, content, lists, reading dates)
    - Derived counters (likes, helpful votes, helpfulness score)
    - Append-only edit history
    - Nested reviewer and book info
    """

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_id: int = Field(..., description="ID of the user who wrote the review")

    rating: int
    title: str
    content: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    recommended_for: list[str] = Field(default_factory=list)
    spoiler_warning: bool
    reading_progress: str
    reading_start_date: date | None = None
    reading_end_date: date | None = None
    reading_duration: int | None = Field(default=None, description="Days spent reading")

    verified: bool
    flagged: bool

    likes_count: int = Field(default=0, description="Number of likes")
    helpful_votes_count: int = Field(default=0, description="Votes marking the review helpful")
    total_votes: int = Field(default=0, description="All helpfulness votes")
    helpfulness_score: float = Field(default=0.0, description="Helpful votes as a percentage")

    edit_history: list[ReviewEditResponse] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime

    user: UserPublicResponse = Field(..., description="User who wrote the review")
    book: BookMinimal = Field(..., description="Book being reviewed")

    model_config = ConfigDict(from_attributes=True)


class ReviewListResponse(BaseModel):
    """Schema for paginated review list responses."""

    items: list[ReviewResponse]
    pagination: PaginationMeta


class BookDetailResponse(BaseModel):
    """
    Book page: the book, one page of its reviews, the caller's own review
    (when authenticated) and the rating histogram.
    """

    book: BookResponse
    reviews: list[ReviewResponse]
    user_review: ReviewResponse | None = None
    reviews_count: int
    rating_distribution: dict[int, int]
    pagination: PaginationMeta


class BookRatingStats(BaseModel):
    """
    Aggregate rating view of a book.

    rating_distribution maps each star value (1-5) to its review count.
    """

    book_id: int
    average_rating: float
    total_reviews: int
    rating_distribution: dict[int, int]


class LikeResponse(BaseModel):
    message: str
    likes_count: int
    is_liked: bool


class HelpfulVoteRequest(BaseModel):
    is_helpful: bool = Field(..., description="True if the review was helpful")


class HelpfulVoteResponse(BaseModel):
    message: str
    helpful_votes: int
    total_votes: int
    helpfulness_score: float

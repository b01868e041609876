"""
Review Model

Represents a user's review of a book, plus the per-review social data:
likes, helpfulness votes and edit history.

Business Rules:
- One review per user per book (unique constraint)
- Rating must be 1-5
- At most one like and one helpfulness vote per user per review
- Edit history is append-only: each content change records the previous text
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base

if TYPE_CHECKING:
    from bookreview.models.book import Book
    from bookreview.models.user import User


class ReadingProgress(str, Enum):
    COMPLETED = "completed"
    CURRENTLY_READING = "currently-reading"
    DID_NOT_FINISH = "dnf"


review_likes = Table(
    "review_likes",
    Base.metadata,
    Column(
        "review_id",
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Users who liked each review",
)


class Review(Base):
    """
    Review model for book reviews.

    Attributes:
        book_id / user_id: the reviewed book and its reviewer (unique pair)
        rating: 1-5 star rating
        title, content: required review text
        pros, cons, recommended_for: optional short string lists
        reading_progress: completed, currently-reading or dnf
        liked_by: users who liked the review
        helpful_votes: one HelpfulVote per voting user
        edit_history: previous versions of the content
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    pros: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    cons: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    recommended_for: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    spoiler_warning: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reading_progress: Mapped[str] = mapped_column(
        String(20),
        default=ReadingProgress.COMPLETED.value,
        nullable=False,
    )
    reading_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    reading_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Moderation fields
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    flagged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")

    liked_by: Mapped[list["User"]] = relationship("User", secondary=review_likes)

    helpful_votes: Mapped[list["HelpfulVote"]] = relationship(
        "HelpfulVote",
        back_populates="review",
        cascade="all, delete-orphan",
    )

    edit_history: Mapped[list["ReviewEdit"]] = relationship(
        "ReviewEdit",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="ReviewEdit.edited_at",
    )

    __table_args__ = (
        UniqueConstraint("book_id", "user_id", name="uq_review_book_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    # -------------------------------------------------------------------------
    # Derived values (read-only, exposed through ReviewResponse)
    # -------------------------------------------------------------------------
    @property
    def likes_count(self) -> int:
        return len(self.liked_by)

    @property
    def helpful_votes_count(self) -> int:
        return sum(1 for vote in self.helpful_votes if vote.is_helpful)

    @property
    def total_votes(self) -> int:
        return len(self.helpful_votes)

    @property
    def helpfulness_score(self) -> float:
        """Percentage of votes that marked the review helpful, 0 with no votes."""
        if not self.helpful_votes:
            return 0.0
        return self.helpful_votes_count / self.total_votes * 100

    @property
    def reading_duration(self) -> int | None:
        """Days between starting and finishing the book, if both are known."""
        if self.reading_start_date is None or self.reading_end_date is None:
            return None
        return (self.reading_end_date - self.reading_start_date).days

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})>"


class HelpfulVote(Base):
    """A single user's helpful / not-helpful vote on a review."""

    __tablename__ = "review_helpful_votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_helpful: Mapped[bool] = mapped_column(Boolean, nullable=False)

    review: Mapped["Review"] = relationship("Review", back_populates="helpful_votes")

    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="uq_helpful_vote_review_user"),
    )


class ReviewEdit(Base):
    """Previous content of a review, recorded when the content changes."""

    __tablename__ = "review_edits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    edited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    previous_content: Mapped[str] = mapped_column(Text, nullable=False)

    review: Mapped["Review"] = relationship("Review", back_populates="edit_history")

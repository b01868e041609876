"""
Book Model

The catalog entry at the center of the Book Review API.

A book belongs to exactly one genre from a fixed enumeration (BookGenre).
Two fields are derived rather than edited directly:
- average_rating: mean review rating, rounded to one decimal (0 with no reviews)
- ratings_count: number of reviews

Both are recomputed by services.ratings.recalculate_book_rating after every
review create, update or delete.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base
from bookreview.models.user import user_books_read, user_wishlist

if TYPE_CHECKING:
    from bookreview.models.review import Review
    from bookreview.models.user import User


class BookGenre(str, Enum):
    """Genres a book (or a user's favorites) can take."""
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCI_FI = "Sci-Fi"
    FANTASY = "Fantasy"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SELF_HELP = "Self-Help"
    POETRY = "Poetry"


class Availability(str, Enum):
    AVAILABLE = "Available"
    OUT_OF_STOCK = "Out of Stock"
    COMING_SOON = "Coming Soon"


class Book(Base):
    """
    Book model representing catalog entries.

    Table: books

    Relationships:
    - added_by: the user who submitted the book (owner)
    - reviews: One-to-Many, deleted together with the book
    - readers / wishlisted_by: users who list this book

    Indexes:
    - isbn: unique (NULLs allowed, so several books may have no ISBN)
    - genre, average_rating, created_at: filtering and sorting

    Example:
        book = Book(
            title="Dune",
            author="Frank Herbert",
            description="Desert planet, spice, politics.",
            genre=BookGenre.SCI_FI.value,
            page_count=412,
            added_by_id=user.id,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(200),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Author name as printed on the cover"
    )

    isbn: Mapped[str | None] = mapped_column(
        String(13),
        unique=True,
        index=True,
        nullable=True,
        comment="ISBN-10 or ISBN-13, digits only"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    genre: Mapped[str] = mapped_column(
        String(20),
        index=True,
        nullable=False,
        comment="One of the BookGenre values"
    )

    sub_genres: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    published_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(100), nullable=True)

    page_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Number of pages in the book"
    )

    language: Mapped[str] = mapped_column(String(50), default="English", nullable=False)
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Numeric(10, 2) for currency; Decimal avoids float rounding on prices
    price_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    price_currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    availability: Mapped[str] = mapped_column(
        String(20),
        default=Availability.AVAILABLE.value,
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Derived Rating Fields
    # -------------------------------------------------------------------------
    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        index=True,
        nullable=False,
        comment="Mean review rating rounded to one decimal, 0 without reviews"
    )

    ratings_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Number of reviews for this book"
    )

    # -------------------------------------------------------------------------
    # Moderation / Curation
    # -------------------------------------------------------------------------
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    added_by_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        index=True,
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        index=True,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    added_by: Mapped["User"] = relationship("User", back_populates="added_books")

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    readers: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_books_read,
        back_populates="books_read",
    )

    wishlisted_by: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_wishlist,
        back_populates="wishlist",
    )

    __table_args__ = (
        CheckConstraint("page_count >= 1", name="ck_book_page_count_positive"),
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_book_average_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"

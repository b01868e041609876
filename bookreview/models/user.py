"""
User Model

Represents a registered reader, including the user-owned sets of the
social graph: books read, wishlist, and followers/following.

Set-valued fields are association tables rather than arrays:
- user_books_read: books the user has read (added when they review a book)
- user_wishlist: books the user wants to read
- follows: one row per (follower, followed) pair

A single follows row backs both User.following and User.followers, so the
two sides of a follow can never disagree.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base

if TYPE_CHECKING:
    from bookreview.models.book import Book
    from bookreview.models.review import Review


# =============================================================================
# Association Tables
# =============================================================================

user_books_read = Table(
    "user_books_read",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "book_id",
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Books each user has read",
)

user_wishlist = Table(
    "user_wishlist",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "book_id",
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Books each user wants to read",
)

follows = Table(
    "follows",
    Base.metadata,
    Column(
        "follower_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "followed_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    CheckConstraint("follower_id <> followed_id", name="ck_follows_not_self"),
    comment="Directed follow edges between users",
)


class User(Base):
    """
    User model representing registered readers.

    Table: users

    Relationships:
    - reviews: One-to-Many with Review
    - books_read / wishlist: Many-to-Many with Book
    - following / followers: self-referential Many-to-Many through follows
    - added_books: books this user added to the catalog

    Example:
        user = User(
            email="jane@example.com",
            username="janedoe",
            hashed_password=hash_password("secret123"),
            first_name="Jane",
            last_name="Doe",
            favorite_genres=["Fantasy", "Mystery"],
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    username: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique username for profile URLs"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)

    bio: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="User biography"
    )

    avatar_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL to user's avatar image"
    )

    # Subset of BookGenre values, validated at the schema layer
    favorite_genres: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="Genres the user declared as favorites"
    )

    reading_goal: Mapped[int] = mapped_column(
        Integer,
        default=12,
        nullable=False,
        comment="Books the user plans to read this year"
    )

    # -------------------------------------------------------------------------
    # Account Status
    # -------------------------------------------------------------------------
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_superuser: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Whether user has admin privileges"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
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

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    added_books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="added_by",
    )

    books_read: Mapped[list["Book"]] = relationship(
        "Book",
        secondary=user_books_read,
        back_populates="readers",
    )

    wishlist: Mapped[list["Book"]] = relationship(
        "Book",
        secondary=user_wishlist,
        back_populates="wishlisted_by",
    )

    following: Mapped[list["User"]] = relationship(
        "User",
        secondary=follows,
        primaryjoin=lambda: User.id == follows.c.follower_id,
        secondaryjoin=lambda: User.id == follows.c.followed_id,
        back_populates="followers",
    )

    followers: Mapped[list["User"]] = relationship(
        "User",
        secondary=follows,
        primaryjoin=lambda: User.id == follows.c.followed_id,
        secondaryjoin=lambda: User.id == follows.c.follower_id,
        back_populates="following",
    )

    __table_args__ = (
        CheckConstraint(
            "reading_goal >= 0 AND reading_goal <= 365",
            name="ck_user_reading_goal_range",
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}', username='{self.username}')"

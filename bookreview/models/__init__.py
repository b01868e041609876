"""
SQLAlchemy Models Package

Model Relationships:
- User -> Book: One-to-Many (added_by, the catalog entry's owner)
- Book -> Review: One-to-Many (reviews are deleted with their book)
- User -> Review: One-to-Many (at most one review per book)
- User <-> Book: Many-to-Many twice (books_read, wishlist)
- User <-> User: Many-to-Many through follows (following/followers)
- Review <-> User: Many-to-Many through review_likes

Import all models here so they register with Base.metadata before
create_all() or Alembic autogenerate runs.
"""

from bookreview.models.user import User, follows, user_books_read, user_wishlist
from bookreview.models.book import Availability, Book, BookGenre
from bookreview.models.review import (
    HelpfulVote,
    ReadingProgress,
    Review,
    ReviewEdit,
    review_likes,
)

__all__ = [
    "User",
    "follows",
    "user_books_read",
    "user_wishlist",
    "Book",
    "BookGenre",
    "Availability",
    "Review",
    "ReviewEdit",
    "HelpfulVote",
    "ReadingProgress",
    "review_likes",
]

"""
Recommendations Service

Content-based book selection driven by genres and the rating aggregates:

1. Personal recommendations: highly rated books in the genres a user reads
   or has declared as favorites, excluding books they have already read.
2. Trending: highly rated books added in the last 30 days.
3. Featured: books flagged by an administrator.

The thresholds and result sizes are fixed policy, not settings.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookreview.models import Book, User

logger = logging.getLogger(__name__)

RECOMMENDATION_MIN_RATING = 4
RECOMMENDATION_MIN_RATINGS_COUNT = 5
RECOMMENDATION_LIMIT = 12

TRENDING_WINDOW = timedelta(days=30)
TRENDING_MIN_RATING = 4
TRENDING_MIN_RATINGS_COUNT = 3
TRENDING_LIMIT = 10

FEATURED_LIMIT = 8


def candidate_genres(user: User) -> list[str]:
    """
    Genres to recommend from: the user's favorites followed by the genres
    of books they have read, without duplicates.
    """
    genres = list(user.favorite_genres or [])
    genres.extend(book.genre for book in user.books_read)
    return list(dict.fromkeys(genres))


def recommend_books(db: Session, user: User) -> list[Book]:
    """
    Recommend unread books in the user's genres.

    Algorithm:
    1. Candidate genres = favorite genres ∪ genres of books read
    2. Keep books in those genres that the user has not read
    3. Require average_rating >= 4 and ratings_count >= 5
    4. Order by average_rating desc, then ratings_count desc
    5. Return at most 12

    No fallback: a user with no favorites and no reading history gets [].

    Args:
        db: Database session
        user: The user to recommend for

    Returns:
        List of recommended Book instances
    """
    genres = candidate_genres(user)
    if not genres:
        return []

    read_ids = [book.id for book in user.books_read]

    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(Book.genre.in_(genres))
        .where(Book.average_rating >= RECOMMENDATION_MIN_RATING)
        .where(Book.ratings_count >= RECOMMENDATION_MIN_RATINGS_COUNT)
        .order_by(Book.average_rating.desc(), Book.ratings_count.desc())
        .limit(RECOMMENDATION_LIMIT)
    )
    if read_ids:
        stmt = stmt.where(Book.id.not_in(read_ids))

    books = list(db.execute(stmt).scalars().all())
    logger.debug(f"Recommended {len(books)} books for user {user.id} from genres {genres}")
    return books


def get_trending_books(db: Session, now: datetime | None = None) -> list[Book]:
    """
    Books added within the trending window with strong ratings.

    Args:
        db: Database session
        now: Reference time (defaults to the current UTC time)
    """
    since = (now or datetime.now(UTC)) - TRENDING_WINDOW
    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(Book.created_at >= since)
        .where(Book.average_rating >= TRENDING_MIN_RATING)
        .where(Book.ratings_count >= TRENDING_MIN_RATINGS_COUNT)
        .order_by(Book.average_rating.desc(), Book.ratings_count.desc())
        .limit(TRENDING_LIMIT)
    )
    return list(db.execute(stmt).scalars().all())


def get_featured_books(db: Session) -> list[Book]:
    """Featured books, best rated first, newest first among ties."""
    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(Book.featured.is_(True))
        .order_by(Book.average_rating.desc(), Book.created_at.desc())
        .limit(FEATURED_LIMIT)
    )
    return list(db.execute(stmt).scalars().all())

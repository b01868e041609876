"""
Reading Statistics Service

Aggregations over a user's reviews, joined to the reviewed books:
- totals (reviews, average rating given, pages read)
- genre distribution
- monthly progress for the current year
- progress toward the user's yearly reading goal
"""

from collections import Counter
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.models import Book, Review, User


def goal_progress(books_read: int, reading_goal: int) -> int:
    """
    Percentage of the reading goal reached, rounded half-up.

    1 book against a goal of 8 is 12.5%, reported as 13. A goal of 0
    reports 0.
    """
    if not reading_goal:
        return 0
    percent = Decimal(books_read * 100) / Decimal(reading_goal)
    return int(percent.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def profile_stats(db: Session, user: User) -> dict[str, Any]:
    """Counters shown on a user's public profile."""
    total_reviews, avg_rating = db.execute(
        select(func.count(Review.id), func.avg(Review.rating))
        .where(Review.user_id == user.id)
    ).one()

    return {
        "books_read": len(user.books_read),
        "reviews": total_reviews,
        "average_rating": float(avg_rating) if avg_rating is not None else 0.0,
        "followers": len(user.followers),
        "following": len(user.following),
        "wishlist_books": len(user.wishlist),
    }


def get_reading_stats(
    db: Session,
    user: User,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Build the reading statistics for a user.

    Args:
        db: Database session
        user: The user whose reviews are aggregated
        now: Reference time for the "current year" (defaults to now, UTC)

    Returns:
        Dictionary matching schemas.user.ReadingStatsResponse
    """
    now = now or datetime.now(UTC)

    total_reviews, avg_rating, total_pages = db.execute(
        select(
            func.count(Review.id),
            func.avg(Review.rating),
            func.coalesce(func.sum(Book.page_count), 0),
        )
        .join(Book, Review.book_id == Book.id)
        .where(Review.user_id == user.id)
    ).one()

    genre_rows = db.execute(
        select(
            Book.genre,
            func.count(Review.id).label("count"),
            func.avg(Review.rating).label("average_rating"),
        )
        .join(Book, Review.book_id == Book.id)
        .where(Review.user_id == user.id)
        .group_by(Book.genre)
        .order_by(func.count(Review.id).desc(), Book.genre)
    ).all()

    # Month bucketing in Python keeps this portable across PostgreSQL and SQLite
    created = db.execute(
        select(Review.created_at).where(Review.user_id == user.id)
    ).scalars().all()
    per_month = Counter(ts.month for ts in created if ts.year == now.year)

    books_read = len(user.books_read)
    progress = goal_progress(books_read, user.reading_goal)

    return {
        "books_read": books_read,
        "reading_goal": user.reading_goal,
        "total_reviews": total_reviews,
        "average_rating": float(avg_rating) if avg_rating is not None else 0.0,
        "total_pages": int(total_pages),
        "genre_distribution": [
            {
                "genre": genre,
                "count": count,
                "average_rating": float(average),
            }
            for genre, count, average in genre_rows
        ],
        "monthly_progress": [
            {"month": month, "books_read": per_month[month]}
            for month in sorted(per_month)
        ],
        "progress_percentage": progress,
    }

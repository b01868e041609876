"""
Ratings Service

Maintains the denormalized rating fields on the Book model:
- average_rating: mean of all review ratings, rounded half-up to one decimal
- ratings_count: number of reviews

These fields are recomputed from scratch whenever a review is created,
updated or deleted. The recompute runs inside the caller's transaction and
does not commit: the router commits the review write and the new aggregate
together, so readers never see one without the other.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreview.models import Book, Review

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def round_average(total: int, count: int) -> float:
    """
    Mean of `count` ratings summing to `total`, rounded half-up to one decimal.

    Uses Decimal so that e.g. 13 / 4 = 3.25 rounds to 3.3 rather than
    float's banker's rounding to 3.2.

    Returns:
        The rounded mean, or 0.0 when count is 0
    """
    if count == 0:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_rating_aggregate(ratings: Iterable[int]) -> tuple[float, int]:
    """
    Aggregate a collection of ratings into (average_rating, ratings_count).

    Example:
        >>> compute_rating_aggregate([5, 4, 3])
        (4.0, 3)
        >>> compute_rating_aggregate([])
        (0.0, 0)
    """
    values = list(ratings)
    return round_average(sum(values), len(values)), len(values)


def rating_distribution(db: Session, book_id: int) -> dict[int, int]:
    """Count of reviews per star value (1-5) for a book."""
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    stmt = (
        select(Review.rating, func.count(Review.id))
        .where(Review.book_id == book_id)
        .group_by(Review.rating)
    )
    for rating, count in db.execute(stmt).all():
        distribution[rating] = count
    return distribution


def recalculate_book_rating(db: Session, book_id: int) -> Book | None:
    """
    Recalculate and update a book's rating aggregations.

    Called after any review create/update/delete. Pending review changes
    are flushed first so the aggregate query sees them.

    Args:
        db: Database session
        book_id: ID of the book to update

    Returns:
        The updated Book, or None if the book no longer exists

    Note:
        This function does not commit. Errors propagate to the caller.
    """
    db.flush()

    stmt = select(
        func.coalesce(func.sum(Review.rating), 0),
        func.count(Review.id),
    ).where(Review.book_id == book_id)
    total, count = db.execute(stmt).one()

    book = db.get(Book, book_id)
    if book is None:
        return None

    book.average_rating = round_average(int(total), int(count))
    book.ratings_count = int(count)
    db.flush()

    logger.debug(
        f"Book {book_id} rating recalculated: "
        f"{book.average_rating} from {book.ratings_count} reviews"
    )
    return book


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books and commit.

    Useful for data repairs after imports or manual edits.

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    for book_id in book_ids:
        recalculate_book_rating(db, book_id)

    db.commit()
    return len(book_ids)

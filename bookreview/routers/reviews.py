"""
Reviews Router

Endpoints for book reviews and their social actions.

Endpoints:
- GET /reviews - List reviews (filter by book, user, rating)
- POST /reviews - Create a review for the book named in the body
- GET /books/{book_id}/reviews - List reviews for a book
- POST /books/{book_id}/reviews - Create a review for a book
- GET /books/{book_id}/rating - Get book rating statistics
- GET /reviews/{review_id} - Get a specific review
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner or superuser)
- POST /reviews/{review_id}/like - Like / unlike a review
- POST /reviews/{review_id}/helpful - Vote on a review's helpfulness
- GET /users/{user_id}/reviews - Get reviews by a user

Business Rules:
- One review per user per book
- Only the review author can update their review
- Only the review author or superusers can delete a review
- Every create, update and delete recalculates the book's rating in the
  same transaction as the review write
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from bookreview.config import get_settings
from bookreview.dependencies import (
    ActiveUser,
    DbSession,
    Pagination,
    get_book_or_404,
    get_review_or_404,
    get_user_or_404,
)
from bookreview.models import Book, HelpfulVote, Review, ReviewEdit, User
from bookreview.schemas.review import (
    BookRatingStats,
    HelpfulVoteRequest,
    HelpfulVoteResponse,
    LikeResponse,
    ReviewCreate,
    ReviewCreateWithBook,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreview.services.rate_limiter import limiter
from bookreview.services.ratings import rating_distribution, recalculate_book_rating
from bookreview.services.social import mark_book_read, record_helpful_vote, toggle_like

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)

ReviewSortField = Literal["created_at", "rating", "helpful"]
SortOrder = Literal["asc", "desc"]


# =============================================================================
# Helper Functions
# =============================================================================


def review_select():
    """Base review query with everything ReviewResponse needs loaded."""
    return select(Review).options(
        selectinload(Review.user),
        selectinload(Review.book),
        selectinload(Review.liked_by),
        selectinload(Review.helpful_votes),
        selectinload(Review.edit_history),
    )


def review_order(sort_by: str, order: str):
    """ORDER BY clauses for the review list sort options."""
    if sort_by == "helpful":
        column = (
            select(func.count(HelpfulVote.id))
            .where(HelpfulVote.review_id == Review.id)
            .where(HelpfulVote.is_helpful.is_(True))
            .correlate(Review)
            .scalar_subquery()
        )
    elif sort_by == "rating":
        column = Review.rating
    else:
        column = Review.created_at

    if order == "asc":
        return column.asc(), Review.id.asc()
    return column.desc(), Review.id.desc()


def list_reviews_page(
    db: Session,
    pagination: Pagination,
    *conditions,
    sort_by: str = "created_at",
    order: str = "desc",
) -> ReviewListResponse:
    """Count and fetch one page of reviews matching `conditions`."""
    count_stmt = select(func.count(Review.id)).where(*conditions)
    total = db.execute(count_stmt).scalar() or 0

    stmt = (
        review_select()
        .where(*conditions)
        .order_by(*review_order(sort_by, order))
        .offset(pagination.skip)
        .limit(pagination.limit)
    )
    reviews = db.execute(stmt).scalars().all()

    return ReviewListResponse(
        items=[ReviewResponse.model_validate(r) for r in reviews],
        pagination=pagination.meta(total),
    )


def create_review_for_book(
    db: Session,
    book: Book,
    user: User,
    review_data: ReviewCreate,
) -> Review:
    """
    Create a review, mark the book as read and recalculate the book rating,
    all in one commit.

    Raises:
        HTTPException: 400 if the user already reviewed this book
    """
    existing_stmt = select(Review.id).where(
        Review.book_id == book.id,
        Review.user_id == user.id,
    )
    if db.execute(existing_stmt).scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already reviewed this book",
        )

    review = Review(
        book_id=book.id,
        user_id=user.id,
        rating=review_data.rating,
        title=review_data.title,
        content=review_data.content,
        pros=review_data.pros,
        cons=review_data.cons,
        recommended_for=review_data.recommended_for,
        spoiler_warning=review_data.spoiler_warning,
        reading_progress=review_data.reading_progress.value,
        reading_start_date=review_data.reading_start_date,
        reading_end_date=review_data.reading_end_date,
    )
    db.add(review)

    mark_book_read(user, book)
    recalculate_book_rating(db, book.id)
    db.commit()

    logger.info(f"User {user.id} reviewed book {book.id} with rating {review.rating}")

    return get_review_or_404(db, review.id)


# =============================================================================
# Review Collection Endpoints
# =============================================================================


@router.get(
    "/reviews",
    response_model=ReviewListResponse,
    summary="List reviews",
    description="Paginated reviews, optionally filtered by book, user or rating.",
)
@limiter.limit(settings.rate_limit_default)
def list_reviews(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    book_id: int | None = Query(default=None, ge=1),
    user_id: int | None = Query(default=None, ge=1),
    rating: int | None = Query(default=None, ge=1, le=5),
    sort_by: ReviewSortField = Query(default="created_at"),
    order: SortOrder = Query(default="desc"),
) -> ReviewListResponse:
    conditions = []
    if book_id is not None:
        conditions.append(Review.book_id == book_id)
    if user_id is not None:
        conditions.append(Review.user_id == user_id)
    if rating is not None:
        conditions.append(Review.rating == rating)

    return list_reviews_page(
        db, pagination, *conditions, sort_by=sort_by, order=order
    )


@router.post(
    "/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a review for the book given by book_id. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    review_data: ReviewCreateWithBook,
    db: DbSession,
    current_user: ActiveUser,
) -> ReviewResponse:
    book = get_book_or_404(db, review_data.book_id)
    review = create_review_for_book(db, book, current_user, review_data)
    return ReviewResponse.model_validate(review)


# =============================================================================
# Book Review Endpoints
# =============================================================================


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a book",
    description="Get a paginated list of reviews for a specific book.",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
    sort_by: ReviewSortField = Query(default="created_at"),
    order: SortOrder = Query(default="desc"),
) -> ReviewListResponse:
    """
    List all reviews for a specific book.

    Raises:
        HTTPException: 404 if book not found
    """
    get_book_or_404(db, book_id)
    return list_reviews_page(
        db, pagination, Review.book_id == book_id, sort_by=sort_by, order=order
    )


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
    description="Create a new review for a book. Requires authentication. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_book_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: ActiveUser,
) -> ReviewResponse:
    """
    Create a new review for a book.

    Raises:
        HTTPException: 404 if book not found
        HTTPException: 400 if user already reviewed this book
    """
    book = get_book_or_404(db, book_id)
    review = create_review_for_book(db, book, current_user, review_data)
    return ReviewResponse.model_validate(review)


@router.get(
    "/books/{book_id}/rating",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Average rating, review count and the 1-5 star distribution of a book.",
)
@limiter.limit(settings.rate_limit_default)
def get_book_rating_stats(
    request: Request,
    book_id: int,
    db: DbSession,
) -> BookRatingStats:
    book = get_book_or_404(db, book_id)

    return BookRatingStats(
        book_id=book.id,
        average_rating=book.average_rating,
        total_reviews=book.ratings_count,
        rating_distribution=rating_distribution(db, book.id),
    )


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    db: DbSession,
) -> ReviewResponse:
    review = get_review_or_404(db, review_id)
    return ReviewResponse.model_validate(review)


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Update your own review. A content change is kept in the edit history.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user: ActiveUser,
) -> ReviewResponse:
    """
    Update an existing review.

    Only the review author can update their review. When the content
    changes, the previous content is appended to the edit history. The
    book's rating is recalculated before committing.

    Raises:
        HTTPException: 404 if review not found
        HTTPException: 403 if user is not the review author
        HTTPException: 400 if the resulting reading dates are inconsistent
    """
    review = get_review_or_404(db, review_id)

    if review.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own reviews",
        )

    update_data = review_data.model_dump(exclude_unset=True)
    # Reading dates may be cleared; every other column is required
    update_data = {
        field: value
        for field, value in update_data.items()
        if value is not None or field in ("reading_start_date", "reading_end_date")
    }
    if "reading_progress" in update_data:
        update_data["reading_progress"] = update_data["reading_progress"].value

    start = update_data.get("reading_start_date", review.reading_start_date)
    end = update_data.get("reading_end_date", review.reading_end_date)
    if start is not None and end is not None and end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="reading_end_date cannot be before reading_start_date",
        )

    if "content" in update_data and update_data["content"] != review.content:
        review.edit_history.append(ReviewEdit(previous_content=review.content))

    for field, value in update_data.items():
        setattr(review, field, value)

    recalculate_book_rating(db, review.book_id)
    db.commit()

    logger.info(f"Review {review_id} updated by user {current_user.id}")

    return ReviewResponse.model_validate(get_review_or_404(db, review_id))


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Delete a review. Only the review author or superusers can delete.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> None:
    """
    Delete a review and recalculate its book's rating.

    Raises:
        HTTPException: 404 if review not found
        HTTPException: 403 if user is neither the author nor a superuser
    """
    review = get_review_or_404(db, review_id)

    if review.user_id != current_user.id and not current_user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own reviews",
        )

    book_id = review.book_id
    db.delete(review)
    recalculate_book_rating(db, book_id)
    db.commit()

    logger.info(f"Review {review_id} deleted by user {current_user.id}")


@router.post(
    "/reviews/{review_id}/like",
    response_model=LikeResponse,
    summary="Like or unlike a review",
)
@limiter.limit(settings.rate_limit_write)
def like_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> LikeResponse:
    review = get_review_or_404(db, review_id)

    is_liked = toggle_like(review, current_user)
    likes_count = review.likes_count
    db.commit()

    return LikeResponse(
        message="Review liked" if is_liked else "Review unliked",
        likes_count=likes_count,
        is_liked=is_liked,
    )


@router.post(
    "/reviews/{review_id}/helpful",
    response_model=HelpfulVoteResponse,
    summary="Vote on a review's helpfulness",
    description="Record a helpful / not helpful vote. Voting again replaces your previous vote.",
)
@limiter.limit(settings.rate_limit_write)
def vote_review_helpful(
    request: Request,
    review_id: int,
    vote: HelpfulVoteRequest,
    db: DbSession,
    current_user: ActiveUser,
) -> HelpfulVoteResponse:
    review = get_review_or_404(db, review_id)

    record_helpful_vote(db, review, current_user, vote.is_helpful)
    response = HelpfulVoteResponse(
        message="Helpfulness vote recorded",
        helpful_votes=review.helpful_votes_count,
        total_votes=review.total_votes,
        helpfulness_score=review.helpfulness_score,
    )
    db.commit()

    return response


# =============================================================================
# User Review Endpoints
# =============================================================================


@router.get(
    "/users/{user_id}/reviews",
    response_model=ReviewListResponse,
    summary="Get reviews by user",
    description="Get a paginated list of reviews written by a specific user, sorted by date or rating.",
)
@limiter.limit(settings.rate_limit_default)
def list_user_reviews(
    request: Request,
    user_id: int,
    db: DbSession,
    pagination: Pagination,
    sort_by: Literal["created_at", "rating"] = Query(default="created_at"),
    order: SortOrder = Query(default="desc"),
) -> ReviewListResponse:
    get_user_or_404(db, user_id)
    return list_reviews_page(
        db, pagination, Review.user_id == user_id, sort_by=sort_by, order=order
    )

"""
Users Router

User profiles, the social graph and per-user statistics.

Endpoints:
- GET /users - List users (search, sort, paginate)
- GET /users/me - Current user's account
- PUT /users/me - Update current user's profile
- POST /users/wishlist/{book_id} - Add / remove a book from the wishlist
- GET /users/{user_id} - Public profile with recent reviews and counters
- POST /users/{user_id}/follow - Follow / unfollow a user
- GET /users/{user_id}/reading-stats - Reading statistics
- GET /users/{user_id}/recommendations - Book recommendations

Business Rules:
- Users can only update their own profile
- Users cannot follow themselves
- Following and followers are two views of the same follow row
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request, status
from sqlalchemy import func, or_, select

from bookreview.config import get_settings
from bookreview.dependencies import (
    ActiveUser,
    DbSession,
    OptionalUser,
    Pagination,
    get_book_or_404,
    get_user_or_404,
)
from bookreview.models import Review, User
from bookreview.routers.reviews import review_select
from bookreview.schemas.book import BookResponse
from bookreview.schemas.profile import (
    FollowResponse,
    ProfileStats,
    ReadingStatsResponse,
    UserProfileResponse,
    WishlistResponse,
)
from bookreview.schemas.review import ReviewResponse
from bookreview.schemas.user import (
    UserListResponse,
    UserPublicResponse,
    UserResponse,
    UserUpdate,
)
from bookreview.services.rate_limiter import limiter
from bookreview.services.recommendations import recommend_books
from bookreview.services.social import SelfFollowError, toggle_follow, toggle_wishlist
from bookreview.services.stats import get_reading_stats, profile_stats

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)

RECENT_REVIEWS_LIMIT = 5

UserSortField = Literal["username", "created_at", "first_name"]


# =============================================================================
# User Listing
# =============================================================================


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="Search users by username or name.",
)
@limiter.limit(settings.rate_limit_default)
def list_users(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    search: str | None = Query(default=None, max_length=100),
    sort_by: UserSortField = Query(default="created_at"),
    order: Literal["asc", "desc"] = Query(default="desc"),
) -> UserListResponse:
    conditions = []
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(
            or_(
                User.username.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            )
        )

    total = db.execute(select(func.count(User.id)).where(*conditions)).scalar() or 0

    column = getattr(User, sort_by)
    ordering = (column.asc(), User.id.asc()) if order == "asc" else (column.desc(), User.id.desc())

    users = db.execute(
        select(User)
        .where(*conditions)
        .order_by(*ordering)
        .offset(pagination.skip)
        .limit(pagination.limit)
    ).scalars().all()

    return UserListResponse(
        items=[UserPublicResponse.model_validate(u) for u in users],
        pagination=pagination.meta(total),
    )


# =============================================================================
# Current User Endpoints (/users/me, /users/wishlist)
# =============================================================================


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
    description="Get the authenticated user's full profile.",
)
@limiter.limit(settings.rate_limit_default)
def get_current_user_profile(
    request: Request,
    current_user: ActiveUser,
) -> UserResponse:
    """Equivalent to /auth/me, placed here for REST consistency."""
    return UserResponse.model_validate(current_user)


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Update current user profile",
    description="Update names, bio, avatar, favorite genres or reading goal.",
)
@limiter.limit(settings.rate_limit_write)
def update_current_user_profile(
    request: Request,
    user_data: UserUpdate,
    db: DbSession,
    current_user: ActiveUser,
) -> UserResponse:
    """
    Update the current user's profile.

    Only provided fields are updated. bio and avatar_url may be cleared
    with an explicit null.
    """
    update_data = {
        field: value
        for field, value in user_data.model_dump(exclude_unset=True).items()
        if value is not None or field in ("bio", "avatar_url")
    }
    if "favorite_genres" in update_data:
        update_data["favorite_genres"] = [
            genre.value for genre in user_data.favorite_genres
        ]

    for field, value in update_data.items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    logger.info(f"User {current_user.id} updated their profile")

    return UserResponse.model_validate(current_user)


@router.post(
    "/wishlist/{book_id}",
    response_model=WishlistResponse,
    summary="Toggle a book in the wishlist",
)
@limiter.limit(settings.rate_limit_write)
def toggle_wishlist_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> WishlistResponse:
    """
    Add the book to the current user's wishlist, or remove it if present.

    Raises:
        HTTPException: 404 if book not found
    """
    book = get_book_or_404(db, book_id)

    in_wishlist = toggle_wishlist(current_user, book)
    wishlist_count = len(current_user.wishlist)
    db.commit()

    return WishlistResponse(
        message="Book added to wishlist" if in_wishlist else "Book removed from wishlist",
        in_wishlist=in_wishlist,
        wishlist_count=wishlist_count,
    )


# =============================================================================
# Public Profile Endpoints (/users/{user_id}/...)
# =============================================================================


@router.get(
    "/{user_id}",
    response_model=UserProfileResponse,
    summary="Get user profile",
    description="Public profile with recent reviews, counters and whether you follow this user.",
)
@limiter.limit(settings.rate_limit_default)
def get_user_profile(
    request: Request,
    user_id: int,
    db: DbSession,
    current_user: OptionalUser,
) -> UserProfileResponse:
    user = get_user_or_404(db, user_id)

    recent_reviews = db.execute(
        review_select()
        .where(Review.user_id == user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(RECENT_REVIEWS_LIMIT)
    ).scalars().all()

    is_following = current_user is not None and current_user in user.followers

    return UserProfileResponse(
        user=UserPublicResponse.model_validate(user),
        recent_reviews=[ReviewResponse.model_validate(r) for r in recent_reviews],
        stats=ProfileStats(**profile_stats(db, user)),
        is_following=is_following,
    )


@router.post(
    "/{user_id}/follow",
    response_model=FollowResponse,
    summary="Follow or unfollow a user",
)
@limiter.limit(settings.rate_limit_write)
def follow_user(
    request: Request,
    user_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> FollowResponse:
    """
    Follow the user, or unfollow if already following.

    Both sides of the relationship change in one commit.

    Raises:
        HTTPException: 400 when following yourself
        HTTPException: 404 if the target user does not exist
    """
    target = get_user_or_404(db, user_id)

    try:
        is_following = toggle_follow(current_user, target)
    except SelfFollowError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    db.flush()
    followers_count = len(target.followers)
    db.commit()

    return FollowResponse(
        message="User followed" if is_following else "User unfollowed",
        is_following=is_following,
        followers_count=followers_count,
    )


@router.get(
    "/{user_id}/reading-stats",
    response_model=ReadingStatsResponse,
    summary="Get reading statistics",
    description="Totals, genre distribution, monthly progress and progress toward the reading goal.",
)
@limiter.limit(settings.rate_limit_default)
def get_user_reading_stats(
    request: Request,
    user_id: int,
    db: DbSession,
) -> ReadingStatsResponse:
    user = get_user_or_404(db, user_id)
    return ReadingStatsResponse(**get_reading_stats(db, user))


@router.get(
    "/{user_id}/recommendations",
    response_model=list[BookResponse],
    summary="Get book recommendations",
    description="""
    Unread books in the user's favorite genres or the genres they read,
    rated 4 or more by at least 5 reviewers. At most 12, best rated first.
    """,
)
@limiter.limit(settings.rate_limit_default)
def get_user_recommendations(
    request: Request,
    user_id: int,
    db: DbSession,
) -> list[BookResponse]:
    user = get_user_or_404(db, user_id)
    return [BookResponse.model_validate(b) for b in recommend_books(db, user)]

"""
Profile and Social Pydantic Schemas

Responses for the user profile page, reading statistics and the
follow / wishlist toggles.
"""

from pydantic import BaseModel, Field

from bookreview.schemas.review import ReviewResponse
from bookreview.schemas.user import UserPublicResponse


class ProfileStats(BaseModel):
    books_read: int
    reviews: int
    average_rating: float
    followers: int
    following: int
    wishlist_books: int


class UserProfileResponse(BaseModel):
    """
    Public profile of a user.

    is_following is only true when the caller is authenticated and follows
    this user.
    """

    user: UserPublicResponse
    recent_reviews: list[ReviewResponse]
    stats: ProfileStats
    is_following: bool = False


class GenreStat(BaseModel):
    genre: str
    count: int
    average_rating: float


class MonthlyProgress(BaseModel):
    month: int = Field(..., ge=1, le=12)
    books_read: int


class ReadingStatsResponse(BaseModel):
    """
    Reading statistics of a user.

    Example:
        {
            "books_read": 6,
            "reading_goal": 12,
            "total_reviews": 6,
            "average_rating": 4.2,
            "total_pages": 2140,
            "genre_distribution": [{"genre": "Fantasy", "count": 4, "average_rating": 4.5}],
            "monthly_progress": [{"month": 1, "books_read": 2}],
            "progress_percentage": 50
        }
    """

    books_read: int
    reading_goal: int
    total_reviews: int
    average_rating: float
    total_pages: int
    genre_distribution: list[GenreStat]
    monthly_progress: list[MonthlyProgress]
    progress_percentage: int


class FollowResponse(BaseModel):
    message: str
    is_following: bool
    followers_count: int


class WishlistResponse(BaseModel):
    message: str
    in_wishlist: bool
    wishlist_count: int

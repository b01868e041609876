"""
Pydantic Schemas Package

Request and response models, kept separate from the SQLAlchemy models so
the API shape can evolve independently of the database schema.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
- XxxListResponse: {items, pagination} page of XxxResponse
"""

from bookreview.schemas.common import BookMinimal, PaginationMeta
from bookreview.schemas.user import (
    TokenResponse,
    UserCreate,
    UserListResponse,
    UserPublicResponse,
    UserResponse,
    UserUpdate,
)
from bookreview.schemas.book import (
    BookCreate,
    BookListResponse,
    BookResponse,
    BookUpdate,
    FeaturedToggleResponse,
)
from bookreview.schemas.review import (
    BookDetailResponse,
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
from bookreview.schemas.profile import (
    FollowResponse,
    ReadingStatsResponse,
    UserProfileResponse,
    WishlistResponse,
)

__all__ = [
    # Shared
    "BookMinimal",
    "PaginationMeta",
    # Users / auth
    "TokenResponse",
    "UserCreate",
    "UserListResponse",
    "UserPublicResponse",
    "UserResponse",
    "UserUpdate",
    # Books
    "BookCreate",
    "BookListResponse",
    "BookResponse",
    "BookUpdate",
    "FeaturedToggleResponse",
    # Reviews
    "BookDetailResponse",
    "BookRatingStats",
    "HelpfulVoteRequest",
    "HelpfulVoteResponse",
    "LikeResponse",
    "ReviewCreate",
    "ReviewCreateWithBook",
    "ReviewListResponse",
    "ReviewResponse",
    "ReviewUpdate",
    # Profiles
    "FollowResponse",
    "ReadingStatsResponse",
    "UserProfileResponse",
    "WishlistResponse",
]

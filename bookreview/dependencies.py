"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers with
Depends(). This module provides:

- DbSession: per-request database session
- Pagination / BookPagination: page and limit query parameters
- ActiveUser / SuperUser / OptionalUser: JWT authentication
- get_book_or_404 / get_user_or_404 / get_review_or_404: shared lookups
"""

import math
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookreview.config import get_settings
from bookreview.database import get_db
from bookreview.models import Book, Review, User
from bookreview.schemas.common import PaginationMeta

if TYPE_CHECKING:
    from bookreview.models.user import User as UserModel

settings = get_settings()

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - limit: How many items per page (max 50)
    - skip: Calculated offset for the database query

    Usage in route:
        @router.get("/reviews")
        def list_reviews(db: DbSession, pagination: Pagination):
            stmt = select(Review).offset(pagination.skip).limit(pagination.limit)
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
        ),
        limit: int = Query(
            default=10,
            ge=1,
            le=50,
            description="Number of items per page (max 50)",
        ),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        """Number of records to skip: page 1 → 0, page 2 → limit, ..."""
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> PaginationMeta:
        """Build the pagination block of a list response."""
        return PaginationMeta(
            current=self.page,
            pages=math.ceil(total / self.limit) if total > 0 else 0,
            total=total,
            limit=self.limit,
        )


class BookPaginationParams(PaginationParams):
    """Pagination for catalog listings, which default to 12 books per page."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
        limit: int = Query(
            default=12,
            ge=1,
            le=50,
            description="Number of books per page (max 50)",
        ),
    ) -> None:
        super().__init__(page=page, limit=limit)


Pagination = Annotated[PaginationParams, Depends()]
BookPagination = Annotated[BookPaginationParams, Depends()]


# =============================================================================
# JWT Authentication
# =============================================================================
# OAuth2PasswordBearer extracts the token from "Authorization: Bearer <token>"
# and adds the "Authorize" button to Swagger UI.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/auth/login",
    auto_error=True,
)

oauth2_scheme_optional = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/auth/login",
    auto_error=False,
)


def _user_from_token(db: Session, token: str) -> User | None:
    from bookreview.services.security import verify_token_type

    payload = verify_token_type(token, "access")
    if payload is None:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    try:
        return db.get(User, int(user_id))
    except ValueError:
        return None


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Extract and validate the current user from the JWT token.

    Raises:
        HTTPException: 401 if token is invalid or user not found
    """
    user = _user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Verify the current user is active.

    Raises:
        HTTPException: 403 if user is inactive
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return current_user


def get_current_superuser(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """
    Verify the current user has superuser (admin) privileges.

    Raises:
        HTTPException: 403 if user is not a superuser
    """
    if not current_user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


def get_optional_current_user(
    token: str | None = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db),
) -> User | None:
    """
    Get the current user if authenticated, None otherwise.

    Used by endpoints that work anonymously but add caller-specific data,
    such as the caller's own review on the book detail page.
    """
    if not token:
        return None
    return _user_from_token(db, token)


ActiveUser = Annotated["UserModel", Depends(get_current_active_user)]
SuperUser = Annotated["UserModel", Depends(get_current_superuser)]
OptionalUser = Annotated["UserModel | None", Depends(get_optional_current_user)]


# =============================================================================
# Shared Lookups
# =============================================================================
def get_book_or_404(db: Session, book_id: int) -> Book:
    """
    Get a book by ID or raise 404.

    Raises:
        HTTPException: 404 if book not found
    """
    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(Book.id == book_id)
    )
    book = db.execute(stmt).scalar_one_or_none()

    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )
    return book


def get_user_or_404(db: Session, user_id: int) -> User:
    """
    Get a user by ID or raise 404.

    Raises:
        HTTPException: 404 if user not found
    """
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def get_review_or_404(db: Session, review_id: int) -> Review:
    """
    Get a review by ID with its author, book and votes loaded, or raise 404.

    Raises:
        HTTPException: 404 if review not found
    """
    stmt = (
        select(Review)
        .options(
            selectinload(Review.user),
            selectinload(Review.book),
            selectinload(Review.liked_by),
            selectinload(Review.helpful_votes),
            selectinload(Review.edit_history),
        )
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review

"""
Books Router

Catalog endpoints for books.

Endpoints:
- GET /books - List books (filter, search, sort, paginate)
- GET /books/featured - Featured books
- GET /books/trending - Highly rated books added in the last 30 days
- GET /books/{book_id} - Book detail with reviews and rating distribution
- POST /books - Add a book (authenticated)
- PUT /books/{book_id} - Update a book (owner or superuser)
- DELETE /books/{book_id} - Delete a book and its reviews (owner or superuser)
- POST /books/{book_id}/toggle-featured - Feature / unfeature (superuser)

Fixed paths (/featured, /trending) are declared before /{book_id} so they
are matched first.
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request, status
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session, selectinload

from bookreview.config import get_settings
from bookreview.dependencies import (
    ActiveUser,
    BookPagination,
    DbSession,
    OptionalUser,
    Pagination,
    SuperUser,
    get_book_or_404,
)
from bookreview.models import Book, BookGenre, Review, User
from bookreview.routers.reviews import review_order, review_select
from bookreview.schemas.book import (
    BookCreate,
    BookListResponse,
    BookResponse,
    BookUpdate,
    FeaturedToggleResponse,
)
from bookreview.schemas.review import BookDetailResponse, ReviewResponse
from bookreview.services.rate_limiter import limiter
from bookreview.services.ratings import rating_distribution
from bookreview.services.recommendations import get_featured_books, get_trending_books

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)

BookSortField = Literal["title", "author", "average_rating", "created_at", "published_date"]
SortOrder = Literal["asc", "desc"]

# Columns that may be cleared with an explicit null on update
NULLABLE_BOOK_FIELDS = {"isbn", "published_date", "publisher", "cover_image", "price_amount"}


# =============================================================================
# Helper Functions
# =============================================================================


def ensure_isbn_available(db: Session, isbn: str | None, exclude_id: int | None = None) -> None:
    """
    Raise 400 if another book already uses this ISBN.

    Raises:
        HTTPException: 400 on duplicate ISBN
    """
    if isbn is None:
        return

    stmt = select(Book.id).where(Book.isbn == isbn)
    if exclude_id is not None:
        stmt = stmt.where(Book.id != exclude_id)

    if db.execute(stmt).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A book with this ISBN already exists",
        )


def ensure_can_modify(book: Book, user: User) -> None:
    """
    Only the user who added a book, or a superuser, may change it.

    Raises:
        HTTPException: 403 otherwise
    """
    if book.added_by_id != user.id and not user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify books you added",
        )


# =============================================================================
# List Books
# =============================================================================


@router.get(
    "",
    response_model=BookListResponse,
    summary="List all books",
    description="""
    Retrieve a paginated list of books.

    **Filtering:**
    - `genre`: exact genre
    - `author`: case-insensitive partial match on the author name
    - `search`: case-insensitive match on title, author, description or tags

    **Sorting:** `sort_by` one of title, author, average_rating, created_at,
    published_date; `order` asc or desc (default: newest first).
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: BookPagination,
    genre: BookGenre | None = Query(default=None, description="Filter by genre"),
    author: str | None = Query(default=None, max_length=100, description="Filter by author"),
    search: str | None = Query(default=None, max_length=200, description="Search text"),
    sort_by: BookSortField = Query(default="created_at"),
    order: SortOrder = Query(default="desc"),
) -> BookListResponse:
    conditions = []
    if genre is not None:
        conditions.append(Book.genre == genre.value)
    if author:
        conditions.append(Book.author.ilike(f"%{author.strip()}%"))
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(
            or_(
                Book.title.ilike(pattern),
                Book.author.ilike(pattern),
                Book.description.ilike(pattern),
                cast(Book.tags, String).ilike(pattern),
            )
        )

    count_stmt = select(func.count(Book.id)).where(*conditions)
    total = db.execute(count_stmt).scalar() or 0

    column = getattr(Book, sort_by)
    ordering = (column.asc(), Book.id.asc()) if order == "asc" else (column.desc(), Book.id.desc())

    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(*conditions)
        .order_by(*ordering)
        .offset(pagination.skip)
        .limit(pagination.limit)
    )
    books = db.execute(stmt).scalars().all()

    return BookListResponse(
        items=[BookResponse.model_validate(b) for b in books],
        pagination=pagination.meta(total),
    )


@router.get(
    "/featured",
    response_model=list[BookResponse],
    summary="Featured books",
)
@limiter.limit(settings.rate_limit_default)
def list_featured_books(request: Request, db: DbSession) -> list[BookResponse]:
    return [BookResponse.model_validate(b) for b in get_featured_books(db)]


@router.get(
    "/trending",
    response_model=list[BookResponse],
    summary="Trending books",
    description="Books added in the last 30 days with at least 3 reviews and a rating of 4 or more.",
)
@limiter.limit(settings.rate_limit_default)
def list_trending_books(request: Request, db: DbSession) -> list[BookResponse]:
    return [BookResponse.model_validate(b) for b in get_trending_books(db)]


# =============================================================================
# Get Single Book
# =============================================================================


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    summary="Get a book by ID",
    description="Book details with a page of reviews, the caller's own review and the rating distribution.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
    current_user: OptionalUser,
    sort_by: Literal["created_at", "rating", "helpful"] = Query(default="created_at"),
    order: SortOrder = Query(default="desc"),
) -> BookDetailResponse:
    """
    Retrieve a book with one page of its reviews.

    user_review is the authenticated caller's review of this book, if any.

    Raises:
        HTTPException: 404 if book not found
    """
    book = get_book_or_404(db, book_id)

    total = db.execute(
        select(func.count(Review.id)).where(Review.book_id == book_id)
    ).scalar() or 0

    reviews = db.execute(
        review_select()
        .where(Review.book_id == book_id)
        .order_by(*review_order(sort_by, order))
        .offset(pagination.skip)
        .limit(pagination.limit)
    ).scalars().all()

    user_review = None
    if current_user is not None:
        user_review = db.execute(
            review_select().where(
                Review.book_id == book_id,
                Review.user_id == current_user.id,
            )
        ).scalar_one_or_none()

    return BookDetailResponse(
        book=BookResponse.model_validate(book),
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
        user_review=ReviewResponse.model_validate(user_review) if user_review else None,
        reviews_count=total,
        rating_distribution=rating_distribution(db, book_id),
        pagination=pagination.meta(total),
    )


# =============================================================================
# Create / Update / Delete
# =============================================================================


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="Add a new book to the catalog. The ISBN, when given, must be unique.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: ActiveUser,
) -> BookResponse:
    """
    Create a new book owned by the current user.

    Raises:
        HTTPException: 400 if a book with the same ISBN exists
    """
    ensure_isbn_available(db, book_data.isbn)

    values = book_data.model_dump()
    values["genre"] = book_data.genre.value
    values["availability"] = book_data.availability.value

    book = Book(**values, added_by_id=current_user.id)
    db.add(book)
    db.commit()

    logger.info(f"Book {book.id} '{book.title}' added by user {current_user.id}")

    return BookResponse.model_validate(get_book_or_404(db, book.id))


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Partially update a book. Only the user who added it or a superuser may update.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    current_user: ActiveUser,
) -> BookResponse:
    """
    Update an existing book.

    Raises:
        HTTPException: 404 if book not found
        HTTPException: 403 if the caller did not add the book
        HTTPException: 400 if the new ISBN belongs to another book
    """
    book = get_book_or_404(db, book_id)
    ensure_can_modify(book, current_user)

    update_data = {
        field: value
        for field, value in book_data.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_BOOK_FIELDS
    }
    if "isbn" in update_data:
        ensure_isbn_available(db, update_data["isbn"], exclude_id=book.id)
    for enum_field in ("genre", "availability"):
        if enum_field in update_data:
            update_data[enum_field] = update_data[enum_field].value

    for field, value in update_data.items():
        setattr(book, field, value)

    db.commit()

    logger.info(f"Book {book_id} updated by user {current_user.id}")

    return BookResponse.model_validate(get_book_or_404(db, book_id))


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Delete a book together with all of its reviews.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> None:
    """
    Delete a book.

    Reviews (with their likes, votes and edit history) are deleted with it,
    and the book leaves every wishlist and read list.

    Raises:
        HTTPException: 404 if book not found
        HTTPException: 403 if the caller did not add the book
    """
    book = get_book_or_404(db, book_id)
    ensure_can_modify(book, current_user)

    db.delete(book)
    db.commit()

    logger.info(f"Book {book_id} deleted by user {current_user.id}")


@router.post(
    "/{book_id}/toggle-featured",
    response_model=FeaturedToggleResponse,
    summary="Feature or unfeature a book",
    description="Flip the featured flag of a book. Superuser only.",
)
@limiter.limit(settings.rate_limit_write)
def toggle_featured(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: SuperUser,
) -> FeaturedToggleResponse:
    book = get_book_or_404(db, book_id)

    book.featured = not book.featured
    featured = book.featured
    db.commit()

    logger.info(f"Book {book_id} featured={featured} by admin {current_user.id}")

    return FeaturedToggleResponse(
        message="Book featured" if featured else "Book unfeatured",
        featured=featured,
    )

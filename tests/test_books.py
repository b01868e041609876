"""
Tests for the Books Catalog

- Listing with pagination, genre/author/search filters and sorting
- Book detail with reviews, the caller's review and the rating histogram
- Create / update / delete with ownership and ISBN uniqueness rules
- Featured and trending lists, featured toggle (superuser only)
"""

from datetime import UTC, datetime, timedelta

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookreview.models import Book, Review
from bookreview.models.user import User
from bookreview.services.security import create_access_token


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


NEW_BOOK = {
    "title": "Dune",
    "author": "Frank Herbert",
    "isbn": "978-0-441-01359-3",
    "description": "Politics, religion and ecology on the desert planet Arrakis.",
    "genre": "Sci-Fi",
    "page_count": 412,
    "price_amount": "9.99",
}


# =============================================================================
# List Books
# =============================================================================


class TestListBooks:
    """Tests for GET /api/v1/books"""

    def test_list_books_empty(self, client: TestClient):
        response = client.get("/api/v1/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["items"] == []
        assert data["pagination"] == {"current": 1, "pages": 0, "total": 0, "limit": 12}

    def test_list_books_pagination(self, client: TestClient, book_factory):
        for _ in range(15):
            book_factory()

        response = client.get("/api/v1/books", params={"page": 2, "limit": 10})

        data = response.json()
        assert len(data["items"]) == 5
        assert data["pagination"] == {"current": 2, "pages": 2, "total": 15, "limit": 10}

    def test_list_books_limit_capped(self, client: TestClient):
        response = client.get("/api/v1/books", params={"limit": 51})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "limit"

    def test_filter_by_genre(self, client: TestClient, sample_book: Book, book_factory):
        book_factory(genre="Mystery")

        response = client.get("/api/v1/books", params={"genre": "Fantasy"})

        items = response.json()["items"]
        assert [b["id"] for b in items] == [sample_book.id]

    def test_filter_by_unknown_genre(self, client: TestClient):
        response = client.get("/api/v1/books", params={"genre": "Cookbooks"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_filter_by_author_partial(self, client: TestClient, sample_book: Book, book_factory):
        book_factory(author="Agatha Christie")

        response = client.get("/api/v1/books", params={"author": "tolk"})

        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["author"] == "J.R.R. Tolkien"

    def test_search_matches_description(self, client: TestClient, sample_book: Book, book_factory):
        book_factory(title="Unrelated")

        response = client.get("/api/v1/books", params={"search": "DWARF"})

        items = response.json()["items"]
        assert [b["id"] for b in items] == [sample_book.id]

    def test_search_matches_tags(self, client: TestClient, sample_book: Book, book_factory):
        tagged = book_factory(title="Dune", tags=["classic", "space opera"])

        response = client.get("/api/v1/books", params={"search": "Space Opera"})

        items = response.json()["items"]
        assert [b["id"] for b in items] == [tagged.id]

    def test_sort_by_title_ascending(self, client: TestClient, book_factory):
        book_factory(title="Charlie")
        book_factory(title="Alpha")
        book_factory(title="Bravo")

        response = client.get("/api/v1/books", params={"sort_by": "title", "order": "asc"})

        titles = [b["title"] for b in response.json()["items"]]
        assert titles == ["Alpha", "Bravo", "Charlie"]

    def test_sort_by_rating_descending(self, client: TestClient, book_factory):
        book_factory(title="Low", average_rating=2.5, ratings_count=2)
        book_factory(title="High", average_rating=4.8, ratings_count=9)

        response = client.get("/api/v1/books", params={"sort_by": "average_rating"})

        titles = [b["title"] for b in response.json()["items"]]
        assert titles == ["High", "Low"]

    def test_invalid_sort_field(self, client: TestClient):
        response = client.get("/api/v1/books", params={"sort_by": "price_amount"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Book Detail
# =============================================================================


class TestGetBook:
    """Tests for GET /api/v1/books/{book_id}"""

    def test_get_book_without_reviews(self, client: TestClient, sample_book: Book):
        response = client.get(f"/api/v1/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["book"]["title"] == "The Hobbit"
        assert data["book"]["average_rating"] == 0
        assert data["book"]["ratings_count"] == 0
        assert data["book"]["added_by"]["username"] == "testuser"
        assert data["reviews"] == []
        assert data["user_review"] is None
        assert data["reviews_count"] == 0
        assert data["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}

    def test_get_book_with_reviews(self, client: TestClient, sample_review: Review):
        response = client.get(f"/api/v1/books/{sample_review.book_id}")

        data = response.json()
        assert data["reviews_count"] == 1
        assert data["reviews"][0]["id"] == sample_review.id
        assert data["rating_distribution"]["4"] == 1
        assert data["book"]["average_rating"] == 4.0
        assert data["pagination"]["total"] == 1

    def test_get_book_includes_callers_review(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        response = client.get(
            f"/api/v1/books/{sample_review.book_id}",
            headers=get_auth_header(sample_user),
        )

        assert response.json()["user_review"]["id"] == sample_review.id

    def test_get_book_other_caller_has_no_review(
        self, client: TestClient, sample_review: Review, second_user: User
    ):
        response = client.get(
            f"/api/v1/books/{sample_review.book_id}",
            headers=get_auth_header(second_user),
        )

        assert response.json()["user_review"] is None

    def test_get_book_not_found(self, client: TestClient):
        response = client.get("/api/v1/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book not found"}


# =============================================================================
# Create / Update / Delete
# =============================================================================


class TestCreateBook:
    """Tests for POST /api/v1/books"""

    def test_create_book(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/books",
            json=NEW_BOOK,
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Dune"
        assert data["isbn"] == "9780441013593"  # stored without hyphens
        assert data["genre"] == "Sci-Fi"
        assert data["average_rating"] == 0
        assert data["ratings_count"] == 0
        assert data["featured"] is False
        assert data["language"] == "English"
        assert data["availability"] == "Available"
        assert data["added_by"]["id"] == sample_user.id

    def test_create_book_requires_auth(self, client: TestClient):
        response = client.post("/api/v1/books", json=NEW_BOOK)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_book_duplicate_isbn(
        self, client: TestClient, sample_book: Book, second_user: User
    ):
        payload = {**NEW_BOOK, "isbn": "978-0-547-92822-7"}  # same as sample_book

        response = client.post(
            "/api/v1/books",
            json=payload,
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "A book with this ISBN already exists"

    def test_create_book_invalid_isbn(self, client: TestClient, sample_user: User):
        payload = {**NEW_BOOK, "isbn": "12345"}

        response = client.post(
            "/api/v1/books",
            json=payload,
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "isbn"

    def test_create_book_isbn10_with_x(self, client: TestClient, sample_user: User):
        payload = {**NEW_BOOK, "isbn": "0-8044-2957-x"}

        response = client.post(
            "/api/v1/books",
            json=payload,
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["isbn"] == "080442957X"

    def test_create_book_without_isbn(self, client: TestClient, sample_user: User, book_factory):
        book_factory(isbn=None)
        payload = {k: v for k, v in NEW_BOOK.items() if k != "isbn"}

        response = client.post(
            "/api/v1/books",
            json=payload,
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["isbn"] is None

    def test_create_book_missing_fields(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/books",
            json={"title": "Only a title"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {e["field"] for e in response.json()["errors"]}
        assert {"author", "description", "genre", "page_count"} <= fields

    def test_create_book_zero_pages(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/books",
            json={**NEW_BOOK, "page_count": 0},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestUpdateBook:
    """Tests for PUT /api/v1/books/{book_id}"""

    def test_owner_can_update(self, client: TestClient, sample_book: Book, sample_user: User):
        response = client.put(
            f"/api/v1/books/{sample_book.id}",
            json={"title": "The Hobbit, or There and Back Again", "page_count": 320},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "The Hobbit, or There and Back Again"
        assert data["page_count"] == 320
        assert data["author"] == "J.R.R. Tolkien"  # unchanged

    def test_non_owner_cannot_update(
        self, client: TestClient, sample_book: Book, second_user: User
    ):
        response = client.put(
            f"/api/v1/books/{sample_book.id}",
            json={"title": "Hijacked"},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_superuser_can_update(self, client: TestClient, sample_book: Book, superuser: User):
        response = client.put(
            f"/api/v1/books/{sample_book.id}",
            json={"genre": "Fiction"},
            headers=get_auth_header(superuser),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["genre"] == "Fiction"

    def test_update_to_taken_isbn(
        self, client: TestClient, sample_book: Book, sample_user: User, book_factory
    ):
        other = book_factory(isbn="9780441013593")

        response = client.put(
            f"/api/v1/books/{other.id}",
            json={"isbn": sample_book.isbn},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_keeps_own_isbn(self, client: TestClient, sample_book: Book, sample_user: User):
        response = client.put(
            f"/api/v1/books/{sample_book.id}",
            json={"isbn": "978-0547928227"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK

    def test_update_does_not_touch_rating_fields(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        response = client.put(
            f"/api/v1/books/{sample_review.book_id}",
            json={"average_rating": 1.0, "ratings_count": 99, "title": "Renamed"},
            headers=get_auth_header(sample_user),
        )

        data = response.json()
        assert data["average_rating"] == 4.0
        assert data["ratings_count"] == 1


class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{book_id}"""

    def test_delete_cascades_reviews(
        self,
        client: TestClient,
        db_session: Session,
        sample_review: Review,
        sample_user: User,
    ):
        book_id = sample_review.book_id
        review_id = sample_review.id

        response = client.delete(
            f"/api/v1/books/{book_id}",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert db_session.get(Book, book_id) is None
        remaining = db_session.execute(
            select(Review).where(Review.id == review_id)
        ).scalar_one_or_none()
        assert remaining is None

    def test_delete_removes_from_wishlists(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        second_user.wishlist.append(sample_book)
        db_session.commit()

        client.delete(
            f"/api/v1/books/{sample_book.id}",
            headers=get_auth_header(sample_user),
        )

        db_session.refresh(second_user)
        assert second_user.wishlist == []

    def test_non_owner_cannot_delete(
        self, client: TestClient, sample_book: Book, second_user: User
    ):
        response = client.delete(
            f"/api/v1/books/{sample_book.id}",
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_superuser_can_delete(self, client: TestClient, sample_book: Book, superuser: User):
        response = client.delete(
            f"/api/v1/books/{sample_book.id}",
            headers=get_auth_header(superuser),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT


# =============================================================================
# Featured / Trending
# =============================================================================


class TestFeatured:
    """Tests for /books/featured and /books/{book_id}/toggle-featured"""

    def test_toggle_featured_requires_superuser(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        response = client.post(
            f"/api/v1/books/{sample_book.id}/toggle-featured",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Admin privileges required"

    def test_toggle_featured_round_trip(
        self, client: TestClient, sample_book: Book, superuser: User
    ):
        url = f"/api/v1/books/{sample_book.id}/toggle-featured"

        first = client.post(url, headers=get_auth_header(superuser))
        assert first.json() == {"message": "Book featured", "featured": True}

        featured = client.get("/api/v1/books/featured").json()
        assert [b["id"] for b in featured] == [sample_book.id]

        second = client.post(url, headers=get_auth_header(superuser))
        assert second.json()["featured"] is False
        assert client.get("/api/v1/books/featured").json() == []


class TestTrending:
    """Tests for GET /api/v1/books/trending"""

    def test_trending_filters_and_orders(self, client: TestClient, book_factory):
        old = datetime.now(UTC) - timedelta(days=45)
        book_factory(title="Recent strong", average_rating=4.5, ratings_count=3)
        book_factory(title="Recent stronger", average_rating=4.9, ratings_count=4)
        book_factory(title="Too few ratings", average_rating=5.0, ratings_count=2)
        book_factory(title="Too low", average_rating=3.9, ratings_count=10)
        book_factory(title="Too old", average_rating=5.0, ratings_count=10, created_at=old)

        response = client.get("/api/v1/books/trending")

        assert response.status_code == status.HTTP_200_OK
        titles = [b["title"] for b in response.json()]
        assert titles == ["Recent stronger", "Recent strong"]

"""
Tests for Recommendations

Books are created with their rating aggregate set directly so the
thresholds can be exercised without writing dozens of reviews.
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookreview.models import BookGenre
from bookreview.models.user import User
from bookreview.services.recommendations import (
    RECOMMENDATION_LIMIT,
    candidate_genres,
    recommend_books,
)


class TestCandidateGenres:
    def test_favorites_then_read_genres_without_duplicates(
        self, db_session: Session, sample_user: User, book_factory
    ):
        sample_user.books_read.append(book_factory(genre=BookGenre.MYSTERY.value))
        sample_user.books_read.append(book_factory(genre=BookGenre.FANTASY.value))
        db_session.commit()

        assert candidate_genres(sample_user) == ["Fantasy", "Mystery"]


class TestRecommendBooks:
    def test_thresholds_and_order(self, db_session: Session, sample_user: User, book_factory):
        fantasy = BookGenre.FANTASY.value
        best = book_factory(genre=fantasy, average_rating=4.8, ratings_count=20)
        tied_more = book_factory(genre=fantasy, average_rating=4.5, ratings_count=30)
        tied_fewer = book_factory(genre=fantasy, average_rating=4.5, ratings_count=6)
        book_factory(genre=fantasy, average_rating=3.9, ratings_count=50)  # rating too low
        book_factory(genre=fantasy, average_rating=5.0, ratings_count=4)  # too few ratings
        book_factory(genre=BookGenre.ROMANCE.value, average_rating=5.0, ratings_count=50)

        result = recommend_books(db_session, sample_user)

        assert [b.id for b in result] == [best.id, tied_more.id, tied_fewer.id]

    def test_excludes_books_already_read(
        self, db_session: Session, sample_user: User, book_factory
    ):
        read = book_factory(genre=BookGenre.FANTASY.value, average_rating=4.9, ratings_count=10)
        unread = book_factory(genre=BookGenre.FANTASY.value, average_rating=4.2, ratings_count=10)
        sample_user.books_read.append(read)
        db_session.commit()

        result = recommend_books(db_session, sample_user)

        assert [b.id for b in result] == [unread.id]

    def test_genres_of_read_books_count(self, db_session: Session, second_user: User, book_factory):
        history = book_factory(genre=BookGenre.HISTORY.value)
        second_user.books_read.append(history)
        db_session.commit()
        candidate = book_factory(genre=BookGenre.HISTORY.value, average_rating=4.0, ratings_count=5)

        result = recommend_books(db_session, second_user)

        assert [b.id for b in result] == [candidate.id]

    def test_limit(self, db_session: Session, sample_user: User, book_factory):
        for _ in range(RECOMMENDATION_LIMIT + 3):
            book_factory(genre=BookGenre.FANTASY.value, average_rating=4.5, ratings_count=10)

        assert len(recommend_books(db_session, sample_user)) == RECOMMENDATION_LIMIT

    def test_no_genres_no_recommendations(
        self, db_session: Session, second_user: User, book_factory
    ):
        book_factory(average_rating=5.0, ratings_count=100)

        assert recommend_books(db_session, second_user) == []


class TestRecommendationsEndpoint:
    """Tests for GET /api/v1/users/{user_id}/recommendations"""

    def test_endpoint(self, client: TestClient, sample_user: User, book_factory):
        book = book_factory(
            title="The Name of the Wind",
            genre=BookGenre.FANTASY.value,
            average_rating=4.6,
            ratings_count=12,
        )

        response = client.get(f"/api/v1/users/{sample_user.id}/recommendations")

        assert response.status_code == status.HTTP_200_OK
        assert [b["id"] for b in response.json()] == [book.id]
        assert response.json()[0]["title"] == "The Name of the Wind"

    def test_endpoint_unknown_user(self, client: TestClient):
        response = client.get("/api/v1/users/99999/recommendations")

        assert response.status_code == status.HTTP_404_NOT_FOUND

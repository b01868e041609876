"""
Tests for the Rating Aggregate

The book's average_rating / ratings_count must always equal the aggregate
of its current reviews, with the mean rounded half-up to one decimal.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookreview.models import Book, Review
from bookreview.models.user import User
from bookreview.services.ratings import (
    compute_rating_aggregate,
    rating_distribution,
    recalculate_all_book_ratings,
    recalculate_book_rating,
    round_average,
)
from bookreview.services.security import create_access_token


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def review_payload(rating: int) -> dict:
    return {
        "rating": rating,
        "title": f"{rating} stars",
        "content": f"My verdict is {rating} out of 5.",
    }


class TestRoundAverage:
    @pytest.mark.parametrize(
        "total,count,expected",
        [
            (13, 4, 3.3),  # 3.25 rounds half-up
            (7, 3, 2.3),
            (5, 3, 1.7),
            (12, 3, 4.0),
            (0, 0, 0.0),
        ],
    )
    def test_round_average(self, total, count, expected):
        assert round_average(total, count) == expected

    def test_compute_rating_aggregate(self):
        assert compute_rating_aggregate([5, 4, 3]) == (4.0, 3)
        assert compute_rating_aggregate([]) == (0.0, 0)


class TestRecalculate:
    def test_recalculate_book_rating(
        self,
        db_session: Session,
        sample_book: Book,
        user_factory,
    ):
        for rating in (5, 5, 4, 3):
            reviewer = user_factory()
            db_session.add(Review(
                book_id=sample_book.id,
                user_id=reviewer.id,
                rating=rating,
                title="Review",
                content="Some thoughts.",
            ))

        book = recalculate_book_rating(db_session, sample_book.id)

        assert book.average_rating == 4.3  # 17 / 4 = 4.25
        assert book.ratings_count == 4
        assert rating_distribution(db_session, sample_book.id) == {1: 0, 2: 0, 3: 1, 4: 1, 5: 2}

    def test_recalculate_missing_book(self, db_session: Session):
        assert recalculate_book_rating(db_session, 99999) is None

    def test_recalculate_all_repairs_drift(
        self,
        db_session: Session,
        sample_review: Review,
        book_factory,
    ):
        drifted = sample_review.book
        drifted.average_rating = 1.0
        drifted.ratings_count = 7
        empty = book_factory(average_rating=3.0, ratings_count=2)
        db_session.commit()

        updated = recalculate_all_book_ratings(db_session)

        assert updated == 2
        assert (drifted.average_rating, drifted.ratings_count) == (4.0, 1)
        assert (empty.average_rating, empty.ratings_count) == (0.0, 0)


class TestRatingScenario:
    """Aggregate follows reviews through create, update and delete."""

    def test_aggregate_follows_review_writes(
        self,
        client: TestClient,
        sample_book: Book,
        user_factory,
    ):
        rating_url = f"/api/v1/books/{sample_book.id}/rating"
        reviews_url = f"/api/v1/books/{sample_book.id}/reviews"

        for rating in (5, 4, 3):
            response = client.post(
                reviews_url,
                json=review_payload(rating),
                headers=get_auth_header(user_factory()),
            )
            assert response.status_code == status.HTTP_201_CREATED

        stats = client.get(rating_url).json()
        assert stats["average_rating"] == 4.0
        assert stats["total_reviews"] == 3

        fourth = user_factory()
        created = client.post(
            reviews_url,
            json=review_payload(2),
            headers=get_auth_header(fourth),
        ).json()

        stats = client.get(rating_url).json()
        assert stats["average_rating"] == 3.5
        assert stats["total_reviews"] == 4
        assert stats["rating_distribution"] == {"1": 0, "2": 1, "3": 1, "4": 1, "5": 1}

        client.put(
            f"/api/v1/reviews/{created['id']}",
            json={"rating": 1},
            headers=get_auth_header(fourth),
        )
        assert client.get(rating_url).json()["average_rating"] == 3.3  # 13 / 4

        client.delete(
            f"/api/v1/reviews/{created['id']}",
            headers=get_auth_header(fourth),
        )

        stats = client.get(rating_url).json()
        assert stats["average_rating"] == 4.0
        assert stats["total_reviews"] == 3

    def test_rating_stats_unknown_book(self, client: TestClient):
        response = client.get("/api/v1/books/99999/rating")

        assert response.status_code == status.HTTP_404_NOT_FOUND

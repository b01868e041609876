"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (in-memory database, client, users, books, reviews)
- test_auth.py: Registration, login and /auth/me
- test_books.py: /api/v1/books catalog, featured and trending lists
- test_reviews.py: Review create/list/update/delete
- test_ratings.py: Book rating aggregate and its rounding
- test_social.py: Follow, like, helpful votes and wishlist toggles
- test_users.py: User listing, profiles and reading statistics
- test_recommendations.py: Genre-based recommendations

Running Tests:
    # Install with the test extra
    pip install -e ".[test]"

    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_ratings.py

    # Run specific test
    pytest tests/test_reviews.py::TestDeleteReview::test_author_can_delete

    # Run with verbose output
    pytest -v
"""

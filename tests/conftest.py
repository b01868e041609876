"""
pytest Fixtures for Book Review API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for the engine (tables created once)
- function scope for sessions (each test runs in a transaction that is
  rolled back afterwards)
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# Environment variables must be set BEFORE importing the app:
# settings are cached on first import.
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookreview.database import Base, get_db
from bookreview.main import app
from bookreview.models import Book, BookGenre, Review, User
from bookreview.services.ratings import recalculate_book_rating
from bookreview.services.security import hash_password

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory keeps the suite fast and self-contained.
# JSON columns and CHECK constraints behave the same as on PostgreSQL for
# what these tests exercise.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the single connection alive for the entire session;
    without it the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is bound to a connection-level transaction that is rolled
    back after the test, so commits made by the app never leak between tests.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client that uses the test database session.

    The get_db dependency is overridden to yield the test session.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def user_factory(db_session: Session) -> Callable[..., User]:
    """
    Build and persist users with unique usernames.

    Usage:
        reader = user_factory(favorite_genres=["Fantasy"])
    """
    counter = {"n": 0}

    def make_user(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "email": f"reader{n}@example.com",
            "username": f"reader{n}",
            "hashed_password": hash_password("ReaderPass123"),
            "first_name": "Reader",
            "last_name": f"Number{n}",
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return make_user


@pytest.fixture
def book_factory(db_session: Session, sample_user: User) -> Callable[..., Book]:
    """Build and persist books added by sample_user."""
    counter = {"n": 0}

    def make_book(**overrides) -> Book:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "title": f"Generated Book {n}",
            "author": "Various Authors",
            "description": f"Description of generated book {n}.",
            "genre": BookGenre.FICTION.value,
            "page_count": 100 + n,
            "added_by_id": sample_user.id,
        }
        values.update(overrides)
        book = Book(**values)
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return make_book


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(
        email="testuser@example.com",
        username="testuser",
        hashed_password=hash_password("SecurePass123"),
        first_name="Test",
        last_name="User",
        favorite_genres=[BookGenre.FANTASY.value],
        is_active=True,
        is_verified=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    user = User(
        email="seconduser@example.com",
        username="seconduser",
        hashed_password=hash_password("SecurePass456"),
        first_name="Second",
        last_name="User",
        is_active=True,
        is_verified=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def superuser(db_session: Session) -> User:
    """Create a superuser for testing admin scenarios."""
    user = User(
        email="admin@example.com",
        username="admin",
        hashed_password=hash_password("AdminPass123"),
        first_name="Admin",
        last_name="User",
        is_active=True,
        is_verified=True,
        is_superuser=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_book(db_session: Session, sample_user: User) -> Book:
    """Create a sample book added by sample_user."""
    book = Book(
        title="The Hobbit",
        author="J.R.R. Tolkien",
        isbn="9780547928227",
        description="Bilbo Baggins is swept into a quest to reclaim a dwarf kingdom.",
        genre=BookGenre.FANTASY.value,
        page_count=310,
        added_by_id=sample_user.id,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def sample_review(
    db_session: Session,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """Create a sample review by sample_user, with the book rating updated."""
    review = Review(
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=4,
        title="Great book!",
        content="I really enjoyed reading this book.",
    )
    db_session.add(review)
    recalculate_book_rating(db_session, sample_book.id)
    db_session.commit()
    db_session.refresh(review)
    return review

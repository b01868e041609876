"""
Database Configuration Module

Sets up SQLAlchemy 2.0 for the Book Review API.

We use synchronous SQLAlchemy with the "session per request" pattern:
1. Request arrives → create a new session
2. Use the session for all database operations in that request
3. Commit once the request's writes are complete
4. Close the session when the request ends

Multi-row updates (a review plus its book's rating aggregate, both sides of
a follow) are flushed into the same session and committed together, so a
failure part-way through rolls back the whole request.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookreview.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# - pool_pre_ping: test connection health before use (prevents stale connections)
# - echo: log all SQL statements in debug mode

engine = create_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
    echo=settings.debug,
)


# =============================================================================
# Session Factory
# =============================================================================
# autoflush=False: services call flush() explicitly before running
# aggregate queries over rows written in the same request.

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, code after yield closes it,
    even when the route raised.

    Usage in Routes:
        @router.get("/books/")
        def get_books(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """
    Create all database tables.

    Development and test helper; production deployments use Alembic.
    """
    Base.metadata.create_all(bind=engine)

#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample readers, books and reviews for
development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample users (one admin), books and reviews
4. Recalculates every book's rating from the seeded reviews
"""

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookreview.database import SessionLocal, create_tables
from bookreview.models import Book, BookGenre, Review, User, follows
from bookreview.services.ratings import recalculate_all_book_ratings
from bookreview.services.security import hash_password
from bookreview.services.social import mark_book_read

SEED_PASSWORD = "ReadMore123"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    for review in db.query(Review).all():
        db.delete(review)
    for book in db.query(Book).all():
        db.delete(book)
    db.execute(delete(follows))
    db.query(User).delete()
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, User]:
    """Create sample readers and one administrator."""
    print("Creating users...")
    users_data = [
        {
            "username": "admin",
            "email": "admin@example.com",
            "first_name": "Ada",
            "last_name": "Admin",
            "is_superuser": True,
            "favorite_genres": [],
        },
        {
            "username": "mira",
            "email": "mira@example.com",
            "first_name": "Mira",
            "last_name": "Okafor",
            "bio": "Fantasy first, everything else second.",
            "favorite_genres": [BookGenre.FANTASY.value, BookGenre.SCI_FI.value],
            "reading_goal": 30,
        },
        {
            "username": "tomas",
            "email": "tomas@example.com",
            "first_name": "Tomas",
            "last_name": "Lindqvist",
            "favorite_genres": [BookGenre.MYSTERY.value, BookGenre.HISTORY.value],
        },
        {
            "username": "priya",
            "email": "priya@example.com",
            "first_name": "Priya",
            "last_name": "Raman",
            "favorite_genres": [BookGenre.FICTION.value],
            "reading_goal": 20,
        },
    ]

    users = {}
    for data in users_data:
        user = User(hashed_password=hash_password(SEED_PASSWORD), **data)
        db.add(user)
        users[data["username"]] = user

    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session, added_by: User) -> dict[str, Book]:
    """Create sample books added by the given user."""
    print("Creating books...")
    books_data = [
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "isbn": "9780547928227",
            "description": "Bilbo Baggins is swept into a quest to reclaim a dwarf kingdom.",
            "genre": BookGenre.FANTASY.value,
            "published_date": date(1937, 9, 21),
            "publisher": "George Allen & Unwin",
            "page_count": 310,
            "price_amount": Decimal("10.99"),
            "featured": True,
        },
        {
            "title": "Dune",
            "author": "Frank Herbert",
            "isbn": "9780441013593",
            "description": "Politics, religion and ecology on the desert planet Arrakis.",
            "genre": BookGenre.SCI_FI.value,
            "published_date": date(1965, 8, 1),
            "page_count": 412,
            "price_amount": Decimal("9.99"),
            "tags": ["classic", "space opera"],
        },
        {
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "isbn": "9780062693662",
            "description": "Hercule Poirot investigates a murder aboard a snowbound train.",
            "genre": BookGenre.MYSTERY.value,
            "published_date": date(1934, 1, 1),
            "page_count": 256,
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "isbn": "9780141439518",
            "description": "Elizabeth Bennet and Mr Darcy misjudge each other.",
            "genre": BookGenre.FICTION.value,
            "published_date": date(1813, 1, 28),
            "page_count": 432,
            "featured": True,
        },
        {
            "title": "SPQR",
            "author": "Mary Beard",
            "isbn": "9781631492228",
            "description": "A history of ancient Rome from its founding myths to 212 CE.",
            "genre": BookGenre.HISTORY.value,
            "page_count": 608,
        },
    ]

    books = {}
    for data in books_data:
        book = Book(added_by_id=added_by.id, **data)
        db.add(book)
        books[data["title"]] = book

    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_reviews(db: Session, users: dict[str, User], books: dict[str, Book]) -> int:
    """Create sample reviews and mark the reviewed books as read."""
    print("Creating reviews...")
    reviews_data = [
        ("mira", "The Hobbit", 5, "Still magical", "Reread it this winter and loved every page."),
        ("mira", "Dune", 4, "Dense but rewarding", "The first hundred pages are slow, then it flies."),
        ("tomas", "Murder on the Orient Express", 5, "The ending!", "I did not see it coming at all."),
        ("tomas", "SPQR", 4, "Readable history", "Beard makes Roman politics feel current."),
        ("priya", "Pride and Prejudice", 5, "Sharp and funny", "Austen's dialogue holds up remarkably well."),
        ("priya", "The Hobbit", 3, "Charming", "Lovely, though I prefer the longer books."),
    ]

    for username, title, rating, review_title, content in reviews_data:
        user, book = users[username], books[title]
        db.add(Review(
            book_id=book.id,
            user_id=user.id,
            rating=rating,
            title=review_title,
            content=content,
        ))
        mark_book_read(user, book)

    users["mira"].following.append(users["tomas"])
    users["priya"].following.append(users["mira"])
    users["tomas"].wishlist.append(books["Dune"])

    db.commit()
    print(f"Created {len(reviews_data)} reviews.")
    return len(reviews_data)


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db, users["admin"])
        review_count = create_reviews(db, users, books)
        recalculate_all_book_ratings(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SEED_PASSWORD})")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {review_count}")
        print("\nAPI documentation at http://localhost:5001/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()

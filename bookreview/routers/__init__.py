"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* endpoints (registration, login)
- books.py: /api/v1/books/* catalog endpoints
- reviews.py: /api/v1/reviews/* plus the review views of books and users
- users.py: /api/v1/users/* profiles, social graph and statistics

Each router is imported and registered in main.py.
"""

from bookreview.routers.auth import router as auth_router
from bookreview.routers.books import router as books_router
from bookreview.routers.reviews import router as reviews_router
from bookreview.routers.users import router as users_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
    "users_router",
]

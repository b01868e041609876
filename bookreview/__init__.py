"""
Book Review API Application Package

A REST service for a community book-review site: catalog entries,
user reviews with ratings, social features and reading statistics.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (ratings, recommendations, social toggles)
"""

__version__ = "0.1.0"

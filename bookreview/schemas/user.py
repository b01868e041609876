"""
User Pydantic Schemas

These schemas define the shape of data for User-related API operations.

Schemas:
- UserCreate: Registration data (email, username, password, names)
- UserUpdate: Profile update fields (bio, favorite genres, reading goal...)
- UserResponse: The caller's own account data (never exposes password)
- UserPublicResponse: Profile data visible to other users
- UserListResponse: Paginated list of public profiles
- TokenResponse: Login result
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from bookreview.models.book import BookGenre
from bookreview.schemas.common import PaginationMeta


class UserBase(BaseModel):
    """
    Base schema with shared user fields.

    Contains fields common to multiple user schemas.
    """

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["jane@example.com"],
    )

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        description="Unique username (3-30 characters, letters, numbers and underscores)",
        examples=["janedoe", "book_worm42"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        """
        Validate username format.

        Rules:
        - 3-30 characters
        - Only alphanumeric and underscores
        - Must start with a letter
        """
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9_]*$", v):
            raise ValueError(
                "Username must start with a letter and contain only "
                "letters, numbers, and underscores"
            )
        return v.lower()  # Normalize to lowercase


class UserCreate(UserBase):
    """
    Schema for user registration.

    Requires email, username, names and a password with strength validation.
    """

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 chars, must include uppercase and number)",
        examples=["SecurePass123"],
    )

    first_name: str = Field(..., min_length=1, max_length=50, examples=["Jane"])
    last_name: str = Field(..., min_length=1, max_length=50, examples=["Doe"])

    bio: str | None = Field(default=None, max_length=500)

    favorite_genres: list[BookGenre] = Field(
        default_factory=list,
        description="Genres the user likes to read",
        examples=[["Fantasy", "Mystery"]],
    )

    reading_goal: int = Field(
        default=12,
        ge=0,
        le=365,
        description="Books the user plans to read this year",
    )

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        """
        Validate password strength.

        Requirements:
        - At least 8 characters (enforced by min_length)
        - At least 1 uppercase letter
        - At least 1 lowercase letter
        - At least 1 number
        """
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def names_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class UserUpdate(BaseModel):
    """
    Schema for updating the caller's profile.

    All fields are optional for partial updates.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)

    bio: str | None = Field(
        default=None,
        max_length=500,
        description="User biography",
    )

    avatar_url: str | None = Field(
        default=None,
        max_length=500,
        description="URL to avatar image",
    )

    favorite_genres: list[BookGenre] | None = Field(
        default=None,
        description="Replaces the user's favorite genres",
    )

    reading_goal: int | None = Field(default=None, ge=0, le=365)


class UserPublicResponse(BaseModel):
    """
    Schema for public user profile (visible to other users).

    Excludes email and account status fields.
    """

    id: int = Field(..., description="Unique user identifier")
    username: str = Field(..., description="Unique username")
    first_name: str
    last_name: str
    full_name: str = Field(..., description="First and last name")
    avatar_url: str | None = Field(default=None, description="URL to avatar image")
    bio: str | None = Field(default=None, description="User biography")
    favorite_genres: list[str] = Field(default_factory=list)
    created_at: datetime = Field(..., description="When the user joined")

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserPublicResponse):
    """
    Schema for the authenticated user's own account.

    SECURITY: Never includes password or hashed password.
    """

    email: EmailStr = Field(..., description="User's email address")
    reading_goal: int = Field(..., description="Yearly reading goal")
    is_active: bool = Field(..., description="Whether the account is active")
    is_verified: bool = Field(..., description="Whether email has been verified")
    is_superuser: bool = Field(default=False, description="Whether the user is an administrator")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "email": "jane@example.com",
                "username": "janedoe",
                "first_name": "Jane",
                "last_name": "Doe",
                "full_name": "Jane Doe",
                "avatar_url": None,
                "bio": "Mystery and fantasy reader",
                "favorite_genres": ["Mystery", "Fantasy"],
                "reading_goal": 24,
                "is_active": True,
                "is_verified": False,
                "is_superuser": False,
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class UserListResponse(BaseModel):
    """Paginated list of public user profiles."""

    items: list[UserPublicResponse]
    pagination: PaginationMeta


class TokenResponse(BaseModel):
    """Access token returned by login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Always 'bearer'")
    expires_in: int = Field(..., description="Token lifetime in seconds")

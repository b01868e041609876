"""initial_schema

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment="User's email address (used for login)"),
        sa.Column('username', sa.String(length=30), nullable=False, comment='Unique username for profile URLs'),
        sa.Column('hashed_password', sa.String(length=255), nullable=False, comment='Bcrypt hashed password'),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('bio', sa.String(length=500), nullable=True, comment='User biography'),
        sa.Column('avatar_url', sa.Text(), nullable=True, comment="URL to user's avatar image"),
        sa.Column('favorite_genres', sa.JSON(), nullable=False, comment='Genres the user declared as favorites'),
        sa.Column('reading_goal', sa.Integer(), nullable=False, comment='Books the user plans to read this year'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False, comment='Whether user has admin privileges'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('reading_goal >= 0 AND reading_goal <= 365', name='ck_user_reading_goal_range'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'follows',
        sa.Column('follower_id', sa.Integer(), nullable=False),
        sa.Column('followed_id', sa.Integer(), nullable=False),
        sa.CheckConstraint('follower_id <> followed_id', name='ck_follows_not_self'),
        sa.ForeignKeyConstraint(['followed_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('follower_id', 'followed_id'),
        comment='Directed follow edges between users',
    )

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False, comment='Book title'),
        sa.Column('author', sa.String(length=100), nullable=False, comment='Author name as printed on the cover'),
        sa.Column('isbn', sa.String(length=13), nullable=True, comment='ISBN-10 or ISBN-13, digits only'),
        sa.Column('description', sa.Text(), nullable=False, comment='Book description or summary'),
        sa.Column('genre', sa.String(length=20), nullable=False, comment='One of the BookGenre values'),
        sa.Column('sub_genres', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('published_date', sa.Date(), nullable=True),
        sa.Column('publisher', sa.String(length=100), nullable=True),
        sa.Column('page_count', sa.Integer(), nullable=False, comment='Number of pages in the book'),
        sa.Column('language', sa.String(length=50), nullable=False),
        sa.Column('cover_image', sa.Text(), nullable=True),
        sa.Column('price_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('price_currency', sa.String(length=3), nullable=False),
        sa.Column('availability', sa.String(length=20), nullable=False),
        sa.Column(
            'average_rating',
            sa.Float(),
            nullable=False,
            server_default='0',
            comment='Mean review rating rounded to one decimal, 0 without reviews',
        ),
        sa.Column(
            'ratings_count',
            sa.Integer(),
            nullable=False,
            server_default='0',
            comment='Number of reviews for this book',
        ),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('added_by_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('page_count >= 1', name='ck_book_page_count_positive'),
        sa.CheckConstraint(
            'average_rating >= 0 AND average_rating <= 5',
            name='ck_book_average_rating_range',
        ),
        sa.ForeignKeyConstraint(['added_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_books_title'), 'books', ['title'], unique=False)
    op.create_index(op.f('ix_books_author'), 'books', ['author'], unique=False)
    op.create_index(op.f('ix_books_isbn'), 'books', ['isbn'], unique=True)
    op.create_index(op.f('ix_books_genre'), 'books', ['genre'], unique=False)
    op.create_index(op.f('ix_books_average_rating'), 'books', ['average_rating'], unique=False)
    op.create_index(op.f('ix_books_added_by_id'), 'books', ['added_by_id'], unique=False)
    op.create_index(op.f('ix_books_created_at'), 'books', ['created_at'], unique=False)

    for table, comment in (
        ('user_books_read', 'Books each user has read'),
        ('user_wishlist', 'Books each user wants to read'),
    ):
        op.create_table(
            table,
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('book_id', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('user_id', 'book_id'),
            comment=comment,
        )

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Rating from 1-5 stars'),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('pros', sa.JSON(), nullable=False),
        sa.Column('cons', sa.JSON(), nullable=False),
        sa.Column('recommended_for', sa.JSON(), nullable=False),
        sa.Column('spoiler_warning', sa.Boolean(), nullable=False),
        sa.Column('reading_progress', sa.String(length=20), nullable=False),
        sa.Column('reading_start_date', sa.Date(), nullable=True),
        sa.Column('reading_end_date', sa.Date(), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('flagged', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('book_id', 'user_id', name='uq_review_book_user'),
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)
    op.create_index(op.f('ix_reviews_book_id'), 'reviews', ['book_id'], unique=False)
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)

    op.create_table(
        'review_likes',
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('review_id', 'user_id'),
        comment='Users who liked each review',
    )

    op.create_table(
        'review_helpful_votes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('is_helpful', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('review_id', 'user_id', name='uq_helpful_vote_review_user'),
    )
    op.create_index(
        op.f('ix_review_helpful_votes_review_id'),
        'review_helpful_votes',
        ['review_id'],
        unique=False,
    )

    op.create_table(
        'review_edits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('edited_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('previous_content', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_review_edits_review_id'), 'review_edits', ['review_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_review_edits_review_id'), table_name='review_edits')
    op.drop_table('review_edits')
    op.drop_index(op.f('ix_review_helpful_votes_review_id'), table_name='review_helpful_votes')
    op.drop_table('review_helpful_votes')
    op.drop_table('review_likes')
    op.drop_index(op.f('ix_reviews_user_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_book_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_id'), table_name='reviews')
    op.drop_table('reviews')
    op.drop_table('user_wishlist')
    op.drop_table('user_books_read')
    op.drop_index(op.f('ix_books_created_at'), table_name='books')
    op.drop_index(op.f('ix_books_added_by_id'), table_name='books')
    op.drop_index(op.f('ix_books_average_rating'), table_name='books')
    op.drop_index(op.f('ix_books_genre'), table_name='books')
    op.drop_index(op.f('ix_books_isbn'), table_name='books')
    op.drop_index(op.f('ix_books_author'), table_name='books')
    op.drop_index(op.f('ix_books_title'), table_name='books')
    op.drop_table('books')
    op.drop_table('follows')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

"""
Social Service

Presence toggles over user-owned and review-owned sets:

- Follow/unfollow: flips one row in the follows table. Both
  follower.following and followed.followers are views of that row.
- Wishlist: flips a book's membership in a user's wishlist.
- Like: flips a user's membership in a review's likes.
- Helpful vote: records or overwrites one vote per (review, user).

Each toggle returns the state after the call. None of these functions
commit; the router commits once per request.
"""

import logging

from sqlalchemy.orm import Session

from bookreview.models import Book, HelpfulVote, Review, User

logger = logging.getLogger(__name__)


class SelfFollowError(ValueError):
    """Raised when a user tries to follow themselves."""


def toggle_follow(follower: User, target: User) -> bool:
    """
    Follow `target` if not already followed, otherwise unfollow.

    Returns:
        True if `follower` now follows `target`, False otherwise

    Raises:
        SelfFollowError: If follower and target are the same user
    """
    if follower.id == target.id:
        raise SelfFollowError("You cannot follow yourself")

    if target in follower.following:
        follower.following.remove(target)
        logger.info(f"User {follower.id} unfollowed user {target.id}")
        return False

    follower.following.append(target)
    logger.info(f"User {follower.id} followed user {target.id}")
    return True


def toggle_wishlist(user: User, book: Book) -> bool:
    """
    Add `book` to the user's wishlist, or remove it if already present.

    Returns:
        True if the book is in the wishlist after the call
    """
    if book in user.wishlist:
        user.wishlist.remove(book)
        return False
    user.wishlist.append(book)
    return True


def toggle_like(review: Review, user: User) -> bool:
    """
    Like the review, or remove the like if the user already liked it.

    Returns:
        True if the user likes the review after the call
    """
    if user in review.liked_by:
        review.liked_by.remove(user)
        return False
    review.liked_by.append(user)
    return True


def record_helpful_vote(
    db: Session,
    review: Review,
    user: User,
    is_helpful: bool,
) -> HelpfulVote:
    """
    Record the user's helpfulness vote on a review.

    An existing vote by the same user is updated in place, so a user never
    holds more than one vote and repeating a vote changes nothing.

    Returns:
        The user's (new or updated) vote
    """
    for vote in review.helpful_votes:
        if vote.user_id == user.id:
            vote.is_helpful = is_helpful
            return vote

    vote = HelpfulVote(user_id=user.id, is_helpful=is_helpful)
    review.helpful_votes.append(vote)
    db.flush()
    return vote


def mark_book_read(user: User, book: Book) -> bool:
    """
    Add `book` to the user's books read if it is not there yet.

    Returns:
        True if the book was added
    """
    if book in user.books_read:
        return False
    user.books_read.append(book)
    return True

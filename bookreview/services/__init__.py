"""
Services Package

Business logic kept separate from HTTP handling so it can be reused and
tested without a request:

- ratings.py: Book rating aggregation (average and count)
- recommendations.py: Personal, trending and featured book selection
- social.py: Follow, wishlist, like and helpfulness-vote toggles
- stats.py: Reading statistics and profile counters
- security.py: Password hashing and JWT utilities
- rate_limiter.py: Rate limiting with slowapi
"""

"""
Services Package

Business logic kept apart from HTTP handling, so it can be tested without a
running application.

Current services:
- cache.py: In-process TTL cache with periodic sweep
- google_books.py: Cached Google Books search and volume lookup
- rate_limiter.py: Per-client daily search quota (limits + slowapi helpers)
- security.py: Password hashing and JWT session tokens
- tracking.py: Find-or-create and tracking data access
- users.py: Registration and login
"""

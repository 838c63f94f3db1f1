"""
Book Release Tracker Application Package

Backend for tracking upcoming book releases: a cached, rate-limited proxy
over the Google Books API plus user accounts that follow books, authors and
series.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- errors.py: Error types and their HTTP status codes
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (caching, rate limiting, Google Books, tracking)
"""

__version__ = "0.1.0"

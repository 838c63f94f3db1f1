"""
Test Suite for the Book Release Tracker

Test Organization:
- conftest.py: Shared fixtures (test database, client, fake Google Books)
- test_cache.py / test_rate_limiter.py: The search proxy's guards
- test_security.py / test_auth.py: Passwords, tokens and auth endpoints
- test_books.py: Google Books search and detail
- test_tracking.py / test_calendar.py: Tracking data access and endpoints
- test_health.py: Utility endpoints

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_tracking.py -v
"""

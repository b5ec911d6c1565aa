"""
Test Suite

Tests for the admissions workflow backend.

Structure:
    tests/
    ├── __init__.py                   # This file
    ├── conftest.py                   # Fixtures and in-memory fakes
    ├── test_status_model.py          # Status graph and display helpers
    ├── test_access_policy.py         # Areas, predicates, area registry
    ├── test_route_guard.py           # Allow/redirect decisions
    ├── test_transition_engine.py     # Single transitions and races
    ├── test_enrollment_service.py    # Events, retries, notifications
    ├── test_repositories.py          # MongoDB repositories (mocked collections)
    ├── test_notification_service.py  # Outbox notifications
    ├── test_logger.py                # JSON log formatting
    └── test_api.py                   # HTTP endpoints

To run tests:
    pytest
"""

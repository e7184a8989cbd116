"""
Test Suite for Demande Recommender.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: End-to-end pipeline tests
    - fixtures/: Shared row builders and sample configuration

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
"""

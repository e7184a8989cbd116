"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with mocked dependencies.
Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_eligibility_filter.py: Hard and soft eligibility rules
    - test_deterministic_scorer.py: Score components and ordering
    - test_sanitizer.py: PII scrubbing and candidate whitelist
    - test_config_loader.py: Configuration loading/validation
"""

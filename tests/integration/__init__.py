"""
Integration Tests - End-to-End Pipeline Tests.

These tests verify that all components work together correctly.
Integration tests use the MockClinicDataSource and StaticAdvisor to avoid
external dependencies while testing the full workflow.

Test Files:
    - test_recommendation_pipeline.py: Full recommendation workflow
"""

"""
Test Suite for the price span analytics workbench

Includes:
- Unit tests for span, moving average and sentiment calculations
- Query router intent and handler tests
- Session atomicity tests
- Shared CSV fixtures under tests/fixtures
"""

"""
Test suite for classgallery.

- Unit tests for models, services and UI handlers
- Integration tests for flows that cross several services
"""

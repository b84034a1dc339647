"""unit services tests."""

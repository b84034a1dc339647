"""unit ui tests."""

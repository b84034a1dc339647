"""unit models tests."""

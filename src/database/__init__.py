"""Per-project SQLite schema, models and repositories."""

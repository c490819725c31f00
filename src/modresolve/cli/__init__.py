"""Command-line interface for modresolve."""

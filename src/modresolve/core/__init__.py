"""Core resolution logic for modresolve."""

"""Application factory and lifecycle."""

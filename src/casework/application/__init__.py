"""Application layer - sessions, settings and template use cases."""

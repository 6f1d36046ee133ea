"""Core services: paths, theme, history state and request context."""

"""Persistence: cached repositories and the repository container."""

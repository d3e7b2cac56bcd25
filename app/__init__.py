"""Coworking-space management API."""

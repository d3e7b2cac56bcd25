"""Domain layer: enums, status transition tables and exceptions."""

"""Persistence layer: database management, ORM models and repositories."""

"""Adapters (Hexagonal Architecture)."""

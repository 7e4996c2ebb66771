"""Boundary adapters: relational job store and key-value cache."""

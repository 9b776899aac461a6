"""Helpers for randomness, grid construction, serialization and text reports."""

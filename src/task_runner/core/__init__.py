"""Interfaces shared across the package."""

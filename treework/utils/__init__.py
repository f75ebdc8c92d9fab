"""Utility functions for treework."""

from .sanitize import sanitize_name

__all__ = ["sanitize_name"]

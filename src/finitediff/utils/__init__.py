"""Utility functions for the finitediff package."""

from .layout import flatten, unflatten
from .numerics import relative_error

__all__ = [
    "flatten",
    "unflatten",
    "relative_error",
]

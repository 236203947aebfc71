"""Stencil tables and the shared perturb-evaluate-restore loop."""

from .core import stencil_sum
from .stencil import AccuracyOrder, Stencil, get_stencil

__all__ = ["AccuracyOrder", "Stencil", "get_stencil", "stencil_sum"]

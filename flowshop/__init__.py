"""Permutation flow-shop solvers (``problem``) and CSV benchmark drivers (``bench``)."""

__version__ = "0.1.0"
__all__ = ["problem", "bench"]
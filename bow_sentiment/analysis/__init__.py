"""
Subpackage for model evaluation and inspection.

This package contains modules for scoring held-out predictions and
tabulating fitted coefficients with their significance.
"""

__all__ = ["evaluation", "regression"]

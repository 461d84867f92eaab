"""
Exception hierarchy for OLS atom selection.

Argument problems are raised before any array is touched. Degenerate
dictionary columns are not errors: the projector masks them out locally.
"""


class OLSError(Exception):
    """Base class for all errors raised by ols_pursuit."""


class InvalidArgumentError(OLSError, ValueError):
    """Bad atom budget, repeat count, shape mismatch or non-finite input."""


class NumericalNonFiniteError(OLSError, FloatingPointError):
    """A floating-point fault escaped the degenerate-column guard."""

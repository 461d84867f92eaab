"""
Column normalization for OLS dictionaries.

Each candidate column is rescaled to unit L2 norm one at a time. A column
whose norm is at or below the tolerance cannot be normalized without
producing inf/nan, so it is zeroed and dropped from the active mask instead.
"""

import logging
from typing import Iterable, Optional

import numpy as np

logger = logging.getLogger(__name__)


def default_zero_tol(dtype) -> float:
    """Smallest norm the initial normalization divides by."""
    return float(np.finfo(dtype).tiny)


def _scaled_norm(column: np.ndarray):
    """
    L2 norm computed on the column divided by its largest magnitude.

    sqrt(x·x) overflows for entries near sqrt(max) and underflows to zero
    for entries near sqrt(tiny); the scaled form stays finite and nonzero
    for every finite, nonzero column.

    Returns:
        (unit, ratio, norm) where unit = column / scale, ratio = ||unit||
        and norm = scale * ratio
    """
    scale = np.max(np.abs(column))
    if scale == 0:
        return column, 1.0, scale
    unit = column / scale
    ratio = np.linalg.norm(unit)
    return unit, ratio, scale * ratio


def normalize_columns(dictionary: np.ndarray,
                      active: np.ndarray,
                      tol: Optional[float] = None,
                      columns: Optional[Iterable[int]] = None) -> int:
    """
    Rescale dictionary columns to unit norm in place.

    Args:
        dictionary: (d, P) floating array, modified in place
        active: (P,) boolean mask, columns found degenerate are set False
        tol: norms <= tol count as zero (default: smallest normal float)
        columns: column indices to visit (default: every active column)

    Returns:
        Number of columns deactivated by this call
    """
    if tol is None:
        tol = default_zero_tol(dictionary.dtype)
    if columns is None:
        columns = np.flatnonzero(active)

    n_dropped = 0
    for j in columns:
        column = dictionary[:, j]
        unit, ratio, norm = _scaled_norm(column)
        if norm > tol:
            column[:] = unit / ratio
        else:
            column[:] = 0
            active[j] = False
            n_dropped += 1
            logger.debug("column %d is degenerate (norm %.3e <= %.3e), deactivated",
                         j, norm, tol)
    return n_dropped

"""
Modified Gram-Schmidt step against a newly fixed direction.

After an atom is chosen, its orthogonalized column q becomes the next basis
vector. Every still-active candidate has its component along q removed and
is rescaled to unit norm, so the next correlation scan measures only what
the candidates add beyond the current basis.

Repeating the subtract-and-renormalize pass (``repeat_count > 1``) recovers
orthogonality lost to rounding once many atoms have been removed.
"""

import logging
from typing import Optional

import numpy as np

from .normalization import normalize_columns

logger = logging.getLogger(__name__)


def default_degenerate_tol(dtype) -> float:
    """
    Relative norm below which a projected column is treated as zero.

    Candidates are unit norm going into a pass, so this compares against 1.
    sqrt(eps) caps the noise amplification of a renormalization at 1/sqrt(eps).
    """
    return float(np.sqrt(np.finfo(dtype).eps))


def project_out(dictionary: np.ndarray,
                direction: np.ndarray,
                active: np.ndarray,
                repeat_count: int = 1,
                tol: Optional[float] = None) -> int:
    """
    Remove ``direction`` from all active columns, then renormalize them.

    Args:
        dictionary: (d, P) working dictionary, modified in place
        direction: (d,) unit-norm basis vector
        active: (P,) boolean mask of selectable columns, updated in place
        repeat_count: number of subtract-and-renormalize passes
        tol: post-projection norms <= tol deactivate the column

    Returns:
        Number of columns deactivated
    """
    if tol is None:
        tol = default_degenerate_tol(dictionary.dtype)

    n_dropped = 0
    for _ in range(repeat_count):
        cols = np.flatnonzero(active)
        if cols.size == 0:
            break
        # Columns are independent within a pass; one block update covers all.
        block = dictionary[:, cols]
        block -= np.outer(direction, direction @ block)
        dictionary[:, cols] = block
        n_dropped += normalize_columns(dictionary, active, tol=tol, columns=cols)

    if n_dropped:
        logger.debug("projection deactivated %d column(s)", n_dropped)
    return n_dropped

"""
Orthogonal Least Squares (OLS) greedy atom selection.

Implements Chen, S., Billings, S. A., & Luo, W. (1989). Orthogonal least squares
methods and their application to non-linear system identification. International
Journal of Control, 50(5), 1873-1896, in the column-orthogonalizing form of
Rebollo-Neira, L., & Lowe, D. (2002). Optimized orthogonal matching pursuit
approach. IEEE Signal Processing Letters, 9(4), 137-140.

Unlike OMP, which scores atoms by their raw correlation with the residual,
OLS keeps every remaining candidate orthogonalized against the atoms already
chosen and renormalized. The correlation scan then picks the atom whose
addition reduces the least-squares residual the most, and the returned
ordering is nested: every prefix is the OLS answer for that budget.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..exceptions import InvalidArgumentError, NumericalNonFiniteError
from .array import (
    ArrayLike, check_budget, check_inputs, check_repeat_count, check_tolerance,
)
from .interfaces import ProgressCallback
from .normalization import normalize_columns
from .projection import default_degenerate_tol, project_out
from .selection_state import SelectionState
from .stopping import StoppingPolicy, default_residual_tol

logger = logging.getLogger(__name__)


@dataclass
class OrthogonalLeastSquares:
    """
    Greedy OLS selector.

    Args:
        n_atoms: atom budget M; None or anything above min(d, P) is clamped
            to min(d, P)
        repeat_count: Gram-Schmidt passes per step; values above one
            re-orthogonalize the candidates for better numerical robustness
        degenerate_tol: relative norm under which an orthogonalized candidate
            is dropped (default: sqrt(eps) of the working dtype)
        residual_tol: absolute residual norm at which selection stops
            (default: eps of the working dtype)
        overwrite_dictionary: normalize and orthogonalize the caller's array
            in place instead of a copy (only when it already has the working
            dtype)
    """
    n_atoms: Optional[int] = None
    repeat_count: int = 1
    degenerate_tol: Optional[float] = None
    residual_tol: Optional[float] = None
    overwrite_dictionary: bool = False

    @classmethod
    def from_config(cls, config) -> "OrthogonalLeastSquares":
        """Build a selector from a ``SelectionConfig``."""
        return cls(
            n_atoms=config.n_atoms,
            repeat_count=config.repeat_count,
            degenerate_tol=config.degenerate_tol,
            residual_tol=config.residual_tol,
        )

    @property
    def name(self) -> str:
        return "ols"

    def run(self, signal: ArrayLike, dictionary: ArrayLike,
            progress: Optional[ProgressCallback] = None) -> SelectionState:
        """
        Run OLS and return the full selection state.

        Args:
            signal: Signal vector (n_features,) or (n_features, 1)
            dictionary: Dictionary matrix (n_features, n_atoms)
            progress: called with the 1-based iteration number before each step

        Returns:
            SelectionState holding indices, basis Q, residuals Rf, coefficients z
            and the stop reason

        Raises:
            InvalidArgumentError: before any mutation, for bad inputs or options
        """
        f, phi, dtype = check_inputs(signal, dictionary)
        d, n_candidates = phi.shape
        budget = check_budget(self.n_atoms, d, n_candidates)
        repeat_count = check_repeat_count(self.repeat_count)
        degenerate_tol = check_tolerance("degenerate_tol", self.degenerate_tol)
        residual_tol = check_tolerance("residual_tol", self.residual_tol, allow_zero=True)
        if self.n_atoms is not None and budget < self.n_atoms:
            logger.debug("n_atoms=%d clamped to min(d, P)=%d", self.n_atoms, budget)

        if self.overwrite_dictionary and phi.dtype == dtype and phi.flags.writeable:
            working = phi
        else:
            working = np.array(phi, dtype=dtype, copy=True)

        if degenerate_tol is None:
            degenerate_tol = default_degenerate_tol(dtype)
        if residual_tol is None:
            residual_tol = default_residual_tol(dtype)
        policy = StoppingPolicy(n_atoms=budget, residual_tol=residual_tol)

        state = SelectionState.allocate(f, working, budget)
        try:
            with np.errstate(divide="raise", invalid="raise"):
                n_zero = normalize_columns(state.dictionary, state.active)
                if n_zero:
                    logger.debug("%d zero-norm column(s) excluded from selection", n_zero)
                self._select_atoms(state, policy, repeat_count, degenerate_tol, progress)
        except FloatingPointError as e:
            raise NumericalNonFiniteError(
                f"Non-finite value after {state.n_selected} selection(s): {e}"
            ) from e

        logger.debug("OLS stopped after %d atom(s): %s (residual norm %.3e)",
                     state.n_selected, state.stop_reason.value, state.residual_norm)
        return state

    def select(self, signal: ArrayLike, dictionary: ArrayLike,
               progress: Optional[ProgressCallback] = None) -> List[int]:
        """Selected dictionary column indices (0-based), in selection order."""
        return self.run(signal, dictionary, progress=progress).selected_indices

    def _select_atoms(self, state: SelectionState, policy: StoppingPolicy,
                      repeat_count: int, degenerate_tol: float,
                      progress: Optional[ProgressCallback]) -> None:
        """Greedy loop: scan, pick, orthogonalize, update residual, check stop."""
        phi = state.dictionary
        reason = policy.check(state)
        while reason is None:
            if progress is not None:
                progress(state.n_selected + 1)

            # Inactive columns can never win; argmax keeps the first maximum.
            scores = np.full(phi.shape[1], -np.inf)
            active = np.flatnonzero(state.active)
            scores[active] = np.abs(state.residual @ phi[:, active])
            index = int(np.argmax(scores))

            state.active[index] = False
            direction = phi[:, index].copy()
            project_out(phi, direction, state.active,
                        repeat_count=repeat_count, tol=degenerate_tol)
            state.record(index, direction)

            reason = policy.check(state)
        state.stop_reason = reason


def project_onto_atoms(signal: ArrayLike, dictionary: ArrayLike,
                       indices: List[int]) -> np.ndarray:
    """
    Orthogonal projection of ``signal`` onto the span of the listed atoms.

    This is the reconstruction an OLS selection achieves; it does not solve
    for coefficients in the original (non-orthogonal) atom basis.
    """
    f, phi, dtype = check_inputs(signal, dictionary)
    idx = np.asarray(indices, dtype=np.intp).ravel()
    if idx.size == 0:
        return np.zeros(f.shape[0], dtype=dtype)
    if idx.min() < 0 or idx.max() >= phi.shape[1]:
        raise InvalidArgumentError(
            f"Atom indices must lie in [0, {phi.shape[1]}), got {idx.tolist()}"
        )
    Q, _ = np.linalg.qr(np.asarray(phi[:, idx], dtype=dtype))
    f = f.astype(dtype)
    return Q @ (Q.T @ f)


def ols(signal: ArrayLike,
        dictionary: ArrayLike,
        n_atoms: Optional[int] = None,
        repeat_count: int = 1,
        progress: Optional[ProgressCallback] = None) -> List[int]:
    """
    Select the best ``n_atoms`` columns of ``dictionary`` for ``signal`` by OLS.

    Args:
        signal: Signal vector (n_features,)
        dictionary: Dictionary matrix (n_features, n_atoms); not modified
        n_atoms: Maximum number of atoms (default and upper clamp: min(d, P))
        repeat_count: Gram-Schmidt passes per step
        progress: Optional per-iteration observer

    Returns:
        0-based column indices in selection order; each prefix is the OLS
        selection for that smaller budget

    Example:
        >>> ols([3.0, 4.0], np.eye(2))
        [1, 0]
    """
    selector = OrthogonalLeastSquares(n_atoms=n_atoms, repeat_count=repeat_count)
    return selector.select(signal, dictionary, progress=progress)

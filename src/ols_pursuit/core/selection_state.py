"""
Mutable state of a single OLS run.

One ``SelectionState`` is created per call and owned by it. Buffers are
allocated up front for the full atom budget M and filled left to right;
``n_selected`` says how much of each buffer is meaningful.

Residual bookkeeping keeps the exact decomposition

    f = sum_{k < m} z[k] * Q[:, k] + Rf[:, m]

after every step m.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np


class StopReason(Enum):
    """Why the selection loop ended."""
    BUDGET = "budget"          # n_selected reached the atom budget
    RESIDUAL = "residual"      # residual norm collapsed to numerical zero
    EXHAUSTED = "exhausted"    # no selectable column left


@dataclass
class SelectionState:
    """Selection buffers for one signal/dictionary pair.

    Attributes:
        signal: private copy of f, shape (d,)
        dictionary: working dictionary, normalized then orthogonalized, (d, P)
        active: selectable-column mask, (P,)
        indices: selected column indices, capacity M
        basis: orthonormal directions Q, (d, M)
        residuals: Rf, (d, M + 1), column 0 is f
        coefficients: z, (M,)
        n_selected: filled count of the buffers above
        stop_reason: set when the loop ends
    """
    signal: np.ndarray
    dictionary: np.ndarray
    active: np.ndarray
    indices: np.ndarray
    basis: np.ndarray
    residuals: np.ndarray
    coefficients: np.ndarray
    n_selected: int = 0
    stop_reason: Optional[StopReason] = field(default=None)

    @classmethod
    def allocate(cls, signal: np.ndarray, dictionary: np.ndarray,
                 capacity: int) -> "SelectionState":
        """Allocate buffers for at most ``capacity`` selections.

        ``signal`` is copied; ``dictionary`` is taken as the working array
        as-is, so the caller decides whether it is a copy.
        """
        d, n_candidates = dictionary.shape
        dtype = dictionary.dtype
        residuals = np.zeros((d, capacity + 1), dtype=dtype)
        residuals[:, 0] = signal
        return cls(
            signal=np.array(signal, dtype=dtype, copy=True),
            dictionary=dictionary,
            active=np.ones(n_candidates, dtype=bool),
            indices=np.full(capacity, -1, dtype=np.intp),
            basis=np.zeros((d, capacity), dtype=dtype),
            residuals=residuals,
            coefficients=np.zeros(capacity, dtype=dtype),
        )

    @property
    def capacity(self) -> int:
        return self.indices.shape[0]

    @property
    def residual(self) -> np.ndarray:
        """Current residual Rf[:, m]."""
        return self.residuals[:, self.n_selected]

    @property
    def residual_norm(self) -> float:
        return float(np.linalg.norm(self.residual))

    @property
    def n_active(self) -> int:
        return int(np.count_nonzero(self.active))

    def record(self, index: int, direction: np.ndarray) -> float:
        """
        Append a selection and advance the residual.

        Args:
            index: selected column of the original dictionary
            direction: its orthogonalized, unit-norm column

        Returns:
            Projection coefficient z[m] of the previous residual onto direction
        """
        m = self.n_selected
        if m >= self.capacity:
            raise IndexError(f"selection buffers are full (capacity {self.capacity})")
        previous = self.residuals[:, m]
        coeff = previous @ direction
        self.indices[m] = index
        self.basis[:, m] = direction
        self.coefficients[m] = coeff
        self.residuals[:, m + 1] = previous - coeff * direction
        self.n_selected = m + 1
        return float(coeff)

    # Read-only views over the filled prefix

    @property
    def selected_indices(self) -> List[int]:
        return [int(i) for i in self.indices[:self.n_selected]]

    @property
    def Q(self) -> np.ndarray:
        return self.basis[:, :self.n_selected]

    @property
    def z(self) -> np.ndarray:
        return self.coefficients[:self.n_selected]

    @property
    def Rf(self) -> np.ndarray:
        return self.residuals[:, :self.n_selected + 1]

    @property
    def residual_norms(self) -> np.ndarray:
        """‖Rf[:, k]‖ for k = 0..m; non-increasing."""
        return np.linalg.norm(self.Rf, axis=0)

    def reconstruction(self) -> np.ndarray:
        """Approximation Q z of the signal from the atoms selected so far."""
        return self.Q @ self.z

    @property
    def error_reduction_ratio(self) -> np.ndarray:
        """
        Share of signal energy explained by each step, z[k]² / ‖f‖².

        Together with the final residual energy the ratios sum to one.
        A zero signal gives all-zero ratios.
        """
        energy = float(self.signal @ self.signal)
        if energy == 0.0:
            return np.zeros(self.n_selected, dtype=self.coefficients.dtype)
        return self.z ** 2 / energy

    def orthogonality_error(self) -> float:
        """max |QᵀQ − I| over the selected basis."""
        if self.n_selected == 0:
            return 0.0
        gram = self.Q.T @ self.Q
        return float(np.max(np.abs(gram - np.eye(self.n_selected))))

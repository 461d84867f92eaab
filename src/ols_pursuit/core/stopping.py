"""Termination rules for the OLS loop."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .selection_state import SelectionState, StopReason


def default_residual_tol(dtype) -> float:
    """Machine epsilon of the working dtype, used as an absolute threshold."""
    return float(np.finfo(dtype).eps)


@dataclass(frozen=True)
class StoppingPolicy:
    """
    Decide when the selection is done.

    The loop stops once the budget is spent, once the residual norm is at or
    below ``residual_tol``, or once no selectable column remains. There is no
    partial state to resume from; a larger budget needs a fresh run.
    """
    n_atoms: int
    residual_tol: float

    def check(self, state: SelectionState) -> Optional[StopReason]:
        """Return the reason to stop, or None to keep going."""
        if state.n_selected >= self.n_atoms:
            return StopReason.BUDGET
        if state.n_selected > 0 and state.residual_norm <= self.residual_tol:
            return StopReason.RESIDUAL
        if state.n_active == 0:
            return StopReason.EXHAUSTED
        return None

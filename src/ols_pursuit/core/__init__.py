"""
Numerical core of OLS atom selection.

Normalizer, orthogonal projector, residual tracker, stopping policy and the
greedy driver that ties them together.
"""

from .array import (
    check_inputs, check_budget, check_repeat_count, check_tolerance, working_dtype,
)
from .interfaces import ProgressCallback, AtomSelector
from .normalization import normalize_columns
from .projection import project_out
from .selection_state import SelectionState, StopReason
from .stopping import StoppingPolicy
from .orthogonal_least_squares import OrthogonalLeastSquares, ols, project_onto_atoms

__all__ = [
    'check_inputs', 'check_budget', 'check_repeat_count', 'check_tolerance', 'working_dtype',
    'ProgressCallback', 'AtomSelector',
    'normalize_columns', 'project_out',
    'SelectionState', 'StopReason', 'StoppingPolicy',
    'OrthogonalLeastSquares', 'ols', 'project_onto_atoms',
]

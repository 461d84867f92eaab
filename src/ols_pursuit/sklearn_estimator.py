import numpy as np
from sklearn.base import BaseEstimator
from sklearn.feature_selection import SelectorMixin
from sklearn.utils.validation import check_is_fitted, check_X_y

from .core.orthogonal_least_squares import OrthogonalLeastSquares


class OLSSelector(SelectorMixin, BaseEstimator):
    """
    Feature selector ranking columns of X by OLS against the target y.

    X plays the role of the dictionary (samples are rows, candidate features
    are columns) and y the signal. After ``fit``, ``ranking_`` holds the
    selected feature indices in selection order; ``transform`` keeps those
    columns in their original order.
    """

    def __init__(self, n_atoms=None, repeat_count=1, degenerate_tol=None, residual_tol=None):
        self.n_atoms = n_atoms
        self.repeat_count = repeat_count
        self.degenerate_tol = degenerate_tol
        self.residual_tol = residual_tol

    def fit(self, X, y):
        X, y = check_X_y(X, y, dtype=np.float64, y_numeric=True)
        selector = OrthogonalLeastSquares(
            n_atoms=self.n_atoms,
            repeat_count=self.repeat_count,
            degenerate_tol=self.degenerate_tol,
            residual_tol=self.residual_tol,
        )
        state = selector.run(y, X)
        self.n_features_in_ = X.shape[1]
        self.ranking_ = np.asarray(state.selected_indices, dtype=np.intp)
        self.error_reduction_ratio_ = state.error_reduction_ratio.copy()
        self.stop_reason_ = state.stop_reason.value
        return self

    def _get_support_mask(self):
        check_is_fitted(self, "ranking_")
        mask = np.zeros(self.n_features_in_, dtype=bool)
        mask[self.ranking_] = True
        return mask

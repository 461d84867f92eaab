"""
Test configuration and fixtures for OLS selection tests.

Provides common test fixtures, dictionary generators, and assertion helpers
for all test modules.
"""

import numpy as np
import pytest
from scipy import linalg


@pytest.fixture
def random_seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def signal_length():
    """Standard signal length for tests."""
    return 32


@pytest.fixture
def n_candidates():
    """Overcomplete dictionary size."""
    return 64


@pytest.fixture
def random_problem(signal_length, n_candidates, random_seed):
    """Random signal and overcomplete Gaussian dictionary with uneven column scales."""
    rng = np.random.default_rng(random_seed)
    Phi = rng.standard_normal((signal_length, n_candidates))
    Phi *= rng.uniform(0.1, 10.0, size=n_candidates)
    f = rng.standard_normal(signal_length)
    return {'signal': f, 'dictionary': Phi}


@pytest.fixture
def sparse_problem(signal_length, n_candidates, random_seed):
    """Signal built from a handful of dictionary atoms."""
    rng = np.random.default_rng(random_seed)
    Phi = rng.standard_normal((signal_length, n_candidates))
    Phi /= np.linalg.norm(Phi, axis=0, keepdims=True)
    support = np.array([3, 17, 40])
    f = Phi[:, support] @ np.array([5.0, -3.0, 2.0])
    return {'signal': f, 'dictionary': Phi, 'support': support}


def create_test_dictionary(n_features, n_atoms, condition_number=1.0, seed=42):
    """Create a test dictionary with controlled conditioning."""
    rng = np.random.default_rng(seed)

    if n_atoms <= n_features:
        # Orthonormal columns from a QR decomposition
        Q, _ = linalg.qr(rng.standard_normal((n_features, n_atoms)), mode='economic')
        D = Q

        if condition_number > 1.0:
            # Correlate the atoms
            corruption = rng.standard_normal((n_features, n_atoms)) * (condition_number - 1) / 10
            D = D + corruption
    else:
        D = rng.standard_normal((n_features, n_atoms))

    D = D / np.linalg.norm(D, axis=0, keepdims=True)
    return D


def assert_orthonormal(Q, tolerance=1e-8):
    """Assert that the columns of Q are pairwise orthonormal."""
    m = Q.shape[1]
    gram = Q.T @ Q
    np.testing.assert_allclose(gram, np.eye(m), atol=tolerance,
                               err_msg="Basis columns must be orthonormal")


def assert_non_increasing(values, slack=1e-12):
    """Assert a sequence never increases by more than ``slack``."""
    values = np.asarray(values)
    steps = np.diff(values)
    assert np.all(steps <= slack), (
        f"Sequence increases: max step {steps.max():.3e}, values {values}"
    )


def least_squares_residual(f, Phi, columns):
    """Residual norm of the least-squares fit of f on the given columns."""
    if len(columns) == 0:
        return float(np.linalg.norm(f))
    A = Phi[:, list(columns)]
    coeffs, *_ = linalg.lstsq(A, f)
    return float(np.linalg.norm(f - A @ coeffs))

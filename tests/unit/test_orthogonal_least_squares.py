"""
Unit tests for the OLS greedy selector.

Covers the worked scenarios, argument validation, degenerate columns and the
basic invariants of a run.
"""

import numpy as np
import pytest

from ols_pursuit import (
    OrthogonalLeastSquares, ols, project_onto_atoms,
    InvalidArgumentError, StopReason, SelectionConfig,
)
from tests.conftest import assert_orthonormal, assert_non_increasing


class TestScenarios:
    """Small hand-checkable problems."""

    def test_larger_component_selected_first(self):
        """d=2 identity dictionary, f=[3, 4]: index 1 first, then 0."""
        state = OrthogonalLeastSquares(n_atoms=2).run([3.0, 4.0], np.eye(2))

        assert state.selected_indices == [1, 0]
        assert state.residual_norm == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(state.reconstruction(), [3.0, 4.0])

    def test_zero_column_never_selected(self):
        """d=3, one zero column between two orthogonal ones."""
        Phi = np.array([[1.0, 0.0, 0.0],
                        [0.0, 0.0, 1.0],
                        [0.0, 0.0, 0.0]])
        f = np.array([1.0, 2.0, 3.0])

        indices = ols(f, Phi, n_atoms=2)

        assert indices == [2, 0]
        assert 1 not in indices

    def test_budget_clamped_to_min_d_p(self):
        rng = np.random.default_rng(0)
        Phi = rng.standard_normal((3, 5))
        f = rng.standard_normal(3)

        state = OrthogonalLeastSquares(n_atoms=10).run(f, Phi)

        assert state.capacity == 3
        assert len(state.selected_indices) <= 3

    def test_default_budget_is_min_d_p(self):
        rng = np.random.default_rng(1)
        Phi = rng.standard_normal((6, 4))
        f = rng.standard_normal(6)

        assert len(ols(f, Phi)) == 4

    def test_sparse_signal_recovered(self, sparse_problem):
        data = sparse_problem
        state = OrthogonalLeastSquares(n_atoms=3).run(data['signal'], data['dictionary'])

        assert sorted(state.selected_indices) == sorted(data['support'].tolist())
        assert state.residual_norm < 1e-10


class TestArgumentValidation:
    """Invalid inputs fail before anything is mutated."""

    @pytest.mark.parametrize("n_atoms", [0, -1])
    def test_non_positive_budget(self, n_atoms):
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0], np.eye(2), n_atoms=n_atoms)

    @pytest.mark.parametrize("n_atoms", [1.5, "2", True])
    def test_non_integer_budget(self, n_atoms):
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0], np.eye(2), n_atoms=n_atoms)

    @pytest.mark.parametrize("repeat_count", [0, -2, 1.0, False])
    def test_bad_repeat_count(self, repeat_count):
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0], np.eye(2), repeat_count=repeat_count)

    @pytest.mark.parametrize("degenerate_tol", [0.0, -1.0, np.inf, np.nan, True, "1e-8"])
    def test_bad_degenerate_tol(self, degenerate_tol):
        with pytest.raises(InvalidArgumentError):
            OrthogonalLeastSquares(degenerate_tol=degenerate_tol).run([1.0, 0.0], [[1.0, 2.0], [0.0, 0.0]])

    @pytest.mark.parametrize("residual_tol", [-1e-12, np.inf, np.nan, False])
    def test_bad_residual_tol(self, residual_tol):
        with pytest.raises(InvalidArgumentError):
            OrthogonalLeastSquares(residual_tol=residual_tol).run([1.0, 0.0], np.eye(2))

    def test_zero_residual_tol_accepted(self):
        state = OrthogonalLeastSquares(residual_tol=0).run([3.0, 4.0], np.eye(2))

        assert state.selected_indices == [1, 0]

    def test_bad_tolerance_leaves_dictionary_untouched(self):
        Phi = np.array([[2.0, 4.0], [0.0, 0.0]])
        selector = OrthogonalLeastSquares(degenerate_tol=-1.0, overwrite_dictionary=True)

        with pytest.raises(InvalidArgumentError):
            selector.run([1.0, 0.0], Phi)

        np.testing.assert_array_equal(Phi, [[2.0, 4.0], [0.0, 0.0]])

    def test_dimension_mismatch(self):
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0, 3.0], np.eye(2))

    def test_empty_dictionary(self):
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0], np.zeros((2, 0)))

    def test_empty_signal(self):
        with pytest.raises(InvalidArgumentError):
            ols([], np.zeros((0, 3)))

    def test_dictionary_must_be_2d(self):
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0], np.ones(2))

    def test_signal_must_be_vector(self):
        with pytest.raises(InvalidArgumentError):
            ols(np.ones((2, 2)), np.eye(2))

    def test_column_signal_accepted(self):
        assert ols(np.array([[3.0], [4.0]]), np.eye(2)) == [1, 0]

    @pytest.mark.parametrize("bad", [np.nan, np.inf])
    def test_non_finite_input(self, bad):
        Phi = np.eye(2)
        with pytest.raises(InvalidArgumentError):
            ols([1.0, bad], Phi)
        Phi[0, 1] = bad
        with pytest.raises(InvalidArgumentError):
            ols([1.0, 2.0], Phi)

    def test_complex_input_rejected(self):
        with pytest.raises(InvalidArgumentError):
            ols([1.0 + 1j, 2.0], np.eye(2))

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            ols([1.0], np.eye(1), n_atoms=0)

    def test_failed_call_leaves_dictionary_untouched(self):
        Phi = np.array([[2.0, 0.0], [0.0, 3.0]])
        selector = OrthogonalLeastSquares(n_atoms=0, overwrite_dictionary=True)

        with pytest.raises(InvalidArgumentError):
            selector.run([1.0, 1.0], Phi)

        np.testing.assert_array_equal(Phi, [[2.0, 0.0], [0.0, 3.0]])


class TestDegenerateColumns:
    """Zero and linearly dependent columns are masked, never raised."""

    def test_all_zero_dictionary_selects_nothing(self):
        state = OrthogonalLeastSquares().run([1.0, 2.0], np.zeros((2, 3)))

        assert state.selected_indices == []
        assert state.stop_reason is StopReason.EXHAUSTED

    def test_duplicate_column_not_selected_twice(self):
        Phi = np.array([[1.0, 2.0, 0.0],
                        [0.0, 0.0, 1.0],
                        [0.0, 0.0, 0.0]])
        f = np.array([5.0, 1.0, 0.0])

        state = OrthogonalLeastSquares(n_atoms=3).run(f, Phi)

        # Column 1 is column 0 rescaled; after picking 0 it has nothing left.
        assert state.selected_indices == [0, 2]
        assert np.all(np.isfinite(state.Q))

    def test_dependent_dictionary_exhausts(self):
        Phi = np.array([[1.0, 0.0, 1.0],
                        [0.0, 1.0, 1.0],
                        [0.0, 0.0, 0.0]])
        f = np.array([0.0, 0.0, 1.0])  # orthogonal to every atom

        state = OrthogonalLeastSquares(n_atoms=3).run(f, Phi)

        assert state.n_selected == 2
        assert state.stop_reason is StopReason.EXHAUSTED
        assert state.residual_norm == pytest.approx(1.0)

    def test_zero_column_with_zero_signal(self):
        Phi = np.array([[0.0, 1.0],
                        [0.0, 0.0]])

        state = OrthogonalLeastSquares().run([0.0, 0.0], Phi)

        assert state.selected_indices == [1]
        assert state.stop_reason is StopReason.RESIDUAL


    @pytest.mark.parametrize("dtype,scale", [
        (np.float64, 1e200),
        (np.float32, 1e20),
        (np.float32, 1e-25),
    ])
    def test_extreme_scale_column_still_selected(self, dtype, scale):
        Phi = np.array([[scale, 0.0],
                        [0.0, 1.0]], dtype=dtype)
        f = np.array([1.0, 0.5], dtype=dtype)

        state = OrthogonalLeastSquares().run(f, Phi)

        assert state.selected_indices == [0, 1]
        np.testing.assert_allclose(state.Q, np.eye(2), atol=1e-6)


class TestRunBehaviour:
    """Invariants and options of a full run."""

    def test_caller_dictionary_not_modified(self, random_problem):
        Phi = random_problem['dictionary']
        before = Phi.copy()

        ols(random_problem['signal'], Phi, n_atoms=10)

        np.testing.assert_array_equal(Phi, before)

    def test_overwrite_dictionary_works_in_place(self, random_problem):
        Phi = random_problem['dictionary'].copy()
        state = OrthogonalLeastSquares(n_atoms=5, overwrite_dictionary=True).run(
            random_problem['signal'], Phi)

        assert state.dictionary is Phi

    def test_overwrite_ignored_when_cast_needed(self):
        Phi = np.eye(3, dtype=np.int64)
        state = OrthogonalLeastSquares(overwrite_dictionary=True).run([1, 2, 3], Phi)

        assert state.dictionary is not Phi
        np.testing.assert_array_equal(Phi, np.eye(3, dtype=np.int64))

    def test_float32_stays_float32(self):
        rng = np.random.default_rng(3)
        Phi = rng.standard_normal((8, 12)).astype(np.float32)
        f = rng.standard_normal(8).astype(np.float32)

        state = OrthogonalLeastSquares().run(f, Phi)

        assert state.basis.dtype == np.float32
        assert_orthonormal(state.Q, tolerance=1e-3)

    def test_integer_inputs_run_in_float64(self):
        state = OrthogonalLeastSquares().run([3, 4], np.eye(2, dtype=int))

        assert state.basis.dtype == np.float64
        assert state.selected_indices == [1, 0]

    def test_invariants_hold(self, random_problem):
        f = random_problem['signal']
        state = OrthogonalLeastSquares(n_atoms=20, repeat_count=2).run(
            f, random_problem['dictionary'])

        indices = state.selected_indices
        assert len(indices) == len(set(indices)) == 20
        assert_orthonormal(state.Q, tolerance=1e-10)
        assert_non_increasing(state.residual_norms)
        np.testing.assert_allclose(state.reconstruction() + state.residual, f, atol=1e-10)
        for k in range(1, state.n_selected + 1):
            np.testing.assert_allclose(state.Q[:, :k].T @ state.Rf[:, k], 0.0, atol=1e-10)

    def test_deterministic(self, random_problem):
        f, Phi = random_problem['signal'], random_problem['dictionary']

        assert ols(f, Phi, n_atoms=15) == ols(f, Phi, n_atoms=15)

    def test_nested_prefixes(self, random_problem):
        f, Phi = random_problem['signal'], random_problem['dictionary']
        full = ols(f, Phi, n_atoms=12)

        for k in (1, 4, 9):
            assert ols(f, Phi, n_atoms=k) == full[:k]

    def test_first_maximum_wins_ties(self):
        # |<f, phi_j>| is identical for all three columns
        Phi = np.array([[1.0, 0.0, 1.0],
                        [0.0, 1.0, 0.0]])
        f = np.array([1.0, 1.0])

        assert ols(f, Phi, n_atoms=1) == [0]

    def test_progress_called_once_per_iteration(self, random_problem):
        seen = []
        indices = ols(random_problem['signal'], random_problem['dictionary'],
                      n_atoms=7, progress=seen.append)

        assert seen == list(range(1, len(indices) + 1))

    def test_progress_does_not_change_result(self, random_problem):
        f, Phi = random_problem['signal'], random_problem['dictionary']

        assert ols(f, Phi, n_atoms=9, progress=lambda m: None) == ols(f, Phi, n_atoms=9)

    def test_from_config(self):
        cfg = SelectionConfig(n_atoms=3, repeat_count=2, residual_tol=1e-9)
        selector = OrthogonalLeastSquares.from_config(cfg)

        assert selector.n_atoms == 3
        assert selector.repeat_count == 2
        assert selector.residual_tol == 1e-9
        assert selector.name == "ols"


class TestProjectOntoAtoms:
    """Reconstruction from a list of selected atoms."""

    def test_matches_run_reconstruction(self, random_problem):
        f, Phi = random_problem['signal'], random_problem['dictionary']
        state = OrthogonalLeastSquares(n_atoms=6).run(f, Phi)

        f_hat = project_onto_atoms(f, Phi, state.selected_indices)

        np.testing.assert_allclose(f_hat, state.reconstruction(), atol=1e-10)

    def test_empty_selection(self):
        np.testing.assert_array_equal(project_onto_atoms([1.0, 2.0], np.eye(2), []), [0.0, 0.0])

    def test_out_of_range_index(self):
        with pytest.raises(InvalidArgumentError):
            project_onto_atoms([1.0, 2.0], np.eye(2), [2])

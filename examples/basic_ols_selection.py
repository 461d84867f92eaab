#!/usr/bin/env python3
"""
Basic OLS Selection Example

Builds a sparse signal from a random overcomplete dictionary, selects atoms
greedily with Orthogonal Least Squares and compares the result with the
true support.
"""

import sys
from pathlib import Path

import numpy as np

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from ols_pursuit import OrthogonalLeastSquares, ConsoleProgress, project_onto_atoms


def make_sparse_problem(d=64, P=256, k=6, seed=0):
    """Random dictionary with columns of varied scale and a k-sparse signal."""
    rng = np.random.default_rng(seed)
    Phi = rng.standard_normal((d, P)) * rng.uniform(0.2, 5.0, size=P)
    support = np.sort(rng.choice(P, size=k, replace=False))
    coeffs = rng.uniform(1.0, 3.0, size=k) * rng.choice([-1.0, 1.0], size=k)
    f = Phi[:, support] @ coeffs
    return f, Phi, support


def main():
    print("🔎 Orthogonal Least Squares atom selection")
    print("=" * 50)

    f, Phi, support = make_sparse_problem()
    print(f"Signal length: {f.size}, candidates: {Phi.shape[1]}, true support: {support.tolist()}")

    progress = ConsoleProgress()
    state = OrthogonalLeastSquares(n_atoms=len(support), repeat_count=2).run(
        f, Phi, progress=progress)
    progress.close()

    print(f"Selected (in order): {state.selected_indices}")
    print(f"Stop reason: {state.stop_reason.value}")
    print("Residual norm per step:")
    for k, (r, err) in enumerate(zip(state.residual_norms[1:], state.error_reduction_ratio), 1):
        print(f"  {k:2d}: ||R|| = {r:.3e}   ERR = {err:.4f}")

    f_hat = project_onto_atoms(f, Phi, state.selected_indices)
    print(f"Reconstruction error: {np.linalg.norm(f - f_hat):.3e}")
    print(f"Support recovered: {sorted(state.selected_indices) == support.tolist()}")


if __name__ == "__main__":
    main()

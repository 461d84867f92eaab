#!/usr/bin/env python3
"""
Simple timing benchmark for OLS selection.

Times full-budget runs over a few problem sizes with one and two
Gram-Schmidt passes and reports the final orthogonality error.
"""

import sys
import time
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import numpy as np
from ols_pursuit import OrthogonalLeastSquares


def run_benchmark(sizes=((64, 128), (128, 512), (256, 1024)), repeats=(1, 2), seed=42):
    """Time OLS for each (d, P) and pass count."""
    print("🚀 Simple OLS Benchmark")
    print("=" * 60)

    rng = np.random.default_rng(seed)
    results = {}
    for d, P in sizes:
        Phi = rng.standard_normal((d, P))
        f = rng.standard_normal(d)
        for repeat_count in repeats:
            selector = OrthogonalLeastSquares(repeat_count=repeat_count)
            start = time.perf_counter()
            state = selector.run(f, Phi)
            elapsed = time.perf_counter() - start

            results[(d, P, repeat_count)] = {
                'time': elapsed,
                'n_selected': state.n_selected,
                'orthogonality_error': state.orthogonality_error(),
                'residual_norm': state.residual_norm,
            }
            print(f"d={d:4d} P={P:5d} passes={repeat_count}: {elapsed:7.3f}s  "
                  f"atoms={state.n_selected:4d}  "
                  f"||QᵀQ-I||={state.orthogonality_error():.2e}  "
                  f"||R||={state.residual_norm:.2e}")
    return results


if __name__ == "__main__":
    run_benchmark()

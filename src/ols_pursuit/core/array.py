"""
Input coercion and validation for the OLS core.

Everything here runs before the selector mutates any buffer, so a bad call
fails without side effects.
"""

from typing import Any, Optional, Tuple

import numpy as np

from ..exceptions import InvalidArgumentError

ArrayLike = Any  # np.ndarray, list of lists, anything np.asarray accepts


def working_dtype(*arrays: np.ndarray) -> np.dtype:
    """
    Floating dtype the selection runs in.

    Follows numpy promotion, so float32 stays float32. When no floating
    type results (all-integer or boolean inputs) the selection runs in float64.
    """
    for arr in arrays:
        if np.issubdtype(arr.dtype, np.complexfloating):
            raise InvalidArgumentError("Complex inputs are not supported")
        if not (np.issubdtype(arr.dtype, np.number) or arr.dtype == np.bool_):
            raise InvalidArgumentError(f"Non-numeric input dtype: {arr.dtype}")
    dtype = np.result_type(*[arr.dtype for arr in arrays])
    if not np.issubdtype(dtype, np.floating):
        dtype = np.dtype(np.float64)
    return np.dtype(dtype)


def as_signal(signal: ArrayLike) -> np.ndarray:
    """Return the signal as a 1-D array; (d, 1) columns are flattened."""
    f = np.asarray(signal)
    if f.ndim == 2 and f.shape[1] == 1:
        f = f[:, 0]
    if f.ndim != 1:
        raise InvalidArgumentError(
            f"Signal must be a vector of shape (d,) or (d, 1), got {f.shape}"
        )
    if f.shape[0] < 1:
        raise InvalidArgumentError("Signal must have at least one entry")
    return f


def as_dictionary(dictionary: ArrayLike) -> np.ndarray:
    """Return the dictionary as a 2-D (d, P) array with P >= 1."""
    phi = np.asarray(dictionary)
    if phi.ndim != 2:
        raise InvalidArgumentError(
            f"Dictionary must be a 2-D (d, P) matrix, got shape {phi.shape}"
        )
    if phi.shape[1] < 1:
        raise InvalidArgumentError("Dictionary has no columns (P = 0)")
    return phi


def check_inputs(signal: ArrayLike,
                 dictionary: ArrayLike) -> Tuple[np.ndarray, np.ndarray, np.dtype]:
    """
    Validate a signal/dictionary pair.

    Returns:
        (signal, dictionary, dtype) where the arrays are views or conversions
        of the inputs, not yet cast or copied.

    Raises:
        InvalidArgumentError: on shape mismatch, empty input, non-real or
            non-finite values.
    """
    f = as_signal(signal)
    phi = as_dictionary(dictionary)
    if phi.shape[0] != f.shape[0]:
        raise InvalidArgumentError(
            f"Signal length {f.shape[0]} does not match dictionary row count "
            f"{phi.shape[0]}"
        )
    dtype = working_dtype(f, phi)
    if not np.all(np.isfinite(f)):
        raise InvalidArgumentError("Signal contains non-finite values")
    if not np.all(np.isfinite(phi)):
        raise InvalidArgumentError("Dictionary contains non-finite values")
    return f, phi, dtype


def check_budget(n_atoms: Optional[int], n_features: int, n_candidates: int) -> int:
    """
    Resolve the atom budget M.

    None, or anything above min(d, P), is clamped to min(d, P).
    """
    limit = min(n_features, n_candidates)
    if n_atoms is None:
        return limit
    if isinstance(n_atoms, (bool, np.bool_)) or not isinstance(n_atoms, (int, np.integer)):
        raise InvalidArgumentError(f"n_atoms must be an integer, got {n_atoms!r}")
    if n_atoms < 1:
        raise InvalidArgumentError(f"n_atoms must be positive, got {n_atoms}")
    return int(min(n_atoms, limit))


def check_repeat_count(repeat_count: int) -> int:
    """Number of Gram-Schmidt passes per selection step, at least one."""
    if isinstance(repeat_count, (bool, np.bool_)) or not isinstance(repeat_count, (int, np.integer)):
        raise InvalidArgumentError(
            f"repeat_count must be an integer, got {repeat_count!r}"
        )
    if repeat_count < 1:
        raise InvalidArgumentError(f"repeat_count must be >= 1, got {repeat_count}")
    return int(repeat_count)


def check_tolerance(name: str, value: Optional[float], allow_zero: bool = False) -> Optional[float]:
    """
    Validate an optional tolerance override.

    None passes through (the dtype default applies). Anything else must be a
    finite real number, strictly positive unless ``allow_zero``.
    """
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidArgumentError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not np.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite, got {value}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidArgumentError(f"{name} must be {bound}, got {value}")
    return value

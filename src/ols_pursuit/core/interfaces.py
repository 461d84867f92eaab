"""
Protocol interfaces for the selection core.

Defines contracts for: ProgressCallback, AtomSelector
"""

from typing import List, Optional, Protocol

from .array import ArrayLike


class ProgressCallback(Protocol):
    """
    Observer notified once per selection iteration.

    Purely observational: a callback must not touch the arrays being
    processed, and a no-op callback gives identical results.
    """

    def __call__(self, iteration: int) -> None:
        """
        Args:
            iteration: 1-based number of the iteration about to run
        """
        ...


class AtomSelector(Protocol):
    """Greedy atom selection interface."""

    def select(self, signal: ArrayLike, dictionary: ArrayLike,
               progress: Optional[ProgressCallback] = None) -> List[int]:
        """
        Choose dictionary columns for approximating a signal.

        Args:
            signal: Signal vector (n_features,)
            dictionary: Dictionary matrix (n_features, n_atoms)
            progress: Optional per-iteration observer

        Returns:
            Selected column indices in selection order
        """
        ...

    @property
    def name(self) -> str:
        ...

from .__about__ import __version__

from .exceptions import OLSError, InvalidArgumentError, NumericalNonFiniteError

from .core.orthogonal_least_squares import (
    OrthogonalLeastSquares, ols, project_onto_atoms
)
from .core.selection_state import SelectionState, StopReason
from .core.stopping import StoppingPolicy
from .core.normalization import normalize_columns
from .core.projection import project_out

from .config import SelectionConfig, load_config, make_metadata
from .progress import ConsoleProgress, LoggingProgress, JsonProgress, make_progress

__all__ = [
    # Version
    "__version__",

    # Entry points
    "ols", "OrthogonalLeastSquares", "project_onto_atoms",

    # Selection internals
    "SelectionState", "StopReason", "StoppingPolicy",
    "normalize_columns", "project_out",

    # Errors
    "OLSError", "InvalidArgumentError", "NumericalNonFiniteError",

    # Configuration and progress reporting
    "SelectionConfig", "load_config", "make_metadata",
    "ConsoleProgress", "LoggingProgress", "JsonProgress", "make_progress",
]

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, PositiveInt

from .__about__ import __version__


class SelectionConfig(BaseModel):
    n_atoms: Optional[PositiveInt] = None        # None -> min(d, P)
    repeat_count: PositiveInt = 1                # Gram-Schmidt passes per step
    degenerate_tol: Optional[float] = Field(None, gt=0.0)
    residual_tol: Optional[float] = Field(None, ge=0.0)
    one_based: bool = False                      # CLI index output convention
    progress: str = Field("none", pattern="^(none|console|log|json)$")


SCHEMA_VERSION = 1


def load_config(path: Optional[Union[str, Path]]) -> SelectionConfig:
    """Read a YAML config file; no path or an empty file gives the defaults."""
    if not path:
        return SelectionConfig()
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    return SelectionConfig(**raw)


def make_metadata(cfg: SelectionConfig, signal_shape: Tuple[int, ...],
                  dictionary_shape: Tuple[int, ...], state=None,
                  extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    meta = {
        "schema_version": SCHEMA_VERSION,
        "version": __version__,
        "n_atoms": cfg.n_atoms,
        "repeat_count": cfg.repeat_count,
        "degenerate_tol": cfg.degenerate_tol,
        "residual_tol": cfg.residual_tol,
        "one_based": cfg.one_based,
        "shapes": {"signal": list(signal_shape), "dictionary": list(dictionary_shape)},
    }
    if state is not None:
        offset = 1 if cfg.one_based else 0
        meta["result"] = {
            "indices": [i + offset for i in state.selected_indices],
            "n_selected": state.n_selected,
            "stop_reason": state.stop_reason.value if state.stop_reason else None,
            "residual_norm": state.residual_norm,
            "error_reduction_ratio": [float(r) for r in state.error_reduction_ratio],
        }
    if extra: meta.update(extra)
    return meta

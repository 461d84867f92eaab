import argparse, json, logging
import numpy as np
from pathlib import Path
from .config import SelectionConfig, load_config, make_metadata
from .core.orthogonal_least_squares import OrthogonalLeastSquares, project_onto_atoms
from .experimental_logging import log
from .progress import make_progress

def _load_array(path):
    return np.load(path)

def _resolve_config(args):
    cfg = load_config(args.config)
    overrides = {}
    if args.n_atoms is not None: overrides["n_atoms"] = args.n_atoms
    if args.repeat_count is not None: overrides["repeat_count"] = args.repeat_count
    if args.one_based: overrides["one_based"] = True
    if args.progress is not None: overrides["progress"] = args.progress
    if overrides:
        cfg = SelectionConfig(**{**cfg.model_dump(), **overrides})
    return cfg

def cmd_select(args):
    cfg = _resolve_config(args)
    f = _load_array(args.signal)
    Phi = _load_array(args.dictionary)
    selector = OrthogonalLeastSquares.from_config(cfg)
    progress = make_progress(cfg.progress)
    if cfg.progress == "log":  # visible without -v
        progress.log.setLevel(min(progress.log.getEffectiveLevel(), logging.INFO))
    log("select_start", signal=args.signal, dictionary=args.dictionary,
        n_atoms=cfg.n_atoms, repeat_count=cfg.repeat_count)
    try:
        state = selector.run(f, Phi, progress=progress)
    finally:
        if progress is not None: progress.close()
    offset = 1 if cfg.one_based else 0
    indices = np.asarray(state.selected_indices, dtype=np.int64) + offset
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    np.save(out, indices)
    if args.residuals:
        np.save(args.residuals, state.residual_norms)
    if args.metadata:
        meta = make_metadata(cfg, np.shape(f), np.shape(Phi), state)
        with open(args.metadata, "w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2)
    log("select_done", out=args.out, n_selected=state.n_selected,
        stop_reason=state.stop_reason.value, residual_norm=state.residual_norm)
    return 0

def cmd_reconstruct(args):
    f = _load_array(args.signal)
    Phi = _load_array(args.dictionary)
    indices = np.load(args.indices).astype(np.intp).ravel()
    if args.one_based: indices = indices - 1
    f_hat = project_onto_atoms(f, Phi, indices.tolist())
    np.save(args.out, f_hat)
    log("reconstruct_done", out=args.out, n_atoms=int(indices.size),
        residual_norm=float(np.linalg.norm(np.ravel(f) - f_hat)))
    return 0

def main(argv=None):
    ap = argparse.ArgumentParser("ols-pursuit")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_sel = sub.add_parser("select", help="Select dictionary atoms for a signal by OLS")
    ap_sel.add_argument("--signal", required=True, help="f.npy, shape (d,)")
    ap_sel.add_argument("--dictionary", required=True, help="Phi.npy, shape (d, P)")
    ap_sel.add_argument("--out", required=True, help="Output .npy of selected indices")
    ap_sel.add_argument("--config")
    ap_sel.add_argument("--n-atoms", type=int)
    ap_sel.add_argument("--repeat-count", type=int)
    ap_sel.add_argument("--one-based", action="store_true")
    ap_sel.add_argument("--progress", choices=["none", "console", "log", "json"])
    ap_sel.add_argument("--residuals", help="Output .npy of residual norms per step")
    ap_sel.add_argument("--metadata", help="Output JSON run record")
    ap_sel.set_defaults(func=cmd_select)

    ap_rc = sub.add_parser("reconstruct", help="Project a signal onto selected atoms")
    ap_rc.add_argument("--signal", required=True)
    ap_rc.add_argument("--dictionary", required=True)
    ap_rc.add_argument("--indices", required=True)
    ap_rc.add_argument("--out", required=True)
    ap_rc.add_argument("--one-based", action="store_true")
    ap_rc.set_defaults(func=cmd_reconstruct)

    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)

if __name__ == "__main__":
    raise SystemExit(main())

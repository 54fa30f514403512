from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import numpy as np

from seismic_ttf.config import load_config
from seismic_ttf.pipeline import run_pipeline_file
from seismic_ttf.preprocess import downsample_signal


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Score one seismic trace CSV (signal in column 0).")
    parser.add_argument("path", help="CSV file, e.g. seg_0620e6.csv")
    parser.add_argument("--seed", type=int, default=None, help="Seed the random factor.")
    parser.add_argument("--config", default=None, help="YAML config (default: configs/default.yaml).")
    parser.add_argument("--include-signal", action="store_true", help="Echo the parsed signal.")
    parser.add_argument("--max-points", type=int, default=None, help="Downsample the echoed signal (default: display.max_points from config).")
    parser.add_argument("--parallel", action="store_true", help="Run the downstream stages on threads.")
    args = parser.parse_args(argv)

    cfg = load_config(Path(args.config) if args.config else None)
    rng = np.random.default_rng(args.seed) if args.seed is not None else None
    result = run_pipeline_file(args.path, rng=rng, config=cfg, parallel=args.parallel)

    if not result.ok:
        print(json.dumps({"state": result.state.value, "error": result.error, "kind": result.error_kind}), file=sys.stderr)
        return 1

    out = {
        "file": str(args.path),
        "n_samples": int(result.signal.size),
        "features": result.features.as_dict(),
        "time_to_failure": result.estimate,
        "interpretation": result.interpretation.model_dump(),
        "grid_shape": list(result.grid.shape),
    }
    if args.include_signal:
        max_points = cfg.max_points if args.max_points is None else args.max_points
        out["signal"] = downsample_signal(result.signal, max_points).tolist()
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from seismic_ttf.feature_catalog import SIGNAL_COL


@dataclass(frozen=True)
class GeneratorConfig:
    n_files: int
    length: int
    seed: int
    burst_prob: float = 0.3


def make_segment(rng: np.random.Generator, length: int, burst_prob: float) -> np.ndarray:
    """Integer-valued acoustic trace: noise around a small offset, optionally one decaying burst."""
    x = 4.0 + rng.normal(0.0, 3.0, size=length)

    if length > 10 and rng.random() < burst_prob:
        start = int(rng.integers(0, length - 10))
        n = length - start
        t = np.arange(n)
        amp = float(rng.uniform(50.0, 500.0))
        x[start:] += amp * np.exp(-t / max(n / 20.0, 1.0)) * np.sin(t * 0.7)

    return np.round(x).astype(int)


def generate(cfg: GeneratorConfig, out_dir: Path) -> list[Path]:
    if cfg.n_files < 1:
        raise ValueError("n_files must be >= 1")
    if cfg.length < 1:
        raise ValueError("length must be >= 1")

    out_dir.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(cfg.seed)

    written: list[Path] = []
    names: set[str] = set()
    while len(names) < cfg.n_files:
        name = f"seg_{int(rng.integers(0, 16**6)):06x}.csv"
        if name in names:
            continue
        names.add(name)
        seg = make_segment(rng, cfg.length, cfg.burst_prob)
        path = out_dir / name
        pd.DataFrame({SIGNAL_COL: seg}).to_csv(path, index=False)
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Write synthetic seismic segments as seg_xxxxxx.csv.")
    parser.add_argument("--n-files", type=int, default=5)
    parser.add_argument("--length", type=int, default=150_000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out-dir", default="data/synthetic")
    args = parser.parse_args(argv)

    cfg = GeneratorConfig(n_files=args.n_files, length=args.length, seed=args.seed)
    for path in generate(cfg, Path(args.out_dir)):
        print(f"Wrote CSV: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

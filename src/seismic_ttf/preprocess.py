from __future__ import annotations

import numpy as np

from seismic_ttf.feature_catalog import GRID_COLS, GRID_ROWS
from seismic_ttf.features import as_signal, mean_std


def normalize_signal(signal) -> np.ndarray:
    """Z-score with population std. A flat signal maps to all zeros."""
    x = as_signal(signal)
    mean, std = mean_std(x)
    if std == 0:
        return np.zeros_like(x)
    return (x - mean) / std


def reshape_signal(normalized, rows: int = GRID_ROWS, cols: int = GRID_COLS) -> np.ndarray:
    """
    Tile a 1-D signal into a (rows, cols) grid in row-major order.

    grid[i, j] = normalized[(i * cols + j) % len(normalized)], so short signals
    wrap around from index 0 and long ones are cut after rows*cols samples.
    """
    if rows < 1 or cols < 1:
        raise ValueError("rows and cols must be >= 1")
    x = as_signal(normalized)

    idx = np.arange(rows * cols) % x.size
    grid = x[idx].reshape(rows, cols)
    grid.flags.writeable = False
    return grid


def preprocess_signal(signal, rows: int = GRID_ROWS, cols: int = GRID_COLS) -> np.ndarray:
    return reshape_signal(normalize_signal(signal), rows=rows, cols=cols)


def downsample_signal(signal, max_points: int = 1000) -> np.ndarray:
    """Keep every k-th sample, k = ceil(n / max_points), for display payloads."""
    if max_points < 1:
        raise ValueError("max_points must be >= 1")
    x = as_signal(signal)
    if x.size <= max_points:
        return x.copy()
    step = -(-x.size // max_points)
    return x[::step].copy()

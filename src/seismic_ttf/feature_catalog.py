from __future__ import annotations

# Closed set of descriptors produced for every signal, in output order.

FEATURE_NAMES: tuple[str, ...] = (
    "mean",
    "std",
    "max",
    "min",
    "median",
    "energy",
    "q25",
    "q75",
    "iqr",
    "skewness",
    "kurtosis",
)

# Model-ready grid shape (timesteps x channels).
GRID_ROWS = 199
GRID_COLS = 11

SIGNAL_COL = "acoustic_data"

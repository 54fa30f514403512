from __future__ import annotations

import numpy as np

from seismic_ttf.schemas import FeatureMap


def as_signal(signal) -> np.ndarray:
    x = np.asarray(signal, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("signal must be one-dimensional")
    if x.size < 1:
        raise ValueError("signal must contain at least one sample")
    return x


def _moments(x: np.ndarray) -> tuple[float, float]:
    mean = float(np.mean(x))
    return mean, float(np.sqrt(np.mean((x - mean) ** 2)))


def mean_std(x: np.ndarray) -> tuple[float, float]:
    """Mean and population std (ddof=0); std is exactly 0.0 for a flat signal."""
    if x.max() == x.min():
        return float(np.mean(x)), 0.0
    mean, std = _moments(x)
    if np.isfinite(mean) and np.isfinite(std):
        return mean, std
    # sums overflowed near float64 max: compute on a scaled copy
    scale = float(np.max(np.abs(x)))
    mean, std = _moments(x / scale)
    return mean * scale, std * scale


def percentile_sorted(sorted_x: np.ndarray, p: float) -> float:
    """Linear-interpolation percentile at rank (p/100)*(N-1) on sorted data."""
    idx = (p / 100.0) * (sorted_x.size - 1)
    lo = int(np.floor(idx))
    hi = int(np.ceil(idx))
    if lo == hi:
        return float(sorted_x[lo])
    a, b = float(sorted_x[lo]), float(sorted_x[hi])
    w = idx - lo
    # clamp keeps q25 <= median <= q75 under rounding
    return min(max(a * (1 - w) + b * w, a), b)


def median_sorted(sorted_x: np.ndarray) -> float:
    n = sorted_x.size
    mid = n // 2
    if n % 2 == 0:
        a, b = float(sorted_x[mid - 1]), float(sorted_x[mid])
        # halve first so a + b cannot overflow
        return min(max(a / 2 + b / 2, a), b)
    return float(sorted_x[mid])


def standardized_moment(x: np.ndarray, mean: float, std: float, order: int) -> float:
    if std == 0:
        return 0.0
    return float(np.mean(((x - mean) / std) ** order))


def extract_features(signal) -> FeatureMap:
    """
    Descriptive statistics of one signal.

    Pure and total for any non-empty finite signal:
      - std is the population std (divide by N)
      - median/q25/q75 come from a single sorted copy
      - skewness/kurtosis are the raw 3rd/4th standardized moments,
        0.0 when std == 0
    """
    x = as_signal(signal)
    mean, std = mean_std(x)
    sorted_x = np.sort(x)

    q25 = percentile_sorted(sorted_x, 25)
    q75 = percentile_sorted(sorted_x, 75)

    return FeatureMap(
        mean=mean,
        std=std,
        max=float(sorted_x[-1]),
        min=float(sorted_x[0]),
        median=median_sorted(sorted_x),
        energy=float(np.sum(x * x)),
        q25=q25,
        q75=q75,
        iqr=q75 - q25,
        skewness=standardized_moment(x, mean, std, 3),
        kurtosis=standardized_moment(x, mean, std, 4),
    )

from __future__ import annotations

import numpy as np

from seismic_ttf.config import EstimatorConfig, InterpretConfig, PipelineConfig, default_config
from seismic_ttf.features import as_signal
from seismic_ttf.preprocess import preprocess_signal
from seismic_ttf.schemas import Interpretation


def base_estimate(signal, coeffs: EstimatorConfig | None = None) -> float:
    """intercept + |mean|*w_mean + range*w_range + energy*w_energy on the raw signal."""
    c = default_config().estimator if coeffs is None else coeffs
    x = as_signal(signal)

    mean = float(np.mean(x))
    value_range = float(x.max() - x.min())
    energy = float(np.sum(x * x))

    return (
        c.intercept
        + abs(mean) * c.mean_weight
        + value_range * c.range_weight
        + energy * c.energy_weight
    )


def random_factor(rng: np.random.Generator, jitter: float) -> float:
    # uniform in [1 - jitter, 1 + jitter)
    return (1.0 - jitter) + float(rng.random()) * 2.0 * jitter


def estimate_time_to_failure(
    signal,
    rng: np.random.Generator | None = None,
    coeffs: EstimatorConfig | None = None,
) -> float:
    """
    Time-to-failure estimate: base_estimate(signal) times a uniform random factor.

    There is no trained model behind this number. Without `rng` every call
    draws from a freshly seeded generator, so the same signal gives different
    results across calls; pass a seeded Generator for reproducible output.
    """
    c = default_config().estimator if coeffs is None else coeffs
    rng = np.random.default_rng() if rng is None else rng
    base = base_estimate(signal, c)
    return max(base * random_factor(rng, c.jitter), 0.0)


def predict(
    signal,
    rng: np.random.Generator | None = None,
    config: PipelineConfig | None = None,
) -> tuple[float, np.ndarray]:
    """Build the model-ready grid and return (estimate, grid).

    The estimate is computed from the raw signal; the grid is returned for
    callers that want to inspect or feed it elsewhere.
    """
    cfg = default_config() if config is None else config
    grid = preprocess_signal(signal, rows=cfg.grid.rows, cols=cfg.grid.cols)
    return estimate_time_to_failure(signal, rng=rng, coeffs=cfg.estimator), grid


def risk_level(seconds: float, bands: InterpretConfig | None = None) -> str:
    """Critical < 10s <= High < 30s <= Moderate < 60s <= Low (default bands)."""
    b = default_config().interpret if bands is None else bands
    if seconds < b.critical_below:
        return "Critical"
    if seconds < b.high_below:
        return "High"
    if seconds < b.moderate_below:
        return "Moderate"
    return "Low"


def confidence_interval(estimate: float, bands: InterpretConfig | None = None) -> tuple[float, float]:
    # standard error is a fixed fraction of the estimate; no model variance exists
    b = default_config().interpret if bands is None else bands
    margin = b.z_score * b.relative_se * estimate
    return max(0.0, estimate - margin), estimate + margin


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.2f} seconds"
    if seconds < 3600:
        return f"{int(seconds // 60)} min {seconds % 60:.0f} sec"
    return f"{int(seconds // 3600)} hr {int((seconds % 3600) // 60)} min"


def interpret(estimate: float, bands: InterpretConfig | None = None) -> Interpretation:
    b = default_config().interpret if bands is None else bands
    lower, upper = confidence_interval(estimate, b)
    return Interpretation(
        risk_level=risk_level(estimate, b),
        ci_lower=lower,
        ci_upper=upper,
        z_score=b.z_score,
        display=format_duration(estimate),
    )

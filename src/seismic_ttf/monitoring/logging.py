from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from seismic_ttf.config import default_config, project_root


def _utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _to_py(x: Any) -> Any:
    # JSON has no NaN/Infinity; overflowed statistics are written as null
    if isinstance(x, (np.integer,)):
        return int(x)
    if isinstance(x, (float, np.floating)):
        return float(x) if np.isfinite(x) else None
    if isinstance(x, (np.ndarray,)):
        return [_to_py(v) for v in x.tolist()]
    if isinstance(x, dict):
        return {str(k): _to_py(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_to_py(v) for v in x]
    return x


def prediction_log_path() -> Path:
    override = os.getenv("TTF_PREDICTION_LOG")
    if override:
        return Path(override)
    path = Path(default_config().prediction_log)
    return path if path.is_absolute() else project_root() / path


def log_prediction_event(
    *,
    endpoint: str,
    request_id: str,
    signal: np.ndarray,
    features: dict[str, float],
    estimate: float,
    risk_level: str | None = None,
    path: Path | None = None,
) -> Path:
    path = prediction_log_path() if path is None else path
    path.parent.mkdir(parents=True, exist_ok=True)

    rec = {
        "timestamp_utc": _utc_now(),
        "endpoint": endpoint,
        "request_id": request_id,
        "inputs": {
            "n_samples": int(signal.size),
            "min": float(np.min(signal)),
            "max": float(np.max(signal)),
        },
        "outputs": {
            "time_to_failure": estimate,
            "risk_level": risk_level,
            "features": features,
        },
    }

    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(_to_py(rec), ensure_ascii=False, allow_nan=False) + "\n")
    return path

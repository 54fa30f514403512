from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from seismic_ttf.feature_catalog import GRID_COLS, GRID_ROWS


def project_root() -> Path:
    # repo/src/seismic_ttf/config.py -> parents[2] == repo/
    return Path(__file__).resolve().parents[2]


DEFAULT_CONFIG_PATH = project_root() / "configs" / "default.yaml"


@dataclass(frozen=True)
class GridConfig:
    rows: int = GRID_ROWS
    cols: int = GRID_COLS


@dataclass(frozen=True)
class EstimatorConfig:
    intercept: float = 15.0
    mean_weight: float = 5.0
    range_weight: float = 0.1
    energy_weight: float = 0.0001
    jitter: float = 0.2


@dataclass(frozen=True)
class InterpretConfig:
    relative_se: float = 0.1
    z_score: float = 1.96
    critical_below: float = 10.0
    high_below: float = 30.0
    moderate_below: float = 60.0


@dataclass(frozen=True)
class PipelineConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    interpret: InterpretConfig = field(default_factory=InterpretConfig)
    max_points: int = 1000
    prediction_log: str = "logs/predictions.jsonl"


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    sec = raw.get(name) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"config section '{name}' must be a mapping, got {type(sec).__name__}")
    return sec


def config_from_dict(raw: dict[str, Any] | None) -> PipelineConfig:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config must be a mapping, got {type(raw).__name__}")
    g = _section(raw, "grid")
    e = _section(raw, "estimator")
    i = _section(raw, "interpretation")
    mon = _section(raw, "monitoring")
    disp = _section(raw, "display")

    grid = GridConfig(
        rows=int(g.get("rows", GRID_ROWS)),
        cols=int(g.get("cols", GRID_COLS)),
    )
    if grid.rows < 1 or grid.cols < 1:
        raise ValueError("grid rows and cols must be >= 1")

    defaults = EstimatorConfig()
    est = EstimatorConfig(
        intercept=float(e.get("intercept", defaults.intercept)),
        mean_weight=float(e.get("mean_weight", defaults.mean_weight)),
        range_weight=float(e.get("range_weight", defaults.range_weight)),
        energy_weight=float(e.get("energy_weight", defaults.energy_weight)),
        jitter=float(e.get("jitter", defaults.jitter)),
    )
    if not 0.0 <= est.jitter < 1.0:
        raise ValueError("estimator.jitter must be in [0, 1)")

    idef = InterpretConfig()
    interp = InterpretConfig(
        relative_se=float(i.get("relative_se", idef.relative_se)),
        z_score=float(i.get("z_score", idef.z_score)),
        critical_below=float(i.get("critical_below", idef.critical_below)),
        high_below=float(i.get("high_below", idef.high_below)),
        moderate_below=float(i.get("moderate_below", idef.moderate_below)),
    )
    if interp.relative_se < 0 or interp.z_score < 0:
        raise ValueError("interpretation.relative_se and z_score must be >= 0")
    if not interp.critical_below <= interp.high_below <= interp.moderate_below:
        raise ValueError("interpretation bands must satisfy critical_below <= high_below <= moderate_below")

    max_points = int(disp.get("max_points", 1000))
    if max_points < 1:
        raise ValueError("display.max_points must be >= 1")

    return PipelineConfig(
        grid=grid,
        estimator=est,
        interpret=interp,
        max_points=max_points,
        prediction_log=str(mon.get("prediction_log", "logs/predictions.jsonl")),
    )


def load_config(path: Path | None = None) -> PipelineConfig:
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    if not path.exists():
        return PipelineConfig()
    return config_from_dict(yaml.safe_load(path.read_text(encoding="utf-8")))


@lru_cache(maxsize=1)
def default_config() -> PipelineConfig:
    return load_config()

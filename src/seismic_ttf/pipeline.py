from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

import numpy as np

from seismic_ttf.config import PipelineConfig, default_config
from seismic_ttf.data import parse_signal_csv, read_signal_file
from seismic_ttf.features import extract_features
from seismic_ttf.inference import estimate_time_to_failure, interpret
from seismic_ttf.preprocess import preprocess_signal
from seismic_ttf.schemas import FeatureMap, Interpretation
from seismic_ttf.validation import ParseError

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    PARSED = "parsed"
    FAILED = "failed"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PipelineResult:
    state: PipelineState
    signal: np.ndarray | None = None
    features: FeatureMap | None = None
    grid: np.ndarray | None = None
    estimate: float | None = None
    interpretation: Interpretation | None = None
    error: str | None = None
    error_kind: str | None = None
    stage_errors: dict[str, str] = field(default_factory=dict)
    transitions: tuple[PipelineState, ...] = ()

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.COMPLETE


def _failed_parse(exc: ParseError, transitions: list[PipelineState]) -> PipelineResult:
    logger.info("parse failed (%s): %s", exc.kind, exc)
    transitions.append(PipelineState.FAILED)
    return PipelineResult(
        state=PipelineState.FAILED,
        error=str(exc),
        error_kind=exc.kind,
        transitions=tuple(transitions),
    )


def _run_stages(stages: dict[str, Callable[[], Any]], parallel: bool) -> tuple[dict[str, Any], dict[str, str]]:
    results: dict[str, Any] = {}
    errors: dict[str, str] = {}

    if parallel:
        with ThreadPoolExecutor(max_workers=len(stages)) as pool:
            futures = {name: pool.submit(fn) for name, fn in stages.items()}
            for name, fut in futures.items():
                try:
                    results[name] = fut.result()
                except Exception as e:
                    logger.exception("stage %r failed", name)
                    errors[name] = str(e)
    else:
        for name, fn in stages.items():
            try:
                results[name] = fn()
            except Exception as e:
                logger.exception("stage %r failed", name)
                errors[name] = str(e)

    return results, errors


def process_signal(
    signal: np.ndarray,
    *,
    rng: np.random.Generator | None = None,
    config: PipelineConfig | None = None,
    parallel: bool = False,
    transitions: list[PipelineState] | None = None,
) -> PipelineResult:
    """
    Run the independent downstream stages on an already parsed signal.

    features, grid and estimate do not depend on each other; a failure in one
    is recorded in `stage_errors` and the others still complete.
    """
    cfg = default_config() if config is None else config
    rng = np.random.default_rng() if rng is None else rng
    transitions = [PipelineState.IDLE, PipelineState.PARSING, PipelineState.PARSED] if transitions is None else transitions

    stages: dict[str, Callable[[], Any]] = {
        "features": lambda: extract_features(signal),
        "grid": lambda: preprocess_signal(signal, rows=cfg.grid.rows, cols=cfg.grid.cols),
        "estimate": lambda: estimate_time_to_failure(signal, rng=rng, coeffs=cfg.estimator),
    }
    results, errors = _run_stages(stages, parallel)
    estimate = results.get("estimate")
    interpretation = interpret(estimate, cfg.interpret) if estimate is not None else None

    state = PipelineState.FAILED if errors else PipelineState.COMPLETE
    transitions.append(state)
    return PipelineResult(
        state=state,
        signal=signal,
        features=results.get("features"),
        grid=results.get("grid"),
        estimate=estimate,
        interpretation=interpretation,
        error="; ".join(f"{k}: {v}" for k, v in errors.items()) or None,
        error_kind="stage_failure" if errors else None,
        stage_errors=errors,
        transitions=tuple(transitions),
    )


def run_pipeline(
    text: str,
    *,
    rng: np.random.Generator | None = None,
    config: PipelineConfig | None = None,
    parallel: bool = False,
) -> PipelineResult:
    """
    Idle -> Parsing -> (Failed | Parsed) -> Complete.

    A ParseError halts the run with its message carried verbatim in `error`
    and no partial results. Nothing is retried; submit new input instead.
    """
    transitions = [PipelineState.IDLE, PipelineState.PARSING]
    try:
        signal = parse_signal_csv(text)
    except ParseError as e:
        return _failed_parse(e, transitions)

    transitions.append(PipelineState.PARSED)
    return process_signal(signal, rng=rng, config=config, parallel=parallel, transitions=transitions)


def run_pipeline_file(
    path: Path | str,
    *,
    rng: np.random.Generator | None = None,
    config: PipelineConfig | None = None,
    parallel: bool = False,
) -> PipelineResult:
    transitions = [PipelineState.IDLE, PipelineState.PARSING]
    try:
        signal = read_signal_file(path)
    except ParseError as e:
        return _failed_parse(e, transitions)

    transitions.append(PipelineState.PARSED)
    return process_signal(signal, rng=rng, config=config, parallel=parallel, transitions=transitions)

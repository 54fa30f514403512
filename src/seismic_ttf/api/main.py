from __future__ import annotations

import logging
import os
import traceback
from uuid import uuid4

import numpy as np
from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from seismic_ttf.data import parse_signal_bytes
from seismic_ttf.monitoring.logging import log_prediction_event
from seismic_ttf.pipeline import PipelineResult, process_signal, run_pipeline
from seismic_ttf.preprocess import downsample_signal
from seismic_ttf.schemas import ErrorResponse, PredictRequest, PredictResponse
from seismic_ttf.validation import ParseError

logger = logging.getLogger(__name__)

app = FastAPI(title="Seismic Time-to-Failure API")


class PipelineFailed(Exception):
    def __init__(self, result: PipelineResult):
        super().__init__(result.error)
        self.result = result


@app.exception_handler(ParseError)
async def _parse_error(request: Request, exc: ParseError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "kind": exc.kind})


@app.exception_handler(PipelineFailed)
async def _pipeline_failed(request: Request, exc: PipelineFailed):
    status = 500 if exc.result.stage_errors else 422
    return JSONResponse(status_code=status, content={"detail": exc.result.error, "kind": exc.result.error_kind})


# ---- DEV-only: return useful error text instead of silent 500 ----
@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    tb = traceback.format_exc()
    print(tb)  # always print to uvicorn terminal

    if os.getenv("TTF_DEBUG", "1") == "1":
        return JSONResponse(status_code=500, content={"detail": str(exc), "traceback": tb})

    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _echo_signal(signal: np.ndarray, max_points: int | None) -> list[float]:
    if max_points is None:
        return signal.tolist()
    return downsample_signal(signal, max_points).tolist()


def _respond(
    endpoint: str,
    result: PipelineResult,
    include_signal: bool,
    max_points: int | None,
) -> PredictResponse:
    if not result.ok:
        raise PipelineFailed(result)

    features = result.features.as_dict()

    # Best-effort logging: NEVER break predictions
    try:
        log_prediction_event(
            endpoint=endpoint,
            request_id=str(uuid4()),
            signal=result.signal,
            features=features,
            estimate=result.estimate,
            risk_level=result.interpretation.risk_level,
        )
    except Exception:
        logger.exception("failed to write prediction event")

    return PredictResponse(
        n_samples=int(result.signal.size),
        features=result.features,
        time_to_failure=float(result.estimate),
        interpretation=result.interpretation,
        signal=_echo_signal(result.signal, max_points) if include_signal else None,
    )


def _rng(seed: int | None) -> np.random.Generator | None:
    return None if seed is None else np.random.default_rng(seed)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post(
    "/predict",
    response_model=PredictResponse,
    responses={422: {"model": ErrorResponse}},
)
def predict(req: PredictRequest) -> PredictResponse:
    result = run_pipeline(req.csv, rng=_rng(req.seed))
    return _respond("/predict", result, req.include_signal, req.max_points)


@app.post(
    "/predict/upload",
    response_model=PredictResponse,
    responses={422: {"model": ErrorResponse}},
)
async def predict_upload(
    file: UploadFile = File(...),
    include_signal: bool = False,
    seed: int | None = None,
    max_points: int | None = Query(1000, ge=1),
) -> PredictResponse:
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=415, detail="Please upload a .csv file")

    content = await file.read()
    signal = parse_signal_bytes(content)  # ParseError -> 422 via handler
    result = process_signal(signal, rng=_rng(seed))
    return _respond("/predict/upload", result, include_signal, max_points)

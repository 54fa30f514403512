from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field

from seismic_ttf.feature_catalog import FEATURE_NAMES


class FeatureMap(BaseModel):
    model_config = ConfigDict(frozen=True)

    mean: float
    std: float = Field(..., ge=0.0)
    max: float
    min: float
    median: float
    energy: float = Field(..., ge=0.0)
    q25: float
    q75: float
    iqr: float = Field(..., ge=0.0)
    skewness: float
    kurtosis: float

    def as_dict(self) -> dict[str, float]:
        return {name: float(getattr(self, name)) for name in FEATURE_NAMES}


class Interpretation(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_level: str = Field(..., description="Critical | High | Moderate | Low")
    ci_lower: float = Field(..., ge=0.0)
    ci_upper: float = Field(..., ge=0.0)
    z_score: float
    display: str


class PredictRequest(BaseModel):
    csv: str = Field(..., description="CSV text; signal is column 0, optional single header row")
    include_signal: bool = Field(False, description="Echo the parsed signal back for display.")
    seed: int | None = Field(None, description="Seed the random factor for reproducible output (optional)")
    max_points: int | None = Field(1000, ge=1, description="Downsample the echoed signal to at most this many points; null echoes every sample.")


class PredictResponse(BaseModel):
    n_samples: int = Field(..., ge=1)
    features: FeatureMap
    time_to_failure: float = Field(..., ge=0.0)
    interpretation: Interpretation
    signal: list[float] | None = None


class ErrorResponse(BaseModel):
    detail: str
    kind: str

from __future__ import annotations

import re
from pathlib import Path

import numpy as np
import pandas as pd

from seismic_ttf.validation import (
    EMPTY_MESSAGE,
    NON_NUMERIC_MESSAGE,
    READ_ERROR_MESSAGE,
    EmptySignalError,
    NonNumericError,
    SignalReadError,
    validate_signal,
)

_LINE_SPLIT = re.compile(r"\r\n|\n")


def project_root() -> Path:
    # repo/src/seismic_ttf/data.py -> parents[2] == repo/
    return Path(__file__).resolve().parents[2]


def _first_field(line: str) -> str:
    return line.split(",", 1)[0].strip()


def _to_float(fields: list[str]) -> pd.Series:
    # non-parseable -> NaN; inf/-inf are rejected alongside NaN below
    return pd.to_numeric(pd.Series(fields, dtype=object), errors="coerce").astype(float)


def _looks_like_header(line: str) -> bool:
    # same rule as data rows: anything that is not a finite float
    return not bool(np.isfinite(_to_float([_first_field(line)]).iloc[0]))


def parse_signal_csv(text: str) -> np.ndarray:
    """
    Parse CSV text into a signal (column 0 of every data row).

    - lines split on \\n or \\r\\n; blank lines dropped
    - first non-blank line is a header if its first field is not a float
    - only the first comma-separated field of each row is used

    Raises NonNumericError if any row's first field is not a finite float,
    EmptySignalError if no data rows remain. Both are checked after every
    row has been parsed.
    """
    lines = [ln for ln in _LINE_SPLIT.split(text) if ln.strip() != ""]

    if lines and _looks_like_header(lines[0]):
        lines = lines[1:]

    fields = [_first_field(ln) for ln in lines]
    values = _to_float(fields)

    bad = ~np.isfinite(values.to_numpy())
    if bad.any():
        pos = int(np.flatnonzero(bad)[0])
        raise NonNumericError(f"{NON_NUMERIC_MESSAGE} (row {pos + 1}: {fields[pos]!r})")

    if values.empty:
        raise EmptySignalError(EMPTY_MESSAGE)

    return validate_signal(values)


def parse_signal_bytes(data: bytes) -> np.ndarray:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SignalReadError(f"{READ_ERROR_MESSAGE}: {e}") from e
    return parse_signal_csv(text)


def read_signal_file(path: Path | str) -> np.ndarray:
    """Read a CSV trace from disk (e.g. seg_0620e6.csv). The name is not checked."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise SignalReadError(f"{READ_ERROR_MESSAGE}: {e}") from e
    return parse_signal_bytes(data)

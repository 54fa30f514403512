from __future__ import annotations

"""Signal validation and the parse error taxonomy.

Every failure while turning raw CSV text into a signal is a ParseError. The
`kind` attribute tells callers which of the three cases happened without
having to match on message text.
"""

import numpy as np
import pandas as pd
import pandera.pandas as pa
from pandera import Check
from pandera.errors import SchemaError


class ParseError(ValueError):
    """Raised when raw input cannot be turned into a signal."""

    kind = "parse_error"


class NonNumericError(ParseError):
    """A data row's first field is not a finite float."""

    kind = "non_numeric"


class EmptySignalError(ParseError):
    """No data rows remain after header removal and blank-line filtering."""

    kind = "empty"


class SignalReadError(ParseError):
    """The input resource could not be read or decoded."""

    kind = "io_failure"


NON_NUMERIC_MESSAGE = "Invalid data format: File contains non-numeric values"
EMPTY_MESSAGE = "Empty data: No valid signal values found"
READ_ERROR_MESSAGE = "Error reading file"


def signal_schema() -> pa.SeriesSchema:
    return pa.SeriesSchema(
        float,
        checks=[
            Check(lambda s: np.isfinite(s), error="signal values must be finite"),
            Check(lambda s: len(s) >= 1, element_wise=False, error="signal must not be empty"),
        ],
        nullable=False,
        coerce=True,
    )


def validate_signal(values: pd.Series) -> np.ndarray:
    """Validate parsed samples and freeze them into a read-only float64 array."""
    try:
        checked = signal_schema().validate(values)
    except SchemaError as e:
        raise NonNumericError(f"{NON_NUMERIC_MESSAGE} ({e})") from e

    out = checked.to_numpy(dtype=np.float64, copy=True)
    out.flags.writeable = False
    return out

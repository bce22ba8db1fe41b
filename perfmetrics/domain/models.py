"""Data model for one submission cycle.

:class:`ObservedValue` holds a raw measurement read from the data document;
:class:`AssembledRecord` is the fully-formed, rounded and dimensioned record
that the preview renderer and the publisher consume.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config.documents import read_yaml_document
from ..config.models import MetricDimension
from ..errors import InputReadError

METRIC_UNIT = "Count"


class ObservedValue(BaseModel):
    """Measured value for one data key.

    Attributes
    ----------
    key: str
        Data key, joined against the configured metric mappings.
    value: float
        Raw measured quantity. Must be a finite number; integers are widened.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: float = Field(..., strict=True, allow_inf_nan=False)


class AssembledRecord(BaseModel):
    """Metric record ready for preview and submission.

    Attributes
    ----------
    name: str
        Remote metric name from the mapping.
    value: float
        Value rounded to the batch precision.
    timestamp: datetime
        Capture instant (UTC), shared by every record of a batch.
    dimensions: Tuple[MetricDimension, ...]
        Dimensions copied from the mapping, in declaration order.
    unit: str
        CloudWatch unit; always "Count".
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    timestamp: datetime
    dimensions: Tuple[MetricDimension, ...] = ()
    unit: str = METRIC_UNIT

    def dimension_summary(self) -> str:
        """Return ``name=value`` pairs joined by spaces, or an empty string."""
        return " ".join(f"{dim.name}={dim.value}" for dim in self.dimensions)


def load_data(path: Path) -> List[ObservedValue]:
    """Load the data document for one cycle.

    The document is a flat YAML mapping of key to number. An empty file is an
    empty data set.

    Raises
    ------
    InputReadError
        If the file is missing, is not YAML, is not a mapping, or holds a
        value that is not a finite number.
    """
    data = read_yaml_document(path, "data")
    if data is None:
        return []
    if not isinstance(data, dict):
        raise InputReadError(
            f"Data file {path} must contain a mapping of metric key to value, "
            f"got {type(data).__name__}",
            path,
        )

    observed: List[ObservedValue] = []
    for key, value in data.items():
        try:
            observed.append(ObservedValue(key=str(key), value=value))
        except ValidationError as exc:
            raise InputReadError(
                f"Invalid value for {key!r} in data file {path}: "
                f"expected a finite number, got {value!r}",
                path,
            ) from exc
    return observed

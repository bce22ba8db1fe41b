"""Metric assembly.

Joins the observed values of one cycle against the configured metric
mappings and produces the batch of records to preview and publish.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import List, Optional, Union

from ..config.models import MetricMapping
from .models import AssembledRecord, ObservedValue
from .rounding import DEFAULT_PRECISION, round_half_away

logger = logging.getLogger(__name__)

Observations = Union[Iterable[ObservedValue], Mapping[str, float]]


def _as_observed_values(observed: Observations) -> List[ObservedValue]:
    if isinstance(observed, Mapping):
        return [ObservedValue(key=key, value=value) for key, value in observed.items()]
    return list(observed)


def assemble(
    observed: Observations,
    mappings: Mapping[str, MetricMapping],
    *,
    precision: int = DEFAULT_PRECISION,
    now: Optional[datetime] = None,
) -> List[AssembledRecord]:
    """
    Build one record per observed key that has a metric mapping.

    Parameters
    ----------
    observed : Iterable[ObservedValue] or Mapping[str, float]
        Measurements for this cycle
    mappings : Mapping[str, MetricMapping]
        Configured metric mappings keyed by data key
    precision : int
        Decimal places for the rounded values
    now : datetime, optional
        Batch timestamp; defaults to the current UTC time

    Returns
    -------
    List[AssembledRecord]
        Records ordered by data key. Keys without a mapping produce no record.

    Examples
    --------
    >>> from perfmetrics.config.models import MetricMapping
    >>> records = assemble({"a": 1.25}, {"a": MetricMapping(name="A")})
    >>> [(r.name, r.value) for r in records]
    [('A', 1.25)]
    """
    timestamp = now if now is not None else datetime.now(timezone.utc)
    records: List[AssembledRecord] = []
    dropped = 0

    for item in sorted(_as_observed_values(observed), key=lambda obs: obs.key):
        mapping = mappings.get(item.key)
        if mapping is None:
            dropped += 1
            logger.debug("assembler.unmapped_key", extra={"key": item.key})
            continue
        records.append(
            AssembledRecord(
                name=mapping.remote_name,
                value=round_half_away(item.value, precision),
                timestamp=timestamp,
                dimensions=mapping.dimensions,
            )
        )

    logger.info(
        "assembler.assembled",
        extra={"records": len(records), "dropped": dropped, "precision": precision},
    )
    return records

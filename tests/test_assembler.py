"""Tests for metric assembly."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from perfmetrics.config.models import MetricDimension, MetricMapping
from perfmetrics.domain.assembler import assemble
from perfmetrics.domain.models import ObservedValue

MAPPINGS = {
    "a": MetricMapping(name="A"),
    "b": MetricMapping(
        name="B", dimensions=[MetricDimension(name="Goal", value="Fitness")]
    ),
}


def test_assemble_reference_example(now: datetime) -> None:
    records = assemble({"a": 1.25, "b": 2}, MAPPINGS, precision=2, now=now)

    assert [(r.name, r.value) for r in records] == [("A", 1.25), ("B", 2.0)]
    assert records[0].dimensions == ()
    assert records[1].dimensions == (MetricDimension(name="Goal", value="Fitness"),)
    assert records[1].dimension_summary() == "Goal=Fitness"
    assert all(r.unit == "Count" for r in records)
    assert all(r.timestamp == now for r in records)


def test_assemble_drops_unmapped_keys(now: datetime, caplog) -> None:
    observed = [
        ObservedValue(key="zzz", value=1.0),
        ObservedValue(key="a", value=3.0),
        ObservedValue(key="unknown", value=9.0),
    ]
    with caplog.at_level(logging.DEBUG, logger="perfmetrics.domain.assembler"):
        records = assemble(observed, MAPPINGS, now=now)

    assert [r.name for r in records] == ["A"]
    dropped = [
        r.key for r in caplog.records if r.getMessage() == "assembler.unmapped_key"
    ]
    assert sorted(dropped) == ["unknown", "zzz"]


def test_assemble_orders_by_key(now: datetime) -> None:
    mappings = {key: MetricMapping(name=key.upper()) for key in ("c", "a", "b")}
    records = assemble({"c": 3, "b": 2, "a": 1}, mappings, now=now)
    assert [r.name for r in records] == ["A", "B", "C"]


def test_assemble_rounds_to_precision(now: datetime) -> None:
    mappings = {"x": MetricMapping(name="X")}
    assert assemble({"x": 1.25}, mappings, precision=1, now=now)[0].value == 1.3
    assert assemble({"x": -1.25}, mappings, precision=1, now=now)[0].value == -1.3
    assert assemble({"x": 81.456}, mappings, precision=2, now=now)[0].value == 81.46


def test_assemble_forwards_duplicate_dimensions(now: datetime) -> None:
    mapping = MetricMapping(
        name="Steps",
        dimensions=[
            MetricDimension(name="Goal", value="Fitness"),
            MetricDimension(name="Goal", value="Health"),
        ],
    )
    (record,) = assemble({"steps": 1000}, {"steps": mapping}, now=now)
    assert [(d.name, d.value) for d in record.dimensions] == [
        ("Goal", "Fitness"),
        ("Goal", "Health"),
    ]
    assert record.dimension_summary() == "Goal=Fitness Goal=Health"


def test_assemble_empty_inputs(now: datetime) -> None:
    assert assemble({}, MAPPINGS, now=now) == []
    assert assemble({"a": 1.0}, {}, now=now) == []


def test_assemble_defaults_timestamp_to_utc_now() -> None:
    before = datetime.now(timezone.utc)
    records = assemble({"a": 1.0, "b": 2.0}, MAPPINGS)
    after = datetime.now(timezone.utc)

    assert before <= records[0].timestamp <= after
    assert records[0].timestamp == records[1].timestamp
    assert records[0].timestamp.tzinfo is not None

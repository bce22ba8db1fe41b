"""Tests for the preview table."""

from __future__ import annotations

import io
from datetime import datetime

from perfmetrics.config.models import MetricDimension, MetricMapping
from perfmetrics.domain.assembler import assemble
from perfmetrics.domain.models import AssembledRecord
from perfmetrics.preview import HEADING, format_table, render


def _record(name: str, value: float, now: datetime, *dims) -> AssembledRecord:
    return AssembledRecord(
        name=name,
        value=value,
        timestamp=now,
        dimensions=[MetricDimension(name=n, value=v) for n, v in dims],
    )


def test_render_table_rows(now: datetime) -> None:
    records = [
        _record("A", 1.25, now),
        _record("B", 2.0, now, ("Goal", "Fitness"), ("Kind", "Daily")),
    ]
    stream = io.StringIO()
    table = render(records, 2, stream)

    assert table.splitlines() == [
        "+-------------+-------+-------------------------+",
        "| Metric name | Value | Dimensions              |",
        "+-------------+-------+-------------------------+",
        "| A           | 1.25  |                         |",
        "| B           | 2.00  | Goal=Fitness Kind=Daily |",
        "+-------------+-------+-------------------------+",
    ]
    assert stream.getvalue() == f"{HEADING}\n{table}\n"


def test_render_uses_batch_precision(now: datetime) -> None:
    table = format_table([_record("W", 81.5, now)], precision=1)
    assert "| 81.5  |" in table


def test_render_empty_batch_prints_header_only() -> None:
    stream = io.StringIO()
    table = render([], stream=stream)

    assert table.splitlines() == [
        "+-------------+-------+------------+",
        "| Metric name | Value | Dimensions |",
        "+-------------+-------+------------+",
    ]
    assert stream.getvalue().startswith(HEADING)


def test_render_defaults_to_stdout(now: datetime, capsys) -> None:
    render([_record("A", 1.0, now)])
    out = capsys.readouterr().out
    assert out.startswith("Metrics to be published:\n")
    assert "| A           | 1.00  |" in out


def test_render_small_negative_value_as_zero(now: datetime) -> None:
    records = assemble({"x": -0.001}, {"x": MetricMapping(name="X")}, now=now)
    assert "| X           | 0.00  |" in format_table(records, 2)

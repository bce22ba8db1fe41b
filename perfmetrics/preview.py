"""Preview table for the metrics about to be published.

The table is always written before any submission decision so that the
operator, or the log of an unattended run, sees exactly what would be sent.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import List, Optional, TextIO

from .domain.models import AssembledRecord
from .domain.rounding import DEFAULT_PRECISION

HEADER = ("Metric name", "Value", "Dimensions")
HEADING = "Metrics to be published:"


def _format_rows(
    records: Sequence[AssembledRecord], precision: int
) -> List[tuple[str, str, str]]:
    return [
        (record.name, f"{record.value:.{precision}f}", record.dimension_summary())
        for record in records
    ]


def format_table(
    records: Sequence[AssembledRecord], precision: int = DEFAULT_PRECISION
) -> str:
    """Return the boxed table text for ``records`` (header only when empty)."""
    rows = [HEADER, *_format_rows(records, precision)]
    widths = [max(len(row[col]) for row in rows) for col in range(len(HEADER))]

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def line(cells: tuple[str, str, str]) -> str:
        return (
            "| "
            + " | ".join(cell.ljust(width) for cell, width in zip(cells, widths))
            + " |"
        )

    lines = [border, line(HEADER), border]
    lines.extend(line(row) for row in rows[1:])
    if len(rows) > 1:
        lines.append(border)
    return "\n".join(lines)


def render(
    records: Sequence[AssembledRecord],
    precision: int = DEFAULT_PRECISION,
    stream: Optional[TextIO] = None,
) -> str:
    """Write the preview heading and table to ``stream`` (stdout by default).

    Returns the table text. Never raises on an empty batch.
    """
    out = stream if stream is not None else sys.stdout
    table = format_table(records, precision)
    out.write(f"{HEADING}\n{table}\n")
    out.flush()
    return table

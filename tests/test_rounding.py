"""
Tests for the value rounding policy.
"""

import math

import pytest

from perfmetrics.domain.rounding import (
    CURRENT_FORMAT_VERSION,
    DEFAULT_PRECISION,
    LEGACY_FORMAT_VERSION,
    precision_for_format,
    round_half_away,
    supported_format_versions,
)


def test_precision_for_known_formats():
    """Legacy format keeps one decimal, current format keeps two."""
    assert precision_for_format(LEGACY_FORMAT_VERSION) == 1
    assert precision_for_format(CURRENT_FORMAT_VERSION) == 2
    assert DEFAULT_PRECISION == 2
    assert supported_format_versions() == [1, 2]


def test_precision_for_unknown_format():
    """Unknown versions are rejected."""
    with pytest.raises(ValueError, match="Unknown format version 3"):
        precision_for_format(3)


def test_round_half_away_from_zero():
    """Ties round away from zero in both directions."""
    assert round_half_away(1.25, 1) == 1.3
    assert round_half_away(-1.25, 1) == -1.3
    assert round_half_away(0.125, 2) == 0.13
    assert round_half_away(-0.125, 2) == -0.13
    assert round_half_away(2.5, 0) == 3.0


def test_round_uses_shortest_decimal_representation():
    """1.005 rounds as written, not as its binary approximation."""
    assert round_half_away(1.005, 2) == 1.01
    assert round_half_away(2.675, 2) == 2.68


def test_round_integers_and_plain_values():
    """Integers widen to float and short values pass through."""
    assert round_half_away(2, 2) == 2.0
    assert round_half_away(1.25, 2) == 1.25
    assert round_half_away(12.3456, 2) == 12.35
    assert round_half_away(12.3456, 1) == 12.3


def test_round_is_idempotent():
    """Rounding an already rounded value at the same precision is a no-op."""
    for value in (1.25, -3.14159, 0.005, 1234.5678, 1e-9, 99.995):
        for precision in (0, 1, 2, 3):
            once = round_half_away(value, precision)
            assert round_half_away(once, precision) == once


def test_round_large_values():
    """Values with many integer digits still round without error."""
    assert round_half_away(1e30, 2) == 1e30
    assert round_half_away(123456789012345.678, 1) == 123456789012345.7


def test_round_rejects_invalid_input():
    """Negative precision and non-finite values raise ValueError."""
    with pytest.raises(ValueError):
        round_half_away(1.0, -1)
    with pytest.raises(ValueError):
        round_half_away(math.inf, 2)
    with pytest.raises(ValueError):
        round_half_away(math.nan, 2)


def test_round_never_returns_negative_zero():
    """Small negative values round to positive zero."""
    for value, precision in ((-0.001, 2), (-0.04, 1), (-0.4, 0), (-0.0, 2)):
        result = round_half_away(value, precision)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0
        assert f"{result:.{precision}f}" == f"{0:.{precision}f}"

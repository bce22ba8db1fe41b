"""
Rounding policy for published metric values.

Values are rounded half away from zero at a fixed number of decimal places
that depends on the data format version: one place for the legacy format,
two for the current one. Rounding goes through the shortest decimal
representation of the float so that ``1.005`` rounds to ``1.01`` rather than
to the binary neighbour below it.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

LEGACY_FORMAT_VERSION = 1
CURRENT_FORMAT_VERSION = 2

_FORMAT_PRECISION = {
    LEGACY_FORMAT_VERSION: 1,
    CURRENT_FORMAT_VERSION: 2,
}

DEFAULT_PRECISION = _FORMAT_PRECISION[CURRENT_FORMAT_VERSION]


def supported_format_versions() -> list[int]:
    """Return the known format versions in ascending order."""
    return sorted(_FORMAT_PRECISION)


def precision_for_format(version: int) -> int:
    """
    Return the number of decimal places used by a data format version.

    Parameters
    ----------
    version : int
        Format version (1 = legacy, 2 = current)

    Returns
    -------
    int
        Decimal places for values in that format

    Raises
    ------
    ValueError
        If the version is unknown

    Examples
    --------
    >>> precision_for_format(1)
    1
    >>> precision_for_format(2)
    2
    """
    try:
        return _FORMAT_PRECISION[version]
    except KeyError:
        raise ValueError(
            f"Unknown format version {version!r}; "
            f"expected one of {supported_format_versions()}"
        ) from None


def round_half_away(value: float, precision: int = DEFAULT_PRECISION) -> float:
    """
    Round ``value`` to ``precision`` decimal places, ties away from zero.

    Parameters
    ----------
    value : float
        Finite value to round
    precision : int
        Number of decimal places (>= 0)

    Returns
    -------
    float
        The rounded value. Rounding an already rounded value at the same
        precision returns it unchanged.

    Raises
    ------
    ValueError
        If ``value`` is not finite or ``precision`` is negative

    Examples
    --------
    >>> round_half_away(1.25, 1)
    1.3
    >>> round_half_away(-1.25, 1)
    -1.3
    >>> round_half_away(2, 2)
    2.0
    """
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")

    exact = Decimal(repr(float(value)))
    quantum = Decimal(1).scaleb(-precision)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the fraction
        ctx.prec = max(ctx.prec, exact.adjusted() + precision + 2)
        rounded = float(exact.quantize(quantum, rounding=ROUND_HALF_UP))
    # -0.0 becomes 0.0
    return rounded + 0.0

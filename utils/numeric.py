"""
Small numeric helpers shared by the scoring components.

The functions operate on plain sequences of floats and drop NaNs
before computing anything, so partially filled provider payloads can
be passed straight in.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from .errors import InvalidInputError


def _to_array(values: Sequence[Optional[float]]) -> np.ndarray:
    """Convert a sequence to a float array while dropping NaNs and ``None``.

    Parameters
    ----------
    values : sequence of float
        The input values.  ``None`` entries are treated as missing.

    Returns
    -------
    numpy.ndarray
        Array of valid values.
    """
    arr = np.asarray([np.nan if v is None else v for v in values], dtype=float)
    return arr[~np.isnan(arr)]


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound ``value`` to the closed interval ``[lower, upper]``."""
    return min(max(value, lower), upper)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up, as commercial rounding does.

    Python's built-in :func:`round` rounds halves to even, which turns a
    weighted score of 76.5 into 76.  Scores and amounts in this project
    follow the half-up convention.  The value is first rounded to 9
    decimals so binary artefacts such as ``76.49999999999999`` do not
    flip the result.
    """
    factor = 10 ** ndigits
    return math.floor(round(value * factor, 9) + 0.5) / factor


def population_variance(values: Sequence[Optional[float]]) -> float:
    """Population variance (``ddof=0``) of the valid values, 0.0 if empty."""
    arr = _to_array(values)
    if arr.size == 0 or np.all(arr == arr[0]):
        return 0.0
    return float(np.var(arr, ddof=0))


def coefficient_of_variation(values: Sequence[Optional[float]]) -> float:
    """Compute ``sqrt(variance) / mean`` of a sample.

    Returns 0.0 when there is no data or when the mean is not positive,
    so that a set of all-zero rainfall readings counts as perfect
    agreement rather than a division error.
    """
    arr = _to_array(values)
    if arr.size == 0:
        return 0.0
    mean = float(arr.mean())
    if mean <= 0:
        return 0.0
    return float(math.sqrt(population_variance(arr)) / mean)


def require_positive(name: str, value: float) -> float:
    """Return ``value`` as float or raise :class:`InvalidInputError`."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"{name} must be a positive finite number, got {value!r}")
    return number


def require_in_range(name: str, value: float, lower: float, upper: float) -> float:
    """Return ``value`` as float or raise if it falls outside ``[lower, upper]``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number < lower or number > upper:
        raise InvalidInputError(
            f"{name} must lie within [{lower}, {upper}], got {value!r}"
        )
    return number


__all__ = [
    "clamp",
    "round_half_up",
    "population_variance",
    "coefficient_of_variation",
    "require_positive",
    "require_in_range",
]

"""
Exception taxonomy for the decisioning core.

Only invalid input and broken reference data raise.  Insufficient or
unknown data is always resolved by a documented fallback inside the
components themselves.
"""

from __future__ import annotations


class ClimInvestError(Exception):
    """Base exception for the decisioning core."""


class InvalidInputError(ClimInvestError, ValueError):
    """Raised when an input is nonsensical (e.g. a non-positive farm size)."""


class ReferenceDataError(ClimInvestError):
    """Raised when a reference data document is malformed."""


__all__ = ["ClimInvestError", "InvalidInputError", "ReferenceDataError"]

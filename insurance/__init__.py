"""
insurance
=========

Parametric micro-insurance pricing.  :mod:`insurance.premium` converts
a farm profile and a continuous risk intensity into a bounded monthly
premium and its coverage amount.
"""

from .premium import (
    PremiumInput,
    PremiumPricer,
    PremiumResult,
    RiskIntensity,
    calculate_premium,
    format_amount,
)

__all__ = [
    "PremiumInput",
    "PremiumPricer",
    "PremiumResult",
    "RiskIntensity",
    "calculate_premium",
    "format_amount",
]

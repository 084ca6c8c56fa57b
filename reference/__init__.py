"""
Reference data (crop thresholds, risk factors, climatological normals)
used to parameterise the scoring components.
"""

from .loader import (
    CreditTerms,
    CropThresholds,
    MonthlyNormals,
    PremiumTariff,
    ReferenceData,
    load_reference,
    parse_reference,
)

__all__ = [
    "CreditTerms",
    "CropThresholds",
    "MonthlyNormals",
    "PremiumTariff",
    "ReferenceData",
    "load_reference",
    "parse_reference",
]

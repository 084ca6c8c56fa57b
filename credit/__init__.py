"""
credit
======

Micro-credit scoring for smallholder farmers.

Modules
-------

soil
    The soil quality score shared with the soil-data collaborator.
scoring
    Sub-scores, the weighted 0–1000 credit score, risk tier and loan
    terms.
"""

from .soil import SoilData, soil_quality_score, soil_suitability
from .scoring import (
    CreditScorer,
    FarmerCreditScore,
    InsuranceHistory,
    MarketAccessData,
    YieldData,
    overall_score,
)

__all__ = [
    "SoilData",
    "soil_quality_score",
    "soil_suitability",
    "CreditScorer",
    "FarmerCreditScore",
    "InsuranceHistory",
    "MarketAccessData",
    "YieldData",
    "overall_score",
]

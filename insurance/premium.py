"""
Monthly premium pricing for parametric crop insurance.

This module turns a farm's profile into a bounded monthly premium.

Inputs
------
- crop type (crop risk factor, 0.4–0.9)
- farm size in hectares
- a continuous risk intensity in [0, 1]
- optional agro-climatic region (regional risk factor)

Outputs
-------
A :class:`PremiumResult` with:
- monthly_premium (FCFA, always within [200, 1000])
- coverage_amount (30 × the monthly premium)
- risk_category ('low', 'medium', 'high'), for reporting only
- explanation (text for the farmer)

The risk intensity used here is a number, not the categorical
``risk_level`` of :class:`climate_index.crop_risk.RiskAnalysis`; the
two are kept as distinct types.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, NewType, Optional, Sequence

import pandas as pd

from reference import ReferenceData, load_reference
from utils.numeric import clamp, require_in_range, require_positive

logger = logging.getLogger(__name__)

RiskIntensity = NewType("RiskIntensity", float)
PremiumRiskCategory = Literal["low", "medium", "high"]

DEFAULT_SIZES: Sequence[float] = (0.5, 1, 1.5, 2, 3, 5)

_RISK_TEXT = {
    "en": {"low": "low risk", "medium": "moderate risk", "high": "high risk"},
    "fr": {"low": "faible risque", "medium": "risque modéré", "high": "risque élevé"},
}
_TEMPLATES = {
    "en": "Your {crop} crop on {size} hectare{plural} presents {risk}. "
    "Calculated premium: {premium} FCFA/month.",
    "fr": "Votre culture de {crop} sur {size} hectare{plural} présente un {risk}. "
    "Prime calculée: {premium} FCFA/mois.",
}


@dataclass(frozen=True)
class PremiumInput:
    crop_type: str
    farm_size: float
    risk_intensity: RiskIntensity
    region: Optional[str] = None


@dataclass(frozen=True)
class PremiumResult:
    monthly_premium: int
    coverage_amount: int
    risk_category: PremiumRiskCategory
    explanation: str
    base_premium: float
    adjusted_premium: float
    crop_risk_factor: float
    regional_risk_factor: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def risk_category(
    risk_intensity: float, crop_risk_factor: float, regional_risk_factor: float
) -> PremiumRiskCategory:
    """Bucket the combined risk; not used for bounding the premium."""
    combined = risk_intensity * crop_risk_factor * regional_risk_factor
    if combined < 0.3:
        return "low"
    if combined < 0.6:
        return "medium"
    return "high"


class PremiumPricer:
    """Price monthly premiums from a deployment's reference tables."""

    def __init__(self, reference: Optional[ReferenceData] = None, *, locale: str = "en") -> None:
        self.reference = reference or load_reference()
        self.tariff = self.reference.premium
        self.locale = locale if locale in _TEMPLATES else "en"

    @property
    def min_premium(self) -> int:
        return int(self.tariff.min_premium)

    @property
    def max_premium(self) -> int:
        return int(self.tariff.max_premium)

    def adjusted_premium(
        self,
        farm_size: float,
        risk_intensity: float,
        crop_risk_factor: float,
        regional_risk_factor: float,
    ) -> float:
        """Pre-bounding premium, rounded up to the tariff's step."""
        base = self.tariff.base_per_hectare * farm_size
        raw = base * crop_risk_factor * regional_risk_factor * (1 + risk_intensity)
        step = self.tariff.rounding_step
        # 9 decimals absorb float noise such as 280.00000000000006
        return math.ceil(round(raw / step, 9)) * step

    def explain(self, crop_type: str, farm_size: float, category: str, premium: int) -> str:
        return _TEMPLATES[self.locale].format(
            crop=self.reference.crop_display_name(crop_type, self.locale),
            size=f"{farm_size:g}",
            plural="s" if farm_size > 1 else "",
            risk=_RISK_TEXT[self.locale][category],
            premium=premium,
        )

    def price(self, params: PremiumInput) -> PremiumResult:
        """Compute the monthly premium of ``params``.

        Raises
        ------
        InvalidInputError
            If the farm size is not positive or the risk intensity lies
            outside [0, 1].
        """
        farm_size = require_positive("farm_size", params.farm_size)
        intensity = require_in_range("risk_intensity", params.risk_intensity, 0.0, 1.0)

        crop_factor = self.reference.crop_risk_factor(params.crop_type)
        regional_factor = self.reference.regional_risk_factor(params.region)

        base = self.tariff.base_per_hectare * farm_size
        adjusted = self.adjusted_premium(farm_size, intensity, crop_factor, regional_factor)
        final = int(clamp(adjusted, self.tariff.min_premium, self.tariff.max_premium))
        if final != adjusted:
            logger.debug("Premium %.0f bounded to %d FCFA", adjusted, final)

        category = risk_category(intensity, crop_factor, regional_factor)
        result = PremiumResult(
            monthly_premium=final,
            coverage_amount=int(final * self.tariff.coverage_multiplier),
            risk_category=category,
            explanation=self.explain(params.crop_type, farm_size, category, final),
            base_premium=base,
            adjusted_premium=adjusted,
            crop_risk_factor=crop_factor,
            regional_risk_factor=regional_factor,
        )
        logger.info(
            "Premium for %s (%.2f ha, risk %.2f, region %s): %d FCFA",
            params.crop_type, farm_size, intensity, params.region, final,
        )
        return result

    def premium_by_size(
        self,
        crop_type: str,
        risk_intensity: float = 0.5,
        sizes: Sequence[float] = DEFAULT_SIZES,
        region: Optional[str] = None,
    ) -> pd.DataFrame:
        """Tabulate premium and coverage over a range of farm sizes."""
        rows = []
        for size in sizes:
            result = self.price(
                PremiumInput(crop_type, size, RiskIntensity(risk_intensity), region)
            )
            rows.append(
                {"size": size, "premium": result.monthly_premium, "coverage": result.coverage_amount}
            )
        return pd.DataFrame(rows, columns=["size", "premium", "coverage"])

    def validate_premium(self, premium: float) -> bool:
        return self.tariff.min_premium <= premium <= self.tariff.max_premium


def calculate_premium(
    crop_type: str,
    farm_size: float,
    risk_intensity: float,
    region: Optional[str] = None,
    *,
    reference: Optional[ReferenceData] = None,
    locale: str = "en",
) -> PremiumResult:
    """Functional shortcut for :meth:`PremiumPricer.price`."""
    pricer = PremiumPricer(reference, locale=locale)
    return pricer.price(PremiumInput(crop_type, farm_size, RiskIntensity(risk_intensity), region))


def format_amount(amount: float) -> str:
    """Format an amount in FCFA with thousands separators."""
    return f"{int(round(amount)):,} FCFA"


__all__ = [
    "RiskIntensity",
    "PremiumInput",
    "PremiumResult",
    "PremiumPricer",
    "calculate_premium",
    "format_amount",
    "risk_category",
]

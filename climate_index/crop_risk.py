"""
climate_index.crop_risk
-----------------------

Classifies the climate risk faced by a crop from the indicators
produced by :mod:`climate_index.features`.

Scoring is additive: each trigger contributes points and no single
trigger decides the outcome on its own.

==============================  ======  =========================
Trigger                         Points  Compensation eligible
==============================  ======  =========================
dry spell >= critical days        40    yes
dry spell >= warning days         25    no
rainfall >= flood threshold       35    yes
max temperature >= heat limit     30    yes
rainfall anomaly < -50 %          20    no
temperature anomaly > +15 %       15    no
farm larger than 5 ha              5    no
==============================  ======  =========================

The score is capped at 100 and mapped onto a risk level and an alert
level (>= 80 critical/emergency, >= 60 high/danger, >= 30
medium/warning, otherwise low/info).  An insufficient-data indicator
set yields a fixed medium-risk fallback instead of an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from ingestion.transform.align import DailyInput
from reference import ReferenceData, load_reference
from utils.numeric import require_positive

from .features import ClimateIndicators, WeatherIndicatorCalculator

logger = logging.getLogger(__name__)

RiskCategory = Literal["low", "medium", "high", "critical"]
RiskType = Literal["drought", "flood", "storm", "heat_stress", "multiple"]
AlertLevel = Literal["info", "warning", "danger", "emergency"]

INSUFFICIENT_DATA_MESSAGE = "insufficient data — manual monitoring advised"

LARGE_FARM_HECTARES = 5.0
PRECIPITATION_DEFICIT_PCT = -50.0
TEMPERATURE_EXCESS_PCT = 15.0
COMPOUND_DRY_DAYS = 10

# (minimum score, risk level, alert level), highest first
_TIERS: Tuple[Tuple[int, RiskCategory, AlertLevel], ...] = (
    (80, "critical", "emergency"),
    (60, "high", "danger"),
    (30, "medium", "warning"),
    (0, "low", "info"),
)


@dataclass(frozen=True)
class RiskAnalysis:
    risk_level: RiskCategory
    risk_type: RiskType
    risk_score: int
    triggers: Mapping[str, float]
    recommendations: Tuple[str, ...]
    compensation_eligible: bool
    alert_level: AlertLevel
    crop_type: str = ""
    fired: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risk_level": self.risk_level,
            "risk_type": self.risk_type,
            "risk_score": self.risk_score,
            "triggers": dict(self.triggers),
            "recommendations": list(self.recommendations),
            "compensation_eligible": self.compensation_eligible,
            "alert_level": self.alert_level,
            "crop_type": self.crop_type,
            "fired": list(self.fired),
        }


def tier_for_score(score: float) -> Tuple[RiskCategory, AlertLevel]:
    """Map a 0–100 risk score onto ``(risk_level, alert_level)``."""
    for minimum, level, alert in _TIERS:
        if score >= minimum:
            return level, alert
    return "low", "info"


def insufficient_data_analysis(crop_type: str = "") -> RiskAnalysis:
    """The fixed result used whenever the indicators cannot be trusted."""
    return RiskAnalysis(
        risk_level="medium",
        risk_type="drought",
        risk_score=50,
        triggers={"drought_days": 0, "excessive_precipitation": 0.0, "temperature_stress": 0.0},
        recommendations=(INSUFFICIENT_DATA_MESSAGE,),
        compensation_eligible=False,
        alert_level="warning",
        crop_type=crop_type,
    )


class CropRiskClassifier:
    """Score climate indicators against crop-specific thresholds."""

    def __init__(self, reference: Optional[ReferenceData] = None) -> None:
        self.reference = reference or load_reference()

    def classify(
        self,
        indicators: Optional[ClimateIndicators],
        crop_type: Optional[str] = None,
        farm_size: float = 1.0,
    ) -> RiskAnalysis:
        """Return the :class:`RiskAnalysis` of ``indicators`` for one farm.

        Unknown crops fall back to the reference's default crop.  A
        missing or insufficient indicator set returns
        :func:`insufficient_data_analysis`.

        Raises
        ------
        InvalidInputError
            If ``farm_size`` is not a positive number.
        """
        farm_size = require_positive("farm_size", farm_size)
        thresholds = self.reference.thresholds_for(crop_type)
        crop = thresholds.crop

        if indicators is None or not indicators.sufficient_data:
            logger.warning("Risk analysis for %s falls back: insufficient data", crop)
            return insufficient_data_analysis(crop)

        score = 0
        risk_type: RiskType = "drought"
        drought_critical = False
        eligible = False
        fired: List[str] = []
        recommendations: List[str] = []

        dry_days = indicators.consecutive_dry_days
        if dry_days >= thresholds.drought_critical:
            score += 40
            drought_critical = True
            risk_type = "drought"
            eligible = True
            fired.append("drought_critical")
            recommendations.append("Critical drought detected")
            recommendations.append("Urgent irrigation required")
        elif dry_days >= thresholds.drought_warning:
            score += 25
            fired.append("drought_warning")
            recommendations.append("Prolonged dry spell")
            recommendations.append("Plan irrigation if possible")

        flood = indicators.total_precipitation >= thresholds.flood_critical
        if flood:
            score += 35
            risk_type = "multiple" if dry_days >= COMPOUND_DRY_DAYS else "flood"
            eligible = True
            fired.append("flood_critical")
            recommendations.append("High flood risk")
            recommendations.append("Improve field drainage")

        if indicators.max_temperature >= thresholds.heat_critical:
            score += 30
            risk_type = "multiple" if drought_critical else "heat_stress"
            eligible = True
            fired.append("heat_critical")
            recommendations.append("Critical heat stress")
            recommendations.append("Shade or mulch crops against the sun")

        if indicators.precipitation_anomaly < PRECIPITATION_DEFICIT_PCT:
            score += 20
            fired.append("precipitation_deficit")
            recommendations.append("Significant rainfall deficit")

        if indicators.temperature_anomaly > TEMPERATURE_EXCESS_PCT:
            score += 15
            fired.append("temperature_excess")
            recommendations.append("Abnormally high temperatures")

        if farm_size > LARGE_FARM_HECTARES:
            score += 5
            fired.append("large_farm")

        risk_score = min(100, score)
        risk_level, alert_level = tier_for_score(risk_score)
        if risk_level == "low":
            recommendations.append("Favorable conditions for crops")

        analysis = RiskAnalysis(
            risk_level=risk_level,
            risk_type=risk_type,
            risk_score=risk_score,
            triggers={
                "drought_days": dry_days,
                "excessive_precipitation": indicators.total_precipitation,
                "temperature_stress": indicators.max_temperature,
            },
            recommendations=tuple(recommendations),
            compensation_eligible=eligible,
            alert_level=alert_level,
            crop_type=crop,
            fired=tuple(fired),
        )
        logger.info(
            "Risk for %s (%.1f ha): %s/%s score=%d",
            crop, farm_size, risk_level, risk_type, risk_score,
        )
        return analysis


def analyze_risk(
    series: DailyInput,
    latitude: float,
    crop_type: Optional[str],
    farm_size: float,
    *,
    reference_date: date,
    reference: Optional[ReferenceData] = None,
) -> RiskAnalysis:
    """Weather series to :class:`RiskAnalysis` in one call.

    ``reference_date`` marks the end of the analysed window; the
    surrounding application usually passes the last 30 days.
    """
    reference = reference or load_reference()
    indicators = WeatherIndicatorCalculator(reference).calculate(
        series, latitude, reference_date=reference_date
    )
    return CropRiskClassifier(reference).classify(indicators, crop_type, farm_size)


__all__ = [
    "RiskAnalysis",
    "RiskCategory",
    "RiskType",
    "AlertLevel",
    "CropRiskClassifier",
    "analyze_risk",
    "insufficient_data_analysis",
    "tier_for_score",
    "INSUFFICIENT_DATA_MESSAGE",
]

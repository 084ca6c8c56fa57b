"""
Climate risk assessment for smallholder crops.

This package consumes a daily weather series (see
:mod:`ingestion.transform.align` for accepted shapes) and exposes:

- :class:`WeatherIndicatorCalculator` – dry spells, rainfall totals,
  temperature extremes, ET0 and anomalies vs. monthly normals
- :class:`CropRiskClassifier` – crop-specific risk score, type, alert
  level and recommendations
- :func:`analyze_risk` – both steps in one call
"""

from .features import ClimateIndicators, WeatherIndicatorCalculator, calculate_indicators
from .crop_risk import CropRiskClassifier, RiskAnalysis, analyze_risk

__all__ = [
    "ClimateIndicators",
    "WeatherIndicatorCalculator",
    "calculate_indicators",
    "CropRiskClassifier",
    "RiskAnalysis",
    "analyze_risk",
]

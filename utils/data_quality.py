"""Cross-source quality checks for daily weather readings.

Several independent providers (Open‑Meteo, OpenEPI, the national
meteorological service …) report the same day at the same location.
Their agreement is what tells us whether a reading can be trusted
enough to drive an insurance trigger.  This module measures that
agreement and derives a single reliable reading.

Design principles
-----------------

* **Transparency** – the verdict exposes the raw statistics it was
  built from (variances and coefficients of variation) next to the
  quality bucket, warnings and recommendations.

* **Robustness** – fewer than two readings is a normal situation when
  providers are down.  It yields a ``poor`` verdict, never an
  exception.

Quality buckets
---------------

The coefficient of variation ``CV = sqrt(variance) / mean`` is computed
for precipitation and maximum temperature across sources (population
variance, CV = 0 when the mean is 0).  Comparisons are strict but allow
``EDGE_TOLERANCE`` of slack, so a CV that lands exactly on an edge
(8 mm and 12 mm give CV 0.2) falls into the better bucket:

=========  =================  ===============
quality    precipitation CV   temperature CV
=========  =================  ===============
excellent  < 0.10             < 0.05
good       < 0.20             < 0.10
fair       < 0.40             < 0.15
poor       otherwise
=========  =================  ===============

Typical usage
-------------

>>> from utils.data_quality import MultiSourceValidator
>>> validator = MultiSourceValidator()
>>> result = validator.validate(readings)
>>> reading = validator.reliable_reading(readings)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

import pandas as pd

from ingestion.quality.contracts import ReadingsSchema, validate_frame
from ingestion.records import WeatherReading
from ingestion.transform.align import readings_frame
from reference import ReferenceData, load_reference

from .numeric import coefficient_of_variation, population_variance

logger = logging.getLogger(__name__)

DataQuality = Literal["excellent", "good", "fair", "poor"]

# (quality, max precipitation CV, max temperature CV), best first
QUALITY_BUCKETS: Tuple[Tuple[DataQuality, float, float], ...] = (
    ("excellent", 0.10, 0.05),
    ("good", 0.20, 0.10),
    ("fair", 0.40, 0.15),
)
EDGE_TOLERANCE = 1e-9
PRECIPITATION_CV_WARNING = 0.30
TEMPERATURE_CV_WARNING = 0.10
MIN_SOURCES = 2

_FIELDS = ("precipitation", "temperature_max", "temperature_min", "humidity", "wind_speed")


@dataclass(frozen=True)
class ValidationResult:
    precipitation_variance: float
    temperature_variance: float
    data_quality: DataQuality
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    precipitation_cv: float = 0.0
    temperature_cv: float = 0.0
    source_count: int = 0

    @property
    def is_reliable(self) -> bool:
        return self.data_quality in ("excellent", "good")

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["warnings"] = list(self.warnings)
        out["recommendations"] = list(self.recommendations)
        return out


@dataclass(frozen=True)
class ReliableReading:
    """Single daily value derived from all available sources."""

    precipitation: float
    temperature_max: float
    temperature_min: float
    humidity: Optional[float]
    wind_speed: Optional[float]
    quality: DataQuality
    method: Literal["averaged", "fallback"]
    sources: Literal["multiple", "limited", "fallback"]
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def classify_quality(precipitation_cv: float, temperature_cv: float) -> DataQuality:
    """Return the quality bucket for a pair of coefficients of variation."""
    for quality, max_precip, max_temp in QUALITY_BUCKETS:
        if (
            precipitation_cv < max_precip + EDGE_TOLERANCE
            and temperature_cv < max_temp + EDGE_TOLERANCE
        ):
            return quality
    return "poor"


class MultiSourceValidator:
    """Check agreement between providers and derive a reliable reading.

    Parameters
    ----------
    reference : ReferenceData, optional
        Supplies ``source_priority`` for the fallback reading.
    source_priority : sequence of str, optional
        Overrides ``reference.source_priority``; the most stable
        provider comes first.
    """

    def __init__(
        self,
        reference: Optional[ReferenceData] = None,
        *,
        source_priority: Optional[Sequence[str]] = None,
    ) -> None:
        if source_priority is None:
            source_priority = (reference or load_reference()).source_priority
        self.source_priority = tuple(source_priority)

    def _frame(self, readings: Sequence[WeatherReading]) -> pd.DataFrame:
        return validate_frame(readings_frame(readings), ReadingsSchema)

    def validate(self, readings: Optional[Sequence[WeatherReading]]) -> ValidationResult:
        """Compute the data-quality verdict of ``readings``.

        Parameters
        ----------
        readings : sequence of WeatherReading
            Observations of one date and location, one per provider.

        Returns
        -------
        ValidationResult
            ``poor`` with a retry recommendation when fewer than two
            readings are available.
        """
        readings = list(readings or [])
        if len(readings) < MIN_SOURCES:
            logger.warning("Only %d weather source(s) available, cannot cross-validate", len(readings))
            return ValidationResult(
                precipitation_variance=0.0,
                temperature_variance=0.0,
                data_quality="poor",
                warnings=("insufficient data for validation",),
                recommendations=("retry later",),
                source_count=len(readings),
            )

        df = self._frame(readings)
        precip = df["precipitation"].tolist()
        tmax = df["temperature_max"].tolist()

        precip_var = population_variance(precip)
        temp_var = population_variance(tmax)
        precip_cv = coefficient_of_variation(precip)
        temp_cv = coefficient_of_variation(tmax)

        quality = classify_quality(precip_cv, temp_cv)
        warnings: List[str] = []
        recommendations: List[str] = []
        if quality == "fair":
            warnings.append("moderate divergence between sources")
            recommendations.append("monitor trends over several days")
        elif quality == "poor":
            warnings.append("large divergence between sources")
            recommendations.append("manual verification recommended")
            recommendations.append("use local station data if available")

        if precip_cv > PRECIPITATION_CV_WARNING:
            warnings.append(f"high precipitation variance ({precip_cv * 100:.1f}%)")
        if temp_cv > TEMPERATURE_CV_WARNING:
            warnings.append(f"high temperature variance ({temp_cv * 100:.1f}%)")

        result = ValidationResult(
            precipitation_variance=precip_var,
            temperature_variance=temp_var,
            data_quality=quality,
            warnings=tuple(warnings),
            recommendations=tuple(recommendations),
            precipitation_cv=precip_cv,
            temperature_cv=temp_cv,
            source_count=len(readings),
        )
        logger.info(
            "Weather data quality %s across %d sources (precip CV %.3f, temp CV %.3f)",
            quality, len(readings), precip_cv, temp_cv,
        )
        return result

    def _fallback_reading(self, readings: Sequence[WeatherReading]) -> Optional[WeatherReading]:
        # first reading wins when a provider reports twice
        by_source: Dict[str, WeatherReading] = {}
        for r in readings:
            by_source.setdefault(r.source, r)
        for source in self.source_priority:
            if source in by_source:
                return by_source[source]
        return readings[0] if readings else None

    def reliable_reading(
        self,
        readings: Optional[Sequence[WeatherReading]],
        validation: Optional[ValidationResult] = None,
    ) -> ReliableReading:
        """Return one trustworthy reading for the day.

        With ``excellent`` or ``good`` agreement every field is the mean
        across sources (absent fields ignored).  Otherwise the reading of
        the highest-priority provider available is returned, labelled
        ``fallback``.
        """
        readings = list(readings or [])
        validation = validation or self.validate(readings)

        if validation.is_reliable:
            df = self._frame(readings)
            means = {col: df[col].mean(skipna=True) for col in _FIELDS}
            return ReliableReading(
                precipitation=float(means["precipitation"]),
                temperature_max=float(means["temperature_max"]),
                temperature_min=float(means["temperature_min"]),
                humidity=None if pd.isna(means["humidity"]) else float(means["humidity"]),
                wind_speed=None if pd.isna(means["wind_speed"]) else float(means["wind_speed"]),
                quality=validation.data_quality,
                method="averaged",
                sources="multiple" if not validation.warnings else "limited",
            )

        chosen = self._fallback_reading(readings)
        if chosen is None:
            logger.warning("No weather source available, returning an empty fallback reading")
            return ReliableReading(
                precipitation=0.0,
                temperature_max=0.0,
                temperature_min=0.0,
                humidity=None,
                wind_speed=None,
                quality=validation.data_quality,
                method="fallback",
                sources="fallback",
            )
        logger.warning(
            "Data quality %s, falling back to %s reading", validation.data_quality, chosen.source
        )
        return ReliableReading(
            precipitation=float(chosen.precipitation),
            temperature_max=float(chosen.temperature_max),
            temperature_min=float(chosen.temperature_min),
            humidity=chosen.humidity,
            wind_speed=chosen.wind_speed,
            quality=validation.data_quality,
            method="fallback",
            sources="fallback",
            source=chosen.source,
        )


def validate_readings(
    readings: Optional[Sequence[WeatherReading]],
    reference: Optional[ReferenceData] = None,
) -> ValidationResult:
    """Functional shortcut for :meth:`MultiSourceValidator.validate`."""
    return MultiSourceValidator(reference).validate(readings)


__all__ = [
    "DataQuality",
    "ValidationResult",
    "ReliableReading",
    "MultiSourceValidator",
    "classify_quality",
    "validate_readings",
]

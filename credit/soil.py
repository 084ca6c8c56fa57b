"""
credit.soil
-----------

Soil quality scoring shared by the soil-data collaborator and the
credit scorer.  The score sums six tiered components and is capped at
100:

* pH: 20 points in [6.0, 7.0], 15 in [5.5, 7.5], otherwise 5
* organic carbon (%): >2.0 → 20, >1.5 → 15, >1.0 → 10, otherwise 5
* nitrogen (%): >0.2 → 15, >0.15 → 12, >0.1 → 8, otherwise 3
* phosphorus (ppm): >15 → 15, >10 → 12, >5 → 8, otherwise 3
* texture balance, ``|clay-30| + |sand-40| + |silt-30|``:
  <20 → 15, <40 → 10, otherwise 5
* water holding capacity (%): >20 → 15, >15 → 12, >10 → 8, otherwise 3

A missing measurement earns the lowest tier of its component.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional, Sequence, Tuple

SoilSuitability = Literal["excellent", "good", "moderate", "poor"]


@dataclass(frozen=True)
class SoilData:
    """Soil record; either ``quality_score`` or the measurements are set."""

    quality_score: Optional[float] = None
    ph: Optional[float] = None
    organic_carbon: Optional[float] = None
    nitrogen: Optional[float] = None
    phosphorus: Optional[float] = None
    potassium: Optional[float] = None
    clay_content: Optional[float] = None
    sand_content: Optional[float] = None
    silt_content: Optional[float] = None
    bulk_density: Optional[float] = None
    water_holding_capacity: Optional[float] = None

    @property
    def has_measurements(self) -> bool:
        return any(
            v is not None
            for v in (self.ph, self.organic_carbon, self.nitrogen, self.phosphorus,
                      self.clay_content, self.sand_content, self.silt_content,
                      self.water_holding_capacity)
        )

    def resolved_score(self) -> Optional[float]:
        """The given quality score, else the score of the measurements."""
        if self.quality_score is not None:
            return float(self.quality_score)
        if self.has_measurements:
            return soil_quality_score(self)
        return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _tier(value: Optional[float], tiers: Sequence[Tuple[float, int]], floor: int) -> int:
    """Points of the first ``(threshold, points)`` that ``value`` exceeds."""
    if value is None:
        return floor
    for threshold, points in tiers:
        if value > threshold:
            return points
    return floor


def _ph_points(ph: Optional[float]) -> int:
    if ph is None:
        return 5
    if 6.0 <= ph <= 7.0:
        return 20
    if 5.5 <= ph <= 7.5:
        return 15
    return 5


def _texture_points(soil: SoilData) -> int:
    if None in (soil.clay_content, soil.sand_content, soil.silt_content):
        return 5
    balance = (
        abs(soil.clay_content - 30) + abs(soil.sand_content - 40) + abs(soil.silt_content - 30)
    )
    if balance < 20:
        return 15
    if balance < 40:
        return 10
    return 5


def soil_quality_score(soil: SoilData) -> int:
    """Return the 0–100 quality score of the soil measurements."""
    score = _ph_points(soil.ph)
    score += _tier(soil.organic_carbon, ((2.0, 20), (1.5, 15), (1.0, 10)), 5)
    score += _tier(soil.nitrogen, ((0.2, 15), (0.15, 12), (0.1, 8)), 3)
    score += _tier(soil.phosphorus, ((15, 15), (10, 12), (5, 8)), 3)
    score += _texture_points(soil)
    score += _tier(soil.water_holding_capacity, ((20, 15), (15, 12), (10, 8)), 3)
    return min(score, 100)


def soil_suitability(score: float) -> SoilSuitability:
    if score >= 80:
        return "excellent"
    if score >= 65:
        return "good"
    if score >= 45:
        return "moderate"
    return "poor"


__all__ = ["SoilData", "SoilSuitability", "soil_quality_score", "soil_suitability"]

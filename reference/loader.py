"""
reference.loader
----------------

Loads the reference tables (crop thresholds, risk factors, monthly
normals, provider priority, credit tiers) from YAML and turns them
into immutable objects that the scoring components receive through
their constructors.

The document is resolved in this order:

1. an explicit ``path`` passed to :func:`load_reference`;
2. the ``CLIMINVEST_REFERENCE`` environment variable;
3. ``defaults.yaml`` shipped next to this module.

Nothing is cached at module level.  Each call reads the file again,
which keeps tests free to point different components at different
tables.

Example
-------
::

    from reference import load_reference
    ref = load_reference()
    ref.thresholds_for("rice").drought_critical   # 10
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from utils.errors import ReferenceDataError

logger = logging.getLogger(__name__)

ENV_VAR = "CLIMINVEST_REFERENCE"
DEFAULT_PATH = Path(__file__).with_name("defaults.yaml")


@dataclass(frozen=True)
class CropThresholds:
    """Trigger levels for one crop."""

    crop: str
    drought_warning: int
    drought_critical: int
    flood_critical: float
    heat_critical: float


@dataclass(frozen=True)
class MonthlyNormals:
    """Twelve-entry climatological normals, index 0 is January."""

    precipitation_mm: Tuple[float, ...]
    temperature_c: Tuple[float, ...]

    def precipitation(self, month: int) -> float:
        return self.precipitation_mm[month - 1]

    def temperature(self, month: int) -> float:
        return self.temperature_c[month - 1]


@dataclass(frozen=True)
class PremiumTariff:
    base_per_hectare: float = 200.0
    min_premium: float = 200.0
    max_premium: float = 1000.0
    coverage_multiplier: float = 30.0
    rounding_step: float = 10.0


@dataclass(frozen=True)
class CreditTerms:
    amount_per_tonne: float
    interest_rates: Mapping[str, float]
    amount_multipliers: Mapping[str, float]
    base_repayment_months: int
    crop_repayment_months: Mapping[str, int]


@dataclass(frozen=True)
class ReferenceData:
    """All reference tables of one deployment."""

    default_crop: str
    crop_thresholds: Mapping[str, CropThresholds]
    crop_risk_factors: Mapping[str, float]
    default_crop_risk_factor: float
    regional_risk_factors: Mapping[str, float]
    default_regional_risk_factor: float
    normals: MonthlyNormals
    source_priority: Tuple[str, ...]
    premium: PremiumTariff
    credit: CreditTerms
    crop_names: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def is_known_crop(self, crop_type: Optional[str]) -> bool:
        return crop_type is not None and crop_type in self.crop_thresholds

    def thresholds_for(self, crop_type: Optional[str]) -> CropThresholds:
        """Return the thresholds of ``crop_type``, or the default crop's."""
        if self.is_known_crop(crop_type):
            return self.crop_thresholds[crop_type]
        logger.warning(
            "Unknown crop type %r, using %s thresholds", crop_type, self.default_crop
        )
        return self.crop_thresholds[self.default_crop]

    def crop_risk_factor(self, crop_type: Optional[str]) -> float:
        if crop_type in self.crop_risk_factors:
            return self.crop_risk_factors[crop_type]
        logger.warning(
            "No risk factor for crop %r, using default %.2f",
            crop_type,
            self.default_crop_risk_factor,
        )
        return self.default_crop_risk_factor

    def regional_risk_factor(self, region: Optional[str]) -> float:
        if region in self.regional_risk_factors:
            return self.regional_risk_factors[region]
        if region:
            logger.warning(
                "Unknown region %r, using default factor %.2f",
                region,
                self.default_regional_risk_factor,
            )
        return self.default_regional_risk_factor

    def crop_display_name(self, crop_type: str, locale: str = "en") -> str:
        names = self.crop_names.get(locale) or self.crop_names.get("en", {})
        return names.get(crop_type, crop_type)


def _require(doc: Mapping[str, Any], key: str) -> Any:
    if key not in doc:
        raise ReferenceDataError(f"Reference document is missing '{key}'")
    return doc[key]


def _parse_thresholds(raw: Mapping[str, Any]) -> Dict[str, CropThresholds]:
    table: Dict[str, CropThresholds] = {}
    for crop, cfg in raw.items():
        try:
            item = CropThresholds(
                crop=crop,
                drought_warning=int(cfg["drought_days"]["warning"]),
                drought_critical=int(cfg["drought_days"]["critical"]),
                flood_critical=float(cfg["flood_precipitation"]["critical"]),
                heat_critical=float(cfg["heat_stress"]["critical"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ReferenceDataError(f"Invalid thresholds for crop '{crop}': {exc}") from exc
        if item.drought_warning > item.drought_critical:
            raise ReferenceDataError(
                f"Drought warning above critical for crop '{crop}'"
            )
        table[crop] = item
    return table


def _parse_normals(raw: Mapping[str, Any]) -> MonthlyNormals:
    precip = tuple(float(v) for v in _require(raw, "precipitation_mm"))
    temp = tuple(float(v) for v in _require(raw, "temperature_c"))
    if len(precip) != 12 or len(temp) != 12:
        raise ReferenceDataError("Monthly normals must have exactly 12 entries")
    return MonthlyNormals(precipitation_mm=precip, temperature_c=temp)


def parse_reference(doc: Mapping[str, Any]) -> ReferenceData:
    """Build :class:`ReferenceData` from an already parsed mapping."""
    if not isinstance(doc, Mapping):
        raise ReferenceDataError("Reference document must be a mapping")

    thresholds = _parse_thresholds(_require(doc, "crop_thresholds"))
    default_crop = doc.get("default_crop", "maize")
    if default_crop not in thresholds:
        raise ReferenceDataError(
            f"Default crop '{default_crop}' has no thresholds configured"
        )

    credit_raw = _require(doc, "credit")
    try:
        credit = CreditTerms(
            amount_per_tonne=float(credit_raw["amount_per_tonne"]),
            interest_rates={k: float(v) for k, v in credit_raw["interest_rates"].items()},
            amount_multipliers={
                k: float(v) for k, v in credit_raw["amount_multipliers"].items()
            },
            base_repayment_months=int(credit_raw.get("base_repayment_months", 12)),
            crop_repayment_months={
                k.lower(): int(v)
                for k, v in (credit_raw.get("crop_repayment_months") or {}).items()
            },
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ReferenceDataError(f"Invalid credit section: {exc}") from exc

    premium = PremiumTariff(**{k: float(v) for k, v in (doc.get("premium") or {}).items()})

    return ReferenceData(
        default_crop=default_crop,
        crop_thresholds=thresholds,
        crop_risk_factors={k: float(v) for k, v in _require(doc, "crop_risk_factors").items()},
        default_crop_risk_factor=float(doc.get("default_crop_risk_factor", 0.6)),
        regional_risk_factors={
            k: float(v) for k, v in _require(doc, "regional_risk_factors").items()
        },
        default_regional_risk_factor=float(doc.get("default_regional_risk_factor", 0.7)),
        normals=_parse_normals(_require(doc, "monthly_normals")),
        source_priority=tuple(doc.get("source_priority") or ()),
        premium=premium,
        credit=credit,
        crop_names=doc.get("crop_names") or {},
    )


def load_reference(path: Optional[Union[str, Path]] = None) -> ReferenceData:
    """Read and validate a reference document.

    Parameters
    ----------
    path : str or Path, optional
        YAML file to read.  Falls back to ``$CLIMINVEST_REFERENCE`` and
        then to the packaged defaults.

    Raises
    ------
    ReferenceDataError
        If the file cannot be read or does not describe valid tables.
    """
    source = Path(path or os.environ.get(ENV_VAR) or DEFAULT_PATH)
    try:
        with open(source, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ReferenceDataError(f"Cannot read reference data from {source}: {exc}") from exc
    logger.debug("Loaded reference data from %s", source)
    return parse_reference(doc)


__all__ = [
    "CropThresholds",
    "MonthlyNormals",
    "PremiumTariff",
    "CreditTerms",
    "ReferenceData",
    "parse_reference",
    "load_reference",
]

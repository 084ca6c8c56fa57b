"""
Farmer credit scoring for agricultural micro-loans.

Four sub-scores on a 0–100 scale are combined into a 0–1000 credit
score:

=================  ======  ============================================
Sub-score          Weight  Built from
=================  ======  ============================================
soil quality        25 %   :func:`credit.soil.soil_quality_score`
historical yields   25 %   average yield, trend, data reliability
insurance history   30 %   payment reliability, tenure, claims, policies
market access       20 %   distance, transport cost, storage,
                           processing, cooperative membership
=================  ======  ============================================

The score selects a risk tier (>= 700 low, >= 500 medium, otherwise
high) which fixes the interest rate, scales the eligible amount and
adjusts the repayment period.

Missing insurance or market records score zero and are reported in
``FarmerCreditScore.warnings``; they do not raise.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from reference import ReferenceData, load_reference
from utils.errors import InvalidInputError
from utils.numeric import require_in_range, require_positive, round_half_up

from .soil import SoilData, soil_suitability

logger = logging.getLogger(__name__)

CreditRiskLevel = Literal["low", "medium", "high"]
YieldTrend = Literal["increasing", "stable", "decreasing"]

WEIGHTS = {"soil": 0.25, "yields": 0.25, "insurance": 0.30, "market": 0.20}
LOW_RISK_SCORE = 700
MEDIUM_RISK_SCORE = 500
MIN_REPAYMENT_MONTHS = 6

_TREND_POINTS = {"increasing": 30, "stable": 20, "decreasing": 5}


@dataclass(frozen=True)
class YieldData:
    average_yield: float  # t/ha
    trend: YieldTrend = "stable"
    reliability_score: float = 0.0  # 0-100
    crop: Optional[str] = None


@dataclass(frozen=True)
class InsuranceHistory:
    payment_reliability: float  # % of premiums paid on time
    years_with_insurance: int = 0
    claims_submitted: int = 0
    total_policies: int = 0
    active_policies: int = 0
    claims_paid: int = 0
    total_premiums_paid: float = 0.0


@dataclass(frozen=True)
class MarketAccessData:
    distance_to_market: float  # km
    transport_cost: float  # FCFA/kg
    access_to_storage: bool = False
    access_to_processing: bool = False
    cooperative_membership: bool = False
    market_price_variability: Optional[float] = None


@dataclass(frozen=True)
class FarmerCreditScore:
    overall_score: int
    soil_quality: float
    historical_yields: int
    insurance_history: int
    market_access: int
    risk_level: CreditRiskLevel
    eligible_amount: int
    interest_rate: float
    repayment_period: int
    recommendation: str
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["warnings"] = list(self.warnings)
        return out


def _distance_points(km: float) -> int:
    if km < 5:
        return 25
    if km < 10:
        return 20
    if km < 20:
        return 15
    if km < 50:
        return 10
    return 5


def _transport_points(cost: float) -> int:
    if cost < 10:
        return 20
    if cost < 25:
        return 15
    if cost < 50:
        return 10
    return 5


def _average_yield_points(avg: float) -> int:
    if avg > 2.0:
        return 40
    if avg > 1.5:
        return 32
    if avg > 1.0:
        return 24
    if avg > 0.5:
        return 16
    return 8


def _claims_points(claims: int, policies: int) -> int:
    ratio = claims / max(policies, 1)
    if ratio < 0.1:
        return 20
    if ratio < 0.2:
        return 15
    if ratio < 0.3:
        return 10
    return 5


def yield_score(data: YieldData) -> int:
    """0–100 score of the yield history."""
    average = require_in_range("average_yield", data.average_yield, 0.0, math.inf)
    reliability = require_in_range("reliability_score", data.reliability_score, 0, 100)
    if data.trend not in _TREND_POINTS:
        logger.warning("Unknown yield trend %r, scored as decreasing", data.trend)
    score = (
        _average_yield_points(average)
        + _TREND_POINTS.get(data.trend, _TREND_POINTS["decreasing"])
        + reliability / 100 * 30
    )
    return int(min(round_half_up(score), 100))


def insurance_score(history: InsuranceHistory) -> int:
    """0–100 score of the insurance relationship."""
    reliability = require_in_range("payment_reliability", history.payment_reliability, 0, 100)
    for name in ("years_with_insurance", "claims_submitted", "total_policies", "active_policies"):
        if getattr(history, name) < 0:
            raise InvalidInputError(f"{name} must not be negative")
    score = reliability / 100 * 40
    score += min(history.years_with_insurance * 5, 25)
    score += _claims_points(history.claims_submitted, history.total_policies)
    if history.active_policies > 0:
        score += 15
    return int(min(round_half_up(score), 100))


def market_score(data: MarketAccessData) -> int:
    """0–100 score of the farm's access to markets."""
    distance = require_in_range("distance_to_market", data.distance_to_market, 0.0, math.inf)
    cost = require_in_range("transport_cost", data.transport_cost, 0.0, math.inf)
    score = _distance_points(distance) + _transport_points(cost)
    if data.access_to_storage:
        score += 20
    if data.access_to_processing:
        score += 15
    if data.cooperative_membership:
        score += 20
    return min(score, 100)


def overall_score(soil: float, yields: float, insurance: float, market: float) -> int:
    """Weighted 0–1000 score from the four 0–100 sub-scores.

    The weighted mean is rounded half-up to an integer before scaling,
    so the result is always a multiple of 10.
    """
    weighted = (
        soil * WEIGHTS["soil"]
        + yields * WEIGHTS["yields"]
        + insurance * WEIGHTS["insurance"]
        + market * WEIGHTS["market"]
    )
    return int(round_half_up(weighted)) * 10


def credit_risk_level(score: float) -> CreditRiskLevel:
    if score >= LOW_RISK_SCORE:
        return "low"
    if score >= MEDIUM_RISK_SCORE:
        return "medium"
    return "high"


class CreditScorer:
    """Score farmers for micro-credit using a deployment's credit terms."""

    def __init__(self, reference: Optional[ReferenceData] = None) -> None:
        self.reference = reference or load_reference()
        self.terms = self.reference.credit

    def repayment_period(self, score: float, crop_type: Optional[str]) -> int:
        """Months to repay: crop cycle base adjusted by score."""
        base = self.terms.crop_repayment_months.get(
            (crop_type or "").lower(), self.terms.base_repayment_months
        )
        if score >= LOW_RISK_SCORE:
            return base + 6
        if score >= MEDIUM_RISK_SCORE:
            return base
        return max(base - 3, MIN_REPAYMENT_MONTHS)

    def eligible_amount(self, risk_level: CreditRiskLevel, farm_size: float, average_yield: float) -> int:
        base = farm_size * average_yield * self.terms.amount_per_tonne
        return int(round_half_up(base * self.terms.amount_multipliers[risk_level]))

    @staticmethod
    def recommendation(
        risk_level: CreditRiskLevel,
        soil_score: float,
        payment_reliability: Optional[float],
    ) -> str:
        suitability = soil_suitability(soil_score)
        reliability = (
            f"{payment_reliability:g}% of premiums paid on time"
            if payment_reliability is not None
            else "no insurance payment history"
        )
        if risk_level == "low":
            return (
                "Excellent profile! You are eligible for preferential credit. "
                f"Your {suitability} soil and reliable insurance history ({reliability}) "
                "give you access to the best terms."
            )
        if risk_level == "medium":
            return (
                "Fair profile. You can obtain credit on standard terms. "
                f"Improve your {suitability} soil (score: {soil_score:g}/100) and keep "
                f"insurance payments up to date ({reliability}) for better future terms."
            )
        return (
            "Profile needs improvement. We recommend starting with a micro-credit. "
            f"Work on your {suitability} soil and subscribe to insurance ({reliability}) "
            "to raise your credit score."
        )

    def score(
        self,
        soil: Optional[SoilData],
        yields: Optional[YieldData],
        insurance: Optional[InsuranceHistory] = None,
        market: Optional[MarketAccessData] = None,
        *,
        farm_size: float,
        crop_type: Optional[str] = None,
    ) -> FarmerCreditScore:
        """Compute the :class:`FarmerCreditScore` of one farmer.

        Raises
        ------
        InvalidInputError
            If ``farm_size`` is not positive or a record holds values out
            of range (negative distances, percentages above 100 …).
        """
        farm_size = require_positive("farm_size", farm_size)
        warnings: List[str] = []

        soil_value = soil.resolved_score() if soil is not None else None
        if soil_value is None:
            warnings.append("no soil data, soil quality scored 0")
            soil_value = 0.0
        soil_value = require_in_range("soil quality_score", soil_value, 0, 100)

        if yields is None:
            warnings.append("no yield history, scored as worst case")
            yields = YieldData(average_yield=0.0, trend="decreasing", reliability_score=0.0)
        yields_value = yield_score(yields)

        if insurance is None:
            warnings.append("no insurance history, insurance score 0")
            insurance_value = 0
        else:
            insurance_value = insurance_score(insurance)

        if market is None:
            warnings.append("no market access data, market score 0")
            market_value = 0
        else:
            market_value = market_score(market)

        total = overall_score(soil_value, yields_value, insurance_value, market_value)
        risk_level = credit_risk_level(total)
        crop = crop_type or yields.crop

        result = FarmerCreditScore(
            overall_score=total,
            soil_quality=soil_value,
            historical_yields=yields_value,
            insurance_history=insurance_value,
            market_access=market_value,
            risk_level=risk_level,
            eligible_amount=self.eligible_amount(risk_level, farm_size, yields.average_yield),
            interest_rate=self.terms.interest_rates[risk_level],
            repayment_period=self.repayment_period(total, crop),
            recommendation=self.recommendation(
                risk_level,
                soil_value,
                insurance.payment_reliability if insurance is not None else None,
            ),
            warnings=tuple(warnings),
        )
        for message in warnings:
            logger.warning("Credit scoring: %s", message)
        logger.info("Credit score %d (%s risk) for %.2f ha", total, risk_level, farm_size)
        return result


__all__ = [
    "YieldData",
    "InsuranceHistory",
    "MarketAccessData",
    "FarmerCreditScore",
    "CreditScorer",
    "yield_score",
    "insurance_score",
    "market_score",
    "overall_score",
    "credit_risk_level",
]

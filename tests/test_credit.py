"""
tests/test_credit.py

Soil scoring and farmer credit scoring.
"""

from __future__ import annotations

import pytest

from credit import (
    CreditScorer,
    InsuranceHistory,
    MarketAccessData,
    SoilData,
    YieldData,
    overall_score,
    soil_quality_score,
    soil_suitability,
)
from credit.scoring import credit_risk_level, insurance_score, market_score, yield_score
from utils.errors import InvalidInputError

GOOD_SOIL = SoilData(
    ph=6.5,
    organic_carbon=2.5,
    nitrogen=0.25,
    phosphorus=20,
    clay_content=30,
    sand_content=40,
    silt_content=30,
    water_holding_capacity=25,
)
POOR_SOIL = SoilData(
    ph=4.5,
    organic_carbon=0.5,
    nitrogen=0.05,
    phosphorus=2,
    clay_content=60,
    sand_content=20,
    silt_content=20,
    water_holding_capacity=5,
)


@pytest.fixture()
def scorer(reference) -> CreditScorer:
    return CreditScorer(reference)


@pytest.fixture()
def profile():
    """Records scoring soil 80, yields 70, insurance 90 and market 60."""
    return dict(
        soil=SoilData(quality_score=80),
        yields=YieldData(average_yield=1.6, trend="stable", reliability_score=60),
        insurance=InsuranceHistory(
            payment_reliability=75, years_with_insurance=5, claims_submitted=0,
            total_policies=5, active_policies=1,
        ),
        market=MarketAccessData(
            distance_to_market=15, transport_cost=30, access_to_storage=True,
            access_to_processing=True,
        ),
    )


class TestSoil:
    def test_ideal_soil(self) -> None:
        assert soil_quality_score(GOOD_SOIL) == 100
        assert soil_suitability(100) == "excellent"

    def test_poor_soil(self) -> None:
        assert soil_quality_score(POOR_SOIL) == 24
        assert soil_suitability(24) == "poor"

    def test_missing_measurements_take_lowest_tier(self) -> None:
        assert soil_quality_score(SoilData(ph=6.5)) == 20 + 5 + 3 + 3 + 5 + 3

    @pytest.mark.parametrize(
        "score, expected",
        [(80, "excellent"), (79, "good"), (65, "good"), (64, "moderate"), (45, "moderate"), (44, "poor")],
    )
    def test_suitability_boundaries(self, score, expected) -> None:
        assert soil_suitability(score) == expected

    def test_resolved_score(self) -> None:
        assert SoilData(quality_score=72).resolved_score() == 72.0
        assert SoilData().resolved_score() is None
        assert GOOD_SOIL.resolved_score() == 100


class TestSubScores:
    def test_yield(self) -> None:
        assert yield_score(YieldData(2.5, "increasing", 100)) == 100
        assert yield_score(YieldData(0.3, "decreasing", 0)) == 13

    def test_insurance_caps_tenure(self) -> None:
        history = InsuranceHistory(payment_reliability=100, years_with_insurance=10, total_policies=0)
        assert insurance_score(history) == 40 + 25 + 20

    def test_insurance_claims_ratio(self) -> None:
        history = InsuranceHistory(payment_reliability=0, claims_submitted=3, total_policies=10)
        assert insurance_score(history) == 5

    def test_market_capped(self) -> None:
        data = MarketAccessData(1, 5, True, True, True)
        assert market_score(data) == 100

    @pytest.mark.parametrize("average", [float("nan"), float("inf"), -0.5])
    def test_invalid_average_yield(self, average) -> None:
        with pytest.raises(InvalidInputError):
            yield_score(YieldData(average, "stable", 50))

    def test_nan_market_distance(self) -> None:
        with pytest.raises(InvalidInputError):
            market_score(MarketAccessData(float("nan"), 5))

    def test_out_of_range_payment_reliability(self) -> None:
        with pytest.raises(InvalidInputError):
            insurance_score(InsuranceHistory(payment_reliability=120))


class TestOverallScore:
    def test_half_rounds_up(self) -> None:
        # 0.25*80 + 0.25*70 + 0.30*90 + 0.20*60 = 76.5
        assert overall_score(80, 70, 90, 60) == 770

    def test_extremes(self) -> None:
        assert overall_score(100, 100, 100, 100) == 1000
        assert overall_score(0, 0, 0, 0) == 0

    @pytest.mark.parametrize(
        "score, level", [(1000, "low"), (700, "low"), (690, "medium"), (500, "medium"), (490, "high")]
    )
    def test_risk_levels(self, score, level) -> None:
        assert credit_risk_level(score) == level


class TestCreditScorer:
    def test_low_risk_profile(self, scorer, profile) -> None:
        result = scorer.score(**profile, farm_size=2, crop_type="maize")

        assert (result.soil_quality, result.historical_yields) == (80, 70)
        assert (result.insurance_history, result.market_access) == (90, 60)
        assert result.overall_score == 770
        assert result.risk_level == "low"
        assert result.interest_rate == 8.5
        # 2 ha * 1.6 t/ha * 200000 * 1.5
        assert result.eligible_amount == 960000
        assert result.repayment_period == 18
        assert result.warnings == ()
        assert "excellent soil" in result.recommendation
        assert "75% of premiums paid on time" in result.recommendation

    @pytest.mark.parametrize("crop, months", [("maize", 18), ("cotton", 14), ("rice", 12), ("coton", 14)])
    def test_repayment_by_crop_for_low_risk(self, scorer, crop, months) -> None:
        assert scorer.repayment_period(800, crop) == months

    @pytest.mark.parametrize("crop, months", [("maize", 12), ("cotton", 8)])
    def test_repayment_medium_risk(self, scorer, crop, months) -> None:
        assert scorer.repayment_period(600, crop) == months

    @pytest.mark.parametrize("crop, months", [("maize", 9), ("cotton", 6), ("rice", 6)])
    def test_repayment_high_risk_has_floor(self, scorer, crop, months) -> None:
        assert scorer.repayment_period(300, crop) == months

    def test_missing_optional_records(self, scorer, profile) -> None:
        result = scorer.score(profile["soil"], profile["yields"], farm_size=1)
        assert result.insurance_history == 0
        assert result.market_access == 0
        assert len(result.warnings) == 2
        assert "no insurance payment history" in result.recommendation

    def test_nothing_known(self, scorer) -> None:
        result = scorer.score(None, None, farm_size=1)
        # yields scored worst case: 8 + 5 + 0
        assert result.historical_yields == 13
        assert result.overall_score == 30
        assert result.risk_level == "high"
        assert result.interest_rate == 18.0
        assert result.eligible_amount == 0

    def test_measured_soil(self, scorer, profile) -> None:
        profile["soil"] = POOR_SOIL
        result = scorer.score(**profile, farm_size=1)
        assert result.soil_quality == 24
        assert "poor soil" in result.recommendation

    @pytest.mark.parametrize("size", [0, -3])
    def test_invalid_farm_size(self, scorer, profile, size) -> None:
        with pytest.raises(InvalidInputError):
            scorer.score(**profile, farm_size=size)

    def test_nan_yield_is_rejected(self, scorer, profile) -> None:
        profile["yields"] = YieldData(average_yield=float("nan"), trend="stable", reliability_score=60)
        with pytest.raises(InvalidInputError):
            scorer.score(**profile, farm_size=1)

    def test_soil_score_out_of_range(self, scorer, profile) -> None:
        profile["soil"] = SoilData(quality_score=140)
        with pytest.raises(InvalidInputError):
            scorer.score(**profile, farm_size=1)

    def test_to_dict(self, scorer, profile) -> None:
        out = scorer.score(**profile, farm_size=2).to_dict()
        assert out["overall_score"] == 770
        assert isinstance(out["warnings"], list)

"""
tests/test_premium.py

Monthly premium pricing.
"""

from __future__ import annotations

import itertools

import pytest

from insurance import PremiumInput, PremiumPricer, RiskIntensity, calculate_premium, format_amount
from insurance.premium import risk_category
from utils.errors import InvalidInputError


@pytest.fixture()
def pricer(reference) -> PremiumPricer:
    return PremiumPricer(reference)


class TestPrice:
    def test_maize_two_hectares(self, reference) -> None:
        result = calculate_premium("maize", 2, 0.5, reference=reference)
        # 400 * 0.7 * 0.7 * 1.5 = 294 -> 300
        assert result.monthly_premium == 300
        assert result.coverage_amount == 9000
        assert result.base_premium == pytest.approx(400.0)
        assert result.risk_category == "low"

    def test_rounds_up_to_ten(self, reference) -> None:
        # 600 * 0.4 * 0.9 * 1.5 = 324 -> 330
        result = calculate_premium("millet", 3, 0.5, "Sahel", reference=reference)
        assert result.monthly_premium == 330

    def test_exact_multiple_is_kept(self, pricer) -> None:
        assert pricer.adjusted_premium(5, 0.0, 0.7, 0.5) == 350

    def test_floor(self, reference) -> None:
        result = calculate_premium("maize", 1, 0.0, "Sudan", reference=reference)
        assert result.adjusted_premium == 100
        assert result.monthly_premium == 200

    def test_ceiling(self, reference) -> None:
        result = calculate_premium("vegetables", 50, 1.0, "Sahel", reference=reference)
        assert result.monthly_premium == 1000
        assert result.coverage_amount == 30000

    def test_bounds_hold_everywhere(self, pricer) -> None:
        crops = ["maize", "millet", "rice", "vegetables", "cassava"]
        sizes = [0.1, 0.5, 1, 2, 5, 10, 1000]
        risks = [0.0, 0.25, 0.5, 1.0]
        regions = [None, "Sahel", "Guinea", "Atlantis"]
        for crop, size, risk, region in itertools.product(crops, sizes, risks, regions):
            result = pricer.price(PremiumInput(crop, size, RiskIntensity(risk), region))
            assert 200 <= result.monthly_premium <= 1000
            assert result.coverage_amount == 30 * result.monthly_premium

    def test_adjusted_premium_grows_with_risk(self, pricer) -> None:
        values = [pricer.adjusted_premium(2, r / 10, 0.7, 0.7) for r in range(11)]
        assert values == sorted(values)

    @pytest.mark.parametrize("size", [0, -1, float("nan"), float("inf")])
    def test_invalid_farm_size(self, reference, size) -> None:
        with pytest.raises(InvalidInputError):
            calculate_premium("maize", size, 0.5, reference=reference)

    @pytest.mark.parametrize("risk", [-0.1, 1.5])
    def test_risk_intensity_out_of_range(self, reference, risk) -> None:
        with pytest.raises(InvalidInputError):
            calculate_premium("maize", 2, risk, reference=reference)


class TestRiskCategory:
    def test_buckets(self) -> None:
        assert risk_category(0.5, 0.7, 0.7) == "low"
        assert risk_category(1.0, 0.8, 0.7) == "medium"
        assert risk_category(1.0, 0.9, 0.9) == "high"


class TestExplanation:
    def test_english(self, reference) -> None:
        text = calculate_premium("maize", 2, 0.5, reference=reference).explanation
        assert text == (
            "Your maize crop on 2 hectares presents low risk. "
            "Calculated premium: 300 FCFA/month."
        )

    def test_singular_hectare(self, reference) -> None:
        text = calculate_premium("rice", 1, 0.5, reference=reference).explanation
        assert "1 hectare " in text

    def test_french(self, reference) -> None:
        text = calculate_premium("maize", 2, 0.5, reference=reference, locale="fr").explanation
        assert "maïs" in text
        assert "faible risque" in text
        assert "300 FCFA/mois" in text

    def test_unknown_locale_falls_back_to_english(self, reference) -> None:
        assert PremiumPricer(reference, locale="de").locale == "en"


class TestHelpers:
    def test_premium_by_size(self, pricer) -> None:
        table = pricer.premium_by_size("maize")
        assert list(table.columns) == ["size", "premium", "coverage"]
        assert table["size"].tolist() == [0.5, 1, 1.5, 2, 3, 5]
        assert table["premium"].is_monotonic_increasing
        assert (table["coverage"] == table["premium"] * 30).all()

    def test_validate_premium(self, pricer) -> None:
        assert pricer.validate_premium(200)
        assert pricer.validate_premium(1000)
        assert not pricer.validate_premium(1010)

    def test_format_amount(self) -> None:
        assert format_amount(9000) == "9,000 FCFA"
        assert format_amount(250) == "250 FCFA"

    def test_to_dict(self, reference) -> None:
        out = calculate_premium("maize", 2, 0.5, reference=reference).to_dict()
        assert out["monthly_premium"] == 300

"""
tests/test_reference.py

Loading and validating the reference tables.
"""

from __future__ import annotations

import pytest
import yaml

from reference import load_reference, parse_reference
from utils.errors import ReferenceDataError


class TestPackagedDefaults:
    def test_nine_known_crops_with_maize_default(self, reference) -> None:
        assert len(reference.crop_thresholds) == 9
        assert reference.default_crop == "maize"
        assert reference.is_known_crop("sesame")
        assert not reference.is_known_crop("yam")

    def test_maize_thresholds(self, reference) -> None:
        maize = reference.thresholds_for("maize")
        assert (maize.drought_warning, maize.drought_critical) == (10, 15)
        assert maize.flood_critical == 100
        assert maize.heat_critical == 38

    def test_unknown_crop_falls_back_to_maize(self, reference) -> None:
        assert reference.thresholds_for("yam") == reference.thresholds_for("maize")
        assert reference.thresholds_for(None).crop == "maize"

    def test_monthly_normals(self, reference) -> None:
        assert reference.normals.precipitation(1) == 5
        assert reference.normals.precipitation(8) == 220
        assert reference.normals.temperature(4) == 38
        assert reference.normals.temperature(12) == 28

    def test_risk_factors(self, reference) -> None:
        assert reference.crop_risk_factor("maize") == 0.7
        assert reference.crop_risk_factor("cassava") == 0.6
        assert reference.regional_risk_factor("Sahel") == 0.9
        assert reference.regional_risk_factor("Atlantis") == 0.7
        assert reference.regional_risk_factor(None) == 0.7

    def test_source_priority_and_names(self, reference) -> None:
        assert reference.source_priority[0] == "Open-Meteo"
        assert reference.crop_display_name("maize", "fr") == "maïs"
        assert reference.crop_display_name("cassava", "fr") == "cassava"

    def test_credit_terms(self, reference) -> None:
        assert reference.credit.interest_rates == {"low": 8.5, "medium": 12.0, "high": 18.0}
        assert reference.credit.crop_repayment_months["cotton"] == 8


class TestLoading:
    def test_explicit_path(self, tmp_path, raw_reference) -> None:
        raw_reference["crop_thresholds"]["maize"]["drought_days"]["critical"] = 12
        path = tmp_path / "ref.yaml"
        path.write_text(yaml.safe_dump(raw_reference, allow_unicode=True), encoding="utf-8")

        ref = load_reference(path)

        assert ref.thresholds_for("maize").drought_critical == 12

    def test_environment_variable(self, tmp_path, raw_reference, monkeypatch) -> None:
        raw_reference["default_regional_risk_factor"] = 0.8
        path = tmp_path / "env.yaml"
        path.write_text(yaml.safe_dump(raw_reference, allow_unicode=True), encoding="utf-8")
        monkeypatch.setenv("CLIMINVEST_REFERENCE", str(path))

        assert load_reference().regional_risk_factor(None) == 0.8

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ReferenceDataError):
            load_reference(tmp_path / "nope.yaml")


class TestValidation:
    def test_normals_need_twelve_months(self, raw_reference) -> None:
        raw_reference["monthly_normals"]["precipitation_mm"] = [10] * 11
        with pytest.raises(ReferenceDataError):
            parse_reference(raw_reference)

    def test_default_crop_must_have_thresholds(self, raw_reference) -> None:
        raw_reference["default_crop"] = "yam"
        with pytest.raises(ReferenceDataError):
            parse_reference(raw_reference)

    def test_warning_cannot_exceed_critical(self, raw_reference) -> None:
        raw_reference["crop_thresholds"]["rice"]["drought_days"] = {"warning": 12, "critical": 10}
        with pytest.raises(ReferenceDataError):
            parse_reference(raw_reference)

    def test_missing_section(self, raw_reference) -> None:
        del raw_reference["crop_risk_factors"]
        with pytest.raises(ReferenceDataError):
            parse_reference(raw_reference)

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ReferenceDataError):
            parse_reference(["maize"])

#!/usr/bin/env python3
"""
Unit tests for cardiovascular risk estimates and the risk calculator
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from risk_engine.schema import PatientAttributes, RiskName, DiabetesStatus, CalculatorConfig
from risk_engine.cardiovascular import (ascvd_risk, heart_failure_survival, heart_failure_risk,
                                        diabetes_complication_risk)
from risk_engine.calculator import RiskCalculator, calculate_all_risks

def _ascvd_patient(**overrides):
    values = dict(age=60, sex="male", total_cholesterol=200, hdl=45, systolic_bp=135)
    values.update(overrides)
    return PatientAttributes(**values)

class TestASCVD:
    """Pooled-cohort approximation"""

    def test_requires_inputs(self):
        assert ascvd_risk(PatientAttributes(age=60, sex="male", total_cholesterol=200)) is None
        assert ascvd_risk(_ascvd_patient(sex=None)) is None

    def test_within_bounds(self):
        result = ascvd_risk(_ascvd_patient())
        assert 0.5 <= result.ten_year_risk <= 50
        assert result.annual_risk == pytest.approx(result.ten_year_risk / 1000)

    def test_risk_factors_increase_risk(self):
        base = ascvd_risk(_ascvd_patient()).ten_year_risk
        assert ascvd_risk(_ascvd_patient(smoker=True)).ten_year_risk > base
        assert ascvd_risk(_ascvd_patient(diabetes_status=DiabetesStatus.TYPE2)).ten_year_risk > base
        assert ascvd_risk(_ascvd_patient(age=70)).ten_year_risk > base

    def test_floor_applies(self):
        config = CalculatorConfig(ascvd_floor=5.0)
        young = PatientAttributes(age=40, sex="female", total_cholesterol=150, hdl=60, systolic_bp=110)
        assert ascvd_risk(young, config).ten_year_risk == 5.0

class TestHeartFailure:
    """Survival and incident heart failure risk"""

    def test_survival_not_applicable_with_preserved_ef(self):
        assert heart_failure_survival(PatientAttributes(age=70, ef=55)) is None
        assert heart_failure_survival(PatientAttributes(age=70)) is None

    def test_survival_reduced_ef(self):
        result = heart_failure_survival(PatientAttributes(age=70, ef=30))
        assert result.survival_1yr == 53
        assert result.survival_1yr >= result.survival_2yr >= result.survival_5yr
        assert result.interpretation.startswith("Poor prognosis")
        assert set(result.gdmt_life_years) == {"beta_blocker", "mra", "arni", "sglt2i"}

    def test_survival_clamped(self):
        result = heart_failure_survival(PatientAttributes(age=40, ef=45, systolic_bp=160))
        assert result.survival_1yr <= 95

    def test_incident_risk_points(self):
        result = heart_failure_risk(PatientAttributes(age=70, htn_treatment=True))
        assert result.points == 12
        assert result.ten_year_risk == 18.0
        assert result.interpretation == "High risk"

    def test_incident_risk_requires_age(self):
        assert heart_failure_risk(PatientAttributes(htn_treatment=True)) is None

    def test_incident_risk_capped(self):
        patient = PatientAttributes(age=95, htn_treatment=True, prior_mi=True, ef=30,
                                    diabetes_status=DiabetesStatus.TYPE2)
        assert heart_failure_risk(patient).ten_year_risk == 40

class TestDiabetesComplications:
    """UKPDS-style estimates"""

    def test_requires_diabetes(self):
        assert diabetes_complication_risk(PatientAttributes(age=60)) is None
        assert diabetes_complication_risk(
            PatientAttributes(age=60, diabetes_status=DiabetesStatus.PREDIABETES)) is None

    def test_defaults(self):
        result = diabetes_complication_risk(
            PatientAttributes(age=60, diabetes_status=DiabetesStatus.TYPE2))
        assert result.chd_risk == 15.5
        assert result.stroke_risk == 7.7
        assert result.chd_interpretation == "Moderate-high"
        assert result.stroke_interpretation == "Moderate"

class TestRiskCalculator:
    """Bundle assembly"""

    def setup_method(self):
        self.calculator = RiskCalculator()

    def test_empty_patient_gives_empty_bundle(self):
        bundle = self.calculator.calculate_all(PatientAttributes())
        assert bundle.results == {}
        assert bundle.egfr is None

    def test_afib_scores_only_with_afib(self):
        bundle = self.calculator.calculate_all(PatientAttributes(age=70, sex="male"))
        assert RiskName.STROKE not in bundle
        assert RiskName.BLEEDING not in bundle

        bundle = self.calculator.calculate_all(PatientAttributes(age=70, sex="male", afib=True))
        assert bundle.stroke.score == 1
        assert bundle.bleeding.score == 1

    def test_renal_feeds_has_bled(self):
        patient = PatientAttributes(age=60, sex="female", afib=True, creatinine=2.0)
        bundle = self.calculator.calculate_all(patient)
        assert bundle.egfr < 30
        assert bundle.bleeding.score == 1

    def test_measured_egfr_used_without_creatinine(self):
        bundle = self.calculator.calculate_all(PatientAttributes(age=80, egfr=40))
        assert bundle.egfr == 40
        assert bundle.renal.source == "measured"

    def test_heart_failure_calculators(self):
        bundle = self.calculator.calculate_all(PatientAttributes(age=70, ef=30))
        assert bundle.hf_survival is not None
        assert bundle.hf_risk is not None

    def test_to_dict_uses_calculator_names(self):
        patient = PatientAttributes(age=70, sex="female", afib=True, creatinine=1.0,
                                    diabetes_status=DiabetesStatus.TYPE2)
        data = calculate_all_risks(patient).to_dict()
        assert {"chadsvasc", "hasbled", "egfr", "ukpds"} <= set(data)
        assert data["chadsvasc"]["score"] == 3

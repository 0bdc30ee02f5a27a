#!/usr/bin/env python3
"""
Unit tests for harm estimation and life expectancy
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from risk_engine.calculator import RiskCalculator
from risk_engine.schema import PatientAttributes, RiskBundle, DiabetesStatus
from services.config import EngineConfig
from services.harms import adjust_nnh, expected_harm, estimate_harms, has_prediabetes
from services.life_expectancy import estimate_life_expectancy, competing_risk_factor
from services.medication import MedicationRecord

def _record(**overrides):
    data = {"id": "test_med", "name": "Test Med", "class": "Test Class", "purpose": "preventive"}
    data.update(overrides)
    return MedicationRecord.model_validate(data)

class TestAdjustNNH:
    """Patient-specific NNH modifiers"""

    def setup_method(self):
        self.calculator = RiskCalculator()

    def _bundle(self, patient):
        return self.calculator.calculate_all(patient)

    def test_no_modifiers(self):
        patient = PatientAttributes(age=60)
        assert adjust_nnh(100, "hyperkalemia", patient, RiskBundle()) == 100

    def test_hyperkalemia_renal_and_diabetes(self):
        patient = PatientAttributes(age=60, egfr=25, diabetes_status=DiabetesStatus.TYPE2)
        assert adjust_nnh(100, "hyperkalemia", patient, self._bundle(patient)) == pytest.approx(24)

    def test_hyperkalemia_severe_matches_family(self):
        patient = PatientAttributes(age=60, egfr=50)
        assert adjust_nnh(100, "hyperkalemia_severe", patient, self._bundle(patient)) == pytest.approx(70)

    def test_aki(self):
        patient = PatientAttributes(age=60, egfr=40)
        assert adjust_nnh(100, "aki", patient, self._bundle(patient)) == pytest.approx(60)

    def test_hypoglycemia_very_elderly_and_renal(self):
        patient = PatientAttributes(age=80, egfr=40)
        assert adjust_nnh(50, "severe_hypoglycemia", patient, self._bundle(patient)) == pytest.approx(21)

    def test_new_onset_diabetes_with_prediabetes(self):
        patient = PatientAttributes(age=60, a1c=6.0)
        assert adjust_nnh(200, "new_onset_diabetes", patient, RiskBundle()) == pytest.approx(100)

    def test_floor(self):
        patient = PatientAttributes(age=60, egfr=20, diabetes_status=DiabetesStatus.TYPE2)
        assert adjust_nnh(10, "hyperkalemia", patient, self._bundle(patient)) == 5.0

    @pytest.mark.parametrize("a1c,status,expected", [
        (5.6, DiabetesStatus.NONE, False),
        (5.7, DiabetesStatus.NONE, True),
        (6.4, DiabetesStatus.NONE, True),
        (6.5, DiabetesStatus.NONE, False),
        (None, DiabetesStatus.PREDIABETES, True),
    ])
    def test_prediabetes(self, a1c, status, expected):
        assert has_prediabetes(PatientAttributes(a1c=a1c, diabetes_status=status)) is expected

class TestEstimateHarms:
    """Harm entries per medication"""

    def setup_method(self):
        self.config = EngineConfig()

    def test_expected_harm(self):
        assert expected_harm(50, 1, 0.15) == pytest.approx(0.3)
        assert expected_harm(0, 1, 0.15) == 0.0
        assert expected_harm(None, 1, 0.15) == 0.0
        assert expected_harm(25, 1, 0.15) > expected_harm(50, 1, 0.15)

    def test_bleeding_class_skips_static_bleeding_without_estimate(self):
        record = _record(**{"class": "Antiplatelet",
                            "harms": {"gi_bleeding": {"nnh": 100, "timeframe": 2},
                                      "aki": {"nnh": 50, "timeframe": 1, "source": "trial"}}})
        entries = estimate_harms(record, PatientAttributes(age=70), RiskBundle(), self.config)
        assert [e.harm for e in entries] == ["aki"]
        assert entries[0].expected_harm == pytest.approx(1 / 50 * 0.1 * 100)
        assert entries[0].source == "trial"

    def test_has_bled_estimate_replaces_static_harms(self):
        record = _record(**{"class": "Direct Oral Anticoagulant (DOAC)",
                            "harms": {"major_bleeding": {"nnh": 100, "timeframe": 1},
                                      "aki": {"nnh": 50, "timeframe": 1}}})
        patient = PatientAttributes(age=70, afib=True)
        bundle = RiskCalculator().calculate_all(patient)
        entries = estimate_harms(record, patient, bundle, self.config)
        assert [e.harm for e in entries] == ["major_bleeding", "intracranial_bleeding"]
        assert all(e.source.startswith("HAS-BLED score") for e in entries)

    def test_static_bleeding_counted_outside_bleeding_classes(self):
        record = _record(**{"class": "NSAID",
                            "harms": {"gi_bleeding": {"nnh": 100, "timeframe": 2}}})
        entries = estimate_harms(record, PatientAttributes(age=70), RiskBundle(), self.config)
        assert [e.harm for e in entries] == ["gi_bleeding"]
        assert entries[0].expected_harm == pytest.approx(1 / 200 * 0.08 * 100)

    def test_negligible_harm_dropped(self):
        record = _record(harms={"diarrhea_severe": {"nnh": 10000000}})
        assert estimate_harms(record, PatientAttributes(), RiskBundle(), self.config) == []

    def test_harm_without_nnh_skipped(self):
        record = _record(harms={"angioedema": {"timeframe": 1}})
        assert estimate_harms(record, PatientAttributes(), RiskBundle(), self.config) == []

    def test_unknown_harm_uses_default_weight(self):
        record = _record(harms={"toxicity": {"nnh": 20}})
        entries = estimate_harms(record, PatientAttributes(), RiskBundle(), self.config)
        assert entries[0].severity_weight == 0.05

    def test_hypoglycemia_baseline_only(self):
        record = _record(**{"class": "Sulfonylurea"})
        entries = estimate_harms(record, PatientAttributes(age=60), RiskBundle(), self.config)
        assert len(entries) == 1
        assert entries[0].annual_risk == pytest.approx(0.02)
        assert entries[0].nnh == 50.0

class TestLifeExpectancy:
    """Actuarial estimate and competing-risk discount"""

    def setup_method(self):
        self.config = EngineConfig()
        self.calculator = RiskCalculator()

    def _estimate(self, patient):
        return estimate_life_expectancy(patient, self.calculator.calculate_all(patient), self.config)

    def test_table_lookup(self):
        assert self._estimate(PatientAttributes(age=72, sex="male")) == 15
        assert self._estimate(PatientAttributes(age=72, sex="female")) == 17

    def test_age_clamped_to_table(self):
        assert self._estimate(PatientAttributes(age=45, sex="male")) == 30
        assert self._estimate(PatientAttributes(age=110, sex="female")) == 3

    def test_missing_age_and_sex(self):
        assert self._estimate(PatientAttributes()) == 18

    def test_reduced_ef_supersedes_chf_history(self):
        patient = PatientAttributes(age=70, sex="male", ef=30, chf_history=True)
        assert self._estimate(patient) == pytest.approx(7.5)
        patient = PatientAttributes(age=70, sex="male", chf_history=True)
        assert self._estimate(patient) == pytest.approx(10.5)

    def test_renal_modifier(self):
        assert self._estimate(PatientAttributes(age=70, sex="male", egfr=40)) == pytest.approx(10.5)

    def test_floor(self):
        patient = PatientAttributes(age=95, sex="female", ef=20, cancer=True, frailty=True, dementia=True)
        assert self._estimate(patient) == 0.5

    @pytest.mark.parametrize("timeframe,life_expectancy,horizon,expected", [
        (3, 10, 5, 1.0),
        (3, 10, 3, 1.0),
        (5, 1.0, 10, 0.2),
        (5, 10, 0.5, 0.2),
        (4, 2, None, 0.5),
        (4, 20, None, 1.0),
    ])
    def test_competing_risk_factor(self, timeframe, life_expectancy, horizon, expected):
        assert competing_risk_factor(timeframe, life_expectancy, horizon) == pytest.approx(expected)

#!/usr/bin/env python3
"""
Unit tests for the elderly safety screen
"""

from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from risk_engine.calculator import RiskCalculator
from risk_engine.schema import PatientAttributes
from services.benefit_engine import create_net_benefit_engine
from services.catalog import MedicationCatalog
from services.medication import MedicationRecord
from services.safety import screen, listed_hazard_warning, elderly_caution
from services.schema import Severity, RecommendationTier

def _record(**overrides):
    data = {"id": "test_med", "name": "Test Med", "class": "Test Class", "purpose": "symptomatic"}
    data.update(overrides)
    return MedicationRecord.model_validate(data)

class TestSafetyScreen:
    """Listed hazards and elderly caution flags"""

    def setup_method(self):
        self.catalog = MedicationCatalog.from_file()

    def test_listed_hazard_only_for_elderly(self):
        gabapentin = self.catalog.get("gabapentin")
        assert listed_hazard_warning(gabapentin, PatientAttributes(age=60)) is None

        warning = listed_hazard_warning(gabapentin, PatientAttributes(age=65))
        assert warning.strength == "strong"
        assert warning.severity == Severity.HIGH

    def test_non_strong_listing_is_moderate(self):
        record = _record(listed_hazard={"listed": True, "concern": "Orthostasis", "strength": "weak"})
        warning = listed_hazard_warning(record, PatientAttributes(age=70))
        assert warning.severity == Severity.MODERATE

    def test_unlisted_hazard_ignored(self):
        record = _record(listed_hazard={"listed": False, "concern": "None"})
        assert listed_hazard_warning(record, PatientAttributes(age=80)) is None

    def test_frail_very_elderly_warnings_in_order(self):
        patient = PatientAttributes(age=80, sex="female", frailty=True)
        hazard, caution = screen(self.catalog.get("gabapentin"), patient)

        assert hazard is not None
        assert [w.type for w in caution.warnings] == ["fall_risk", "cognitive", "sedation", "frailty"]
        severities = {w.type: w.severity for w in caution.warnings}
        assert severities["fall_risk"] == Severity.HIGH
        assert severities["cognitive"] == Severity.MODERATE
        assert caution.overall_severity == Severity.HIGH
        assert caution.avoid_recommended
        assert caution.requires_renal_adjustment

    def test_no_warnings_gives_no_caution(self):
        assert elderly_caution(self.catalog.get("gabapentin"), PatientAttributes(age=50)) is None
        assert elderly_caution(self.catalog.get("carvedilol"), PatientAttributes(age=90)) is None

    def test_fall_history_triggers_fall_warning_under_65(self):
        record = _record(elderly_caution={"fall_risk": True})
        caution = elderly_caution(record, PatientAttributes(age=55, fall_risk=True))
        assert [w.type for w in caution.warnings] == ["fall_risk"]
        assert caution.warnings[0].severity == Severity.HIGH

    def test_heart_failure_warning_at_any_age(self):
        record = _record(elderly_caution={"avoid_in_hf": True})
        caution = elderly_caution(record, PatientAttributes(age=50, ef=40))
        assert caution.warnings[0].type == "heart_failure"
        assert caution.is_high_severity

    def test_moderate_only(self):
        record = _record(elderly_caution={"sedation": True, "prefer_alternatives": ["melatonin"]})
        caution = elderly_caution(record, PatientAttributes(age=68))
        assert caution.overall_severity == Severity.MODERATE
        assert caution.prefer_alternatives == ("melatonin",)
        assert not caution.avoid_recommended

    def test_frail_patient_caution_tier(self):
        engine = create_net_benefit_engine()
        patient = PatientAttributes(age=80, sex="female", frailty=True, neuropathy=True)
        bundle = RiskCalculator().calculate_all(patient)
        result = engine.evaluate(self.catalog.get("gabapentin"), patient, bundle)

        assert result.net_benefit > 0
        assert result.recommendation == RecommendationTier.CAUTION_ELDERLY
        assert "frail" in result.recommendation_text

    def test_unknown_age_screened_as_65(self):
        gabapentin = self.catalog.get("gabapentin")
        assert listed_hazard_warning(gabapentin, PatientAttributes()) is not None

        record = _record(elderly_caution={"sedation": True, "hypoglycemia_risk": True})
        caution = elderly_caution(record, PatientAttributes())
        assert [w.type for w in caution.warnings] == ["sedation", "hypoglycemia"]
        assert caution.overall_severity == Severity.MODERATE

    def test_unknown_age_not_elderly_for_recommendation(self):
        engine = create_net_benefit_engine()
        patient = PatientAttributes(neuropathy=True)
        bundle = RiskCalculator().calculate_all(patient)
        result = engine.evaluate(self.catalog.get("gabapentin"), patient, bundle)

        assert result.listed_hazard_warning is not None
        assert result.recommendation != RecommendationTier.CAUTION_ELDERLY

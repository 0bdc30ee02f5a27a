#!/usr/bin/env python3
"""
Unit tests for CHA2DS2-VASc, HAS-BLED and CKD-EPI
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from risk_engine.schema import PatientAttributes, DiabetesStatus
from risk_engine.scores import chads_vasc, has_bled
from risk_engine.renal import egfr_ckd_epi_2021, measured_egfr, ckd_stage, ckd_stage_rank

class TestChadsVasc:
    """Stroke score and annual risk lookup"""

    def test_requires_afib(self):
        assert chads_vasc(PatientAttributes(age=80, sex="female")) is None

    def test_zero_score(self):
        result = chads_vasc(PatientAttributes(age=50, sex="male", afib=True))
        assert result.score == 0
        assert result.annual_stroke_risk == 0.2
        assert result.interpretation == "Low risk"

    def test_age_bands_are_exclusive(self):
        assert chads_vasc(PatientAttributes(age=70, sex="male", afib=True)).score == 1
        assert chads_vasc(PatientAttributes(age=75, sex="male", afib=True)).score == 2

    def test_combined_factors(self):
        patient = PatientAttributes(age=76, sex="female", afib=True, htn_treatment=True,
                                    diabetes_status=DiabetesStatus.TYPE2)
        result = chads_vasc(patient)
        assert result.score == 5
        assert result.annual_stroke_risk == 7.2

    def test_reduced_ef_counts_as_chf(self):
        result = chads_vasc(PatientAttributes(age=50, sex="male", afib=True, ef=35))
        assert result.score == 1

    def test_published_dip_at_score_eight(self):
        patient = PatientAttributes(age=80, sex="female", afib=True, htn_treatment=True,
                                    prior_stroke=True, prior_mi=True, chf_history=True)
        result = chads_vasc(patient)
        assert result.score == 8
        assert result.annual_stroke_risk == 10.8

    def test_maximum_score(self):
        patient = PatientAttributes(age=80, sex="female", afib=True, htn_treatment=True,
                                    prior_stroke=True, prior_mi=True, chf_history=True,
                                    diabetes_status=DiabetesStatus.TYPE1)
        result = chads_vasc(patient)
        assert result.score == 9
        assert result.annual_stroke_risk == 12.2

class TestHasBled:
    """Bleeding score and annual risk lookup"""

    def test_requires_afib(self):
        assert has_bled(PatientAttributes(age=80)) is None

    def test_score_three(self):
        patient = PatientAttributes(age=70, afib=True, prior_bleed=True, alcohol=True)
        result = has_bled(patient)
        assert result.score == 3
        assert result.annual_bleed_risk == 3.7
        assert "High bleeding risk" in result.interpretation

    def test_age_exactly_65_not_elderly(self):
        assert has_bled(PatientAttributes(age=65, afib=True)).score == 0

    def test_renal_point_from_egfr(self):
        patient = PatientAttributes(age=50, afib=True)
        assert has_bled(patient, egfr=25).score == 1
        assert has_bled(patient, egfr=45).score == 0

    def test_lookup_capped_at_five(self):
        patient = PatientAttributes(age=80, afib=True, systolic_bp=170, creatinine=2.5,
                                    liver_disease=True, prior_stroke=True, prior_bleed=True,
                                    nsaid_use=True, alcohol=True)
        result = has_bled(patient)
        assert result.score == 8
        assert result.annual_bleed_risk == 12.5

class TestRenal:
    """CKD-EPI 2021 eGFR and KDIGO staging"""

    def test_requires_creatinine_and_age(self):
        assert egfr_ckd_epi_2021(PatientAttributes(age=60)) is None
        assert egfr_ckd_epi_2021(PatientAttributes(creatinine=1.0)) is None

    def test_male_reference_value(self):
        result = egfr_ckd_epi_2021(PatientAttributes(age=50, sex="male", creatinine=1.0))
        assert result.egfr == 92
        assert result.stage == "G1 (Normal)"
        assert result.source == "CKD-EPI 2021"

    def test_female_reference_value(self):
        result = egfr_ckd_epi_2021(PatientAttributes(age=60, sex="female", creatinine=0.7))
        assert result.egfr == 99

    def test_higher_creatinine_lowers_egfr(self):
        low = egfr_ckd_epi_2021(PatientAttributes(age=70, sex="male", creatinine=1.0))
        high = egfr_ckd_epi_2021(PatientAttributes(age=70, sex="male", creatinine=2.0))
        assert high.egfr < low.egfr

    def test_measured_egfr(self):
        result = measured_egfr(PatientAttributes(egfr=40.4))
        assert result.egfr == 40
        assert result.source == "measured"
        assert result.stage == "G3b (Mod-Severe)"

    @pytest.mark.parametrize("egfr,stage", [
        (95, "G1 (Normal)"),
        (60, "G2 (Mild)"),
        (59, "G3a (Mild-Mod)"),
        (30, "G3b (Mod-Severe)"),
        (15, "G4 (Severe)"),
        (14, "G5 (Kidney Failure)"),
    ])
    def test_stage_boundaries(self, egfr, stage):
        assert ckd_stage(egfr) == stage

    def test_stage_rank_is_monotonic(self):
        ranks = [ckd_stage_rank(ckd_stage(e)) for e in (100, 70, 50, 35, 20, 5)]
        assert ranks == sorted(ranks)
        assert ranks[0] == 0
        assert ranks[-1] == 5

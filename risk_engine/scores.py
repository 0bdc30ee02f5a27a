"""
Point scores for patients with atrial fibrillation - CHA2DS2-VASc and HAS-BLED
"""

import logging
from typing import Optional

from .schema import PatientAttributes, StrokeRisk, BleedingRisk, CalculatorConfig

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = CalculatorConfig()

def chads_vasc(patient: PatientAttributes,
               config: CalculatorConfig = _DEFAULT_CONFIG) -> Optional[StrokeRisk]:
    """
    CHA2DS2-VASc stroke score with annual stroke risk lookup.

    Only meaningful with atrial fibrillation; returns None otherwise.
    """
    if not patient.afib:
        return None

    score = 0

    # C - congestive heart failure
    if patient.chf_history or (patient.ef is not None and patient.ef < 40):
        score += 1

    # H - hypertension
    if patient.has_hypertension:
        score += 1

    # A2 / A - age bands are mutually exclusive
    if patient.age is not None:
        if patient.age >= 75:
            score += 2
        elif patient.age >= 65:
            score += 1

    # D - diabetes
    if patient.has_diabetes:
        score += 1

    # S2 - stroke, TIA or thromboembolism
    if patient.prior_stroke:
        score += 2

    # V - vascular disease
    if patient.prior_mi or patient.pvd:
        score += 1

    # Sc - sex category
    if patient.is_female:
        score += 1

    lookup = min(score, config.stroke_score_cap)
    annual_risk = config.stroke_risk_by_score.get(
        lookup, config.stroke_risk_by_score[config.stroke_score_cap])

    if score == 0:
        interpretation = "Low risk"
    elif score == 1:
        interpretation = "Low-moderate risk"
    else:
        interpretation = "Moderate-high risk (anticoagulation recommended)"

    return StrokeRisk(score=score, annual_stroke_risk=annual_risk, interpretation=interpretation)

def has_bled(patient: PatientAttributes, egfr: Optional[float] = None,
             config: CalculatorConfig = _DEFAULT_CONFIG) -> Optional[BleedingRisk]:
    """
    HAS-BLED major bleeding score on anticoagulation.

    Labile INR is not tracked, so the maximum attainable score is 8;
    the probability lookup is capped at 5.
    """
    if not patient.afib:
        return None

    if egfr is None:
        egfr = patient.egfr

    score = 0

    # H - uncontrolled hypertension
    if patient.systolic_bp is not None and patient.systolic_bp > 160:
        score += 1

    # A - abnormal renal and liver function, one point each
    if (patient.creatinine is not None and patient.creatinine > 2.3) or \
            (egfr is not None and egfr < 30):
        score += 1
    if patient.liver_disease:
        score += 1

    # S - stroke
    if patient.prior_stroke:
        score += 1

    # B - bleeding history or predisposition
    if patient.prior_bleed or patient.anemia:
        score += 1

    # E - elderly
    if patient.age is not None and patient.age > 65:
        score += 1

    # D - drugs and alcohol, one point each
    if patient.nsaid_use or patient.antiplatelet:
        score += 1
    if patient.alcohol:
        score += 1

    lookup = min(score, config.bleed_score_cap)
    annual_risk = config.bleed_risk_by_score.get(
        lookup, config.bleed_risk_by_score[config.bleed_score_cap])

    interpretation = ("Low-moderate bleeding risk" if score <= 2
                      else "High bleeding risk - caution with anticoagulation")

    return BleedingRisk(score=score, annual_bleed_risk=annual_risk, interpretation=interpretation)

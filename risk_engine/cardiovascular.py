"""
Cardiovascular and heart failure risk estimates

These are simplified closed forms, not the published full equations. The
coefficients below are the contract every stored result was computed with;
changing them changes every downstream net-benefit score.
"""

import math
import logging
import numpy as np
from typing import Optional

from .schema import (PatientAttributes, ASCVDRisk, HeartFailureSurvival,
                     HeartFailureRisk, DiabetesComplicationRisk, CalculatorConfig,
                     Race, Sex, DiabetesStatus)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = CalculatorConfig()

# Relative survival gain assumed for each guideline-directed HF therapy
GDMT_RELATIVE_BENEFIT = {
    "beta_blocker": 0.35,
    "mra": 0.30,
    "arni": 0.20,
    "sglt2i": 0.25
}

def _clamp(value: float, low: float, high: float) -> float:
    return float(np.clip(value, low, high))

def ascvd_risk(patient: PatientAttributes,
               config: CalculatorConfig = _DEFAULT_CONFIG) -> Optional[ASCVDRisk]:
    """
    10-year ASCVD risk approximating the Pooled Cohort Equations.

    Requires age, sex, total cholesterol, HDL and systolic BP.
    """
    if not patient.age or not patient.total_cholesterol or not patient.hdl \
            or not patient.systolic_bp or patient.sex is None:
        return None

    age = patient.age
    male = not patient.is_female

    base = (age - 40) * (0.8 if male else 0.5)

    # Lipid ratio
    base += (patient.total_cholesterol / patient.hdl - 4) * 1.5

    # Blood pressure, steeper slope when treated
    slope = 0.08 if patient.htn_treatment else 0.05
    base += (patient.systolic_bp - 120) * slope

    if patient.smoker:
        base += 4

    if patient.has_diabetes:
        base += 3 if male else 5

    if patient.race == Race.BLACK:
        base *= 1.1 if male else 1.3

    risk = 30 / (1 + np.exp(-0.15 * (base - 10)))
    risk = round(_clamp(risk, config.ascvd_floor, config.ascvd_ceiling), 1)

    if risk < 5:
        interpretation = "Low risk (<5%)"
    elif risk < 7.5:
        interpretation = "Borderline risk (5-7.5%)"
    elif risk < 20:
        interpretation = "Intermediate risk (7.5-20%)"
    else:
        interpretation = "High risk (≥20%)"

    return ASCVDRisk(ten_year_risk=risk, interpretation=interpretation)

def heart_failure_survival(patient: PatientAttributes) -> Optional[HeartFailureSurvival]:
    """
    Seattle-style survival model for reduced ejection fraction.

    Not applicable when EF is unknown or >= 50%.
    """
    if patient.ef is None or patient.ef >= 50:
        return None

    age = patient.age if patient.age is not None else 65
    nyha = patient.nyha or 2
    sbp = patient.systolic_bp or 110
    creatinine = patient.creatinine or 1.2

    risk_score = 0.0
    risk_score += (age - 60) * 0.02
    risk_score += (40 - patient.ef) * 0.02
    risk_score += (nyha - 2) * 0.15
    risk_score -= (sbp - 100) * 0.005
    risk_score += (creatinine - 1) * 0.1

    if patient.diabetes_status == DiabetesStatus.TYPE2:
        risk_score += 0.1
    if patient.afib:
        risk_score += 0.05

    survival_1yr = _clamp(0.9 - risk_score, 0.4, 0.95)
    survival_2yr = survival_1yr ** 1.8
    survival_5yr = survival_1yr ** 4

    # Life-years over five years attributable to each GDMT class
    gdmt = {therapy: (1 - survival_5yr) * rrr * 5
            for therapy, rrr in GDMT_RELATIVE_BENEFIT.items()}

    if survival_1yr >= 0.85:
        interpretation = "Good prognosis"
    elif survival_1yr >= 0.70:
        interpretation = "Moderate prognosis"
    else:
        interpretation = "Poor prognosis - aggressive therapy warranted"

    return HeartFailureSurvival(
        survival_1yr=round(survival_1yr * 100),
        survival_2yr=round(survival_2yr * 100),
        survival_5yr=round(survival_5yr * 100),
        gdmt_life_years=gdmt,
        interpretation=interpretation
    )

def heart_failure_risk(patient: PatientAttributes) -> Optional[HeartFailureRisk]:
    """Framingham-style points for 10-year heart failure risk"""
    if not patient.age:
        return None

    points = math.floor((patient.age - 45) / 5) * 2

    if patient.has_hypertension:
        points += 2
    if patient.has_diabetes:
        points += 3
    if patient.prior_mi:
        points += 4
    # EF as a proxy for LVH/cardiomegaly
    if patient.ef and patient.ef < 50:
        points += 3

    bmi = patient.bmi
    if bmi is not None and bmi >= 30:
        points += 2

    risk = round(min(points * 1.5, 40), 1)

    if risk < 5:
        interpretation = "Low risk"
    elif risk < 10:
        interpretation = "Moderate risk"
    elif risk < 20:
        interpretation = "High risk"
    else:
        interpretation = "Very high risk"

    return HeartFailureRisk(points=points, ten_year_risk=risk, interpretation=interpretation)

def diabetes_complication_risk(patient: PatientAttributes) -> Optional[DiabetesComplicationRisk]:
    """UKPDS-style 10-year CHD and stroke risk for patients with diabetes"""
    if not patient.has_diabetes:
        return None

    age = patient.age or 60
    duration = patient.diabetes_duration or 5
    a1c = patient.a1c or 7.5
    sbp = patient.systolic_bp or 135
    if patient.total_cholesterol and patient.hdl:
        ratio = patient.total_cholesterol / patient.hdl
    else:
        ratio = 5

    chd = 5.0
    chd += (age - 50) * 0.3
    chd += duration * 0.5
    chd += (a1c - 6.5) * 2
    chd += (sbp - 120) * 0.1
    chd += (ratio - 4) * 1.5
    if patient.smoker:
        chd *= 1.5
    if patient.sex == Sex.MALE:
        chd *= 1.2

    stroke = 3.0
    stroke += (age - 50) * 0.2
    stroke += duration * 0.3
    stroke += (sbp - 120) * 0.08
    if patient.afib:
        stroke *= 2

    chd_label = "Low-moderate" if chd < 10 else ("Moderate-high" if chd < 20 else "High")
    stroke_label = "Low" if stroke < 5 else ("Moderate" if stroke < 10 else "High")

    return DiabetesComplicationRisk(
        chd_risk=round(_clamp(chd, 1, 50), 1),
        stroke_risk=round(_clamp(stroke, 1, 30), 1),
        chd_interpretation=chd_label,
        stroke_interpretation=stroke_label,
        interpretation=f"CHD {chd_label.lower()}, stroke {stroke_label.lower()}"
    )

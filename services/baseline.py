"""
Baseline annual event risk per outcome

Prefers a calculated risk from the RiskBundle and falls back to fixed
population defaults keyed by outcome family.
"""

import math

from risk_engine.schema import PatientAttributes, RiskBundle
from .outcomes import (OutcomeKind, resolve_outcome, MACE_OUTCOMES, STROKE_OUTCOMES,
                       MI_OUTCOMES, MORTALITY_OUTCOMES, HF_HOSPITALIZATION_OUTCOMES,
                       KIDNEY_OUTCOMES, DIABETIC_COMPLICATION_OUTCOMES)

# General population annual mortality by decade of age
AGE_MORTALITY = {40: 0.002, 50: 0.004, 60: 0.01, 70: 0.02, 80: 0.05, 90: 0.15}

DEFAULT_BASELINE = 0.01

def _age_mortality(age: float) -> float:
    key = min(90, max(40, math.floor(age / 10) * 10))
    return AGE_MORTALITY.get(key, 0.02)

def baseline_risk(outcome: str, patient: PatientAttributes, bundle: RiskBundle,
                  default_age: float = 65) -> float:
    """Annual probability (0-1) of the outcome without treatment"""
    kind = resolve_outcome(outcome)
    if kind is None:
        return DEFAULT_BASELINE

    ascvd = bundle.ascvd
    reduced_ef = patient.ef is not None and patient.ef < 40

    if kind in MACE_OUTCOMES:
        return ascvd.annual_risk if ascvd else 0.02

    if kind in STROKE_OUTCOMES:
        if patient.afib and bundle.stroke:
            return bundle.stroke.annual_stroke_risk / 100
        if ascvd:
            return ascvd.annual_risk * 0.3
        return 0.005

    if kind in MI_OUTCOMES:
        return ascvd.annual_risk * 0.5 if ascvd else 0.01

    if kind in MORTALITY_OUTCOMES:
        if reduced_ef:
            survival = bundle.hf_survival
            if survival is not None:
                return (100 - survival.survival_1yr) / 100
            return 0.15
        age = patient.age if patient.age is not None else default_age
        return _age_mortality(age)

    if kind in HF_HOSPITALIZATION_OUTCOMES:
        if reduced_ef:
            return 0.25
        if patient.chf_history:
            return 0.15
        return 0.01

    if kind == OutcomeKind.CV_DEATH_HF_HOSP:
        return 0.35 if reduced_ef else 0.05

    if kind in KIDNEY_OUTCOMES:
        egfr = bundle.egfr
        if egfr is not None:
            if egfr < 30:
                return 0.10
            if egfr < 45:
                return 0.05
            if egfr < 60:
                return 0.02
        return 0.005

    if kind in DIABETIC_COMPLICATION_OUTCOMES:
        if patient.has_diabetes:
            duration = patient.diabetes_duration or 5
            return 0.005 + duration * 0.001
        return 0.001

    return DEFAULT_BASELINE

"""
Life expectancy and competing-risk discount

Preventive benefit accrues over a trial's timeframe. When remaining life
expectancy (or the patient's chosen horizon) is shorter than that
timeframe, only part of the benefit is realised.
"""

import math
from typing import Optional

from risk_engine.schema import PatientAttributes, RiskBundle, Sex
from .config import EngineConfig

def estimate_life_expectancy(patient: PatientAttributes, bundle: RiskBundle,
                             config: EngineConfig) -> float:
    """Remaining years from the actuarial table, adjusted for comorbidities"""
    age = patient.age if patient.age is not None else config.default_age
    sex = patient.sex or Sex.MALE
    age_key = min(95, max(50, math.floor(age / 5) * 5))

    years = config.life_expectancy_table.get(sex, {}).get(age_key, config.life_expectancy_fallback)

    if patient.ef is not None and patient.ef < 40:
        years *= 0.5
    elif patient.chf_history:
        years *= 0.7

    egfr = bundle.egfr
    if egfr is not None:
        if egfr < 30:
            years *= 0.5
        elif egfr < 45:
            years *= 0.7
        elif egfr < 60:
            years *= 0.85

    if patient.cancer:
        years *= 0.4
    if patient.frailty:
        years *= 0.6
    if patient.dementia:
        years *= 0.5
    if patient.copd:
        years *= 0.8
    if patient.prior_mi or patient.prior_stroke:
        years *= 0.85
    if patient.has_diabetes:
        years *= 0.9

    return max(years, config.life_expectancy_floor)

def competing_risk_factor(trial_timeframe: float, life_expectancy: float,
                          time_horizon: Optional[float], default_horizon: float = 10) -> float:
    """
    Fraction of a trial's benefit realised within the effective horizon.

    1.0 when the horizon covers the trial, 0.2 when it is a year or less,
    otherwise proportional.
    """
    effective_horizon = min(life_expectancy, time_horizon or default_horizon)

    if effective_horizon >= trial_timeframe:
        return 1.0
    if effective_horizon <= 1:
        return 0.2
    return effective_horizon / trial_timeframe

"""
Elderly safety screen

Surfaces listed-hazard metadata for patients 65 and over and evaluates the
medication's elderly-caution flags against the patient. A patient of unknown
age is screened as 65: elderly, but not very elderly.
"""

from typing import List, Optional, Tuple

from risk_engine.schema import PatientAttributes
from .medication import MedicationRecord, ElderlyCautionFlags
from .schema import SafetyWarning, ListedHazardWarning, ElderlyCaution, Severity

SCREEN_DEFAULT_AGE = 65

def _severity(high: bool) -> Severity:
    return Severity.HIGH if high else Severity.MODERATE

def _screen_age(patient: PatientAttributes) -> float:
    return patient.age if patient.age is not None else SCREEN_DEFAULT_AGE

def listed_hazard_warning(medication: MedicationRecord,
                          patient: PatientAttributes) -> Optional[ListedHazardWarning]:
    hazard = medication.listed_hazard
    if hazard is None or not hazard.listed or _screen_age(patient) < 65:
        return None
    return ListedHazardWarning(
        concern=hazard.concern,
        recommendation=hazard.recommendation,
        strength=hazard.strength,
        quality_of_evidence=hazard.quality_of_evidence,
        severity=_severity(hazard.strength == "strong")
    )

def caution_warnings(flags: ElderlyCautionFlags, patient: PatientAttributes) -> List[SafetyWarning]:
    """Evaluate each hazard category; order is fixed"""
    age = _screen_age(patient)
    elderly = age >= 65
    very_elderly = age >= 75
    frail = patient.frailty
    warnings = []

    if flags.fall_risk and (elderly or patient.fall_risk):
        warnings.append(SafetyWarning(
            type="fall_risk",
            message="Increases fall risk",
            severity=_severity(very_elderly or patient.fall_risk or frail)))

    if flags.cognitive_impairment and (elderly or patient.dementia):
        warnings.append(SafetyWarning(
            type="cognitive",
            message="May cause or worsen cognitive impairment",
            severity=_severity(patient.dementia)))

    if flags.sedation and elderly:
        warnings.append(SafetyWarning(
            type="sedation",
            message="Causes sedation and CNS depression",
            severity=_severity(very_elderly or frail)))

    if flags.hypoglycemia_risk and elderly:
        warnings.append(SafetyWarning(
            type="hypoglycemia",
            message="High risk of severe hypoglycemia in elderly",
            severity=_severity(very_elderly or frail or patient.dementia)))

    if flags.avoid_in_hf and patient.has_heart_failure:
        warnings.append(SafetyWarning(
            type="heart_failure",
            message="May worsen heart failure (causes edema)",
            severity=Severity.HIGH))

    if flags.narrow_therapeutic_window and elderly:
        warnings.append(SafetyWarning(
            type="toxicity",
            message="Narrow therapeutic window - high toxicity risk in elderly",
            severity=Severity.HIGH))

    if flags.avoid_if_frail and frail:
        warnings.append(SafetyWarning(
            type="frailty",
            message="Avoid in frail patients - high risk of adverse events",
            severity=Severity.HIGH))

    return warnings

def elderly_caution(medication: MedicationRecord,
                    patient: PatientAttributes) -> Optional[ElderlyCaution]:
    flags = medication.elderly_caution
    if flags is None:
        return None

    warnings = caution_warnings(flags, patient)
    if not warnings:
        return None

    any_high = any(w.severity == Severity.HIGH for w in warnings)
    alternatives = tuple(flags.prefer_alternatives) if flags.prefer_alternatives else None
    return ElderlyCaution(
        warnings=tuple(warnings),
        overall_severity=_severity(any_high),
        prefer_alternatives=alternatives,
        requires_renal_adjustment=flags.requires_renal_adjustment,
        avoid_recommended=patient.frailty and flags.avoid_if_frail
    )

def screen(medication: MedicationRecord, patient: PatientAttributes
           ) -> Tuple[Optional[ListedHazardWarning], Optional[ElderlyCaution]]:
    """Listed-hazard warning and elderly caution for one medication"""
    return listed_hazard_warning(medication, patient), elderly_caution(medication, patient)

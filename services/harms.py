"""
Harm estimation

Static NNH figures from the catalog are tightened for patient-specific
modifiers. Anticoagulant and antiplatelet harms come from the patient's
HAS-BLED estimate when one exists; their static bleeding figures are never
counted. Sulfonylureas get a patient-adjusted severe hypoglycemia estimate.
"""

import logging
from typing import List

from risk_engine.schema import PatientAttributes, RiskBundle, DiabetesStatus
from .config import EngineConfig
from .medication import MedicationRecord
from .outcomes import OutcomeKind, is_bleeding_harm
from .schema import HarmEntry

logger = logging.getLogger(__name__)

def has_prediabetes(patient: PatientAttributes) -> bool:
    if patient.diabetes_status == DiabetesStatus.PREDIABETES:
        return True
    return patient.a1c is not None and 5.7 <= patient.a1c < 6.5

def adjust_nnh(base_nnh: float, harm: str, patient: PatientAttributes,
               bundle: RiskBundle, floor: float = 5.0) -> float:
    """Lower NNH for patients at higher risk of this harm. Never below floor."""
    nnh = base_nnh
    egfr = bundle.egfr

    if "hyperkalemia" in harm:
        if egfr is not None:
            if egfr < 30:
                nnh *= 0.3
            elif egfr < 45:
                nnh *= 0.5
            elif egfr < 60:
                nnh *= 0.7
        if patient.has_diabetes:
            nnh *= 0.8

    if harm == OutcomeKind.AKI.value and egfr is not None:
        if egfr < 30:
            nnh *= 0.4
        elif egfr < 45:
            nnh *= 0.6

    if "hypoglycemia" in harm:
        if patient.is_very_elderly:
            nnh *= 0.6
        if egfr is not None and egfr < 45:
            nnh *= 0.7

    if harm == OutcomeKind.NEW_ONSET_DIABETES.value and has_prediabetes(patient):
        nnh *= 0.5

    return max(nnh, floor)

def expected_harm(nnh: float, timeframe: float, weight: float) -> float:
    """Severity-weighted harm per 100 patients per year"""
    if not nnh or nnh <= 0:
        return 0.0
    return max(0.0, (1 / (nnh * timeframe)) * weight * 100)

def _bleeding_harms(bundle: RiskBundle, config: EngineConfig) -> List[HarmEntry]:
    bleeding = bundle.bleeding
    annual_risk = bleeding.annual_bleed_risk / 100
    source = f"HAS-BLED score {bleeding.score}"
    entries = []

    for name, share in ((OutcomeKind.MAJOR_BLEEDING, config.major_bleed_share),
                        (OutcomeKind.INTRACRANIAL_BLEEDING, config.intracranial_bleed_share)):
        risk = annual_risk * share
        weight = config.outcome_weights[name]
        harm = risk * weight * 100
        if harm > config.synthesized_harm_floor:
            entries.append(HarmEntry(
                harm=name.value,
                nnh=round(1 / risk, 1),
                annual_risk=risk,
                timeframe=1,
                severity_weight=weight,
                expected_harm=harm,
                source=source
            ))
    return entries

def _hypoglycemia_harm(patient: PatientAttributes, bundle: RiskBundle,
                       config: EngineConfig) -> List[HarmEntry]:
    risk = config.hypoglycemia_baseline
    if patient.is_very_elderly:
        risk *= config.hypoglycemia_age_multiplier
    egfr = bundle.egfr
    if egfr is not None and egfr < 45:
        risk *= config.hypoglycemia_renal_multiplier

    weight = config.outcome_weights[OutcomeKind.SEVERE_HYPOGLYCEMIA]
    harm = risk * weight * 100
    if harm <= config.synthesized_harm_floor:
        return []
    return [HarmEntry(
        harm=OutcomeKind.SEVERE_HYPOGLYCEMIA.value,
        nnh=round(1 / risk, 1),
        annual_risk=risk,
        timeframe=1,
        severity_weight=weight,
        expected_harm=harm,
        source="Patient-adjusted estimate"
    )]

def _static_harms(medication: MedicationRecord, patient: PatientAttributes,
                  bundle: RiskBundle, config: EngineConfig) -> List[HarmEntry]:
    bleeding_class = medication.in_class(config.bleeding_risk_classes)
    entries = []

    for name, stat in medication.harms.items():
        # Bleeding for these classes is only counted from HAS-BLED
        if bleeding_class and is_bleeding_harm(name):
            continue
        if not stat.nnh:
            continue

        nnh = adjust_nnh(stat.nnh, name, patient, bundle, config.nnh_floor)
        timeframe = stat.timeframe or 1
        weight = config.harm_weight(name)
        harm = expected_harm(nnh, timeframe, weight)

        if harm > config.harm_floor:
            entries.append(HarmEntry(
                harm=name,
                nnh=nnh,
                annual_risk=1 / nnh,
                timeframe=timeframe,
                severity_weight=weight,
                expected_harm=harm,
                source=stat.source
            ))
    return entries

def estimate_harms(medication: MedicationRecord, patient: PatientAttributes,
                   bundle: RiskBundle, config: EngineConfig) -> List[HarmEntry]:
    """
    All harm entries counted for this medication and patient.

    A bleeding-risk class with a HAS-BLED estimate takes its harms from that
    estimate alone; everything else uses the static NNH figures.
    """
    if medication.in_class(config.bleeding_risk_classes) and bundle.bleeding is not None:
        entries = _bleeding_harms(bundle, config)
    else:
        entries = _static_harms(medication, patient, bundle, config)

    if medication.in_class(config.hypoglycemia_classes):
        entries.extend(_hypoglycemia_harm(patient, bundle, config))

    logger.debug(f"{medication.id}: {len(entries)} harm entries")
    return entries

"""
Outcome and harm vocabulary with severity weights

Severity weights are QALY loss per event on a 0-1 scale (1 = death
equivalent). Every OutcomeKind has a weight; identifiers outside the
enumeration fall back to the default benefit or harm weight.
"""

from enum import Enum
from typing import Dict, Optional, FrozenSet

class OutcomeKind(str, Enum):
    # Mortality
    DEATH = "death"
    CV_DEATH = "cv_death"
    ALL_CAUSE_MORTALITY = "all_cause_mortality"
    MORTALITY = "mortality"

    # Stroke
    STROKE_DISABLING = "stroke_disabling"
    STROKE_ANY = "stroke_any"
    STROKE = "stroke"
    STROKE_RECURRENCE = "stroke_recurrence"
    THROMBOEMBOLISM = "thromboembolism"

    # Myocardial infarction
    MI_FATAL = "mi_fatal"
    MI_NONFATAL = "mi_nonfatal"
    MI = "mi"

    # Heart failure and hospitalization
    HEART_FAILURE_HOSPITALIZATION = "heart_failure_hospitalization"
    HF_HOSPITALIZATION = "hf_hospitalization"
    HOSPITALIZATION = "hospitalization"
    CV_HOSPITALIZATION = "cv_hospitalization"
    CV_DEATH_HF_HOSP = "cv_death_hf_hosp"

    # Composites
    MACE = "mace"
    MACE_COMPOSITE = "mace_composite"

    # Kidney
    ESKD_DIALYSIS = "eskd_dialysis"
    KIDNEY_PROGRESSION = "kidney_progression"
    ESRD = "esrd"
    DOUBLING_CREATININE = "doubling_creatinine"

    # Diabetes complications and limbs
    AMPUTATION = "amputation"
    BLINDNESS = "blindness"
    LIMB_EVENTS = "limb_events"

    # Fractures
    HIP_FRACTURE = "hip_fracture"
    VERTEBRAL_FRACTURE = "vertebral_fracture"
    NONVERTEBRAL_FRACTURE = "nonvertebral_fracture"
    FALLS = "falls"

    # Symptomatic outcomes
    EXACERBATIONS = "exacerbations"
    GOUT_FLARES = "gout_flares"
    PAIN_RELIEF = "pain_relief"
    REMISSION = "remission"
    SYMPTOM_RELIEF = "symptom_relief"
    CONGESTION_RELIEF = "congestion_relief"

    # Bleeding harms
    MAJOR_BLEEDING = "major_bleeding"
    INTRACRANIAL_BLEEDING = "intracranial_bleeding"
    GI_BLEEDING = "gi_bleeding"
    FATAL_BLEEDING = "fatal_bleeding"

    # Metabolic harms
    SEVERE_HYPOGLYCEMIA = "severe_hypoglycemia"
    DKA = "dka"
    NEW_ONSET_DIABETES = "new_onset_diabetes"
    HYPERCALCEMIA = "hypercalcemia"

    # Renal harms
    AKI = "aki"
    HYPERKALEMIA_SEVERE = "hyperkalemia_severe"
    HYPERKALEMIA = "hyperkalemia"

    # Bone harms
    ATYPICAL_FEMUR_FRACTURE = "atypical_femur_fracture"
    OSTEONECROSIS_JAW = "osteonecrosis_jaw"

    # Respiratory harms
    PNEUMONIA = "pneumonia"
    PNEUMONIA_COPD = "pneumonia_copd"

    # Cardiovascular harms
    CV_EVENTS = "cv_events"
    AFIB = "afib"
    EDEMA_WORSENING_HF = "edema_worsening_hf"

    # CNS harms in older adults
    FALLS_ELDERLY = "falls_elderly"
    CNS_DEPRESSION = "cns_depression"
    COGNITIVE_IMPAIRMENT = "cognitive_impairment"

    # Other serious harms
    DISCONTINUATION_SYNDROME = "discontinuation_syndrome"
    ANGIOEDEMA = "angioedema"
    PANCREATITIS = "pancreatitis"
    RHABDOMYOLYSIS = "rhabdomyolysis"
    HYPERSENSITIVITY_SYNDROME = "hypersensitivity_syndrome"
    DIARRHEA_SEVERE = "diarrhea_severe"

class BurdenLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    def escalated(self) -> "BurdenLevel":
        """One step more burdensome; HIGH stays HIGH"""
        if self == BurdenLevel.LOW:
            return BurdenLevel.MODERATE
        return BurdenLevel.HIGH

K = OutcomeKind

DEFAULT_OUTCOME_WEIGHTS: Dict[OutcomeKind, float] = {
    K.DEATH: 1.0,
    K.CV_DEATH: 1.0,
    K.ALL_CAUSE_MORTALITY: 1.0,
    K.MORTALITY: 1.0,

    K.STROKE_DISABLING: 0.7,      # permanent severe disability
    K.STROKE_ANY: 0.4,            # mix of disabling and non-disabling
    K.STROKE: 0.4,
    K.STROKE_RECURRENCE: 0.4,
    K.THROMBOEMBOLISM: 0.3,

    K.MI_FATAL: 1.0,
    K.MI_NONFATAL: 0.2,
    K.MI: 0.25,

    K.HEART_FAILURE_HOSPITALIZATION: 0.15,
    K.HF_HOSPITALIZATION: 0.15,
    K.HOSPITALIZATION: 0.1,
    K.CV_HOSPITALIZATION: 0.1,
    K.CV_DEATH_HF_HOSP: 0.4,

    K.MACE: 0.35,
    K.MACE_COMPOSITE: 0.35,

    K.ESKD_DIALYSIS: 0.5,
    K.KIDNEY_PROGRESSION: 0.3,
    K.ESRD: 0.5,
    K.DOUBLING_CREATININE: 0.2,

    K.AMPUTATION: 0.4,
    K.BLINDNESS: 0.4,
    K.LIMB_EVENTS: 0.3,

    K.HIP_FRACTURE: 0.5,
    K.VERTEBRAL_FRACTURE: 0.2,
    K.NONVERTEBRAL_FRACTURE: 0.15,
    K.FALLS: 0.05,

    K.EXACERBATIONS: 0.1,
    K.GOUT_FLARES: 0.02,
    K.PAIN_RELIEF: 0.15,
    K.REMISSION: 0.2,
    K.SYMPTOM_RELIEF: 0.1,
    K.CONGESTION_RELIEF: 0.1,

    K.MAJOR_BLEEDING: 0.15,
    K.INTRACRANIAL_BLEEDING: 0.6,
    K.GI_BLEEDING: 0.08,
    K.FATAL_BLEEDING: 1.0,

    K.SEVERE_HYPOGLYCEMIA: 0.05,
    K.DKA: 0.1,
    K.NEW_ONSET_DIABETES: 0.05,
    K.HYPERCALCEMIA: 0.05,

    K.AKI: 0.1,
    K.HYPERKALEMIA_SEVERE: 0.08,
    K.HYPERKALEMIA: 0.05,

    K.ATYPICAL_FEMUR_FRACTURE: 0.4,
    K.OSTEONECROSIS_JAW: 0.2,

    K.PNEUMONIA: 0.1,
    K.PNEUMONIA_COPD: 0.15,

    K.CV_EVENTS: 0.3,
    K.AFIB: 0.1,
    K.EDEMA_WORSENING_HF: 0.1,

    K.FALLS_ELDERLY: 0.1,
    K.CNS_DEPRESSION: 0.15,
    K.COGNITIVE_IMPAIRMENT: 0.2,

    K.DISCONTINUATION_SYNDROME: 0.02,
    K.ANGIOEDEMA: 0.1,
    K.PANCREATITIS: 0.1,
    K.RHABDOMYOLYSIS: 0.15,
    K.HYPERSENSITIVITY_SYNDROME: 0.2,
    K.DIARRHEA_SEVERE: 0.02,
}

DEFAULT_BURDEN_PENALTIES: Dict[BurdenLevel, float] = {
    BurdenLevel.LOW: 1.0,        # once daily, no monitoring
    BurdenLevel.MODERATE: 3.0,   # multiple doses or regular monitoring
    BurdenLevel.HIGH: 6.0        # INR monitoring, injections, dietary limits
}

# Outcome families used by the baseline-risk lookup
MACE_OUTCOMES: FrozenSet[OutcomeKind] = frozenset({K.MACE, K.MACE_COMPOSITE, K.CV_DEATH})
STROKE_OUTCOMES: FrozenSet[OutcomeKind] = frozenset({K.STROKE, K.STROKE_ANY, K.STROKE_DISABLING})
MI_OUTCOMES: FrozenSet[OutcomeKind] = frozenset({K.MI, K.MI_FATAL, K.MI_NONFATAL})
MORTALITY_OUTCOMES: FrozenSet[OutcomeKind] = frozenset({K.DEATH, K.ALL_CAUSE_MORTALITY, K.MORTALITY})
HF_HOSPITALIZATION_OUTCOMES: FrozenSet[OutcomeKind] = frozenset(
    {K.HF_HOSPITALIZATION, K.HEART_FAILURE_HOSPITALIZATION, K.HOSPITALIZATION})
KIDNEY_OUTCOMES: FrozenSet[OutcomeKind] = frozenset({K.KIDNEY_PROGRESSION, K.ESKD_DIALYSIS, K.ESRD})
DIABETIC_COMPLICATION_OUTCOMES: FrozenSet[OutcomeKind] = frozenset({K.BLINDNESS, K.AMPUTATION})

def resolve_outcome(name: str) -> Optional[OutcomeKind]:
    """Map a catalog identifier to its OutcomeKind, None when outside the vocabulary"""
    try:
        return OutcomeKind(name)
    except ValueError:
        return None

def is_bleeding_harm(name: str) -> bool:
    return "bleeding" in name

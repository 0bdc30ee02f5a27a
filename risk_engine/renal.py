"""
Kidney function - CKD-EPI 2021 race-free eGFR and KDIGO staging
"""

from typing import Optional

from .schema import PatientAttributes, RenalFunction

# Sex-specific constants: (kappa, alpha)
_CKD_EPI_FEMALE = (0.7, -0.241)
_CKD_EPI_MALE = (0.9, -0.302)
_CKD_EPI_HIGH_EXPONENT = -1.200
_CKD_EPI_AGE_BASE = 0.9938
_CKD_EPI_FEMALE_FACTOR = 1.012

# Lower eGFR bound of each stage, best first
CKD_STAGES = [
    (90, "G1 (Normal)"),
    (60, "G2 (Mild)"),
    (45, "G3a (Mild-Mod)"),
    (30, "G3b (Mod-Severe)"),
    (15, "G4 (Severe)"),
]
CKD_FINAL_STAGE = "G5 (Kidney Failure)"

def ckd_stage(egfr: float) -> str:
    """Map an eGFR (mL/min/1.73m2) to its KDIGO G stage"""
    for lower_bound, stage in CKD_STAGES:
        if egfr >= lower_bound:
            return stage
    return CKD_FINAL_STAGE

def ckd_stage_rank(stage: str) -> int:
    """0 for G1 through 5 for G5; higher means worse function"""
    labels = [label for _, label in CKD_STAGES] + [CKD_FINAL_STAGE]
    return labels.index(stage)

def egfr_value(creatinine: float, age: float, female: bool) -> float:
    kappa, alpha = _CKD_EPI_FEMALE if female else _CKD_EPI_MALE
    scr_k = creatinine / kappa

    exponent = alpha if scr_k <= 1 else _CKD_EPI_HIGH_EXPONENT
    egfr = 142 * scr_k ** exponent * _CKD_EPI_AGE_BASE ** age

    if female:
        egfr *= _CKD_EPI_FEMALE_FACTOR
    return egfr

def egfr_ckd_epi_2021(patient: PatientAttributes) -> Optional[RenalFunction]:
    """eGFR from serum creatinine; requires creatinine and age"""
    if not patient.creatinine or patient.age is None:
        return None

    egfr = round(egfr_value(patient.creatinine, patient.age, patient.is_female))
    return RenalFunction(egfr=egfr, stage=ckd_stage(egfr), interpretation=ckd_stage(egfr))

def measured_egfr(patient: PatientAttributes) -> Optional[RenalFunction]:
    """Wrap a laboratory-reported eGFR when creatinine is not available"""
    if patient.egfr is None:
        return None
    egfr = round(patient.egfr)
    return RenalFunction(egfr=egfr, stage=ckd_stage(egfr), source="measured",
                         interpretation=ckd_stage(egfr))

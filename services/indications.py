"""
Indication applicability predicates

Each predicate takes (patient, risk bundle) and returns the reason the
indication applies, or None. Indications without a registered predicate
never apply.
"""

import logging
from typing import Callable, Dict, Optional

from risk_engine.schema import PatientAttributes, RiskBundle, DiabetesStatus

logger = logging.getLogger(__name__)

Predicate = Callable[[PatientAttributes, RiskBundle], Optional[str]]

INDICATION_PREDICATES: Dict[str, Predicate] = {}

def indication(*names: str):
    """Register a predicate under one or more indication names"""
    def register(func: Predicate) -> Predicate:
        for name in names:
            INDICATION_PREDICATES[name] = func
        return func
    return register

def _ef_below(patient: PatientAttributes, threshold: float) -> bool:
    return patient.ef is not None and patient.ef < threshold

def _egfr_below(bundle: RiskBundle, threshold: float) -> bool:
    egfr = bundle.egfr
    return egfr is not None and egfr < threshold

def _albuminuria(patient: PatientAttributes) -> bool:
    return patient.uacr is not None and patient.uacr > 30

def _established_cvd(patient: PatientAttributes) -> bool:
    return patient.prior_mi or patient.prior_stroke or patient.pvd

# Heart failure

@indication("heart_failure", "heart_failure_symptoms")
def _heart_failure(patient, bundle):
    if _ef_below(patient, 50):
        return "EF < 50%"
    if (patient.nyha or 0) >= 1:
        return "Heart failure symptoms"
    if patient.chf_history:
        return "History of heart failure"
    return None

@indication("heart_failure_severe")
def _heart_failure_severe(patient, bundle):
    if _ef_below(patient, 30):
        return "Severe HFrEF (EF < 30%)"
    if (patient.nyha or 0) >= 3:
        return "NYHA III-IV symptoms"
    return None

@indication("edema")
def _edema(patient, bundle):
    if patient.chf_history or _ef_below(patient, 50):
        return "Volume overload/edema"
    return None

# Atrial fibrillation and thrombosis

@indication("afib_stroke_prevention")
def _afib_stroke_prevention(patient, bundle):
    return "Atrial fibrillation" if patient.afib else None

@indication("afib_rate_control")
def _afib_rate_control(patient, bundle):
    return "AFib rate control" if patient.afib else None

@indication("mechanical_valve")
def _mechanical_valve(patient, bundle):
    return "Mechanical heart valve" if patient.mechanical_valve else None

@indication("vte_treatment")
def _vte_treatment(patient, bundle):
    return "VTE treatment" if patient.vte else None

# Diabetes

@indication("diabetes", "diabetes_cv", "diabetes_glycemic")
def _diabetes(patient, bundle):
    return "Diabetes mellitus" if patient.has_diabetes else None

@indication("diabetes_with_cvd")
def _diabetes_with_cvd(patient, bundle):
    if patient.has_diabetes and _established_cvd(patient):
        return "Diabetes with established CVD"
    return None

@indication("diabetic_nephropathy")
def _diabetic_nephropathy(patient, bundle):
    if patient.has_diabetes and _egfr_below(bundle, 60):
        return "Diabetic nephropathy"
    return None

@indication("diabetic_kidney_disease")
def _diabetic_kidney_disease(patient, bundle):
    if patient.diabetes_status == DiabetesStatus.TYPE2 and \
            (_egfr_below(bundle, 60) or _albuminuria(patient)):
        return "Diabetic kidney disease"
    return None

# Atherosclerotic disease and prevention

@indication("secondary_prevention", "post_mi")
def _secondary_prevention(patient, bundle):
    return "Established cardiovascular disease" if _established_cvd(patient) else None

@indication("hyperlipidemia", "secondary_prevention_addon")
def _secondary_prevention_addon(patient, bundle):
    return "Secondary CV prevention" if _established_cvd(patient) else None

@indication("post_mi_with_lv_dysfunction")
def _post_mi_lv_dysfunction(patient, bundle):
    if patient.prior_mi and _ef_below(patient, 40):
        return "Post-MI with LV dysfunction"
    return None

@indication("primary_prevention_high_risk")
def _primary_prevention_high_risk(patient, bundle):
    if patient.prior_mi or patient.prior_stroke:
        return None
    ascvd = bundle.ascvd
    if ascvd is not None and ascvd.ten_year_risk >= 7.5:
        return "High CV risk (ASCVD ≥7.5%)"
    return None

@indication("primary_prevention", "primary_prevention_low_risk")
def _primary_prevention(patient, bundle):
    if patient.prior_mi or patient.prior_stroke:
        return None
    return "Primary prevention"

@indication("acs", "stroke_secondary_prevention")
def _acs(patient, bundle):
    if patient.prior_mi or patient.prior_stroke:
        return "Secondary prevention"
    return None

@indication("cv_prevention", "stable_cad", "stable_cad_pad")
def _stable_cad(patient, bundle):
    if patient.prior_mi or patient.pvd:
        return "Stable CAD or PAD"
    return None

@indication("pad")
def _pad(patient, bundle):
    return "Peripheral artery disease" if patient.pvd else None

@indication("angina")
def _angina(patient, bundle):
    if patient.prior_mi or patient.stable_angina:
        return "Angina/CAD"
    return None

@indication("cv_prevention_high_tg")
def _high_triglycerides(patient, bundle):
    if patient.triglycerides is not None and patient.triglycerides >= 150 and \
            (patient.prior_mi or patient.prior_stroke
             or patient.diabetes_status == DiabetesStatus.TYPE2):
        return "Elevated TG with high CV risk"
    return None

# Blood pressure and kidney

@indication("hypertension")
def _hypertension(patient, bundle):
    if patient.htn_treatment or (patient.systolic_bp is not None and patient.systolic_bp >= 130):
        return "Hypertension"
    return None

@indication("resistant_hypertension")
def _resistant_hypertension(patient, bundle):
    if patient.htn_treatment and patient.systolic_bp is not None and patient.systolic_bp >= 140:
        return "Resistant hypertension"
    return None

@indication("ckd")
def _ckd(patient, bundle):
    if _egfr_below(bundle, 60):
        return "CKD (eGFR < 60)"
    if _albuminuria(patient):
        return "Albuminuria"
    return None

# Bone, joints and pain

@indication("osteoporosis", "osteoporosis_severe")
def _osteoporosis(patient, bundle):
    if patient.osteoporosis:
        return "Osteoporosis"
    age = patient.age or 0
    if age >= 65 and patient.is_female:
        return "High fracture risk (age ≥65, female)"
    if age >= 75:
        return "High fracture risk (age ≥75)"
    return None

@indication("vitamin_d_deficiency", "osteoporosis_adjunct", "fall_prevention")
def _vitamin_d(patient, bundle):
    if patient.osteoporosis or patient.is_elderly:
        return "Vitamin D supplementation indicated"
    return None

@indication("gout", "gout_flare_treatment")
def _gout(patient, bundle):
    return "Gout" if patient.gout else None

@indication("neuropathic_pain")
def _neuropathic_pain(patient, bundle):
    if patient.neuropathy or (patient.diabetes_status == DiabetesStatus.TYPE2
                              and (patient.diabetes_duration or 0) >= 5):
        return "Neuropathic pain"
    return None

@indication("fibromyalgia")
def _fibromyalgia(patient, bundle):
    return "Fibromyalgia" if patient.fibromyalgia else None

# Respiratory, GI, endocrine, neuro

@indication("asthma")
def _asthma(patient, bundle):
    return "Asthma" if patient.asthma else None

@indication("copd")
def _copd(patient, bundle):
    return "COPD" if patient.copd else None

@indication("gerd", "peptic_ulcer", "gi_bleed_prevention")
def _gi_protection(patient, bundle):
    if patient.antiplatelet and (patient.prior_mi or patient.prior_stroke):
        return "GI protection with antithrombotics"
    return None

@indication("hypothyroidism")
def _hypothyroidism(patient, bundle):
    return "Hypothyroidism" if patient.hypothyroidism else None

@indication("depression", "anxiety")
def _depression(patient, bundle):
    return "Depression/anxiety" if patient.depression else None

@indication("seizures")
def _seizures(patient, bundle):
    return "Seizure disorder" if patient.seizures else None

@indication("obesity")
def _obesity(patient, bundle):
    bmi = patient.bmi
    if bmi is not None and bmi >= 30:
        return "Obesity (BMI ≥30)"
    return None

def indication_reason(name: str, patient: PatientAttributes, bundle: RiskBundle) -> Optional[str]:
    """Reason the indication applies to this patient, or None"""
    predicate = INDICATION_PREDICATES.get(name)
    if predicate is None:
        logger.debug(f"No predicate registered for indication '{name}'")
        return None
    return predicate(patient, bundle)

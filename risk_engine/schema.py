"""
Pydantic schemas for patient attributes and risk calculator results
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional, List, Union
from enum import Enum

class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"

class Race(str, Enum):
    WHITE = "white"
    BLACK = "black"
    OTHER = "other"

class DiabetesStatus(str, Enum):
    NONE = "none"
    PREDIABETES = "prediabetes"
    TYPE1 = "type1"
    TYPE2 = "type2"

class RiskName(str, Enum):
    STROKE = "chadsvasc"
    BLEEDING = "hasbled"
    ASCVD = "ascvd"
    RENAL = "egfr"
    HF_SURVIVAL = "seattle_hf"
    HF_RISK = "hf_risk"
    DIABETES = "ukpds"

class PatientAttributes(BaseModel):
    """Flat record of demographics, labs and history flags for one patient"""
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    # Demographics
    age: Optional[float] = Field(default=None, ge=0, le=120)
    sex: Optional[Sex] = None
    race: Optional[Race] = None
    weight_kg: Optional[float] = Field(default=None, gt=0)
    height_cm: Optional[float] = Field(default=None, gt=0)

    # Cardiovascular risk factors
    systolic_bp: Optional[float] = None
    diastolic_bp: Optional[float] = None
    total_cholesterol: Optional[float] = None
    ldl: Optional[float] = None
    hdl: Optional[float] = None
    triglycerides: Optional[float] = None
    htn_treatment: bool = False
    smoker: bool = False
    former_smoker: bool = False
    family_hx_cad: bool = False

    # Diabetes
    diabetes_status: DiabetesStatus = DiabetesStatus.NONE
    a1c: Optional[float] = None
    diabetes_duration: Optional[float] = None
    fasting_glucose: Optional[float] = None

    # Heart and kidney
    ef: Optional[float] = Field(default=None, ge=0, le=100)  # ejection fraction %
    nyha: Optional[int] = Field(default=None, ge=0, le=4)
    creatinine: Optional[float] = Field(default=None, gt=0)  # mg/dL
    egfr: Optional[float] = Field(default=None, ge=0)  # measured, if no creatinine
    uacr: Optional[float] = None
    bnp: Optional[float] = None

    # Atrial fibrillation and vascular history
    afib: bool = False
    prior_stroke: bool = False
    prior_mi: bool = False
    pvd: bool = False
    chf_history: bool = False
    mechanical_valve: bool = False
    stable_angina: bool = False
    vte: bool = False

    # Bleeding risk
    prior_bleed: bool = False
    anemia: bool = False
    liver_disease: bool = False
    alcohol: bool = False
    nsaid_use: bool = False
    antiplatelet: bool = False
    fall_risk: bool = False

    # Other conditions
    copd: bool = False
    osa: bool = False
    depression: bool = False
    dementia: bool = False
    cancer: bool = False
    frailty: bool = False
    osteoporosis: bool = False
    gout: bool = False
    asthma: bool = False
    neuropathy: bool = False
    hypothyroidism: bool = False
    fibromyalgia: bool = False
    seizures: bool = False

    current_medications: List[str] = Field(default_factory=list)

    @property
    def has_diabetes(self) -> bool:
        return self.diabetes_status in (DiabetesStatus.TYPE1, DiabetesStatus.TYPE2)

    @property
    def is_female(self) -> bool:
        return self.sex == Sex.FEMALE

    @property
    def is_elderly(self) -> bool:
        return self.age is not None and self.age >= 65

    @property
    def is_very_elderly(self) -> bool:
        return self.age is not None and self.age >= 75

    @property
    def has_heart_failure(self) -> bool:
        return self.chf_history or (self.ef is not None and self.ef < 50)

    @property
    def has_hypertension(self) -> bool:
        return self.htn_treatment or (self.systolic_bp is not None and self.systolic_bp >= 140)

    @property
    def bmi(self) -> Optional[float]:
        if not self.weight_kg or not self.height_cm:
            return None
        return self.weight_kg / (self.height_cm / 100) ** 2

class RiskResult(BaseModel):
    """Common base for every calculator result"""
    model_config = ConfigDict(frozen=True)

    interpretation: str = ""

class StrokeRisk(RiskResult):
    """CHA2DS2-VASc score with annual stroke risk (%)"""
    score: int
    annual_stroke_risk: float

class BleedingRisk(RiskResult):
    """HAS-BLED score with annual major bleeding risk (%)"""
    score: int
    annual_bleed_risk: float

class ASCVDRisk(RiskResult):
    """10-year atherosclerotic cardiovascular risk (%)"""
    ten_year_risk: float

    @property
    def annual_risk(self) -> float:
        return self.ten_year_risk / 100 / 10

class RenalFunction(RiskResult):
    egfr: int
    stage: str
    source: str = "CKD-EPI 2021"

class HeartFailureSurvival(RiskResult):
    """Seattle-style survival estimate, percentages"""
    survival_1yr: int
    survival_2yr: int
    survival_5yr: int
    gdmt_life_years: Dict[str, float] = Field(default_factory=dict)

class HeartFailureRisk(RiskResult):
    points: int
    ten_year_risk: float

class DiabetesComplicationRisk(RiskResult):
    chd_risk: float
    stroke_risk: float
    chd_interpretation: str = ""
    stroke_interpretation: str = ""

AnyRiskResult = Union[StrokeRisk, BleedingRisk, ASCVDRisk, RenalFunction,
                      HeartFailureSurvival, HeartFailureRisk, DiabetesComplicationRisk]

class RiskBundle(BaseModel):
    """Sparse mapping of calculator name to result, computed once per patient"""
    model_config = ConfigDict(frozen=True)

    results: Dict[RiskName, AnyRiskResult] = Field(default_factory=dict)

    def get(self, name: RiskName) -> Optional[RiskResult]:
        return self.results.get(name)

    def __contains__(self, name: RiskName) -> bool:
        return name in self.results

    @property
    def stroke(self) -> Optional[StrokeRisk]:
        return self.results.get(RiskName.STROKE)

    @property
    def bleeding(self) -> Optional[BleedingRisk]:
        return self.results.get(RiskName.BLEEDING)

    @property
    def ascvd(self) -> Optional[ASCVDRisk]:
        return self.results.get(RiskName.ASCVD)

    @property
    def renal(self) -> Optional[RenalFunction]:
        return self.results.get(RiskName.RENAL)

    @property
    def egfr(self) -> Optional[int]:
        renal = self.renal
        return renal.egfr if renal is not None else None

    @property
    def hf_survival(self) -> Optional[HeartFailureSurvival]:
        return self.results.get(RiskName.HF_SURVIVAL)

    @property
    def hf_risk(self) -> Optional[HeartFailureRisk]:
        return self.results.get(RiskName.HF_RISK)

    @property
    def diabetes(self) -> Optional[DiabetesComplicationRisk]:
        return self.results.get(RiskName.DIABETES)

    def to_dict(self) -> Dict[str, dict]:
        return {name.value: result.model_dump(mode="json") for name, result in self.results.items()}

class CalculatorConfig(BaseModel):
    """Score-to-probability tables for the point-score calculators"""
    model_config = ConfigDict(frozen=True)

    # Annual stroke risk (%) by CHA2DS2-VASc score. The dip at 8 is published data.
    stroke_risk_by_score: Dict[int, float] = {
        0: 0.2, 1: 0.6, 2: 2.2, 3: 3.2, 4: 4.8,
        5: 7.2, 6: 9.7, 7: 11.2, 8: 10.8, 9: 12.2
    }
    stroke_score_cap: int = 9

    # Annual major bleeding risk (%) by HAS-BLED score
    bleed_risk_by_score: Dict[int, float] = {
        0: 1.1, 1: 1.0, 2: 1.9, 3: 3.7, 4: 8.7, 5: 12.5
    }
    bleed_score_cap: int = 5

    # ASCVD approximation bounds (%)
    ascvd_floor: float = 0.5
    ascvd_ceiling: float = 50.0

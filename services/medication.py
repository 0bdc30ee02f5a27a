"""
Medication reference records - efficacy and harm statistics per medication
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .outcomes import BurdenLevel

class Purpose(str, Enum):
    PREVENTIVE = "preventive"
    DISEASE_MODIFYING = "disease_modifying"
    SYMPTOMATIC = "symptomatic"
    REPLACEMENT = "replacement"

class Efficacy(BaseModel):
    """Trial-derived effect of a medication on one outcome"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    rrr: Optional[float] = None
    nnt: Optional[float] = None
    timeframe: Optional[float] = None  # years
    endpoint: str = ""
    quality: str = "unknown"
    source: str = ""
    absolute: Optional[float] = None   # surrogate endpoints (e.g. A1c change)

    @property
    def is_quantified(self) -> bool:
        """True when the outcome carries an RRR or NNT the engine can use"""
        return bool(self.rrr) or bool(self.nnt)

class HarmStat(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    nnh: Optional[float] = None
    timeframe: Optional[float] = None
    source: str = "clinical trial"

class ListedHazard(BaseModel):
    """Published list of potentially inappropriate medications in older adults"""
    model_config = ConfigDict(frozen=True)

    listed: bool = False
    concern: str = ""
    recommendation: str = ""
    strength: str = ""
    quality_of_evidence: str = ""

class ElderlyCautionFlags(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    fall_risk: bool = False
    cognitive_impairment: bool = False
    sedation: bool = False
    hypoglycemia_risk: bool = False
    avoid_in_hf: bool = False
    narrow_therapeutic_window: bool = False
    avoid_if_frail: bool = False
    requires_renal_adjustment: bool = False
    prefer_alternatives: Optional[List[str]] = None

class MedicationRecord(BaseModel):
    """One catalog entry. Read-only once loaded."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    brand_names: List[str] = Field(default_factory=list)
    medication_class: str = Field(alias="class")
    purpose: Purpose
    indications: List[str] = Field(default_factory=list)
    # indication -> outcome -> efficacy
    benefits: Dict[str, Dict[str, Efficacy]] = Field(default_factory=dict)
    harms: Dict[str, HarmStat] = Field(default_factory=dict)
    burden: Optional[BurdenLevel] = None
    burden_details: str = ""
    annual_cost: float = 0
    monitoring: str = ""
    contraindications: List[str] = Field(default_factory=list)
    listed_hazard: Optional[ListedHazard] = None
    elderly_caution: Optional[ElderlyCautionFlags] = None

    def in_class(self, class_names: List[str]) -> bool:
        return any(c in self.medication_class for c in class_names)

    def summary(self) -> Dict[str, object]:
        """Compact listing used by the catalog endpoint"""
        return {
            "id": self.id,
            "name": self.name,
            "brand_names": list(self.brand_names),
            "class": self.medication_class,
            "purpose": self.purpose.value,
            "indications": list(self.indications),
            "burden": self.burden.value if self.burden else None,
            "annual_cost": self.annual_cost,
            "listed_hazard": bool(self.listed_hazard and self.listed_hazard.listed)
        }

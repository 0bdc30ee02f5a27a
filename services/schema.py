"""
Preferences and net-benefit result records
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Tuple, Any

from pydantic import BaseModel, ConfigDict, Field

from .outcomes import BurdenLevel

class Sensitivity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

class Severity(str, Enum):
    MODERATE = "moderate"
    HIGH = "high"

class RecommendationTier(str, Enum):
    STRONGLY_RECOMMENDED = "strongly-recommended"
    RECOMMENDED = "recommended"
    CONSIDER = "consider"
    MARGINAL = "marginal"
    CAUTION_ELDERLY = "caution-elderly"
    NOT_RECOMMENDED = "not-recommended"

class Preferences(BaseModel):
    """Patient preferences that shape burden and the recommendation threshold"""
    model_config = ConfigDict(frozen=True)

    goals_of_care: int = Field(default=3, ge=1, le=4)  # 1 comfort-focused ... 4 proactive
    time_horizon: Optional[float] = Field(default=5, gt=0)  # years
    pill_burden_tolerance: Sensitivity = Sensitivity.MODERATE
    cost_sensitivity: Sensitivity = Sensitivity.MODERATE

@dataclass(frozen=True)
class ApplicableIndication:
    indication: str
    reason: str

@dataclass(frozen=True)
class BenefitEntry:
    outcome: str
    indication: str
    baseline_risk: float
    rrr: Optional[float]
    nnt: Optional[float]
    timeframe: float
    severity_weight: float
    competing_risk_factor: float
    expected_benefit: float
    endpoint_quality: str = "unknown"

@dataclass(frozen=True)
class HarmEntry:
    harm: str
    nnh: float
    annual_risk: float  # probability per year
    timeframe: float
    severity_weight: float
    expected_harm: float
    source: str

@dataclass(frozen=True)
class SafetyWarning:
    type: str
    message: str
    severity: Severity

@dataclass(frozen=True)
class ListedHazardWarning:
    concern: str
    recommendation: str
    strength: str
    quality_of_evidence: str
    severity: Severity

@dataclass(frozen=True)
class ElderlyCaution:
    warnings: Tuple[SafetyWarning, ...]
    overall_severity: Severity
    prefer_alternatives: Optional[Tuple[str, ...]] = None
    requires_renal_adjustment: bool = False
    avoid_recommended: bool = False

    @property
    def is_high_severity(self) -> bool:
        return self.overall_severity == Severity.HIGH

@dataclass(frozen=True)
class NetBenefitResult:
    medication_id: str
    medication_name: str
    medication_class: str
    purpose: str
    benefits: Tuple[BenefitEntry, ...]
    harms: Tuple[HarmEntry, ...]
    total_benefit: float
    total_harm: float
    net_benefit: float
    nnt_equivalent: Optional[int]
    burden_level: BurdenLevel
    burden_penalty: float
    burden_details: str
    estimated_life_expectancy: float
    applicable_indications: Tuple[ApplicableIndication, ...]
    goals_of_care: int
    goals_of_care_name: str
    goals_of_care_threshold: float
    recommendation: RecommendationTier
    recommendation_text: str
    listed_hazard_warning: Optional[ListedHazardWarning] = None
    elderly_caution: Optional[ElderlyCaution] = None
    config_version: str = ""

    @property
    def has_applicable_indication(self) -> bool:
        return len(self.applicable_indications) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return _jsonable(asdict(self))

def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value

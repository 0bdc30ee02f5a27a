"""
Engine configuration - severity weights, burden penalties, actuarial table and thresholds

Every constant that changes a computed score lives here and is versioned
through config_version. The defaults mirror config/net_benefit.yaml.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from risk_engine.schema import Sex
from .outcomes import OutcomeKind, BurdenLevel, DEFAULT_OUTCOME_WEIGHTS, DEFAULT_BURDEN_PENALTIES
from .error_codes import invalid_config_error, incomplete_severity_table_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "net_benefit.yaml"

def missing_outcome_kinds(weights) -> List[str]:
    """Outcome kinds without a severity weight in the given mapping"""
    present = {k.value if isinstance(k, OutcomeKind) else str(k) for k in weights}
    return sorted(kind.value for kind in OutcomeKind if kind.value not in present)

class EngineConfig(BaseModel):
    """Frozen constants consumed by the net-benefit engine"""
    model_config = ConfigDict(frozen=True)

    config_version: str = "2024.1"

    # Severity table (QALY loss per event)
    outcome_weights: Dict[OutcomeKind, float] = Field(
        default_factory=lambda: dict(DEFAULT_OUTCOME_WEIGHTS))
    default_benefit_weight: float = 0.2
    default_harm_weight: float = 0.05

    # Burden (per 100 patients per year) and cost surcharges
    burden_penalties: Dict[BurdenLevel, float] = Field(
        default_factory=lambda: dict(DEFAULT_BURDEN_PENALTIES))
    default_burden: BurdenLevel = BurdenLevel.MODERATE
    high_sensitivity_cost_threshold: float = 2000
    high_sensitivity_surcharge: float = 0.5
    moderate_sensitivity_cost_threshold: float = 5000
    moderate_sensitivity_surcharge: float = 0.3

    # Goals of care
    goals_of_care_thresholds: Dict[int, float] = Field(
        default_factory=lambda: {1: 3.0, 2: 1.0, 3: 0.3, 4: 0.0})
    goals_of_care_names: Dict[int, str] = Field(
        default_factory=lambda: {1: "Comfort-Focused", 2: "Selective",
                                 3: "Balanced", 4: "Proactive"})
    strong_recommendation_floor: float = 3.0
    listed_hazard_benefit_floor: float = 1.0
    high_cost_threshold: float = 3000

    # Materiality floors
    benefit_floor: float = 0.001
    harm_floor: float = 0.0001
    synthesized_harm_floor: float = 0.001
    nnh_floor: float = 5.0

    dementia_adherence_factor: float = 0.7

    # Remaining life expectancy (years) by sex and 5-year age band
    life_expectancy_table: Dict[Sex, Dict[int, float]] = Field(default_factory=lambda: {
        Sex.MALE: {50: 30, 55: 26, 60: 22, 65: 18, 70: 15, 75: 12, 80: 8, 85: 6, 90: 4, 95: 3},
        Sex.FEMALE: {50: 33, 55: 29, 60: 25, 65: 21, 70: 17, 75: 13, 80: 10, 85: 7, 90: 5, 95: 3}
    })
    life_expectancy_fallback: float = 15
    life_expectancy_floor: float = 0.5
    default_age: float = 65
    default_horizon_years: float = 10

    # Harm synthesis
    bleeding_risk_classes: List[str] = Field(default_factory=lambda: [
        "Direct Oral Anticoagulant (DOAC)", "Vitamin K Antagonist", "Antiplatelet"])
    major_bleed_share: float = 0.85
    intracranial_bleed_share: float = 0.12
    hypoglycemia_classes: List[str] = Field(default_factory=lambda: ["Sulfonylurea"])
    hypoglycemia_baseline: float = 0.02
    hypoglycemia_age_multiplier: float = 2.0
    hypoglycemia_renal_multiplier: float = 1.5

    # Medication review
    switch_margin: float = 0.5
    max_new_suggestions: int = 5

    @model_validator(mode="after")
    def _check_totality(self):
        missing = missing_outcome_kinds(self.outcome_weights)
        if missing:
            raise ValueError(f"severity table missing weights for: {', '.join(missing)}")
        missing_burden = [b.value for b in BurdenLevel if b not in self.burden_penalties]
        if missing_burden:
            raise ValueError(f"burden penalties missing: {', '.join(missing_burden)}")
        if sorted(self.goals_of_care_thresholds) != [1, 2, 3, 4]:
            raise ValueError("goals_of_care_thresholds must define tiers 1-4")
        return self

    def weight_for(self, name: str, default: float) -> float:
        """Severity weight for an identifier, falling back to default outside the vocabulary"""
        try:
            return self.outcome_weights[OutcomeKind(name)]
        except ValueError:
            logger.debug(f"Unknown outcome '{name}', using default weight {default}")
            return default

    def benefit_weight(self, name: str) -> float:
        return self.weight_for(name, self.default_benefit_weight)

    def harm_weight(self, name: str) -> float:
        return self.weight_for(name, self.default_harm_weight)

def load_engine_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load EngineConfig from YAML.

    A missing file falls back to the built-in defaults. A file that is
    present but invalid or incomplete raises CodexError.
    """
    config_file = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_file.exists():
        logger.warning(f"Config file {config_file} not found, using defaults")
        return EngineConfig()

    try:
        with open(config_file, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise invalid_config_error(str(config_file), e)
    if not isinstance(data, dict):
        raise invalid_config_error(str(config_file), TypeError("top level must be a mapping"))

    weights = data.get("outcome_weights")
    if weights is not None:
        missing = missing_outcome_kinds(weights)
        if missing:
            raise incomplete_severity_table_error(str(config_file), missing)

    try:
        config = EngineConfig.model_validate(data)
    except ValidationError as e:
        raise invalid_config_error(str(config_file), e)

    logger.info(f"Loaded engine config version {config.config_version} from {config_file}")
    return config

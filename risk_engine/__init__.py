"""
Clinical risk calculators
Stroke, bleeding, cardiovascular, renal and heart failure estimates from patient attributes
"""

from .schema import (PatientAttributes, RiskBundle, RiskName, CalculatorConfig,
                     StrokeRisk, BleedingRisk, ASCVDRisk, RenalFunction,
                     HeartFailureSurvival, HeartFailureRisk, DiabetesComplicationRisk,
                     Sex, Race, DiabetesStatus)
from .scores import chads_vasc, has_bled
from .renal import egfr_ckd_epi_2021, ckd_stage
from .cardiovascular import (ascvd_risk, heart_failure_survival, heart_failure_risk,
                             diabetes_complication_risk)
from .calculator import RiskCalculator, calculate_all_risks

__all__ = [
    'PatientAttributes', 'RiskBundle', 'RiskName', 'CalculatorConfig',
    'StrokeRisk', 'BleedingRisk', 'ASCVDRisk', 'RenalFunction',
    'HeartFailureSurvival', 'HeartFailureRisk', 'DiabetesComplicationRisk',
    'Sex', 'Race', 'DiabetesStatus',
    'chads_vasc', 'has_bled', 'egfr_ckd_epi_2021', 'ckd_stage',
    'ascvd_risk', 'heart_failure_survival', 'heart_failure_risk',
    'diabetes_complication_risk', 'RiskCalculator', 'calculate_all_risks'
]

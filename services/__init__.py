"""
Net-benefit services: engine, safety screen, recommendation, catalog and review
"""

from .benefit_engine import NetBenefitEngine, create_net_benefit_engine
from .catalog import MedicationCatalog
from .config import EngineConfig, load_engine_config
from .error_codes import CodexError, ErrorCode
from .medication import MedicationRecord, Purpose
from .outcomes import OutcomeKind, BurdenLevel
from .review import MedicationReviewService, MedicationReview
from .schema import Preferences, NetBenefitResult, RecommendationTier

__all__ = [
    'NetBenefitEngine', 'create_net_benefit_engine', 'MedicationCatalog',
    'EngineConfig', 'load_engine_config', 'CodexError', 'ErrorCode',
    'MedicationRecord', 'Purpose', 'OutcomeKind', 'BurdenLevel',
    'MedicationReviewService', 'MedicationReview',
    'Preferences', 'NetBenefitResult', 'RecommendationTier'
]

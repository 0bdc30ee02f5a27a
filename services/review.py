"""
Medication review - ranks current medications and proposes additions or switches
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from risk_engine.schema import PatientAttributes, RiskBundle
from .benefit_engine import NetBenefitEngine, round3
from .catalog import MedicationCatalog
from .schema import NetBenefitResult, Preferences

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class SwitchSuggestion:
    candidate: NetBenefitResult
    current_medication_id: str
    improvement: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate.to_dict(),
            "current_medication_id": self.current_medication_id,
            "improvement": self.improvement
        }

@dataclass
class MedicationReview:
    current: List[NetBenefitResult] = field(default_factory=list)
    new_suggestions: List[NetBenefitResult] = field(default_factory=list)
    switches: List[SwitchSuggestion] = field(default_factory=list)
    unknown_medications: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": [r.to_dict() for r in self.current],
            "new_suggestions": [r.to_dict() for r in self.new_suggestions],
            "switches": [s.to_dict() for s in self.switches],
            "unknown_medications": list(self.unknown_medications)
        }

def _by_net_benefit(results: List[NetBenefitResult]) -> List[NetBenefitResult]:
    return sorted(results, key=lambda r: r.net_benefit, reverse=True)

class MedicationReviewService:
    """Evaluates a patient's current list against the whole catalog"""

    def __init__(self, engine: NetBenefitEngine, catalog: MedicationCatalog):
        self.engine = engine
        self.catalog = catalog

    def review(self, patient: PatientAttributes, bundle: RiskBundle,
               preferences: Optional[Preferences] = None) -> MedicationReview:
        preferences = preferences or Preferences()
        config = self.engine.config
        review = MedicationReview()

        current_ids = list(patient.current_medications)
        current_by_id: Dict[str, NetBenefitResult] = {}
        for med_id in current_ids:
            medication = self.catalog.find(med_id)
            if medication is None:
                logger.warning(f"Current medication '{med_id}' not in catalog, skipping")
                review.unknown_medications.append(med_id)
                continue
            current_by_id[med_id] = self.engine.evaluate(medication, patient, bundle, preferences)
        review.current = _by_net_benefit(list(current_by_id.values()))

        # Best candidate per class among medications not already taken
        best_by_class: Dict[str, NetBenefitResult] = {}
        for medication in self.catalog.all():
            if medication.id in current_ids:
                continue
            result = self.engine.evaluate(medication, patient, bundle, preferences)
            if result.net_benefit <= 0 or not result.has_applicable_indication:
                continue
            best = best_by_class.get(result.medication_class)
            if best is None or result.net_benefit > best.net_benefit:
                best_by_class[result.medication_class] = result

        candidates = _by_net_benefit(list(best_by_class.values()))
        current_classes = {r.medication_class for r in current_by_id.values()}

        new_class = [c for c in candidates if c.medication_class not in current_classes]
        review.new_suggestions = new_class[:config.max_new_suggestions]

        for candidate in candidates:
            current = self._current_in_class(candidate.medication_class, current_ids, current_by_id)
            if current is None:
                continue
            improvement = round3(candidate.net_benefit - current.net_benefit)
            if improvement > config.switch_margin:
                review.switches.append(SwitchSuggestion(
                    candidate=candidate,
                    current_medication_id=current.medication_id,
                    improvement=improvement
                ))

        logger.info(f"Review: {len(review.current)} current, {len(review.new_suggestions)} new, "
                    f"{len(review.switches)} switches")
        return review

    @staticmethod
    def _current_in_class(medication_class: str, current_ids: List[str],
                          current_by_id: Dict[str, NetBenefitResult]) -> Optional[NetBenefitResult]:
        """First current medication (in the patient's order) sharing the class"""
        for med_id in current_ids:
            result = current_by_id.get(med_id)
            if result is not None and result.medication_class == medication_class:
                return result
        return None

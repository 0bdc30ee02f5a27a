"""
Net-Benefit Engine

Net benefit = sum(expected benefits) - sum(expected harms), in
severity-weighted events per 100 patients per year. Burden is reported
alongside but does not enter the net score.

Never raises for missing optional patient data: absent inputs make an
indication non-applicable or fall back to population defaults.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Union

from risk_engine.schema import PatientAttributes, RiskBundle
from .baseline import baseline_risk
from .config import EngineConfig, load_engine_config
from .harms import estimate_harms
from .indications import indication_reason
from .life_expectancy import estimate_life_expectancy, competing_risk_factor
from .medication import MedicationRecord, Efficacy
from .outcomes import BurdenLevel
from .recommendation import RecommendationContext, classify
from .safety import screen
from .schema import (Preferences, Sensitivity, BenefitEntry, ApplicableIndication,
                     NetBenefitResult)

logger = logging.getLogger(__name__)

def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward positive infinity: 12.5 -> 13, -2.5 -> -2"""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale

def round3(value: float) -> float:
    return round_half_up(value, 3)

def expected_benefit(efficacy: Efficacy, baseline: float, adherence: float,
                     weight: float, timeframe: float) -> float:
    """
    Severity-weighted benefit per 100 patients per year, before discounting.

    A trial NNT is annualised by its timeframe. Without one, the NNT is
    implied from the annual baseline risk and the RRR.
    """
    if efficacy.nnt:
        # A negative trial NNT means no benefit, even when an RRR is listed
        if efficacy.nnt < 0:
            return 0.0
        annual_nnt = efficacy.nnt * timeframe
    elif baseline and efficacy.rrr:
        arr = baseline * efficacy.rrr * adherence
        if arr <= 0:
            return 0.0
        annual_nnt = 1 / arr
    else:
        return 0.0

    return (1 / annual_nnt) * weight * 100

class NetBenefitEngine:
    """Evaluates one medication for one patient"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def evaluate(self, medication: MedicationRecord, patient: PatientAttributes,
                 bundle: RiskBundle, preferences: Optional[Preferences] = None) -> NetBenefitResult:
        preferences = preferences or Preferences()
        config = self.config

        hazard_warning, caution = screen(medication, patient)

        life_expectancy = estimate_life_expectancy(patient, bundle, config)
        applicable, benefits = self._benefits(medication, patient, bundle,
                                              preferences, life_expectancy)
        harms = estimate_harms(medication, patient, bundle, config)

        burden_level, burden_penalty = self._burden(medication, preferences)

        total_benefit = round3(sum(b.expected_benefit for b in benefits))
        total_harm = round3(sum(h.expected_harm for h in harms))
        net_benefit = round3(total_benefit - total_harm)
        nnt_equivalent = int(round_half_up(100 / net_benefit)) if net_benefit > 0 else None

        goc = preferences.goals_of_care
        threshold = config.goals_of_care_thresholds[goc]
        goc_name = config.goals_of_care_names.get(goc, str(goc))

        tier, rationale = classify(RecommendationContext(
            net_benefit=net_benefit,
            threshold=threshold,
            goals_of_care=goc,
            goals_of_care_name=goc_name,
            elderly=patient.is_elderly,
            listed_hazard=hazard_warning is not None,
            high_severity_caution=caution is not None and caution.is_high_severity,
            avoid_recommended=caution is not None and caution.avoid_recommended,
            high_burden=burden_level == BurdenLevel.HIGH,
            high_cost=medication.annual_cost > config.high_cost_threshold,
            high_cost_sensitivity=preferences.cost_sensitivity == Sensitivity.HIGH,
            strong_floor=config.strong_recommendation_floor,
            listed_hazard_floor=config.listed_hazard_benefit_floor
        ))

        logger.debug(f"{medication.id}: benefit {total_benefit}, harm {total_harm}, "
                     f"net {net_benefit} -> {tier.value}")

        return NetBenefitResult(
            medication_id=medication.id,
            medication_name=medication.name,
            medication_class=medication.medication_class,
            purpose=medication.purpose.value,
            benefits=tuple(benefits),
            harms=tuple(harms),
            total_benefit=total_benefit,
            total_harm=total_harm,
            net_benefit=net_benefit,
            nnt_equivalent=nnt_equivalent,
            burden_level=burden_level,
            burden_penalty=burden_penalty,
            burden_details=medication.burden_details,
            estimated_life_expectancy=life_expectancy,
            applicable_indications=tuple(applicable),
            goals_of_care=goc,
            goals_of_care_name=goc_name,
            goals_of_care_threshold=threshold,
            recommendation=tier,
            recommendation_text=rationale,
            listed_hazard_warning=hazard_warning,
            elderly_caution=caution,
            config_version=config.config_version
        )

    def evaluate_all(self, medications: List[MedicationRecord], patient: PatientAttributes,
                     bundle: RiskBundle, preferences: Optional[Preferences] = None
                     ) -> List[NetBenefitResult]:
        """Evaluate each medication independently, preserving input order"""
        return [self.evaluate(med, patient, bundle, preferences) for med in medications]

    def _benefits(self, medication: MedicationRecord, patient: PatientAttributes,
                  bundle: RiskBundle, preferences: Preferences, life_expectancy: float):
        config = self.config
        adherence = config.dementia_adherence_factor if patient.dementia else 1.0
        applicable: List[ApplicableIndication] = []
        entries: List[BenefitEntry] = []

        for indication, outcomes in medication.benefits.items():
            reason = indication_reason(indication, patient, bundle)
            if reason is None:
                continue
            applicable.append(ApplicableIndication(indication=indication, reason=reason))

            for outcome, efficacy in outcomes.items():
                # Surrogate endpoints (e.g. A1c change) carry no RRR or NNT
                if not efficacy.is_quantified:
                    continue

                baseline = baseline_risk(outcome, patient, bundle, config.default_age)
                timeframe = efficacy.timeframe or 1
                factor = competing_risk_factor(timeframe, life_expectancy,
                                               preferences.time_horizon,
                                               config.default_horizon_years)
                weight = config.benefit_weight(outcome)
                benefit = expected_benefit(efficacy, baseline, adherence, weight, timeframe) * factor

                if benefit <= config.benefit_floor:
                    continue

                nnt = efficacy.nnt
                if not nnt and baseline and efficacy.rrr:
                    nnt = int(round_half_up(1 / (baseline * efficacy.rrr)))

                entries.append(BenefitEntry(
                    outcome=outcome,
                    indication=indication,
                    baseline_risk=baseline,
                    rrr=efficacy.rrr,
                    nnt=nnt,
                    timeframe=timeframe,
                    severity_weight=weight,
                    competing_risk_factor=factor,
                    expected_benefit=benefit,
                    endpoint_quality=efficacy.quality
                ))

        return applicable, entries

    def _burden(self, medication: MedicationRecord, preferences: Preferences):
        config = self.config
        level = medication.burden or config.default_burden
        if preferences.pill_burden_tolerance == Sensitivity.LOW:
            level = level.escalated()

        penalty = config.burden_penalties[level]
        cost = medication.annual_cost
        if preferences.cost_sensitivity == Sensitivity.HIGH \
                and cost > config.high_sensitivity_cost_threshold:
            penalty += config.high_sensitivity_surcharge
        elif preferences.cost_sensitivity == Sensitivity.MODERATE \
                and cost > config.moderate_sensitivity_cost_threshold:
            penalty += config.moderate_sensitivity_surcharge

        return level, penalty

def create_net_benefit_engine(config_path: Optional[Union[str, Path]] = None) -> NetBenefitEngine:
    """Factory function to create the net-benefit engine"""
    return NetBenefitEngine(load_engine_config(config_path))

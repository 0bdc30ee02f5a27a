"""
Risk calculator orchestration - evaluates only the calculators whose
preconditions hold for a patient and assembles the RiskBundle
"""

import logging
from typing import Dict, Optional

from .schema import PatientAttributes, RiskBundle, RiskName, RiskResult, CalculatorConfig
from .scores import chads_vasc, has_bled
from .renal import egfr_ckd_epi_2021, measured_egfr
from .cardiovascular import (ascvd_risk, heart_failure_survival, heart_failure_risk,
                             diabetes_complication_risk)

logger = logging.getLogger(__name__)

class RiskCalculator:
    """Builds the per-patient RiskBundle consumed by the net-benefit engine"""

    def __init__(self, config: Optional[CalculatorConfig] = None):
        self.config = config or CalculatorConfig()

    def calculate_all(self, patient: PatientAttributes) -> RiskBundle:
        """
        Run every applicable calculator.

        A calculator whose required inputs are missing contributes nothing;
        its key is simply absent from the bundle.
        """
        results: Dict[RiskName, RiskResult] = {}

        # Renal function first - HAS-BLED and the engine both read it
        renal = egfr_ckd_epi_2021(patient) or measured_egfr(patient)
        self._add(results, RiskName.RENAL, renal)

        self._add(results, RiskName.ASCVD, ascvd_risk(patient, self.config))

        if patient.afib:
            self._add(results, RiskName.STROKE, chads_vasc(patient, self.config))
            egfr = renal.egfr if renal is not None else None
            self._add(results, RiskName.BLEEDING, has_bled(patient, egfr, self.config))

        if (patient.ef is not None and patient.ef < 50) or (patient.nyha or 0) > 0:
            self._add(results, RiskName.HF_SURVIVAL, heart_failure_survival(patient))
            self._add(results, RiskName.HF_RISK, heart_failure_risk(patient))

        if patient.has_diabetes:
            self._add(results, RiskName.DIABETES, diabetes_complication_risk(patient))

        logger.debug(f"Risk bundle computed: {', '.join(n.value for n in results) or 'empty'}")
        return RiskBundle(results=results)

    @staticmethod
    def _add(results: Dict[RiskName, RiskResult], name: RiskName,
             result: Optional[RiskResult]) -> None:
        if result is None:
            logger.debug(f"Skipping {name.value}: precondition not met")
            return
        results[name] = result

def calculate_all_risks(patient: PatientAttributes,
                        config: Optional[CalculatorConfig] = None) -> RiskBundle:
    """Convenience wrapper around RiskCalculator"""
    return RiskCalculator(config).calculate_all(patient)

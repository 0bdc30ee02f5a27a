"""
Net-benefit API endpoints - risk bundle, per-medication evaluation and review
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, request, jsonify
from pydantic import ValidationError

from risk_engine.calculator import RiskCalculator
from risk_engine.schema import PatientAttributes
from services.benefit_engine import NetBenefitEngine
from services.catalog import MedicationCatalog
from services.error_codes import (CodexError, ErrorLogger, invalid_request_error,
                                  missing_parameter_error)
from services.medication import Purpose
from services.review import MedicationReviewService
from services.schema import Preferences

logger = logging.getLogger(__name__)
error_logger = ErrorLogger('netbenefit_api')

def _parse_request() -> Tuple[PatientAttributes, Preferences, Dict[str, Any]]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise invalid_request_error("Request body must be a JSON object")
    if "patient" not in data:
        raise missing_parameter_error("patient")
    try:
        patient = PatientAttributes.model_validate(data["patient"])
        preferences = Preferences.model_validate(data.get("preferences") or {})
    except ValidationError as e:
        raise invalid_request_error("Invalid patient or preferences", e)
    return patient, preferences, data

def _error_response(error: CodexError):
    error_logger.log_error(error)
    return jsonify({"error": error.to_dict()}), error.http_status

def create_net_benefit_api(engine: NetBenefitEngine, catalog: MedicationCatalog,
                           calculator: RiskCalculator) -> Blueprint:
    """Blueprint bound to explicitly supplied engine, catalog and calculator"""
    bp = Blueprint('net_benefit', __name__, url_prefix='/api/net-benefit')
    review_service = MedicationReviewService(engine, catalog)

    @bp.errorhandler(CodexError)
    def handle_codex_error(error: CodexError):
        return _error_response(error)

    @bp.route('/medications', methods=['GET'])
    def list_medications():
        """
        List catalog medications

        Optional query filters: indication, purpose, class
        """
        medications = catalog.all()

        indication = request.args.get('indication')
        if indication:
            medications = [m for m in medications if indication in m.indications]

        purpose = request.args.get('purpose')
        if purpose:
            try:
                wanted = Purpose(purpose)
            except ValueError as e:
                raise invalid_request_error(f"Unknown purpose '{purpose}'", e)
            medications = [m for m in medications if m.purpose == wanted]

        med_class = request.args.get('class')
        if med_class:
            by_class = {m.id for m in catalog.by_class(med_class)}
            medications = [m for m in medications if m.id in by_class]

        return jsonify({
            "medications": [m.summary() for m in medications],
            "count": len(medications)
        })

    @bp.route('/risks', methods=['POST'])
    def calculate_risks():
        """
        Calculate the risk bundle for a patient

        Expected input:
        {
            "patient": {"age": 72, "sex": "female", "afib": true, "creatinine": 1.1}
        }
        """
        patient, _, _ = _parse_request()
        bundle = calculator.calculate_all(patient)
        return jsonify({"risks": bundle.to_dict()})

    @bp.route('/evaluate', methods=['POST'])
    def evaluate():
        """
        Evaluate medications for a patient

        Expected input:
        {
            "patient": {...},
            "preferences": {"goals_of_care": 3, "time_horizon": 5},
            "medication_ids": ["carvedilol", "apixaban"]
        }

        Without medication_ids every catalog medication is evaluated.
        """
        patient, preferences, data = _parse_request()

        med_ids = data.get("medication_ids")
        if med_ids is None:
            medications = catalog.all()
        elif isinstance(med_ids, list) and all(isinstance(m, str) for m in med_ids):
            medications = [catalog.get(med_id) for med_id in med_ids]
        else:
            raise invalid_request_error("medication_ids must be a list of strings")

        bundle = calculator.calculate_all(patient)
        results = engine.evaluate_all(medications, patient, bundle, preferences)

        return jsonify({
            "risks": bundle.to_dict(),
            "results": [r.to_dict() for r in results],
            "config_version": engine.config.config_version
        })

    @bp.route('/review', methods=['POST'])
    def review():
        """Rank current medications and suggest additions or switches"""
        patient, preferences, _ = _parse_request()
        bundle = calculator.calculate_all(patient)
        result = review_service.review(patient, bundle, preferences)

        response = result.to_dict()
        response["risks"] = bundle.to_dict()
        return jsonify(response)

    @bp.route('/health', methods=['GET'])
    def health_check():
        return jsonify({
            "status": "healthy",
            "medications": len(catalog),
            "config_version": engine.config.config_version
        })

    return bp

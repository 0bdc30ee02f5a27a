"""
Flask application factory for the net-benefit service
"""

import logging
from pathlib import Path
from typing import Optional, Union

from flask import Flask, jsonify

from risk_engine.calculator import RiskCalculator
from services.benefit_engine import create_net_benefit_engine
from services.catalog import MedicationCatalog
from services.error_codes import CodexError, ErrorCode, ErrorLogger
from .net_benefit_api import create_net_benefit_api

logger = logging.getLogger(__name__)

def create_app(config_path: Optional[Union[str, Path]] = None,
               catalog_path: Optional[Union[str, Path]] = None) -> Flask:
    """Wire engine, calculator and catalog and register the API blueprint"""
    logging.basicConfig(level=logging.INFO)
    error_logger = ErrorLogger('netbenefit_app')

    engine = create_net_benefit_engine(config_path)
    catalog = MedicationCatalog.from_file(catalog_path)
    calculator = RiskCalculator()

    app = Flask(__name__)
    app.register_blueprint(create_net_benefit_api(engine, catalog, calculator))
    logger.info(f"Net-benefit API registered ({len(catalog)} medications, "
                f"config {engine.config.config_version})")

    @app.errorhandler(500)
    def internal_error(error):
        codex_error = CodexError(ErrorCode.APP_INTERNAL_ERROR, "Internal server error",
                                 original_exception=getattr(error, "original_exception", None))
        error_logger.log_error(codex_error)
        return jsonify({"error": codex_error.to_dict()}), 500

    return app

if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000)

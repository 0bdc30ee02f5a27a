"""
Error codes for the net-benefit service
Only caller-level conditions are reportable; core arithmetic never raises for missing data.
"""

from enum import Enum
from typing import Dict, Any, List, Optional
import logging
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError

class ErrorCode(Enum):
    """Net-benefit error codes, grouped by component prefix"""

    # Medication catalog (MED_xxx)
    MED_UNKNOWN_MEDICATION = "MED_001"
    MED_INVALID_RECORD = "MED_002"
    MED_CATALOG_NOT_FOUND = "MED_003"

    # Request handling (APP_xxx)
    APP_INVALID_REQUEST = "APP_001"
    APP_MISSING_PARAMETER = "APP_002"
    APP_INTERNAL_ERROR = "APP_005"

    # Engine configuration (CFG_xxx)
    CFG_INVALID_CONFIG = "CFG_002"
    CFG_INCOMPLETE_SEVERITY_TABLE = "CFG_004"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self, 500)

_HTTP_STATUS = {
    ErrorCode.MED_UNKNOWN_MEDICATION: 404,
    ErrorCode.APP_INVALID_REQUEST: 400,
    ErrorCode.APP_MISSING_PARAMETER: 400,
}

class CodexError(Exception):
    """Reportable failure carrying an ErrorCode, details and a short trace id"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.trace_id = uuid.uuid4().hex[:8]

        super().__init__(f"[{error_code.value}] {message}")

    @property
    def http_status(self) -> int:
        return self.error_code.http_status

    def to_dict(self) -> Dict[str, Any]:
        """Error body for API responses and structured logs"""
        body = {
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "message": self.message,
            "details": self.details,
            "trace_id": self.trace_id,
            "timestamp": self.timestamp,
        }
        body["original_error"] = str(self.original_exception) if self.original_exception else None
        return body

class ErrorLogger:
    """Logs CodexErrors with their code and trace id as structured extras"""

    def __init__(self, logger_name: str = "netbenefit"):
        self.logger = logging.getLogger(logger_name)

    def log_error(self, error: CodexError, level: Optional[int] = None):
        # Caller mistakes are warnings; anything else is an error
        if level is None:
            level = logging.WARNING if error.http_status < 500 else logging.ERROR

        self.logger.log(
            level,
            f"NETBENEFIT_ERROR: {error.error_code.value} [{error.trace_id}] {error.message}",
            extra={"error_code": error.error_code.value, "trace_id": error.trace_id,
                   "details": error.details}
        )
        if error.original_exception is not None:
            self.logger.debug(f"Cause of {error.trace_id}", exc_info=error.original_exception)

def validation_details(error: ValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors to field/message pairs"""
    return [
        {"field": ".".join(str(part) for part in e["loc"]), "message": e["msg"]}
        for e in error.errors()
    ]

def unknown_medication_error(medication_id: str) -> CodexError:
    return CodexError(
        error_code=ErrorCode.MED_UNKNOWN_MEDICATION,
        message=f"Medication '{medication_id}' not found in catalog",
        details={
            "medication_id": medication_id,
            "suggested_action": "Check the identifier against GET /api/net-benefit/medications"
        }
    )

def invalid_record_error(medication_id: str, error: ValidationError) -> CodexError:
    return CodexError(
        error_code=ErrorCode.MED_INVALID_RECORD,
        message=f"Medication record '{medication_id}' failed validation",
        details={"medication_id": medication_id, "errors": validation_details(error)},
        original_exception=error
    )

def catalog_not_found_error(path: str) -> CodexError:
    return CodexError(
        error_code=ErrorCode.MED_CATALOG_NOT_FOUND,
        message=f"Medication catalog {path} not found",
        details={"path": path}
    )

def invalid_request_error(message: str, error: Optional[Exception] = None) -> CodexError:
    """Payload that is not a JSON object or fails model validation"""
    details: Dict[str, Any] = {}
    if isinstance(error, ValidationError):
        details["errors"] = validation_details(error)
    return CodexError(ErrorCode.APP_INVALID_REQUEST, message, details=details,
                      original_exception=error)

def missing_parameter_error(field: str) -> CodexError:
    return CodexError(
        error_code=ErrorCode.APP_MISSING_PARAMETER,
        message=f"Missing required field: {field}",
        details={"field": field}
    )

def invalid_config_error(path: str, original_error: Exception) -> CodexError:
    return CodexError(
        error_code=ErrorCode.CFG_INVALID_CONFIG,
        message=f"Invalid engine configuration in {path}",
        details={"path": path, "error_type": type(original_error).__name__},
        original_exception=original_error
    )

def incomplete_severity_table_error(path: str, missing: List[str]) -> CodexError:
    """Severity table that omits one or more outcome kinds"""
    return CodexError(
        error_code=ErrorCode.CFG_INCOMPLETE_SEVERITY_TABLE,
        message=f"Severity table in {path} is missing {len(missing)} outcome kinds",
        details={"path": path, "missing": missing}
    )

ERROR_CODE_DESCRIPTIONS = {
    ErrorCode.MED_UNKNOWN_MEDICATION: "Medication identifier not present in catalog",
    ErrorCode.MED_INVALID_RECORD: "Medication record failed validation",
    ErrorCode.MED_CATALOG_NOT_FOUND: "Medication catalog file missing",
    ErrorCode.CFG_INVALID_CONFIG: "Engine configuration failed validation",
    ErrorCode.CFG_INCOMPLETE_SEVERITY_TABLE: "Severity table does not cover every outcome kind",
    ErrorCode.APP_INVALID_REQUEST: "Request payload failed validation",
    ErrorCode.APP_MISSING_PARAMETER: "Required request field absent"
}

def get_error_description(error_code: ErrorCode) -> str:
    return ERROR_CODE_DESCRIPTIONS.get(error_code, "Unknown error")

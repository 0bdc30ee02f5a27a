"""
Medication catalog - static reference data loaded once at startup
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import yaml
from pydantic import ValidationError

from .error_codes import unknown_medication_error, invalid_record_error, catalog_not_found_error
from .medication import MedicationRecord, Purpose

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "config" / "medications.yaml"

class MedicationCatalog:
    """Read-only lookup of MedicationRecords by identifier"""

    def __init__(self, records: Iterable[MedicationRecord]):
        self._records: Dict[str, MedicationRecord] = {}
        for record in records:
            self._records[record.id] = record

    @classmethod
    def from_dict(cls, data: Dict[str, dict]) -> "MedicationCatalog":
        """Build from an id -> record mapping; a record's id defaults to its key"""
        records = []
        for med_id, raw in (data or {}).items():
            try:
                records.append(MedicationRecord.model_validate({"id": med_id, **raw}))
            except ValidationError as e:
                raise invalid_record_error(med_id, e)
        return cls(records)

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "MedicationCatalog":
        """Load from YAML (.yaml/.yml) or JSON, with records under 'medications'"""
        catalog_file = Path(path) if path else DEFAULT_CATALOG_PATH
        if not catalog_file.exists():
            raise catalog_not_found_error(str(catalog_file))

        with open(catalog_file, 'r') as f:
            if catalog_file.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        catalog = cls.from_dict((data or {}).get("medications", {}))
        logger.info(f"Loaded {len(catalog)} medications from {catalog_file}")
        return catalog

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, med_id: str) -> bool:
        return med_id in self._records

    def get(self, med_id: str) -> MedicationRecord:
        record = self._records.get(med_id)
        if record is None:
            raise unknown_medication_error(med_id)
        return record

    def find(self, med_id: str) -> Optional[MedicationRecord]:
        return self._records.get(med_id)

    def all(self) -> List[MedicationRecord]:
        return list(self._records.values())

    def by_indication(self, indication: str) -> List[MedicationRecord]:
        return [m for m in self._records.values() if indication in m.indications]

    def by_class(self, medication_class: str) -> List[MedicationRecord]:
        """Case-insensitive substring match on the class name"""
        needle = medication_class.lower()
        return [m for m in self._records.values() if needle in m.medication_class.lower()]

    def by_purpose(self, purpose: Union[str, Purpose]) -> List[MedicationRecord]:
        purpose = Purpose(purpose)
        return [m for m in self._records.values() if m.purpose == purpose]

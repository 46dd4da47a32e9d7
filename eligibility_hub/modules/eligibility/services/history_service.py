"""
History Service

Read path joining a patient with its eligibility checks.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eligibility_hub.modules.eligibility.domain import Patient, EligibilityCheck
from eligibility_hub.modules.eligibility.exceptions import NotFoundError
from eligibility_hub.modules.eligibility.repositories import RecordStore

logger = logging.getLogger("eligibility_hub.eligibility.history")

DEFAULT_HISTORY_LIMIT = 10


def normalize_limit(limit: Any, default: int = DEFAULT_HISTORY_LIMIT) -> int:
    """Positive integer limit; anything else falls back to the default."""
    if limit is None or isinstance(limit, bool):
        return default
    try:
        value = int(str(limit).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass
class PatientHistory:
    patient: Patient
    records: List[EligibilityCheck] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "patient": self.patient.to_dict(),
            "history": [record.to_history_dict() for record in self.records],
            "totalRecords": len(self.records),
        }


class HistoryReader:
    """Service for eligibility history lookups."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def get_history(self, patient_id: str, limit: Any = DEFAULT_HISTORY_LIMIT) -> PatientHistory:
        """
        Get a patient's eligibility checks, most recent first.

        Raises:
            NotFoundError: no patient with this id was ever recorded
        """
        limit = normalize_limit(limit)
        logger.debug(f"[HistoryReader.get_history] patient_id={patient_id}, limit={limit}")

        patient = await self._require_patient(patient_id)
        records = await self.store.list_eligibility_checks(patient_id, limit)
        return PatientHistory(patient=patient, records=records)

    async def get_latest(self, patient_id: str) -> Optional[EligibilityCheck]:
        """Get the most recent check for a patient, None when it has none."""
        logger.debug(f"[HistoryReader.get_latest] patient_id={patient_id}")
        await self._require_patient(patient_id)
        return await self.store.get_latest_eligibility_check(patient_id)

    async def _require_patient(self, patient_id: str) -> Patient:
        patient = await self.store.get_patient(patient_id)
        if patient is None:
            raise NotFoundError(patient_id)
        return patient

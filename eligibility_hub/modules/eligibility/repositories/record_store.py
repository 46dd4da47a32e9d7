"""
Record Store Contract

Durable storage for patients and their eligibility checks. Implementations
raise StoreError on any persistence failure.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from eligibility_hub.modules.eligibility.domain import Patient, EligibilityCheck


class RecordStore(ABC):

    @abstractmethod
    async def upsert_patient(self, patient: Patient) -> Patient:
        """
        Create the patient or overwrite its name and date of birth.
        Must be a single atomic statement so concurrent upserts resolve to
        the last write.
        """

    @abstractmethod
    async def get_patient(self, patient_id: str) -> Optional[Patient]:
        """Return the patient, or None if it was never recorded."""

    @abstractmethod
    async def insert_eligibility_check(self, check: EligibilityCheck) -> EligibilityCheck:
        """Append a check and return it with its store id populated."""

    @abstractmethod
    async def list_eligibility_checks(self, patient_id: str, limit: int) -> List[EligibilityCheck]:
        """Return up to `limit` checks for the patient, newest check_datetime first."""

    async def get_latest_eligibility_check(self, patient_id: str) -> Optional[EligibilityCheck]:
        """Return the most recent check for the patient, if any."""
        checks = await self.list_eligibility_checks(patient_id, 1)
        return checks[0] if checks else None

"""
Eligibility Repository

Handles all database operations for the patients and eligibility_checks tables.
"""
import logging
import json
from typing import Optional, List
from databases import Database
from eligibility_hub.modules.database import database as default_database
from eligibility_hub.modules.eligibility.domain import Patient, EligibilityCheck
from eligibility_hub.modules.eligibility.exceptions import StoreError
from .record_store import RecordStore

logger = logging.getLogger("eligibility_hub.eligibility.repository")

CHECK_COLUMNS = """
    id, eligibility_id, patient_id, member_number, insurance_company,
    service_date, check_datetime, status, deductible, deductible_met,
    copay, out_of_pocket_max, out_of_pocket_met, messages, error_message,
    created_at
"""


class EligibilityRepository(RecordStore):
    """Repository for patient and eligibility check data access."""

    def __init__(self, database: Optional[Database] = None):
        self.database = database or default_database

    async def upsert_patient(self, patient: Patient) -> Patient:
        """Create or update a patient in one statement."""
        query = """
            INSERT INTO patients (patient_id, patient_name, date_of_birth)
            VALUES (:patient_id, :patient_name, :date_of_birth)
            ON CONFLICT (patient_id) DO UPDATE
              SET patient_name = EXCLUDED.patient_name,
                  date_of_birth = EXCLUDED.date_of_birth,
                  updated_at = CURRENT_TIMESTAMP
            RETURNING patient_id, patient_name, date_of_birth, created_at, updated_at
        """
        try:
            row = await self.database.fetch_one(query, {
                "patient_id": patient.patient_id,
                "patient_name": patient.patient_name,
                "date_of_birth": patient.date_of_birth,
            })
        except Exception as e:
            logger.error(f"Error upserting patient {patient.patient_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to store patient: {e}") from e
        return Patient.from_dict(dict(row._mapping))

    async def get_patient(self, patient_id: str) -> Optional[Patient]:
        """Get patient by ID."""
        query = """
            SELECT patient_id, patient_name, date_of_birth, created_at, updated_at
            FROM patients
            WHERE patient_id = :patient_id
        """
        try:
            row = await self.database.fetch_one(query, {"patient_id": patient_id})
        except Exception as e:
            logger.error(f"Error getting patient {patient_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to load patient: {e}") from e
        if not row:
            return None
        return Patient.from_dict(dict(row._mapping))

    async def insert_eligibility_check(self, check: EligibilityCheck) -> EligibilityCheck:
        """Store an eligibility check result and return the stored row."""
        coverage = check.coverage
        query = f"""
            INSERT INTO eligibility_checks (
                eligibility_id, patient_id, member_number, insurance_company,
                service_date, check_datetime, status, deductible, deductible_met,
                copay, out_of_pocket_max, out_of_pocket_met, messages, error_message
            ) VALUES (
                :eligibility_id, :patient_id, :member_number, :insurance_company,
                :service_date, :check_datetime, :status, :deductible, :deductible_met,
                :copay, :out_of_pocket_max, :out_of_pocket_met, :messages, :error_message
            )
            RETURNING {CHECK_COLUMNS}
        """
        values = {
            "eligibility_id": check.eligibility_id,
            "patient_id": check.patient_id,
            "member_number": check.member_number,
            "insurance_company": check.insurance_company,
            "service_date": check.service_date,
            "check_datetime": check.check_datetime,
            "status": check.status.value,
            "deductible": coverage.deductible if coverage else None,
            "deductible_met": coverage.deductible_met if coverage else None,
            "copay": coverage.copay if coverage else None,
            "out_of_pocket_max": coverage.out_of_pocket_max if coverage else None,
            "out_of_pocket_met": coverage.out_of_pocket_met if coverage else None,
            "messages": json.dumps(list(check.messages)),
            "error_message": check.error_message,
        }
        try:
            row = await self.database.fetch_one(query, values)
        except Exception as e:
            logger.error(f"Error storing eligibility check {check.eligibility_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to store eligibility check: {e}") from e
        return EligibilityCheck.from_dict(dict(row._mapping))

    async def list_eligibility_checks(self, patient_id: str, limit: int) -> List[EligibilityCheck]:
        """Get eligibility history for a patient, most recent first."""
        query = f"""
            SELECT {CHECK_COLUMNS}
            FROM eligibility_checks
            WHERE patient_id = :patient_id
            ORDER BY check_datetime DESC, id DESC
            LIMIT :limit
        """
        try:
            rows = await self.database.fetch_all(query, {"patient_id": patient_id, "limit": limit})
        except Exception as e:
            logger.error(f"Error getting eligibility history for {patient_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to load eligibility history: {e}") from e
        return [EligibilityCheck.from_dict(dict(row._mapping)) for row in rows]

    async def get_latest_eligibility_check(self, patient_id: str) -> Optional[EligibilityCheck]:
        """Get most recent eligibility check for a patient."""
        query = f"""
            SELECT {CHECK_COLUMNS}
            FROM eligibility_checks
            WHERE patient_id = :patient_id
            ORDER BY check_datetime DESC, id DESC
            LIMIT 1
        """
        try:
            row = await self.database.fetch_one(query, {"patient_id": patient_id})
        except Exception as e:
            logger.error(f"Error getting latest eligibility check for {patient_id}: {e}", exc_info=True)
            raise StoreError(f"Failed to load latest eligibility check: {e}") from e
        if not row:
            return None
        return EligibilityCheck.from_dict(dict(row._mapping))

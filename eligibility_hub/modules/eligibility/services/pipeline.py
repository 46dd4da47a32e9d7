"""
Eligibility Check Pipeline

Turns a submitted patient/insurance payload into a stored eligibility record.

Stages, in order:
    RECEIVED -> VALIDATED -> PATIENT_RECORDED -> ORACLE_EVALUATED -> PERSISTED

Any failure after validation moves the run to PERSIST_FAILED (the caller gets a
server error) after a best-effort attempt to store an Unknown check carrying
the failure message. Validation failures end in REJECTED without touching the
store.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from eligibility_hub.modules.eligibility.domain import (
    Patient,
    EligibilityCheck,
    EligibilityCheckRequest,
    EligibilityOutcome,
    REQUIRED_CHECK_FIELDS,
)
from eligibility_hub.modules.eligibility.exceptions import EligibilityHubError, StoreError
from eligibility_hub.modules.eligibility.repositories import RecordStore
from eligibility_hub.tools.eligibility import InsuranceEligibilityOracle

logger = logging.getLogger("eligibility_hub.eligibility.pipeline")

CHECK_FAILED_ERROR = "Eligibility check failed"
MISSING_FIELDS_ERROR = "Missing required fields"


class PipelineStage(str, Enum):
    RECEIVED = "RECEIVED"
    REJECTED = "REJECTED"
    VALIDATED = "VALIDATED"
    PATIENT_RECORDED = "PATIENT_RECORDED"
    ORACLE_EVALUATED = "ORACLE_EVALUATED"
    PERSISTED = "PERSISTED"
    PERSIST_FAILED = "PERSIST_FAILED"


@dataclass
class StepResult:
    """Outcome of one fallible pipeline step."""
    ok: bool
    value: Any = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Any = None) -> "StepResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "StepResult":
        return cls(ok=False, error=error)


@dataclass
class EligibilityResponse:
    """Final state of a pipeline run plus the response to send back."""
    stage: PipelineStage
    status_code: int
    body: Dict[str, Any]
    stored_check: Optional[EligibilityCheck] = None
    failure_record_stored: Optional[bool] = None
    stages: List[PipelineStage] = field(default_factory=list)


class EligibilityPipeline:
    """Service for running eligibility checks end to end."""

    def __init__(self, store: RecordStore, oracle: Optional[InsuranceEligibilityOracle] = None):
        self.store = store
        self.oracle = oracle or InsuranceEligibilityOracle()

    async def handle_check_request(
        self,
        payload: Union[EligibilityCheckRequest, Dict[str, Any]]
    ) -> EligibilityResponse:
        """Validate, record the patient, evaluate, persist and build the response."""
        if isinstance(payload, dict):
            payload = EligibilityCheckRequest.model_validate(payload)

        stages = [PipelineStage.RECEIVED]
        logger.debug(
            f"[EligibilityPipeline.handle_check_request] ENTRY | patient_id={payload.patient_id}, "
            f"member_number={payload.member_number}"
        )

        missing = payload.missing_fields()
        if missing:
            logger.info(f"[EligibilityPipeline.handle_check_request] rejected | missing={missing}")
            stages.append(PipelineStage.REJECTED)
            return EligibilityResponse(
                stage=PipelineStage.REJECTED,
                status_code=400,
                body={
                    "success": False,
                    "error": MISSING_FIELDS_ERROR,
                    "required": list(REQUIRED_CHECK_FIELDS),
                    "missing": missing,
                },
                stages=stages,
            )
        stages.append(PipelineStage.VALIDATED)

        step = await self._record_patient(payload)
        if not step.ok:
            return await self._fail(payload, step.error, stages)
        stages.append(PipelineStage.PATIENT_RECORDED)

        step = self._evaluate(payload)
        if not step.ok:
            return await self._fail(payload, step.error, stages)
        outcome: EligibilityOutcome = step.value
        stages.append(PipelineStage.ORACLE_EVALUATED)

        step = await self._persist(EligibilityCheck.from_outcome(outcome, payload.service_date))
        if not step.ok:
            return await self._fail(payload, step.error, stages)
        stored: EligibilityCheck = step.value
        stages.append(PipelineStage.PERSISTED)

        logger.info(
            f"[EligibilityPipeline.handle_check_request] stored | eligibility_id={stored.eligibility_id}, "
            f"status={stored.status.value}, stored_id={stored.id}"
        )
        return EligibilityResponse(
            stage=PipelineStage.PERSISTED,
            status_code=200,
            body={
                "success": True,
                "data": outcome.to_dict(),
                "stored": True,
                "storedId": stored.id,
            },
            stored_check=stored,
            stages=stages,
        )

    async def _record_patient(self, payload: EligibilityCheckRequest) -> StepResult:
        patient = Patient(
            patient_id=payload.patient_id,
            patient_name=payload.patient_name,
            date_of_birth=payload.date_of_birth,
        )
        try:
            return StepResult.success(await self.store.upsert_patient(patient))
        except StoreError as e:
            return StepResult.failure(e)

    def _evaluate(self, payload: EligibilityCheckRequest) -> StepResult:
        try:
            return StepResult.success(self.oracle.determine(payload))
        except EligibilityHubError as e:
            logger.warning(f"[EligibilityPipeline._evaluate] oracle failed | patient_id={payload.patient_id}, error={e}")
            return StepResult.failure(e)
        except Exception as e:
            logger.error(
                f"[EligibilityPipeline._evaluate] unexpected oracle error | patient_id={payload.patient_id}, error={e}",
                exc_info=True
            )
            return StepResult.failure(e)

    async def _persist(self, check: EligibilityCheck) -> StepResult:
        try:
            return StepResult.success(await self.store.insert_eligibility_check(check))
        except StoreError as e:
            return StepResult.failure(e)

    async def _fail(
        self,
        payload: EligibilityCheckRequest,
        error: Exception,
        stages: List[PipelineStage]
    ) -> EligibilityResponse:
        """Record the failure best-effort and answer with a server error."""
        logger.error(f"[EligibilityPipeline.handle_check_request] ERROR: {error}")
        failed_check = EligibilityCheck.failed(
            patient_id=payload.patient_id,
            member_number=payload.member_number,
            insurance_company=payload.insurance_company,
            service_date=payload.service_date,
            error_message=str(error),
        )
        step = await self._persist(failed_check)
        if step.ok:
            stored = step.value
        else:
            # The original error still reaches the caller
            logger.error(
                f"[EligibilityPipeline._fail] Failed to store error record {failed_check.eligibility_id}: {step.error}"
            )
            stored = None

        stages.append(PipelineStage.PERSIST_FAILED)
        return EligibilityResponse(
            stage=PipelineStage.PERSIST_FAILED,
            status_code=500,
            body={
                "success": False,
                "error": CHECK_FAILED_ERROR,
                "message": str(error),
            },
            stored_check=stored,
            failure_record_stored=step.ok,
            stages=stages,
        )

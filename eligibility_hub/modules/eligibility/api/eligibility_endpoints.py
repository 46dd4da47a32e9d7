"""
Eligibility API Endpoints

REST API endpoints for eligibility checks and history.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from eligibility_hub.modules.eligibility.domain import EligibilityCheckRequest
from eligibility_hub.modules.eligibility.exceptions import NotFoundError, StoreError
from eligibility_hub.modules.eligibility.repositories import RecordStore, EligibilityRepository
from eligibility_hub.modules.eligibility.services import EligibilityPipeline, HistoryReader

logger = logging.getLogger("eligibility_hub.eligibility.api")

router = APIRouter(prefix="/eligibility", tags=["eligibility"])


def get_record_store() -> RecordStore:
    return EligibilityRepository()


def get_eligibility_pipeline(store: RecordStore = Depends(get_record_store)) -> EligibilityPipeline:
    return EligibilityPipeline(store)


def get_history_reader(store: RecordStore = Depends(get_record_store)) -> HistoryReader:
    return HistoryReader(store)


def _patient_not_found(patient_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"success": False, "error": "Patient not found", "patientId": patient_id},
    )


@router.post("/check")
async def check_eligibility(
    payload: Optional[EligibilityCheckRequest] = Body(None),
    pipeline: EligibilityPipeline = Depends(get_eligibility_pipeline)
):
    """
    Perform a new eligibility check.

    The patient is recorded first, then the check result (or the failure) is
    stored against it.
    """
    # An absent body is validated like an empty one
    if payload is None:
        payload = EligibilityCheckRequest()
    logger.info(f"[eligibility_endpoints.check_eligibility] patient_id={payload.patient_id}")
    result = await pipeline.handle_check_request(payload)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get("/history/{patient_id}")
async def get_eligibility_history(
    patient_id: str,
    limit: Optional[str] = Query(None, description="Maximum number of records, default 10"),
    reader: HistoryReader = Depends(get_history_reader)
):
    """Retrieve eligibility history for a patient, most recent first."""
    logger.info(f"[eligibility_endpoints.get_eligibility_history] patient_id={patient_id}, limit={limit}")

    try:
        history = await reader.get_history(patient_id, limit)
    except NotFoundError:
        return _patient_not_found(patient_id)
    except StoreError as e:
        logger.error(f"[eligibility_endpoints.get_eligibility_history] ERROR: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to fetch eligibility history", "message": str(e)},
        )
    return history.to_dict()


@router.get("/latest/{patient_id}")
async def get_latest_eligibility(
    patient_id: str,
    reader: HistoryReader = Depends(get_history_reader)
):
    """Retrieve the most recent eligibility check for a patient."""
    logger.info(f"[eligibility_endpoints.get_latest_eligibility] patient_id={patient_id}")

    try:
        latest = await reader.get_latest(patient_id)
    except NotFoundError:
        return _patient_not_found(patient_id)
    except StoreError as e:
        logger.error(f"[eligibility_endpoints.get_latest_eligibility] ERROR: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to fetch latest eligibility check", "message": str(e)},
        )
    return {
        "success": True,
        "patientId": patient_id,
        "record": latest.to_history_dict() if latest else None,
    }

"""
Insurance Eligibility Oracle

Deterministic stand-in for a live insurance eligibility query.

The outcome depends only on the member number:
- any member number containing "ERROR" simulates an unavailable payer
- last character 0-6: active, full coverage
- last character 7-8: active, high deductible plan
- anything else: inactive policy
"""
import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Union, Dict, Any

from eligibility_hub.core.base_tool import HubTool, ToolSchema
from eligibility_hub.modules.eligibility.domain import (
    EligibilityCheckRequest,
    EligibilityOutcome,
    ActiveFullCoverage,
    ActiveLimitedCoverage,
    InactiveCoverage,
)
from eligibility_hub.modules.eligibility.domain.check import utcnow
from eligibility_hub.modules.eligibility.exceptions import ValidationError, ServiceUnavailableError

logger = logging.getLogger("eligibility_hub.tools.eligibility.insurance_oracle")

ORACLE_REQUIRED_FIELDS = ["patientId", "memberNumber", "insuranceCompany"]
UNAVAILABLE_SENTINEL = "ERROR999"
UNAVAILABLE_MARKER = "ERROR"


def new_eligibility_id() -> str:
    return f"ELG-{uuid.uuid4().hex.upper()}"


class InsuranceEligibilityOracle(HubTool):
    """Tool that determines coverage for a member"""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._clock = clock or utcnow
        self._id_factory = id_factory or new_eligibility_id
        super().__init__()

    def define_schema(self) -> ToolSchema:
        return ToolSchema(
            name="insurance_eligibility_oracle",
            description="Determine insurance coverage status for a member",
            parameters={
                "patient_id": "str",
                "member_number": "str",
                "insurance_company": "str"
            },
            required=["patient_id", "member_number", "insurance_company"]
        )

    def run(
        self,
        patient_id: Optional[str] = None,
        member_number: Optional[str] = None,
        insurance_company: Optional[str] = None
    ) -> Dict[str, Any]:
        """Keyword entry point; returns the outcome in its public shape"""
        request = EligibilityCheckRequest(
            patient_id=patient_id,
            member_number=member_number,
            insurance_company=insurance_company,
        )
        return self.determine(request).to_dict()

    def determine(self, request: Union[EligibilityCheckRequest, Dict[str, Any]]) -> EligibilityOutcome:
        """
        Determine eligibility for a request.

        Raises:
            ValidationError: patient id, member number or insurance company missing
            ServiceUnavailableError: the member number triggers a simulated outage
        """
        if isinstance(request, dict):
            request = EligibilityCheckRequest.model_validate(request)

        logger.debug(
            f"[InsuranceEligibilityOracle.determine] ENTRY | patient_id={request.patient_id}, "
            f"member_number={request.member_number}"
        )

        if request.missing_fields(ORACLE_REQUIRED_FIELDS):
            raise ValidationError("Missing required fields: patientId, memberNumber, or insuranceCompany")

        member_number = request.member_number
        if member_number == UNAVAILABLE_SENTINEL or UNAVAILABLE_MARKER in member_number:
            raise ServiceUnavailableError("Insurance API temporarily unavailable")

        outcome_cls = self._select_outcome(member_number[-1])
        outcome = outcome_cls(
            eligibility_id=self._id_factory(),
            patient_id=request.patient_id,
            check_datetime=self._clock(),
            insurance_company=request.insurance_company,
            member_number=member_number,
        )

        logger.debug(
            f"[InsuranceEligibilityOracle.determine] EXIT | eligibility_id={outcome.eligibility_id}, "
            f"status={outcome.status.value}, variant={outcome_cls.__name__}"
        )
        return outcome

    @staticmethod
    def _select_outcome(last_char: str):
        if "0" <= last_char <= "6":
            return ActiveFullCoverage
        if last_char in ("7", "8"):
            return ActiveLimitedCoverage
        return InactiveCoverage

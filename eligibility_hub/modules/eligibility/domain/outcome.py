"""
Eligibility Outcomes

Tagged variants returned by the eligibility oracle. Status, coverage and
messages are fixed per variant, so an Active outcome always carries coverage
and an Inactive one never does.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple

from .check import Coverage, EligibilityStatus


FULL_COVERAGE = Coverage(
    deductible=1500.00,
    deductible_met=300.00,
    copay=25.00,
    out_of_pocket_max=5000.00,
    out_of_pocket_met=450.00,
)

LIMITED_COVERAGE = Coverage(
    deductible=3000.00,
    deductible_met=0.00,
    copay=50.00,
    out_of_pocket_max=8000.00,
    out_of_pocket_met=0.00,
)


@dataclass(frozen=True)
class EligibilityOutcome:
    eligibility_id: str
    patient_id: str
    check_datetime: datetime
    insurance_company: str
    member_number: str

    status: ClassVar[EligibilityStatus]
    coverage: ClassVar[Optional[Coverage]] = None
    messages: ClassVar[Tuple[str, ...]] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eligibilityId": self.eligibility_id,
            "patientId": self.patient_id,
            "checkDateTime": self.check_datetime.isoformat(),
            "insuranceCompany": self.insurance_company,
            "memberNumber": self.member_number,
            "status": self.status.value,
            "coverage": self.coverage.to_dict() if self.coverage else None,
            "messages": list(self.messages),
        }


@dataclass(frozen=True)
class ActiveFullCoverage(EligibilityOutcome):
    status: ClassVar[EligibilityStatus] = EligibilityStatus.ACTIVE
    coverage: ClassVar[Optional[Coverage]] = FULL_COVERAGE
    messages: ClassVar[Tuple[str, ...]] = ()


@dataclass(frozen=True)
class ActiveLimitedCoverage(EligibilityOutcome):
    status: ClassVar[EligibilityStatus] = EligibilityStatus.ACTIVE
    coverage: ClassVar[Optional[Coverage]] = LIMITED_COVERAGE
    messages: ClassVar[Tuple[str, ...]] = (
        "High deductible plan",
        "Specialist visits require prior authorization",
    )


@dataclass(frozen=True)
class InactiveCoverage(EligibilityOutcome):
    status: ClassVar[EligibilityStatus] = EligibilityStatus.INACTIVE
    coverage: ClassVar[Optional[Coverage]] = None
    messages: ClassVar[Tuple[str, ...]] = (
        "Policy is inactive",
        "Please contact insurance company",
    )

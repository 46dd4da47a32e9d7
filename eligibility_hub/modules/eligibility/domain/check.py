"""
Eligibility Check Domain Model

An eligibility check is one evaluation of a patient's coverage at a point in
time. Checks are created once per attempt (successful or failed) and never
modified afterwards.
"""
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class EligibilityStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Coverage:
    """Coverage figures; always stored and returned as a complete block."""
    deductible: float
    deductible_met: float
    copay: float
    out_of_pocket_max: float
    out_of_pocket_met: float

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Coverage":
        return cls(
            deductible=_as_amount(row.get("deductible")),
            deductible_met=_as_amount(row.get("deductible_met")),
            copay=_as_amount(row.get("copay")),
            out_of_pocket_max=_as_amount(row.get("out_of_pocket_max")),
            out_of_pocket_met=_as_amount(row.get("out_of_pocket_met")),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "deductible": self.deductible,
            "deductibleMet": self.deductible_met,
            "copay": self.copay,
            "outOfPocketMax": self.out_of_pocket_max,
            "outOfPocketMet": self.out_of_pocket_met,
        }


def new_error_id() -> str:
    """Identifier for failed checks, kept visually distinct from ELG- ids."""
    return f"ERR-{uuid.uuid4().hex.upper()}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EligibilityCheck:
    """
    Eligibility check record.

    `id` and `created_at` are assigned by the record store; a check carrying
    an `id` is a stored check.
    """
    eligibility_id: str
    patient_id: str
    member_number: str
    insurance_company: str
    service_date: str
    check_datetime: datetime
    status: EligibilityStatus
    coverage: Optional[Coverage] = None
    messages: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[Union[datetime, str]] = None

    def __post_init__(self):
        self.status = EligibilityStatus(self.status)
        if (self.coverage is not None) != (self.status == EligibilityStatus.ACTIVE):
            raise ValueError(
                f"coverage must be present exactly when status is Active (status={self.status.value})"
            )
        if self.error_message is not None and self.status != EligibilityStatus.UNKNOWN:
            raise ValueError("error_message is only allowed on Unknown checks")

    @classmethod
    def from_outcome(cls, outcome, service_date: str) -> "EligibilityCheck":
        """Build the record for a successful oracle outcome."""
        return cls(
            eligibility_id=outcome.eligibility_id,
            patient_id=outcome.patient_id,
            member_number=outcome.member_number,
            insurance_company=outcome.insurance_company,
            service_date=service_date,
            check_datetime=outcome.check_datetime,
            status=outcome.status,
            coverage=outcome.coverage,
            messages=list(outcome.messages),
        )

    @classmethod
    def failed(
        cls,
        patient_id: str,
        member_number: str,
        insurance_company: str,
        service_date: str,
        error_message: str,
        check_datetime: Optional[datetime] = None,
        eligibility_id: Optional[str] = None,
    ) -> "EligibilityCheck":
        """Build the synthetic Unknown record for a failed check attempt."""
        return cls(
            eligibility_id=eligibility_id or new_error_id(),
            patient_id=patient_id,
            member_number=member_number,
            insurance_company=insurance_company,
            service_date=service_date,
            check_datetime=check_datetime or utcnow(),
            status=EligibilityStatus.UNKNOWN,
            coverage=None,
            messages=[],
            error_message=error_message,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EligibilityCheck":
        """Create EligibilityCheck from a database row."""
        status = EligibilityStatus(data["status"])
        return cls(
            eligibility_id=data["eligibility_id"],
            patient_id=data["patient_id"],
            member_number=data["member_number"],
            insurance_company=data["insurance_company"],
            service_date=_as_text(data.get("service_date")),
            check_datetime=_as_datetime(data["check_datetime"]),
            status=status,
            coverage=Coverage.from_row(data) if status == EligibilityStatus.ACTIVE else None,
            messages=_parse_messages(data.get("messages")),
            error_message=data.get("error_message") if status == EligibilityStatus.UNKNOWN else None,
            id=data.get("id"),
            created_at=data.get("created_at"),
        )

    def to_history_dict(self) -> Dict[str, Any]:
        """Shape returned by the history endpoint."""
        return {
            "eligibilityId": self.eligibility_id,
            "checkDateTime": self.check_datetime.isoformat(),
            "status": self.status.value,
            "insuranceCompany": self.insurance_company,
            "memberNumber": self.member_number,
            "serviceDate": self.service_date,
            "coverage": self.coverage.to_dict() if self.coverage else None,
            "messages": list(self.messages),
            "errorMessage": self.error_message,
        }


def _as_amount(value: Any) -> Optional[float]:
    # NUMERIC comes back as Decimal from Postgres and int/float from SQLite
    if value is None:
        return None
    return float(value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _as_datetime(value: Any) -> datetime:
    # SQLite hands back naive timestamps; stored times are always UTC
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _parse_messages(value: Any) -> List[str]:
    """Messages are stored as a JSON array; anything unreadable means none."""
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return []
    if not isinstance(value, list):
        return []
    return [str(m) for m in value]

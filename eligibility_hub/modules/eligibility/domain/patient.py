"""
Patient Domain Model

Pure data model representing a patient entity.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union


@dataclass
class Patient:
    """Patient domain model."""
    patient_id: str
    patient_name: str
    date_of_birth: str
    created_at: Optional[Union[datetime, str]] = None
    updated_at: Optional[Union[datetime, str]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Patient":
        """Create Patient from dictionary (e.g., from database row)."""
        return cls(
            patient_id=data["patient_id"],
            patient_name=data["patient_name"],
            date_of_birth=_as_text(data["date_of_birth"]),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        """Convert Patient to the public camelCase shape."""
        return {
            "patientId": self.patient_id,
            "patientName": self.patient_name,
            "dateOfBirth": self.date_of_birth,
        }


def _as_text(value: Any) -> str:
    # DATE columns come back as date objects from some drivers
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)

"""
Eligibility Check Request

Inbound payload for an eligibility check. Every field is optional at the
model level so that missing fields are reported by the pipeline rather
than rejected by the web framework.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Wire names, in the order they are reported back to clients
REQUIRED_CHECK_FIELDS: List[str] = [
    "patientId",
    "patientName",
    "dateOfBirth",
    "memberNumber",
    "insuranceCompany",
    "serviceDate",
]


class EligibilityCheckRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    member_number: Optional[str] = None
    insurance_company: Optional[str] = None
    service_date: Optional[str] = None

    def missing_fields(self, fields: Optional[List[str]] = None) -> List[str]:
        """Return the wire names of required fields that are absent or blank."""
        values = self.model_dump(by_alias=True)
        missing = []
        for field in fields or REQUIRED_CHECK_FIELDS:
            value = values.get(field)
            if value is None or not str(value).strip():
                missing.append(field)
        return missing

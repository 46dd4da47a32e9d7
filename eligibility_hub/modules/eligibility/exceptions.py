"""
Eligibility Hub - Exceptions
"""


class EligibilityHubError(Exception):
    """Base exception for eligibility errors"""
    pass


class ValidationError(EligibilityHubError):
    """Raised when a request is missing required fields"""
    pass


class ServiceUnavailableError(EligibilityHubError):
    """Raised when the insurance service cannot answer right now"""
    pass


class NotFoundError(EligibilityHubError):
    """Raised when a patient is not found"""

    def __init__(self, patient_id: str):
        super().__init__(f"Patient {patient_id} not found")
        self.patient_id = patient_id


class StoreError(EligibilityHubError):
    """Raised when the record store fails to read or write"""
    pass

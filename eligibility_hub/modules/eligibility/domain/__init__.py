"""
Domain Models

Pure data models representing patients, eligibility checks and oracle outcomes.
"""

from .patient import Patient
from .request import EligibilityCheckRequest, REQUIRED_CHECK_FIELDS
from .check import Coverage, EligibilityStatus, EligibilityCheck
from .outcome import (
    EligibilityOutcome,
    ActiveFullCoverage,
    ActiveLimitedCoverage,
    InactiveCoverage,
    FULL_COVERAGE,
    LIMITED_COVERAGE,
)

__all__ = [
    "Patient",
    "EligibilityCheckRequest",
    "REQUIRED_CHECK_FIELDS",
    "Coverage",
    "EligibilityStatus",
    "EligibilityCheck",
    "EligibilityOutcome",
    "ActiveFullCoverage",
    "ActiveLimitedCoverage",
    "InactiveCoverage",
    "FULL_COVERAGE",
    "LIMITED_COVERAGE",
]

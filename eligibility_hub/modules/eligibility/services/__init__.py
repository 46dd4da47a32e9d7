"""
Business Logic Services

Services contain business logic and orchestrate record store calls.
"""

from .pipeline import EligibilityPipeline, EligibilityResponse, PipelineStage
from .history_service import HistoryReader, PatientHistory, normalize_limit

__all__ = [
    "EligibilityPipeline",
    "EligibilityResponse",
    "PipelineStage",
    "HistoryReader",
    "PatientHistory",
    "normalize_limit",
]

"""
Data Access Layer (Repositories)

Repositories handle all database interactions.
"""

from .record_store import RecordStore
from .eligibility_repository import EligibilityRepository

__all__ = [
    "RecordStore",
    "EligibilityRepository",
]

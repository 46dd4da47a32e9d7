"""
API Layer

REST endpoints for eligibility checks.
"""

from .eligibility_endpoints import router

__all__ = ["router"]

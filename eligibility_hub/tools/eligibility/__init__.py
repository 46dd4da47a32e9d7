from .insurance_oracle import InsuranceEligibilityOracle

__all__ = ["InsuranceEligibilityOracle"]

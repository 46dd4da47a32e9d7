"""
Eligibility Hub

Insurance eligibility verification service: synthetic coverage determination,
durable eligibility-check records and per-patient history.
"""

__version__ = "0.1.0"

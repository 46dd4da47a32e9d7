"""
Eligibility Module

Eligibility checks with clear separation of concerns:
- domain: Patient, eligibility check and oracle outcome models
- repositories: Record store contract and its SQL implementation
- services: Check pipeline and history reader
- api: REST API endpoints
"""

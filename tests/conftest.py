"""
Shared fixtures: an SQLite-backed database with the eligibility schema, the
SQL repository on top of it, and an HTTP client wired to that repository.
"""
import sqlite3
from dataclasses import replace
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from databases import Database

from eligibility_hub.app import app
from eligibility_hub.modules.eligibility.api.eligibility_endpoints import get_record_store
from eligibility_hub.modules.eligibility.repositories import RecordStore, EligibilityRepository

# Store timestamps as ISO text, the same shape they are parsed back from
sqlite3.register_adapter(datetime, lambda value: value.isoformat())

SQLITE_SCHEMA = [
    """
    CREATE TABLE patients (
        patient_id TEXT PRIMARY KEY,
        patient_name TEXT NOT NULL,
        date_of_birth TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE eligibility_checks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        eligibility_id TEXT UNIQUE NOT NULL,
        patient_id TEXT NOT NULL REFERENCES patients(patient_id),
        member_number TEXT NOT NULL,
        insurance_company TEXT NOT NULL,
        service_date TEXT NOT NULL,
        check_datetime TEXT NOT NULL,
        status TEXT NOT NULL,
        deductible NUMERIC,
        deductible_met NUMERIC,
        copay NUMERIC,
        out_of_pocket_max NUMERIC,
        out_of_pocket_met NUMERIC,
        messages TEXT NOT NULL DEFAULT '[]',
        error_message TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


@pytest.fixture
async def sqlite_database(tmp_path):
    """Connected database with an empty eligibility schema."""
    database = Database(f"sqlite:///{tmp_path / 'eligibility.db'}")
    await database.connect()
    for statement in SQLITE_SCHEMA:
        await database.execute(statement)
    yield database
    await database.disconnect()


@pytest.fixture
def sqlite_schema():
    return SQLITE_SCHEMA


@pytest.fixture
def repository(sqlite_database):
    return EligibilityRepository(sqlite_database)


@pytest.fixture
async def client(repository):
    """HTTP client for the app with the record store bound to SQLite."""
    app.dependency_overrides[get_record_store] = lambda: repository
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_store():
    """Record store double that echoes writes back with a store id."""
    store = MagicMock(spec=RecordStore)
    store.upsert_patient = AsyncMock(side_effect=lambda patient: patient)
    store.insert_eligibility_check = AsyncMock(side_effect=lambda check: replace(check, id=101))
    store.get_patient = AsyncMock(return_value=None)
    store.list_eligibility_checks = AsyncMock(return_value=[])
    store.get_latest_eligibility_check = AsyncMock(return_value=None)
    return store


@pytest.fixture
def check_payload():
    return {
        "patientId": "P123456",
        "patientName": "John Doe",
        "dateOfBirth": "1980-01-15",
        "memberNumber": "INS123456",
        "insuranceCompany": "BlueCross BlueShield",
        "serviceDate": "2024-02-15",
    }

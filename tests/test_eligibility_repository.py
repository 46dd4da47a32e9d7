"""
Tests for EligibilityRepository against an SQLite database
"""
from datetime import datetime, timedelta, timezone

import pytest

from eligibility_hub.modules.eligibility.domain import (
    Patient,
    EligibilityCheck,
    EligibilityStatus,
    LIMITED_COVERAGE,
)
from eligibility_hub.modules.eligibility.exceptions import StoreError

T0 = datetime(2024, 2, 15, 9, 0, tzinfo=timezone.utc)


def make_check(eligibility_id, check_datetime, patient_id="P123456", status=EligibilityStatus.INACTIVE, **kwargs):
    messages = kwargs.pop("messages", ["Policy is inactive", "Please contact insurance company"])
    return EligibilityCheck(
        eligibility_id=eligibility_id,
        patient_id=patient_id,
        member_number="INS555559",
        insurance_company="Cigna",
        service_date="2024-02-15",
        check_datetime=check_datetime,
        status=status,
        messages=messages,
        **kwargs
    )


@pytest.fixture
async def patient(repository):
    return await repository.upsert_patient(Patient("P123456", "John Doe", "1980-01-15"))


@pytest.mark.asyncio
async def test_upsert_patient_is_last_write_wins(repository, sqlite_database):
    await repository.upsert_patient(Patient("P123456", "John Doe", "1980-01-15"))
    updated = await repository.upsert_patient(Patient("P123456", "Johnny Doe", "1980-01-16"))

    assert updated.patient_name == "Johnny Doe"
    count = await sqlite_database.fetch_val("SELECT COUNT(*) FROM patients WHERE patient_id = 'P123456'")
    assert count == 1

    stored = await repository.get_patient("P123456")
    assert stored.patient_name == "Johnny Doe"
    assert stored.date_of_birth == "1980-01-16"


@pytest.mark.asyncio
async def test_get_unknown_patient_returns_none(repository):
    assert await repository.get_patient("P000000") is None


@pytest.mark.asyncio
async def test_history_is_newest_first(repository, patient):
    t1, t2, t3 = T0, T0 + timedelta(minutes=5), T0 + timedelta(hours=1)
    await repository.insert_eligibility_check(make_check("ELG-2", t2))
    await repository.insert_eligibility_check(make_check("ELG-3", t3))
    await repository.insert_eligibility_check(make_check("ELG-1", t1))

    checks = await repository.list_eligibility_checks("P123456", 10)

    assert [c.eligibility_id for c in checks] == ["ELG-3", "ELG-2", "ELG-1"]
    assert [c.check_datetime for c in checks] == [t3, t2, t1]

    limited = await repository.list_eligibility_checks("P123456", 2)
    assert [c.eligibility_id for c in limited] == ["ELG-3", "ELG-2"]

    latest = await repository.get_latest_eligibility_check("P123456")
    assert latest.eligibility_id == "ELG-3"


@pytest.mark.asyncio
async def test_insert_returns_stored_check(repository, patient):
    check = make_check(
        "ELG-LIMITED",
        T0,
        status=EligibilityStatus.ACTIVE,
        coverage=LIMITED_COVERAGE,
        messages=["High deductible plan", "Specialist visits require prior authorization"],
    )

    stored = await repository.insert_eligibility_check(check)

    assert stored.id is not None
    assert stored.eligibility_id == "ELG-LIMITED"
    # zero amounts survive the round trip
    assert stored.coverage == LIMITED_COVERAGE
    assert stored.messages == ["High deductible plan", "Specialist visits require prior authorization"]
    assert stored.error_message is None


@pytest.mark.asyncio
async def test_failed_check_keeps_error_message(repository, patient):
    failed = EligibilityCheck.failed(
        "P123456", "ERROR999", "Cigna", "2024-02-15", "Insurance API temporarily unavailable", check_datetime=T0
    )

    await repository.insert_eligibility_check(failed)
    [stored] = await repository.list_eligibility_checks("P123456", 10)

    assert stored.status == EligibilityStatus.UNKNOWN
    assert stored.coverage is None
    assert stored.messages == []
    assert stored.error_message == "Insurance API temporarily unavailable"


@pytest.mark.asyncio
async def test_checks_are_scoped_to_patient(repository, patient):
    await repository.upsert_patient(Patient("P789012", "Jane Smith", "1975-06-01"))
    await repository.insert_eligibility_check(make_check("ELG-A", T0))
    await repository.insert_eligibility_check(make_check("ELG-B", T0, patient_id="P789012"))

    checks = await repository.list_eligibility_checks("P789012", 10)

    assert [c.eligibility_id for c in checks] == ["ELG-B"]
    assert await repository.get_latest_eligibility_check("P000000") is None


@pytest.mark.asyncio
async def test_duplicate_eligibility_id_raises_store_error(repository, patient):
    await repository.insert_eligibility_check(make_check("ELG-DUP", T0))

    with pytest.raises(StoreError, match="Failed to store eligibility check"):
        await repository.insert_eligibility_check(make_check("ELG-DUP", T0 + timedelta(seconds=1)))

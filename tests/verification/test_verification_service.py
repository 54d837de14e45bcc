from __future__ import annotations

from datetime import date, datetime

import pytest

from intern_attendance.core.enums import Session, VerificationStatus
from intern_attendance.core.exceptions import RecordNotFound, ValidationError

DAY = date(2026, 2, 2)


@pytest.fixture()
def record(service):
    return service.upsert_session(
        subject_id=7,
        organization_id=3,
        attendance_date=DAY,
        session=Session.AM,
        time_in="08:00 AM",
        time_out="12:00 PM",
    )


def test_new_record_is_pending(record):
    assert record.verification_status == VerificationStatus.PENDING
    assert record.verified_by is None


def test_accept_sets_verifier_and_timestamp(verification, record, clock):
    clock.now = datetime(2026, 2, 3, 9, 0)

    rec = verification.verify(
        organization_id=3, record_id=record.record_id, verifier_id=42, decision="accepted", remarks=" Looks good "
    )

    assert rec.verification_status == VerificationStatus.ACCEPTED
    assert rec.verified_by == 42
    assert rec.verified_at == datetime(2026, 2, 3, 9, 0)
    assert rec.verification_remarks == "Looks good"


def test_revising_a_decision(verification, record, clock):
    verification.verify(
        organization_id=3, record_id=record.record_id, verifier_id=42, decision="denied", remarks="Missing PM"
    )

    clock.now = datetime(2026, 2, 4, 10, 30)
    rec = verification.verify(
        organization_id=3, record_id=record.record_id, verifier_id=43, decision=VerificationStatus.ACCEPTED
    )

    assert rec.verification_status == VerificationStatus.ACCEPTED
    assert rec.verified_by == 43
    assert rec.verified_at == datetime(2026, 2, 4, 10, 30)
    assert rec.verification_remarks is None


def test_repeating_a_decision_keeps_the_outcome(verification, record):
    first = verification.verify(organization_id=3, record_id=record.record_id, verifier_id=42, decision="accepted")
    second = verification.verify(organization_id=3, record_id=record.record_id, verifier_id=42, decision="accepted")

    assert second.verification_status == first.verification_status
    assert second.verified_by == first.verified_by


@pytest.mark.parametrize("decision", ["pending", "approved", "", None])
def test_invalid_decisions(verification, record, decision):
    with pytest.raises(ValidationError):
        verification.verify(organization_id=3, record_id=record.record_id, verifier_id=42, decision=decision)


def test_verifier_id_must_be_positive(verification, record):
    with pytest.raises(ValidationError):
        verification.verify(organization_id=3, record_id=record.record_id, verifier_id=0, decision="accepted")


def test_unknown_record(verification):
    with pytest.raises(RecordNotFound):
        verification.verify(organization_id=3, record_id=404, verifier_id=42, decision="accepted")
    with pytest.raises(RecordNotFound):
        verification.annotate(organization_id=3, record_id=404, remarks="x")


def test_record_of_another_organization_is_not_found(verification, record):
    with pytest.raises(RecordNotFound):
        verification.verify(organization_id=4, record_id=record.record_id, verifier_id=42, decision="accepted")
    with pytest.raises(RecordNotFound):
        verification.annotate(organization_id=4, record_id=record.record_id, remarks="x")

    rec = verification.verify(organization_id=3, record_id=record.record_id, verifier_id=42, decision="denied")
    assert rec.verification_status == VerificationStatus.DENIED
    assert rec.verification_remarks is None


def test_annotate_keeps_decision(verification, record):
    verification.verify(
        organization_id=3, record_id=record.record_id, verifier_id=42, decision="denied", remarks="Missing PM"
    )

    rec = verification.annotate(organization_id=3, record_id=record.record_id, remarks="PM was a field visit")

    assert rec.verification_status == VerificationStatus.DENIED
    assert rec.verified_by == 42
    assert rec.verification_remarks == "PM was a field visit"


def test_pending_queue(service, verification, record):
    other = service.upsert_session(
        subject_id=8,
        organization_id=3,
        attendance_date=DAY,
        session=Session.PM,
        time_in="01:00 PM",
    )
    verification.verify(organization_id=3, record_id=record.record_id, verifier_id=42, decision="accepted")

    pending = verification.get_pending(3, DAY, DAY)

    assert [r.record_id for r in pending] == [other.record_id]

    with pytest.raises(ValidationError):
        verification.get_pending(3, date(2026, 2, 5), DAY)

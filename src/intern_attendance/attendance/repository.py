from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import VerificationStatus
from .model import AttendanceRecord, SessionWrite


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_key(self, subject_id: int, organization_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(self, *, subject_id: int, organization_id: int, attendance_date: date) -> bool:
        """Insert an empty record for the key; False when it already existed."""

        raise NotImplementedError

    def update_session(self, *, record_id: int, expected_version: int, write: SessionWrite) -> bool:
        """Write one session's columns plus derived fields.

        Only succeeds when the stored version still equals ``expected_version``;
        bumps the version.
        """

        raise NotImplementedError

    def update_notes(self, *, record_id: int, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def update_verification(
        self,
        *,
        record_id: int,
        status: VerificationStatus,
        verified_by: int,
        verified_at: datetime,
        remarks: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def update_remarks(self, *, record_id: int, remarks: Optional[str]) -> bool:
        raise NotImplementedError

    def list_for_subject(
        self,
        *,
        subject_id: int,
        organization_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by attendance_date DESC."""

        raise NotImplementedError

    def list_for_organization(
        self,
        *,
        organization_id: int,
        date_from: date,
        date_to: date,
        verification_status: Optional[VerificationStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by attendance_date DESC, subject_id ASC."""

        raise NotImplementedError

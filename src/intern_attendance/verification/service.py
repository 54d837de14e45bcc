from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import local_clock
from ..common.validators import clean_text, require_date_range, require_positive_id
from ..core.enums import VerificationStatus
from ..core.exceptions import RecordNotFound, ValidationError

logger = logging.getLogger(__name__)


class VerificationService:
    """Supervisor decisions over a stored attendance record.

    pending -> accepted | denied, and back to pending only when the record's
    session data changes (handled by the attendance service). A decision can
    be revised by another ``verify`` call at any time.
    """

    def __init__(self, attendance: AttendanceRepository, *, clock: Callable[[], datetime] | None = None):
        self._attendance = attendance
        self._clock = clock or local_clock()

    def _require_record(self, record_id: int, organization_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        # Records of another organization are reported as missing.
        if not record or record.organization_id != int(organization_id):
            raise RecordNotFound(f"Attendance record {record_id} not found")
        return record

    def verify(
        self,
        *,
        organization_id: int,
        record_id: int,
        verifier_id: int,
        decision: VerificationStatus | str,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        try:
            decision = VerificationStatus(decision)
        except ValueError:
            raise ValidationError(f"Unknown verification decision: {decision!r}")
        if decision == VerificationStatus.PENDING:
            raise ValidationError("Decision must be accepted or denied")

        verifier_id = require_positive_id(verifier_id, "verifier_id")
        record = self._require_record(record_id, organization_id)

        ok = self._attendance.update_verification(
            record_id=record.record_id,
            status=decision,
            verified_by=verifier_id,
            verified_at=self._clock(),
            remarks=clean_text(remarks),
        )
        if not ok:
            raise RecordNotFound(f"Attendance record {record_id} not found")

        logger.info(
            "Attendance record %s %s by verifier=%s (was %s)",
            record.record_id,
            decision.value,
            verifier_id,
            record.verification_status.value,
        )
        return self._require_record(record.record_id, record.organization_id)

    def annotate(self, *, organization_id: int, record_id: int, remarks: Optional[str]) -> AttendanceRecord:
        """Replace the verifier's remarks without touching the decision."""

        record = self._require_record(record_id, organization_id)
        if not self._attendance.update_remarks(record_id=record.record_id, remarks=clean_text(remarks)):
            raise RecordNotFound(f"Attendance record {record_id} not found")
        return self._require_record(record.record_id, record.organization_id)

    def get_pending(self, organization_id: int, date_from: date, date_to: date) -> Sequence[AttendanceRecord]:
        require_date_range(date_from, date_to)
        return self._attendance.list_for_organization(
            organization_id=int(organization_id),
            date_from=date_from,
            date_to=date_to,
            verification_status=VerificationStatus.PENDING,
        )

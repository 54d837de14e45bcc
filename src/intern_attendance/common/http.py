from __future__ import annotations

import logging
from datetime import date, timedelta
from functools import wraps
from typing import Optional, Tuple

from flask import jsonify, request, session

from ..attendance.model import AttendanceRecord
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.exceptions import (
    ConcurrentModification,
    DomainError,
    InvalidSessionTransition,
    RecordNotFound,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def login_required(view):
    """Identity comes from the session set by the external auth layer."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def _status_for(error: DomainError) -> int:
    if isinstance(error, RecordNotFound):
        return 404
    if isinstance(error, (InvalidSessionTransition, ConcurrentModification)):
        return 409
    if isinstance(error, ValidationError):
        return 400
    return 422


def json_endpoint(view):
    """Wrap a view returning (payload, status) with the API envelope and error mapping."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            payload, status = view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"success": False, "error": type(e).__name__, "message": str(e)}), _status_for(e)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal server error"}), 500
        return jsonify({"success": True, "data": payload}), status

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    """Request JSON object; arrays, scalars and unparsable bodies read as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def optional_int(value, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def date_range_args(today: date) -> Tuple[date, date]:
    """date_from/date_to query args; defaults to the last DEFAULT_HISTORY_DAYS days."""

    raw_to = request.args.get("date_to")
    raw_from = request.args.get("date_from")
    date_to = parse_iso_date(raw_to) if raw_to else today
    date_from = parse_iso_date(raw_from) if raw_from else date_to - timedelta(days=DEFAULT_HISTORY_DAYS - 1)
    return date_from, date_to


def record_to_json(r: AttendanceRecord) -> dict:
    def t(value):
        return value.to_24h() if value else None

    return {
        "record_id": r.record_id,
        "subject_id": r.subject_id,
        "organization_id": r.organization_id,
        "attendance_date": r.attendance_date.isoformat(),
        "am_time_in": t(r.am_time_in),
        "am_time_out": t(r.am_time_out),
        "pm_time_in": t(r.pm_time_in),
        "pm_time_out": t(r.pm_time_out),
        "am_status": r.am_status.value,
        "pm_status": r.pm_status.value,
        "overall_status": r.overall_status.value,
        "total_hours": r.total_hours,
        "notes": r.notes,
        "verification_status": r.verification_status.value,
        "verified_by": r.verified_by,
        "verified_at": r.verified_at.isoformat() if r.verified_at else None,
        "verification_remarks": r.verification_remarks,
    }

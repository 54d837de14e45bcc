from __future__ import annotations

import csv
import io
from dataclasses import asdict

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import (
    current_user_id,
    date_range_args,
    json_body,
    json_endpoint,
    login_required,
    optional_int,
    record_to_json,
)
from ..container import Container
from ..core.exceptions import ValidationError
from .timecodec import format_12h
from .timeline import project

CSV_FIELDS = [
    "attendance_date",
    "subject_id",
    "am_time_in",
    "am_time_out",
    "pm_time_in",
    "pm_time_out",
    "am_status",
    "pm_status",
    "overall_status",
    "total_hours",
    "verification_status",
    "notes",
]


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _subject_arg() -> int:
        return optional_int(request.args.get("subject_id"), "subject_id") or current_user_id()

    @app.route("/api/attendance/<int:organization_id>/sessions", methods=["POST"], endpoint="upsert_session")
    @login_required
    @json_endpoint
    def upsert_session(organization_id: int):
        data = json_body()
        subject_id = optional_int(data.get("subject_id"), "subject_id")
        if subject_id is None:
            raise ValidationError("subject_id is required")
        session = data.get("session")
        if not isinstance(session, str):
            raise ValidationError("session must be 'AM' or 'PM'")

        record = service.upsert_session(
            subject_id=subject_id,
            organization_id=organization_id,
            attendance_date=parse_iso_date(data.get("attendance_date") or ""),
            session=session.upper(),
            time_in=data.get("time_in"),
            time_out=data.get("time_out"),
            asserted_status=data.get("status"),
        )
        return record_to_json(record), 200

    @app.route("/api/attendance/<int:organization_id>/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    @json_endpoint
    def clock_in(organization_id: int):
        data = json_body()
        record = service.clock_in(current_user_id(), organization_id, asserted_status=data.get("status"))
        return record_to_json(record), 200

    @app.route("/api/attendance/<int:organization_id>/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    @json_endpoint
    def clock_out(organization_id: int):
        record = service.clock_out(current_user_id(), organization_id)
        return record_to_json(record), 200

    @app.route("/api/attendance/<int:organization_id>/notes", methods=["PATCH"], endpoint="update_notes")
    @login_required
    @json_endpoint
    def update_notes(organization_id: int):
        data = json_body()
        record = service.update_notes(
            current_user_id(),
            organization_id,
            parse_iso_date(data.get("attendance_date") or ""),
            data.get("notes"),
        )
        return record_to_json(record), 200

    @app.route("/api/attendance/<int:organization_id>/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    @json_endpoint
    def history(organization_id: int):
        date_from, date_to = date_range_args(service.today())
        rows = service.get_by_subject_and_range(_subject_arg(), organization_id, date_from, date_to)
        return [record_to_json(r) for r in rows], 200

    @app.route("/api/attendance/<int:organization_id>/history.csv", methods=["GET"], endpoint="attendance_history_csv")
    @login_required
    def history_csv(organization_id: int):
        try:
            date_from, date_to = date_range_args(service.today())
            subject_id = _subject_arg()
            rows = service.get_by_subject_and_range(subject_id, organization_id, date_from, date_to)
        except ValidationError as e:
            return {"success": False, "message": str(e)}, 400

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in rows:
            writer.writerow(
                {
                    "attendance_date": r.attendance_date.isoformat(),
                    "subject_id": r.subject_id,
                    "am_time_in": format_12h(r.am_time_in),
                    "am_time_out": format_12h(r.am_time_out),
                    "pm_time_in": format_12h(r.pm_time_in),
                    "pm_time_out": format_12h(r.pm_time_out),
                    "am_status": r.am_status.value,
                    "pm_status": r.pm_status.value,
                    "overall_status": r.overall_status.value,
                    "total_hours": f"{r.total_hours:.2f}",
                    "verification_status": r.verification_status.value,
                    "notes": r.notes or "",
                }
            )

        filename = f"attendance_{subject_id}_{date_from.isoformat()}_{date_to.isoformat()}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/<int:organization_id>/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    @json_endpoint
    def today(organization_id: int):
        return [record_to_json(r) for r in service.get_today(organization_id)], 200

    @app.route("/api/attendance/<int:organization_id>/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    @json_endpoint
    def stats(organization_id: int):
        date_from, date_to = date_range_args(service.today())
        return asdict(service.get_stats(organization_id, date_from, date_to)), 200

    @app.route("/api/attendance/<int:organization_id>/progress", methods=["GET"], endpoint="attendance_progress")
    @login_required
    @json_endpoint
    def progress(organization_id: int):
        try:
            required_hours = float(request.args.get("required_hours", ""))
        except ValueError:
            raise ValidationError("required_hours must be a number")
        return asdict(service.get_hours_progress(_subject_arg(), organization_id, required_hours)), 200

    @app.route("/api/attendance/records/<int:record_id>", methods=["GET"], endpoint="attendance_record")
    @login_required
    @json_endpoint
    def record_detail(record_id: int):
        return record_to_json(service.get_record(record_id)), 200

    @app.route("/api/attendance/records/<int:record_id>/timeline", methods=["GET"], endpoint="attendance_timeline")
    @login_required
    @json_endpoint
    def timeline(record_id: int):
        intervals = project(service.get_record(record_id))
        return [
            {"start_minute": i.start_minute, "end_minute": i.end_minute, "session": i.session.value}
            for i in intervals
        ], 200

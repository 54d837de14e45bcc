from __future__ import annotations

from flask import Flask

from ..common.http import (
    current_user_id,
    date_range_args,
    json_body,
    json_endpoint,
    login_required,
    record_to_json,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.verification_service

    @app.route(
        "/api/verification/<int:organization_id>/records/<int:record_id>/verify",
        methods=["POST"],
        endpoint="verify_record",
    )
    @login_required
    @json_endpoint
    def verify(organization_id: int, record_id: int):
        data = json_body()
        record = service.verify(
            organization_id=organization_id,
            record_id=record_id,
            verifier_id=current_user_id(),
            decision=data.get("decision"),
            remarks=data.get("remarks"),
        )
        return record_to_json(record), 200

    @app.route(
        "/api/verification/<int:organization_id>/records/<int:record_id>/annotate",
        methods=["POST"],
        endpoint="annotate_record",
    )
    @login_required
    @json_endpoint
    def annotate(organization_id: int, record_id: int):
        record = service.annotate(
            organization_id=organization_id,
            record_id=record_id,
            remarks=json_body().get("remarks"),
        )
        return record_to_json(record), 200

    @app.route("/api/verification/<int:organization_id>/pending", methods=["GET"], endpoint="pending_verifications")
    @login_required
    @json_endpoint
    def pending(organization_id: int):
        date_from, date_to = date_range_args(container.attendance_service.today())
        rows = service.get_pending(organization_id, date_from, date_to)
        return [record_to_json(r) for r in rows], 200

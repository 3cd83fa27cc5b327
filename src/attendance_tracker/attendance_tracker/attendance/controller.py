from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.clock import parse_instant
from ..common.http import current_employee_id, json_api, json_body
from ..common.validators import optional_hours_hint, require_leave_type
from ..core.enums import WorkLocation
from ..core.exceptions import InvalidInputError
from ..container import Container
from .model import AttendanceRecord
from .state_machine import status_view


def _ok(record: AttendanceRecord, **extra):
    payload = {"success": True, "attendance": status_view(record).to_dict()}
    payload.update(extra)
    return jsonify(payload)


def _require_date(body: dict) -> str:
    day = body.get("date")
    if not day:
        raise InvalidInputError("date is required")
    return day


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_status")
    @json_api
    def attendance_status():
        view = service.get_status(current_employee_id(), day=request.args.get("date") or None)
        return jsonify(view.to_dict())

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_action")
    @json_api
    def attendance_action():
        employee_id = current_employee_id()
        body = json_body()
        action = body.get("type")

        if action == "signIn":
            record = service.sign_in(
                employee_id,
                location=WorkLocation.from_client(body.get("location")),
                is_half_day=bool(body.get("halfDay", False)),
            )
            return _ok(record)

        if action in {"signOut", "autoSignOut"}:
            record = service.sign_out(
                employee_id,
                at=parse_instant(body["time"]) if body.get("time") else None,
                hours_hint=optional_hours_hint(body.get("hours")),
                automatic=action == "autoSignOut",
                day=body.get("date") or None,
            )
            return _ok(record)

        if action == "absent":
            return _ok(service.mark_absent(employee_id, day=_require_date(body)))

        if action == "leave":
            record = service.request_leave(
                employee_id,
                day=_require_date(body),
                leave_type=require_leave_type(body.get("leaveType")),
            )
            return _ok(record)

        raise InvalidInputError(f"Unknown type: {action!r}")

    @app.route("/api/attendance/halfday", methods=["POST"], endpoint="api_attendance_halfday")
    @json_api
    def attendance_halfday():
        body = json_body()
        record = service.request_half_day(current_employee_id(), day=_require_date(body))
        return _ok(record)

    @app.route("/api/attendance/lunch", methods=["POST", "PATCH"], endpoint="api_attendance_lunch")
    @json_api
    def attendance_lunch():
        employee_id = current_employee_id()
        if request.method == "POST":
            record = service.start_lunch_break(employee_id)
        else:
            record = service.end_lunch_break(employee_id)
        return _ok(record)

    @app.route("/api/attendance/overtime", methods=["GET", "PATCH"], endpoint="api_attendance_overtime")
    @json_api
    def attendance_overtime():
        employee_id = current_employee_id()
        if request.method == "GET":
            hours = service.get_overtime(employee_id, day=request.args.get("date") or None)
            return jsonify({"overtimeHours": hours})

        body = json_body()
        if "hours" not in body:
            raise InvalidInputError("hours is required")
        record = service.submit_overtime(employee_id, hours=body.get("hours"), day=body.get("date") or None)
        return _ok(record, overtimeHours=record.overtime_hours)

from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_employee_id, json_api
from ..container import Container
from ..core.exceptions import InvalidInputError
from .service import parse_date_range


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_attendance_report")
    @json_api
    def attendance_report():
        employee_id = current_employee_id()
        date_range = request.args.get("dateRange")
        if not date_range:
            raise InvalidInputError("dateRange is required")
        start, end = parse_date_range(date_range)

        data = container.report_service.build_attendance_report(employee_id, start=start, end=end)
        return jsonify({"records": data.rows, "stats": data.summary})

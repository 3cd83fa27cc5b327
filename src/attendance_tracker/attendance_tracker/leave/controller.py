from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.clock import local_day_of, parse_local_date, utc_now
from ..common.http import current_employee_id, json_api
from ..container import Container
from ..core.exceptions import NotFoundError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave", methods=["GET"], endpoint="api_leave_balance")
    @json_api
    def leave_balance():
        employee_id = current_employee_id()
        if request.args.get("date"):
            day = parse_local_date(request.args["date"])
        else:
            employee = container.employees_repo.get_by_id(employee_id)
            schedule = container.companies_repo.get_by_id(employee.company_id) if employee else None
            if not schedule:
                raise NotFoundError("Employee not found")
            day = local_day_of(utc_now(), schedule.tz)

        balance = container.leave_service.balance(employee_id, day)
        return jsonify(balance.to_dict())

from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.http import csv_attachment, current_actor, json_response, make_auth_required
from ..container import Container
from ..parking.controller import parking_json
from .export import render_attendance_csv, render_hr_analytics_csv


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)
    reports = container.report_service

    @app.route("/reports/hr-analytics", methods=["GET"], endpoint="hr_analytics")
    @auth_required
    def hr_analytics():
        return json_response(reports.hr_analytics(current_actor()))

    @app.route("/reports/hr-analytics.csv", methods=["GET"], endpoint="hr_analytics_csv")
    @auth_required
    def hr_analytics_csv():
        now = now_local()
        report = reports.hr_analytics(current_actor(), today=now.date())
        text = render_hr_analytics_csv(report, generated_at=now)
        return csv_attachment(app, text, filename=f"HR_Analytics_{now:%Y-%m}.csv")

    @app.route("/reports/dean", methods=["GET"], endpoint="dean_summary")
    @auth_required
    def dean_summary():
        return json_response(reports.dean_summary(current_actor()))

    @app.route("/reports/live", methods=["GET"], endpoint="live_status")
    @auth_required
    def live_status():
        status = reports.live(current_actor())
        return json_response(
            {
                "snapshot": status.snapshot,
                "parking": parking_json(status.parking) if status.parking else None,
            }
        )

    @app.route("/reports/attendance.csv", methods=["GET"], endpoint="attendance_csv")
    @auth_required
    def attendance_csv():
        start = parse_optional_date(request.args.get("startDate"))
        end = parse_optional_date(request.args.get("endDate"))
        rows = reports.attendance_listing(current_actor(), start_date=start, end_date=end)

        label = f"{start or 'all'}_{end or 'all'}"
        return csv_attachment(app, render_attendance_csv(rows), filename=f"attendance_{label}.csv")

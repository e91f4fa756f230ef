from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import MONTHLY_MIN_DAYS, WEEKLY_MIN_DAYS
from .analytics import ComplianceStats
from .service import HRAnalytics

ATTENDANCE_COLUMNS = ["Date", "Name", "Type", "Time In", "Time Out", "Plate Number", "Purpose"]


def _new_writer():
    buf = io.StringIO()
    return buf, csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")


def _compliance_block(w, title: str, stats: ComplianceStats) -> None:
    w.writerow([title])
    w.writerow(["Staff Count", stats.count])
    w.writerow(["Total Staff", stats.total])
    w.writerow(["Percentage", f"{stats.percentage}%"])
    w.writerow([])


def render_hr_analytics_csv(report: HRAnalytics, *, generated_at: datetime) -> str:
    """Summary blocks, ranked breakdown, then staff with no records this month."""
    month = report.day.strftime("%B %Y")
    buf, w = _new_writer()

    w.writerow([f"HR Analytics Report - {month}"])
    w.writerow([f"Generated on: {generated_at:%Y-%m-%d %H:%M:%S}"])
    w.writerow([])

    w.writerow(["SUMMARY STATISTICS"])
    w.writerow([])
    _compliance_block(w, f"Weekly Attendance (>= {WEEKLY_MIN_DAYS} days/week)", report.weekly)
    _compliance_block(w, f"Monthly Attendance (>= {MONTHLY_MIN_DAYS} days in {report.day:%B})", report.monthly)

    w.writerow(["Average Daily Presence"])
    w.writerow(["Avg Staff/Day", report.presence.average])
    w.writerow(["Days Tracked", report.presence.days_tracked])
    w.writerow(["Total Attendance Records", report.presence.total_records])
    w.writerow([])

    w.writerow(["MONTHLY SUMMARY"])
    w.writerow(["Total Staff", report.total_employees])
    w.writerow(["Staff with Records", len(report.ranking)])
    w.writerow([])

    w.writerow([f"INDIVIDUAL EMPLOYEE ATTENDANCE - {month}"])
    w.writerow(["Rank", "Employee Name", "Days Present", "Status"])
    if report.ranking:
        for row in report.ranking:
            w.writerow([row.rank, row.name, row.days_present, row.band.value])
    else:
        w.writerow([f"No attendance records for {month}"])

    if report.without_attendance:
        w.writerow([])
        w.writerow([f"STAFF WITH NO ATTENDANCE RECORDS - {report.day:%B}"])
        w.writerow(["Employee Name", "Employee ID"])
        for emp in report.without_attendance:
            w.writerow([emp.name, emp.employee_id])

    return buf.getvalue()


def render_attendance_csv(records: Sequence[AttendanceRecord]) -> str:
    buf, w = _new_writer()
    w.writerow(ATTENDANCE_COLUMNS)
    for r in records:
        w.writerow(
            [
                r.date.strftime("%Y-%m-%d"),
                r.employee_name,
                "Guest" if r.is_guest else "Staff",
                r.time_in.strftime("%H:%M:%S"),
                r.time_out.strftime("%H:%M:%S") if r.time_out else "",
                r.plate_number or "",
                r.guest_purpose or "",
            ]
        )
    return buf.getvalue()

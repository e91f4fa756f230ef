from __future__ import annotations

import csv
import io
from datetime import date, datetime, time

import pytest

from src.campus_attendance.campus_attendance.core.exceptions import AuthorizationError, ValidationError
from src.campus_attendance.campus_attendance.reports.export import render_attendance_csv, render_hr_analytics_csv
from src.campus_attendance.campus_attendance.reports.service import ReportService


@pytest.fixture
def reports(attendance, employees, parking):
    return ReportService(attendance, employees, parking)


@pytest.fixture
def seeded(employees, attendance, today):
    ana = employees.add("Ana", plate="A-1")
    ben = employees.add("Ben")
    employees.add("Cai")
    for d in (12, 13, 16, 17):
        attendance.add(employee_id=ana.id, employee_name=ana.name, date=date(2026, 3, d), time_out=time(17, 0))
    attendance.add(employee_id=ben.id, employee_name=ben.name, date=today)
    attendance.add(employee_name="Visitor", date=today, is_guest=True, guest_purpose="Tour")
    return ana, ben


def test_hr_analytics(reports, seeded, hr, today):
    report = reports.hr_analytics(hr, today=today)

    assert report.total_employees == 3
    assert (report.weekly.count, report.weekly.total) == (1, 3)
    assert report.monthly.count == 0
    assert [r.name for r in report.ranking] == ["Ana", "Ben"]
    assert [e.name for e in report.without_attendance] == ["Cai"]


def test_dean_summary_counts_guests(reports, seeded, dean, today):
    summary = reports.dean_summary(dean, today=today)

    assert summary.week.total_records == 6
    assert summary.week.total_guests == 1
    assert summary.week.unique_employees == 2
    assert summary.month.total_records == 6


def test_reports_are_gated(reports, security):
    with pytest.raises(AuthorizationError):
        reports.hr_analytics(security)
    with pytest.raises(AuthorizationError):
        reports.dean_summary(security)


def test_live_board_includes_parking(reports, seeded, parking, security, today):
    status = reports.live(security, today=today)

    assert [r.employee_name for r in status.snapshot.active_staff] == ["Ben"]
    assert [r.employee_name for r in status.snapshot.active_guests] == ["Visitor"]
    assert status.parking == parking.config


def test_attendance_listing_range(reports, seeded, admin):
    rows = reports.attendance_listing(admin, start_date=date(2026, 3, 16), end_date=date(2026, 3, 17))

    assert [r.date for r in rows] == [date(2026, 3, 17), date(2026, 3, 16)]
    with pytest.raises(ValidationError):
        reports.attendance_listing(admin, start_date=date(2026, 3, 17), end_date=date(2026, 3, 1))


def test_hr_csv_layout(reports, seeded, hr, today):
    text = render_hr_analytics_csv(reports.hr_analytics(hr, today=today), generated_at=datetime(2026, 3, 18, 9, 30))
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == ["HR Analytics Report - March 2026"]
    assert rows[1] == ["Generated on: 2026-03-18 09:30:00"]
    assert ["Staff Count", "1"] in rows
    assert ["Percentage", "33.3%"] in rows

    header = rows.index(["Rank", "Employee Name", "Days Present", "Status"])
    assert rows[header + 1] == ["1", "Ana", "4", "Low"]
    assert rows[-1] == ["Cai", "cai@campus.edu"]


def test_attendance_csv(attendance, today):
    rec = attendance.add(employee_name="Visitor", date=today, is_guest=True, plate_number="G-1", guest_purpose="Tour")

    rows = list(csv.reader(io.StringIO(render_attendance_csv([rec]))))

    assert rows[0][0] == "Date"
    assert rows[1] == ["2026-03-18", "Visitor", "Guest", "08:00:00", "", "G-1", "Tour"]

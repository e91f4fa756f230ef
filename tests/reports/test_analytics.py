from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from src.campus_attendance.campus_attendance.attendance.model import AttendanceRecord
from src.campus_attendance.campus_attendance.core.enums import PresenceBand
from src.campus_attendance.campus_attendance.employees.model import Employee
from src.campus_attendance.campus_attendance.reports import analytics

TODAY = date(2026, 3, 18)


def _emp(pk: int, name: str) -> Employee:
    return Employee(id=pk, name=name, employee_id=f"{name.lower()}@campus.edu", department="D", position="P")


def _rec(pk: int, emp, day: date, *, out=time(17, 0), guest=False, plate=None) -> AttendanceRecord:
    return AttendanceRecord(
        id=pk,
        employee_id=None if guest else emp.id,
        employee_name=emp if guest else emp.name,
        date=day,
        time_in=time(8, 0),
        time_out=out,
        plate_number=plate,
        is_guest=guest,
    )


def _days(*days: int) -> list[date]:
    return [date(2026, 3, d) for d in days]


@pytest.fixture
def staff():
    return [_emp(1, "Ana"), _emp(2, "Ben"), _emp(3, "Cai")]


def _records(pairs):
    return [_rec(i, emp, day) for i, (emp, day) in enumerate(pairs, start=1)]


def test_four_days_in_the_week_is_compliant_three_is_not(staff):
    ana, ben, _ = staff
    records = _records(
        [(ana, d) for d in _days(12, 13, 16, 17)]
        + [(ben, d) for d in _days(16, 17, 18, 18)]
        + [(ana, date(2026, 3, 10))]
    )

    stats = analytics.weekly_compliance(records, staff, TODAY)

    assert (stats.count, stats.total) == (1, 3)
    assert stats.percentage == 33.3


def test_weekly_window_includes_both_ends(staff):
    ana = staff[0]
    records = _records([(ana, d) for d in _days(11, 12, 13, 18)])

    assert analytics.weekly_compliance(records, staff, TODAY).count == 1


def test_compliance_ignores_guests_and_former_employees(staff):
    gone = _emp(99, "Gone")
    records = _records([(gone, d) for d in _days(14, 15, 16, 17)])
    records += [_rec(100 + i, "Visitor", d, guest=True) for i, d in enumerate(_days(14, 15, 16, 17))]

    stats = analytics.weekly_compliance(records, staff, TODAY)

    assert stats.count == 0
    assert stats.count <= stats.total


def test_compliance_with_no_employees():
    stats = analytics.weekly_compliance([], [], TODAY)

    assert (stats.count, stats.total, stats.percentage) == (0, 0, 0.0)


def test_monthly_threshold_is_sixteen_days(staff):
    ana, ben, _ = staff
    records = _records([(ana, d) for d in _days(*range(1, 17))] + [(ben, d) for d in _days(*range(1, 16))])

    stats = analytics.monthly_compliance(records, staff, TODAY)

    assert stats.count == 1
    assert stats.percentage == 33.3


def test_average_daily_presence_counts_people_not_rows(staff):
    ana, ben, _ = staff
    records = _records([(ana, date(2026, 3, 2)), (ben, date(2026, 3, 2)), (ben, date(2026, 3, 2)), (ana, date(2026, 3, 3))])
    records.append(_rec(50, "Visitor", date(2026, 3, 3), guest=True))
    records.append(_rec(51, ana, date(2026, 2, 27)))

    stats = analytics.average_daily_presence(records, TODAY)

    assert stats.average == 1.5
    assert stats.total_records == 4
    assert stats.days_tracked == 2


def test_average_daily_presence_empty():
    stats = analytics.average_daily_presence([], TODAY)

    assert (stats.average, stats.total_records, stats.days_tracked) == (0.0, 0, 0)


@pytest.mark.parametrize(
    "days, band",
    [(16, PresenceBand.EXCELLENT), (15, PresenceBand.GOOD), (12, PresenceBand.GOOD), (11, PresenceBand.FAIR), (8, PresenceBand.FAIR), (7, PresenceBand.LOW), (0, PresenceBand.LOW)],
)
def test_presence_bands(days, band):
    assert analytics.presence_band(days) is band


def test_ranking_orders_by_days_then_name(staff):
    ana, ben, cai = staff
    records = _records(
        [(cai, d) for d in _days(*range(1, 13))]
        + [(ben, d) for d in _days(2, 3)]
        + [(ana, d) for d in _days(4, 5)]
    )

    ranking = analytics.employee_ranking(records, TODAY, staff)

    assert [(r.rank, r.name, r.days_present, r.band) for r in ranking] == [
        (1, "Cai", 12, PresenceBand.GOOD),
        (2, "Ana", 2, PresenceBand.LOW),
        (3, "Ben", 2, PresenceBand.LOW),
    ]


def test_employees_without_attendance_this_month(staff):
    ana, ben, cai = staff
    records = _records([(ana, date(2026, 3, 5)), (ben, date(2026, 2, 20))])

    missing = analytics.employees_without_attendance(staff, records, TODAY)

    assert [e.name for e in missing] == ["Ben", "Cai"]


def test_peak_day_picks_busiest_date_in_window(staff):
    ana, ben, cai = staff
    records = _records(
        [(ana, date(2026, 3, 16)), (ben, date(2026, 3, 16)), (cai, date(2026, 3, 16))]
        + [(ana, date(2026, 3, 17)), (ben, date(2026, 3, 17))]
        + [(p, date(2026, 3, 2)) for p in staff for _ in range(3)]
    )

    peak = analytics.peak_day(records, TODAY, 7)

    assert (peak.date, peak.count) == (date(2026, 3, 16), 3)
    assert analytics.peak_day(records, TODAY, 30).date == date(2026, 3, 2)


def test_peak_day_tie_goes_to_most_recent_date(staff):
    ana, ben, _ = staff
    records = _records([(ana, date(2026, 3, 14)), (ben, date(2026, 3, 14)), (ana, date(2026, 3, 15)), (ben, date(2026, 3, 15))])

    peak = analytics.peak_day(records, TODAY, 7)

    assert (peak.date, peak.count) == (date(2026, 3, 15), 2)


def test_peak_day_empty_window():
    peak = analytics.peak_day([], TODAY, 7)

    assert (peak.date, peak.count) == (None, 0)


def test_window_stats_for_dean(staff):
    ana, ben, _ = staff
    records = _records([(ana, date(2026, 3, 17)), (ben, date(2026, 3, 17)), (ana, date(2026, 3, 18))])
    records.append(_rec(40, "Visitor", date(2026, 3, 18), guest=True))
    records.append(_rec(41, ana, TODAY - timedelta(days=40)))

    week = analytics.window_stats(records, TODAY, 7)

    assert week.total_records == 4
    assert week.average_per_day == 2.0
    assert week.unique_employees == 2
    assert week.total_guests == 1
    assert week.peak_day.count == 2


def test_live_snapshot_splits_today(staff):
    ana, ben, cai = staff
    records = [
        _rec(1, ana, TODAY, out=None, plate="A-1"),
        _rec(2, ben, TODAY),
        _rec(3, "Visitor", TODAY, out=None, guest=True),
        _rec(4, cai, date(2026, 3, 17), out=None),
    ]

    snap = analytics.live_snapshot(records, TODAY)

    assert [r.id for r in snap.active_staff] == [1]
    assert [r.id for r in snap.active_guests] == [3]
    assert [r.id for r in snap.completed] == [2]

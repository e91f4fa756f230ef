"""Attendance aggregations used by the HR and dean dashboards.

Everything here is a pure function over a list of attendance records and a
reference day, recomputed on every request. Windows are inclusive on both
ends.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Hashable, Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import month_start
from ..core.constants import (
    BAND_EXCELLENT_DAYS,
    BAND_FAIR_DAYS,
    BAND_GOOD_DAYS,
    MONTHLY_MIN_DAYS,
    WEEK_WINDOW_DAYS,
    WEEKLY_MIN_DAYS,
)
from ..core.enums import PresenceBand
from ..employees.model import Employee


@dataclass(frozen=True)
class ComplianceStats:
    count: int
    total: int
    percentage: float


@dataclass(frozen=True)
class PresenceStats:
    average: float
    total_records: int
    days_tracked: int


@dataclass(frozen=True)
class RankedEmployee:
    rank: int
    employee_id: Optional[int]
    name: str
    days_present: int
    band: PresenceBand


@dataclass(frozen=True)
class PeakDay:
    date: Optional[date]
    count: int


@dataclass(frozen=True)
class WindowStats:
    window_days: int
    total_records: int
    average_per_day: float
    unique_employees: int
    total_guests: int
    peak_day: PeakDay


@dataclass(frozen=True)
class LiveSnapshot:
    day: date
    active_staff: tuple[AttendanceRecord, ...]
    active_guests: tuple[AttendanceRecord, ...]
    completed: tuple[AttendanceRecord, ...]


def _person_key(r: AttendanceRecord) -> Hashable:
    return r.employee_id if r.employee_id is not None else ("name", r.employee_name)


def staff_only(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    return [r for r in records if not r.is_guest]


def in_window(records: Iterable[AttendanceRecord], start: date, end: date) -> list[AttendanceRecord]:
    return [r for r in records if start <= r.date <= end]


def days_by_person(records: Iterable[AttendanceRecord]) -> dict[Hashable, set[date]]:
    out: dict[Hashable, set[date]] = defaultdict(set)
    for r in records:
        out[_person_key(r)].add(r.date)
    return out


def _percentage(count: int, total: int) -> float:
    return round(count * 100.0 / total, 1) if total > 0 else 0.0


def compliance(
    records: Sequence[AttendanceRecord],
    employees: Sequence[Employee],
    *,
    start: date,
    end: date,
    min_days: int,
) -> ComplianceStats:
    """Employees with at least ``min_days`` distinct presence dates in the window.

    Only current employees count, so ``count`` never exceeds ``total``.
    """
    known = {e.id for e in employees}
    days = days_by_person(in_window(staff_only(records), start, end))
    count = sum(1 for key, ds in days.items() if key in known and len(ds) >= min_days)
    return ComplianceStats(count=count, total=len(employees), percentage=_percentage(count, len(employees)))


def weekly_compliance(records, employees, today: date) -> ComplianceStats:
    return compliance(
        records,
        employees,
        start=today - timedelta(days=WEEK_WINDOW_DAYS),
        end=today,
        min_days=WEEKLY_MIN_DAYS,
    )


def monthly_compliance(records, employees, today: date) -> ComplianceStats:
    return compliance(records, employees, start=month_start(today), end=today, min_days=MONTHLY_MIN_DAYS)


def average_daily_presence(records: Sequence[AttendanceRecord], today: date) -> PresenceStats:
    month_records = in_window(staff_only(records), month_start(today), today)

    people_by_day: dict[date, set[Hashable]] = defaultdict(set)
    for r in month_records:
        people_by_day[r.date].add(_person_key(r))

    days_tracked = len(people_by_day)
    if not days_tracked:
        return PresenceStats(average=0.0, total_records=0, days_tracked=0)

    total_people = sum(len(people) for people in people_by_day.values())
    return PresenceStats(
        average=round(total_people / days_tracked, 1),
        total_records=len(month_records),
        days_tracked=days_tracked,
    )


def presence_band(days_present: int) -> PresenceBand:
    if days_present >= BAND_EXCELLENT_DAYS:
        return PresenceBand.EXCELLENT
    if days_present >= BAND_GOOD_DAYS:
        return PresenceBand.GOOD
    if days_present >= BAND_FAIR_DAYS:
        return PresenceBand.FAIR
    return PresenceBand.LOW


def employee_ranking(
    records: Sequence[AttendanceRecord],
    today: date,
    employees: Sequence[Employee] = (),
) -> list[RankedEmployee]:
    """Distinct days present this month, most days first (ties by name)."""
    names = {e.id: e.name for e in employees}
    month_records = in_window(staff_only(records), month_start(today), today)

    days: dict[Hashable, set[date]] = defaultdict(set)
    record_names: dict[Hashable, str] = {}
    for r in month_records:
        key = _person_key(r)
        days[key].add(r.date)
        record_names.setdefault(key, r.employee_name)

    rows = []
    for key, ds in days.items():
        employee_id = key if isinstance(key, int) else None
        name = names.get(employee_id) or record_names[key]
        rows.append((employee_id, name, len(ds)))
    rows.sort(key=lambda row: (-row[2], row[1].casefold()))

    return [
        RankedEmployee(rank=i, employee_id=eid, name=name, days_present=n, band=presence_band(n))
        for i, (eid, name, n) in enumerate(rows, start=1)
    ]


def employees_without_attendance(
    employees: Sequence[Employee],
    records: Sequence[AttendanceRecord],
    today: date,
) -> list[Employee]:
    present = {r.employee_id for r in in_window(staff_only(records), month_start(today), today)}
    return [e for e in employees if e.id not in present]


def peak_day(records: Sequence[AttendanceRecord], today: date, window_days: int) -> PeakDay:
    """Busiest date in the trailing window; ties go to the most recent date."""
    counts: dict[date, int] = defaultdict(int)
    for r in in_window(records, today - timedelta(days=window_days), today):
        counts[r.date] += 1
    if not counts:
        return PeakDay(date=None, count=0)
    best = max(counts.items(), key=lambda item: (item[1], item[0]))
    return PeakDay(date=best[0], count=best[1])


def window_stats(records: Sequence[AttendanceRecord], today: date, window_days: int) -> WindowStats:
    window = in_window(records, today - timedelta(days=window_days), today)
    unique_days = {r.date for r in window}
    return WindowStats(
        window_days=window_days,
        total_records=len(window),
        average_per_day=round(len(window) / len(unique_days), 1) if unique_days else 0.0,
        unique_employees=len({_person_key(r) for r in staff_only(window)}),
        total_guests=sum(1 for r in window if r.is_guest),
        peak_day=peak_day(records, today, window_days),
    )


def live_snapshot(records: Sequence[AttendanceRecord], today: date) -> LiveSnapshot:
    todays = [r for r in records if r.date == today]
    return LiveSnapshot(
        day=today,
        active_staff=tuple(r for r in todays if r.is_open and not r.is_guest),
        active_guests=tuple(r for r in todays if r.is_open and r.is_guest),
        completed=tuple(r for r in todays if not r.is_open),
    )

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_start, now_local
from ..common.permissions import REPORT_VIEWERS, require_role
from ..core.constants import MONTH_WINDOW_DAYS, WEEK_WINDOW_DAYS
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..parking.model import ParkingConfig
from ..parking.repository import ParkingRepository
from ..users.model import Actor
from . import analytics
from .analytics import ComplianceStats, LiveSnapshot, PresenceStats, RankedEmployee, WindowStats


@dataclass(frozen=True)
class HRAnalytics:
    day: date
    total_employees: int
    weekly: ComplianceStats
    monthly: ComplianceStats
    presence: PresenceStats
    ranking: list[RankedEmployee]
    without_attendance: list[Employee]


@dataclass(frozen=True)
class DeanSummary:
    day: date
    week: WindowStats
    month: WindowStats


@dataclass(frozen=True)
class LiveStatus:
    snapshot: LiveSnapshot
    parking: Optional[ParkingConfig]


class ReportService:
    """Dashboards and exports, recomputed from the repositories on every call."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        parking: ParkingRepository,
    ):
        self._attendance = attendance
        self._employees = employees
        self._parking = parking

    def _history(self, today: date) -> list[AttendanceRecord]:
        # The widest window any dashboard looks at.
        start = min(month_start(today), today - timedelta(days=MONTH_WINDOW_DAYS))
        return list(self._attendance.list_between(start_date=start, end_date=today))

    def hr_analytics(self, actor: Actor, *, today: Optional[date] = None) -> HRAnalytics:
        require_role(actor.role, REPORT_VIEWERS)
        today = today or now_local().date()

        records = self._history(today)
        employees = list(self._employees.list_all())
        return HRAnalytics(
            day=today,
            total_employees=len(employees),
            weekly=analytics.weekly_compliance(records, employees, today),
            monthly=analytics.monthly_compliance(records, employees, today),
            presence=analytics.average_daily_presence(records, today),
            ranking=analytics.employee_ranking(records, today, employees),
            without_attendance=analytics.employees_without_attendance(employees, records, today),
        )

    def dean_summary(self, actor: Actor, *, today: Optional[date] = None) -> DeanSummary:
        require_role(actor.role, REPORT_VIEWERS)
        today = today or now_local().date()

        records = self._history(today)
        return DeanSummary(
            day=today,
            week=analytics.window_stats(records, today, WEEK_WINDOW_DAYS),
            month=analytics.window_stats(records, today, MONTH_WINDOW_DAYS),
        )

    def live(self, actor: Actor, *, today: Optional[date] = None) -> LiveStatus:
        today = today or now_local().date()
        records = self._attendance.list_between(start_date=today, end_date=today)
        return LiveStatus(snapshot=analytics.live_snapshot(records, today), parking=self._parking.get())

    def attendance_listing(
        self,
        actor: Actor,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        require_role(actor.role, REPORT_VIEWERS)
        if start_date and end_date and end_date < start_date:
            raise ValidationError("endDate must be on or after startDate")
        return list(self._attendance.list_between(start_date=start_date, end_date=end_date))

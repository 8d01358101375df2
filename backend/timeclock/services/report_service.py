"""Report Service 도메인 서비스 레이어입니다. 종료된 근무 기록을 일 → 주 → 월 → 연 단위 근무시간으로 집계합니다.

주차는 ISO 주가 아니라 매월 1일을 기준으로 한 7일 구간입니다(1주차 = 1~7일, 2주차 = 8~14일, ...).
이 모듈은 읽기 전용이며 검토 대기 중인 기록도 그대로 집계합니다.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from timeclock.errors import InvalidReportPeriod
from timeclock.models.time_entry import TimeEntry
from timeclock.schemas.report import (
    DailyReport,
    EmployeeReportOut,
    MonthlyReport,
    ReportEmployee,
    ReportEntry,
    ReportPeriod,
    ReportSummary,
    WeeklyReport,
    YearlyReport,
)
from timeclock.utils import clock
from timeclock.utils.permissions import get_employee_or_404

DAY_NAMES = ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일")
MONTH_NAMES = tuple(f"{m}월" for m in range(1, 13))


def _report_window(year: int, month: Optional[int]):
    if not 1 <= year <= 9999:
        raise InvalidReportPeriod("연도가 올바르지 않습니다.")
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    if not 1 <= month <= 12:
        raise InvalidReportPeriod("월은 1~12 사이여야 합니다.")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def week_of_month(day: date) -> int:
    return (day.day - 1) // 7 + 1


def _build_month(year: int, month: int, entries_by_day: dict) -> MonthlyReport:
    last_day = calendar.monthrange(year, month)[1]
    report = MonthlyReport(month=month, month_name=MONTH_NAMES[month - 1], year=year)

    for week_number in range(1, week_of_month(date(year, month, last_day)) + 1):
        start = date(year, month, (week_number - 1) * 7 + 1)
        end = min(start + timedelta(days=6), date(year, month, last_day))
        week = WeeklyReport(
            week_number=week_number,
            week_label=f"{week_number}주차",
            start_date=start,
            end_date=end,
        )
        day = start
        while day <= end:
            daily = DailyReport(work_date=day, day_of_week=DAY_NAMES[day.weekday()])
            for entry in entries_by_day.get(day, []):
                hours = entry.hours_worked or 0.0
                daily.hours += hours
                daily.entries.append(ReportEntry(clock_in=entry.clock_in, clock_out=entry.clock_out, hours=hours))
            week.days.append(daily)
            week.total_hours += daily.hours
            day += timedelta(days=1)
        report.weeks.append(week)
        report.total_hours += week.total_hours
    return report


def build_report(db: Session, employee_id: int, year: int, month: Optional[int] = None) -> EmployeeReportOut:
    """직원 한 명의 연간(또는 특정 월) 근무시간 리포트를 만듭니다.

    연간 조회에서는 근무시간이 있는 달만 포함하고, 월을 지정하면 비어 있어도 그 달을 포함합니다.
    요약의 평균은 일 평균이 아니라 기록(세션) 1건당 평균입니다.
    """
    start, end = _report_window(year, month)
    employee = get_employee_or_404(db, employee_id)

    entries = (
        db.query(TimeEntry)
        .filter(
            TimeEntry.employee_id == employee_id,
            TimeEntry.clock_in >= datetime.combine(start, datetime.min.time()),
            TimeEntry.clock_in < datetime.combine(end + timedelta(days=1), datetime.min.time()),
            TimeEntry.clock_out.isnot(None),
            TimeEntry.hours_worked.isnot(None),
        )
        .order_by(TimeEntry.clock_in.asc())
        .all()
    )

    entries_by_day: dict = {}
    for entry in entries:
        entries_by_day.setdefault(entry.clock_in.date(), []).append(entry)

    yearly = YearlyReport(year=year)
    for current_month in ([month] if month else range(1, 13)):
        monthly = _build_month(year, current_month, entries_by_day)
        if monthly.total_hours > 0 or month:
            yearly.months.append(monthly)
            yearly.total_hours += monthly.total_hours

    return EmployeeReportOut(
        employee=ReportEmployee(employee_id=employee.employee_id, name=employee.name, is_admin=employee.is_admin),
        report_period=ReportPeriod(year=year, month=month, start_date=start, end_date=end),
        data=yearly,
        summary=ReportSummary(
            total_entries=len(entries),
            total_hours=yearly.total_hours,
            average_hours_per_entry=yearly.total_hours / len(entries) if entries else 0.0,
            days_worked=len(entries_by_day),
        ),
    )


def get_analytics(
    db: Session,
    employee_id: Optional[int] = None,
    period: Optional[str] = None,
    now: Optional[datetime] = None,
    recent_limit: int = 20,
) -> dict:
    filters = [TimeEntry.clock_out.isnot(None), TimeEntry.hours_worked.isnot(None)]
    if employee_id is not None:
        filters.append(TimeEntry.employee_id == employee_id)
    since = clock.period_start(period, now)
    if since is not None:
        filters.append(TimeEntry.clock_in >= since)
    if period == "today":
        filters.append(TimeEntry.clock_in < since + timedelta(days=1))

    total_hours, total_shifts, average_hours = (
        db.query(
            func.coalesce(func.sum(TimeEntry.hours_worked), 0.0),
            func.count(TimeEntry.entry_id),
            func.coalesce(func.avg(TimeEntry.hours_worked), 0.0),
        )
        .filter(*filters)
        .one()
    )
    recent = db.query(TimeEntry).filter(*filters).order_by(TimeEntry.clock_in.desc()).limit(recent_limit).all()
    return {
        "total_hours": round(float(total_hours), 1),
        "total_shifts": int(total_shifts),
        "average_hours": round(float(average_hours), 1),
        "recent_entries": recent,
    }

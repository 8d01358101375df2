"""근무시간 리포트(일/주/월/연) 응답 스키마입니다."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from timeclock.schemas.time_entry import TimeEntryOut


class ReportEntry(BaseModel):
    clock_in: datetime
    clock_out: datetime
    hours: float


class DailyReport(BaseModel):
    work_date: date
    day_of_week: str
    hours: float = 0.0
    entries: List[ReportEntry] = []


class WeeklyReport(BaseModel):
    week_number: int
    week_label: str
    start_date: date
    end_date: date
    total_hours: float = 0.0
    days: List[DailyReport] = []


class MonthlyReport(BaseModel):
    month: int
    month_name: str
    year: int
    total_hours: float = 0.0
    weeks: List[WeeklyReport] = []


class YearlyReport(BaseModel):
    year: int
    total_hours: float = 0.0
    months: List[MonthlyReport] = []


class ReportEmployee(BaseModel):
    employee_id: int
    name: str
    is_admin: bool


class ReportPeriod(BaseModel):
    year: int
    month: Optional[int] = None
    start_date: date
    end_date: date


class ReportSummary(BaseModel):
    total_entries: int
    total_hours: float
    average_hours_per_entry: float
    days_worked: int


class EmployeeReportOut(BaseModel):
    employee: ReportEmployee
    report_period: ReportPeriod
    data: YearlyReport
    summary: ReportSummary


class AnalyticsOut(BaseModel):
    total_hours: float
    total_shifts: int
    average_hours: float
    recent_entries: List[TimeEntryOut] = []

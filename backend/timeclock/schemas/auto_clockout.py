"""자동 퇴근(auto-clockout) 요청/결과 스키마입니다."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ClockedOutEmployee(BaseModel):
    employee_id: int
    employee_name: str
    clock_in: datetime
    clock_out: datetime
    hours_worked: float


class AutoClockoutResult(BaseModel):
    success: bool = True
    clocked_out_count: int = 0
    skipped_count: int = 0
    errors: List[str] = Field(default_factory=list)
    clocked_out_employees: List[ClockedOutEmployee] = Field(default_factory=list)


class SelectiveClockoutItem(BaseModel):
    employee_id: int
    clock_out_time: datetime


class AutoClockoutRequest(BaseModel):
    action: Literal["trigger", "selective", "check", "enforce-no-overtime"] = "trigger"
    dry_run: bool = False
    target_date: Optional[datetime] = None
    selected_employees: Optional[List[SelectiveClockoutItem]] = None


class AutoClockoutActionOut(AutoClockoutResult):
    action: str
    dry_run: bool = False


class ScheduleOut(BaseModel):
    monday_to_saturday: str
    sunday: str
    next_clockout_time: datetime


class TodayScheduleOut(BaseModel):
    clockout_time: datetime
    should_clockout: bool
    time_remaining_seconds: float


class AutoClockoutStatusOut(BaseModel):
    schedule: ScheduleOut
    today: TodayScheduleOut
    active_employees: int

"""근무 기록/출퇴근 요청·응답 스키마입니다."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ClockActionRequest(BaseModel):
    action: Literal["clockIn", "clockOut"]


class TimeEntryOut(BaseModel):
    entry_id: int
    employee_id: int
    clock_in: datetime
    clock_out: Optional[datetime] = None
    hours_worked: Optional[float] = None
    is_auto_clock_out: bool
    auto_clock_out_reason: Optional[str] = None
    needs_review: bool
    original_clock_out: Optional[datetime] = None
    admin_corrected: bool
    corrected_by: Optional[int] = None
    corrected_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClockActionOut(BaseModel):
    message: str
    time_entry: TimeEntryOut


class ActiveEntryOut(BaseModel):
    is_clocked_in: bool
    active_entry: Optional[TimeEntryOut] = None


class TimeEntryDetailOut(TimeEntryOut):
    employee_name: Optional[str] = None
    corrected_by_name: Optional[str] = None


class ActiveEmployeeOut(BaseModel):
    entry_id: int
    employee_id: int
    name: Optional[str] = None
    is_admin: bool
    clock_in: datetime
    current_hours: float


class ActiveEmployeeStats(BaseModel):
    total_active: int
    active_admins: int
    active_employees: int
    longest_shift: float
    shortest_shift: float
    average_shift_length: float


class ActiveEmployeesOut(BaseModel):
    active_employees: List[ActiveEmployeeOut]
    stats: ActiveEmployeeStats


class CorrectionRequest(BaseModel):
    clock_out: Optional[datetime] = None
    admin_notes: Optional[str] = Field(None, max_length=500)
    mark_as_correct: bool = False


class CorrectionOut(BaseModel):
    message: str
    time_entry: TimeEntryOut

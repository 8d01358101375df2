"""Time Entries 기능 API 라우터입니다. 출근/퇴근 처리, 근무 기록 조회와 단건 보정을 제공합니다."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timeclock.database import get_db
from timeclock.middleware.auth_middleware import get_current_employee, require_admin
from timeclock.models.employee import Employee
from timeclock.schemas.time_entry import (
    ActiveEntryOut,
    ClockActionOut,
    ClockActionRequest,
    CorrectionOut,
    CorrectionRequest,
    TimeEntryDetailOut,
    TimeEntryOut,
)
from timeclock.services import correction_service, time_entry_service

router = APIRouter(prefix="/api/timeentries", tags=["timeentries"])

Period = Literal["today", "week", "month", "all"]


@router.post("", response_model=ClockActionOut)
def clock_action(
    data: ClockActionRequest,
    db: Session = Depends(get_db),
    current: Employee = Depends(get_current_employee),
):
    if data.action == "clockIn":
        entry = time_entry_service.clock_in(db, current.employee_id)
        return ClockActionOut(message="출근 처리되었습니다.", time_entry=TimeEntryOut.model_validate(entry))
    entry = time_entry_service.clock_out(db, current.employee_id)
    return ClockActionOut(
        message=f"퇴근 처리되었습니다. ({entry.hours_worked:.2f}시간)",
        time_entry=TimeEntryOut.model_validate(entry),
    )


@router.get("", response_model=List[TimeEntryOut])
def list_time_entries(
    employee_id: Optional[int] = Query(None),
    period: Period = Query("all"),
    db: Session = Depends(get_db),
    current: Employee = Depends(get_current_employee),
):
    # 일반 직원은 본인 기록만 조회한다.
    if not current.is_admin:
        employee_id = current.employee_id
    return time_entry_service.list_time_entries(db, employee_id=employee_id, period=period)


@router.get("/active", response_model=ActiveEntryOut)
def active_entry(
    db: Session = Depends(get_db),
    current: Employee = Depends(get_current_employee),
):
    entry = time_entry_service.get_active_entry(db, current.employee_id)
    return ActiveEntryOut(
        is_clocked_in=entry is not None,
        active_entry=TimeEntryOut.model_validate(entry) if entry else None,
    )


@router.get("/{entry_id}/correct", response_model=TimeEntryDetailOut)
def correction_details(
    entry_id: int,
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return time_entry_service.get_entry_detail(db, entry_id)


@router.put("/{entry_id}/correct", response_model=CorrectionOut)
def correct_entry(
    entry_id: int,
    data: CorrectionRequest,
    db: Session = Depends(get_db),
    current: Employee = Depends(require_admin),
):
    entry = correction_service.correct_entry(
        db,
        entry_id,
        current.employee_id,
        new_clock_out=data.clock_out,
        notes=data.admin_notes,
        mark_as_correct=data.mark_as_correct,
    )
    message = "정상 기록으로 확인되었습니다." if data.mark_as_correct else "퇴근 시각이 보정되었습니다."
    return CorrectionOut(message=message, time_entry=TimeEntryOut.model_validate(entry))

"""Auto Clockout 기능 API 라우터입니다. 관리자용 자동퇴근 실행(trigger/selective/check/enforce)과 일정 조회를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timeclock.database import get_db
from timeclock.errors import InvalidAction
from timeclock.middleware.auth_middleware import require_admin
from timeclock.models.employee import Employee
from timeclock.schemas.auto_clockout import AutoClockoutActionOut, AutoClockoutRequest, AutoClockoutStatusOut
from timeclock.services import auto_clockout_service

router = APIRouter(prefix="/api/auto-clockout", tags=["auto-clockout"])


@router.get("", response_model=AutoClockoutStatusOut)
def auto_clockout_status(
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return auto_clockout_service.get_schedule_info(db)


@router.post("", response_model=AutoClockoutActionOut)
def run_auto_clockout(
    data: AutoClockoutRequest,
    db: Session = Depends(get_db),
    current: Employee = Depends(require_admin),
):
    if data.action == "trigger":
        result = auto_clockout_service.run_auto_clockout(db, data.target_date, dry_run=data.dry_run)
    elif data.action == "selective":
        if not data.selected_employees:
            raise InvalidAction("selective 작업에는 selected_employees 목록이 필요합니다.")
        result = auto_clockout_service.run_selective_auto_clockout(db, data.selected_employees, current.employee_id)
    elif data.action == "check":
        result = auto_clockout_service.check_and_run(db)
    else:
        result = auto_clockout_service.enforce_no_overtime_now(db)
    return AutoClockoutActionOut(**result.model_dump(), action=data.action, dry_run=data.dry_run)

"""Review 기능 API 라우터입니다. 검토 대기 목록, 직원별 그룹핑, 일괄 보정을 제공합니다."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timeclock.database import get_db
from timeclock.middleware.auth_middleware import require_admin
from timeclock.models.employee import Employee
from timeclock.schemas.review import BatchCorrectionOut, BatchCorrectionRequest, GroupedReviewOut, ReviewListOut
from timeclock.services import correction_service

router = APIRouter(prefix="/api/timeentries/needs-review", tags=["review"])


@router.get("", response_model=ReviewListOut)
def list_review_entries(
    status: Literal["needs-review", "corrected", "auto-clockouts", "all"] = Query("needs-review"),
    employee_id: Optional[int] = Query(None),
    period: Literal["today", "week", "month", "all"] = Query("week"),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return correction_service.list_review_entries(
        db, status=status, employee_id=employee_id, period=period, limit=limit
    )


@router.post("", response_model=BatchCorrectionOut)
def batch_correct(
    data: BatchCorrectionRequest,
    db: Session = Depends(get_db),
    current: Employee = Depends(require_admin),
):
    modified = correction_service.batch_correct(
        db,
        data.action,
        data.entry_ids,
        current.employee_id,
        clock_out_time=data.clock_out_time,
        notes=data.admin_notes,
    )
    if data.action == correction_service.MARK_CORRECT:
        message = f"{modified}건의 기록을 정상으로 확인했습니다."
    else:
        message = f"{modified}건의 기록을 일괄 보정했습니다."
    return BatchCorrectionOut(action=data.action, modified_count=modified, message=message)


@router.get("/grouped", response_model=GroupedReviewOut)
def grouped_review(
    employee_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return correction_service.group_by_employee_needing_review(db, employee_id=employee_id)

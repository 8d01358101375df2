"""Reports 기능 API 라우터입니다. 직원별 일/주/월/연 근무시간 리포트와 요약 통계를 제공합니다."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timeclock.database import get_db
from timeclock.errors import AdminPrivilegesRequired
from timeclock.middleware.auth_middleware import get_current_employee
from timeclock.models.employee import Employee
from timeclock.schemas.report import AnalyticsOut, EmployeeReportOut
from timeclock.services import report_service
from timeclock.utils import clock

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/reports/employee", response_model=EmployeeReportOut)
def employee_report(
    employee_id: int = Query(..., ge=1),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current: Employee = Depends(get_current_employee),
):
    if not current.is_admin and employee_id != current.employee_id:
        raise AdminPrivilegesRequired()
    return report_service.build_report(db, employee_id, year or clock.now().year, month)


@router.get("/analytics", response_model=AnalyticsOut)
def analytics(
    employee_id: Optional[int] = Query(None),
    period: Literal["today", "week", "month", "all"] = Query("all"),
    db: Session = Depends(get_db),
    current: Employee = Depends(get_current_employee),
):
    if not current.is_admin:
        employee_id = current.employee_id
    return report_service.get_analytics(db, employee_id=employee_id, period=period)

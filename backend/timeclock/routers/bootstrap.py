"""Bootstrap 기능 API 라우터입니다. 직원이 한 명도 없을 때 최초 관리자를 생성합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timeclock.database import get_db
from timeclock.schemas.employee import BootstrapRequest, BootstrapStatusOut, EmployeeOut
from timeclock.services import employee_service

router = APIRouter(prefix="/api/bootstrap", tags=["bootstrap"])


@router.get("", response_model=BootstrapStatusOut)
def bootstrap_status(db: Session = Depends(get_db)):
    return employee_service.get_bootstrap_status(db)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def bootstrap(data: BootstrapRequest, db: Session = Depends(get_db)):
    return employee_service.bootstrap_admin(db, data)

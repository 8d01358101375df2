"""Employees 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from timeclock.database import get_db
from timeclock.middleware.auth_middleware import require_admin
from timeclock.models.employee import Employee
from timeclock.schemas.employee import EmployeeAdminOut, EmployeeCreate, EmployeePinOut, EmployeeUpdate
from timeclock.schemas.time_entry import ActiveEmployeesOut
from timeclock.services import employee_service, time_entry_service

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=List[EmployeeAdminOut])
def list_employees(
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return [employee_service.to_admin_view(e) for e in employee_service.list_employees(db)]


@router.post("", response_model=EmployeeAdminOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    data: EmployeeCreate,
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return employee_service.to_admin_view(employee_service.create_employee(db, data))


@router.get("/active", response_model=ActiveEmployeesOut)
def active_employees(
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return time_entry_service.list_active_employees(db)


@router.put("/{employee_id}", response_model=EmployeeAdminOut)
def update_employee(
    employee_id: int,
    data: EmployeeUpdate,
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return employee_service.to_admin_view(employee_service.update_employee(db, employee_id, data))


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    employee_service.delete_employee(db, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{employee_id}/pin", response_model=EmployeePinOut)
def get_employee_pin(
    employee_id: int,
    db: Session = Depends(get_db),
    _current: Employee = Depends(require_admin),
):
    return employee_service.get_employee_pin(db, employee_id)

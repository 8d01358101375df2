"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from typing import Optional

from sqlalchemy.orm import Session

from timeclock.errors import AdminPrivilegesRequired, EmployeeNotFound
from timeclock.models.employee import Employee


def is_admin(employee: Optional[Employee]) -> bool:
    return bool(employee is not None and employee.is_admin)


def find_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.query(Employee).filter(Employee.employee_id == employee_id).first()


def get_employee_or_404(db: Session, employee_id: int) -> Employee:
    employee = find_employee(db, employee_id)
    if not employee:
        raise EmployeeNotFound()
    return employee


def require_admin(db: Session, admin_id: int) -> Employee:
    """트랜잭션 안에서 관리자 여부를 다시 확인합니다. 권한이 회수된 경우에도 거부됩니다."""
    admin = find_employee(db, admin_id)
    if not is_admin(admin):
        raise AdminPrivilegesRequired()
    return admin

"""Employee Service 도메인 서비스 레이어입니다. 직원 등록/수정/삭제와 PIN 유일성, 마지막 관리자 보호 규칙을 캡슐화합니다."""

import logging
import re
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from werkzeug.security import generate_password_hash

from timeclock.errors import (
    BootstrapUnavailable,
    CannotDeleteLastAdmin,
    ConcurrentModification,
    InvalidPinFormat,
    NameRequired,
    PinAlreadyExists,
)
from timeclock.models.employee import Employee
from timeclock.schemas.employee import BootstrapRequest, EmployeeCreate, EmployeeUpdate
from timeclock.utils.permissions import get_employee_or_404
from timeclock.utils.transaction import run_in_transaction

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"^\d{4}$")


def validate_pin(pin: Optional[str]) -> str:
    value = (pin or "").strip()
    if not PIN_PATTERN.match(value):
        raise InvalidPinFormat()
    return value


def _normalize_name(name: Optional[str]) -> str:
    value = (name or "").strip()
    if not value:
        raise NameRequired()
    if len(value) > 50:
        raise NameRequired("이름은 50자를 초과할 수 없습니다.")
    return value


def _ensure_pin_available(db: Session, pin: str, exclude_employee_id: Optional[int] = None):
    q = db.query(Employee).filter(Employee.admin_pin == pin)
    if exclude_employee_id is not None:
        q = q.filter(Employee.employee_id != exclude_employee_id)
    if q.first():
        raise PinAlreadyExists()


def list_employees(db: Session):
    return db.query(Employee).order_by(Employee.name, Employee.employee_id).all()


def count_employees(db: Session) -> int:
    return db.query(Employee).count()


def get_bootstrap_status(db: Session) -> dict:
    count = count_employees(db)
    return {"can_bootstrap": count == 0, "employee_count": count}


def bootstrap_admin(db: Session, data: BootstrapRequest) -> Employee:
    name = _normalize_name(data.name)
    pin = validate_pin(data.pin)

    def _create(session: Session) -> Employee:
        if session.query(Employee).count() > 0:
            raise BootstrapUnavailable()
        admin = Employee(
            name=name,
            pin_hash=generate_password_hash(pin),
            admin_pin=pin,
            is_admin=True,
        )
        session.add(admin)
        session.flush()
        return admin

    admin = run_in_transaction(db, _create)
    db.refresh(admin)
    logger.info("[employee] bootstrap admin created: employee_id=%s", admin.employee_id)
    return admin


def create_employee(db: Session, data: EmployeeCreate) -> Employee:
    name = _normalize_name(data.name)
    pin = validate_pin(data.pin)

    def _create(session: Session) -> Employee:
        _ensure_pin_available(session, pin)
        employee = Employee(
            name=name,
            pin_hash=generate_password_hash(pin),
            admin_pin=pin,
            is_admin=bool(data.is_admin),
        )
        session.add(employee)
        session.flush()
        return employee

    employee = run_in_transaction(db, _create)
    db.refresh(employee)
    return employee


def update_employee(db: Session, employee_id: int, data: EmployeeUpdate) -> Employee:
    name = _normalize_name(data.name)
    pin = validate_pin(data.pin) if data.pin else None

    def _update(session: Session) -> Employee:
        employee = get_employee_or_404(session, employee_id)
        if data.version is not None and data.version != employee.version:
            raise ConcurrentModification()

        if employee.is_admin and not data.is_admin:
            _ensure_not_last_admin(session, employee, "마지막 관리자의 관리자 권한은 해제할 수 없습니다.")

        if pin:
            _ensure_pin_available(session, pin, exclude_employee_id=employee_id)
            employee.pin_hash = generate_password_hash(pin)
            employee.admin_pin = pin
        employee.name = name
        employee.is_admin = bool(data.is_admin)
        try:
            session.flush()
        except StaleDataError as exc:
            # version_id_col 불일치: 조회 이후 다른 트랜잭션이 먼저 커밋함
            raise ConcurrentModification() from exc
        return employee

    employee = run_in_transaction(db, _update)
    db.refresh(employee)
    return employee


def _ensure_not_last_admin(db: Session, employee: Employee, detail: Optional[str] = None):
    admin_count = db.query(Employee).filter(Employee.is_admin == True).count()  # noqa: E712
    if employee.is_admin and admin_count <= 1:
        raise CannotDeleteLastAdmin(detail)


def delete_employee(db: Session, employee_id: int) -> None:
    """직원을 삭제합니다. 근무 기록은 이력 보존을 위해 남겨둡니다."""

    def _delete(session: Session):
        employee = get_employee_or_404(session, employee_id)
        _ensure_not_last_admin(session, employee)
        session.delete(employee)

    run_in_transaction(db, _delete)
    logger.info("[employee] deleted employee_id=%s (time entries preserved)", employee_id)


def get_employee_pin(db: Session, employee_id: int) -> dict:
    employee = get_employee_or_404(db, employee_id)
    return {"employee_id": employee.employee_id, "pin": employee.admin_pin}


def to_admin_view(employee: Employee) -> dict:
    return {
        "employee_id": employee.employee_id,
        "name": employee.name,
        "is_admin": employee.is_admin,
        "pin": employee.admin_pin,
        "created_at": employee.created_at,
        "updated_at": employee.updated_at,
        "version": employee.version,
    }

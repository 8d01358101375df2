"""Auth Service 도메인 서비스 레이어입니다. PIN 검증과 접근 토큰 발급을 담당합니다."""

from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash

from timeclock.config import settings
from timeclock.errors import InvalidCredentials
from timeclock.models.employee import Employee
from timeclock.services.employee_service import validate_pin

ALGORITHM = "HS256"


def create_access_token(employee_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(employee_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def authenticate_pin(db: Session, pin: str) -> Employee:
    pin = validate_pin(pin)
    for employee in db.query(Employee).order_by(Employee.employee_id).all():
        if employee.pin_hash and check_password_hash(employee.pin_hash, pin):
            return employee
    raise InvalidCredentials()

"""Auth 기능 API 라우터입니다. PIN 로그인과 현재 직원 조회를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from timeclock.database import get_db
from timeclock.schemas.employee import LoginRequest, TokenResponse, EmployeeOut
from timeclock.services.auth_service import authenticate_pin, create_access_token
from timeclock.middleware.auth_middleware import get_current_employee
from timeclock.models.employee import Employee

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    employee = authenticate_pin(db, request.pin)
    token = create_access_token(employee.employee_id)
    return TokenResponse(access_token=token, employee=EmployeeOut.model_validate(employee))


@router.get("/me", response_model=EmployeeOut)
def me(current_employee: Employee = Depends(get_current_employee)):
    return current_employee

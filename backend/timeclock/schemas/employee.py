"""Employee/인증 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class EmployeeCreate(BaseModel):
    name: str = Field(..., max_length=50)
    pin: str
    is_admin: bool = False


class EmployeeUpdate(BaseModel):
    name: str = Field(..., max_length=50)
    pin: Optional[str] = None
    is_admin: bool = False
    # 낙관적 동시성 토큰. 조회 시점의 version을 그대로 보낸다.
    version: Optional[int] = None


class EmployeeOut(BaseModel):
    employee_id: int
    name: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime
    version: int

    model_config = {"from_attributes": True}


class EmployeeAdminOut(EmployeeOut):
    pin: str


class EmployeePinOut(BaseModel):
    employee_id: int
    pin: str


class BootstrapRequest(BaseModel):
    name: str = Field(..., max_length=50)
    pin: str


class BootstrapStatusOut(BaseModel):
    can_bootstrap: bool
    employee_count: int


class LoginRequest(BaseModel):
    pin: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    employee: EmployeeOut

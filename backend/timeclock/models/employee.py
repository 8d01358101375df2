"""Employee 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index

from timeclock.database import Base
from timeclock.utils import clock


class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    pin_hash = Column(String(255), nullable=False)  # 로그인 검증용
    admin_pin = Column(String(4), nullable=False)  # 관리자 조회용
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=lambda: clock.now())
    updated_at = Column(DateTime, nullable=False, default=lambda: clock.now(), onupdate=lambda: clock.now())
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_employees_admin_pin", "admin_pin"),
        Index("ix_employees_is_admin", "is_admin"),
    )

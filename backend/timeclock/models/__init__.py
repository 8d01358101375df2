"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from timeclock.models.employee import Employee
from timeclock.models.time_entry import TimeEntry

__all__ = [
    "Employee",
    "TimeEntry",
]

"""서비스 레이어 패키지 초기화 모듈입니다."""

from timeclock.services import (
    auth_service,
    auto_clockout_service,
    correction_service,
    employee_service,
    report_service,
    time_entry_service,
)

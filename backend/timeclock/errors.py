"""출퇴근 도메인 예외 정의입니다.

서비스 레이어는 HTTPException 계열의 타입 예외를 발생시키고, 라우터/핸들러는 이를 그대로 응답으로 변환합니다.
``code``는 클라이언트가 분기할 수 있는 고정 식별자이고 ``detail``은 사용자에게 보여줄 메시지입니다.
"""

from typing import Optional

from fastapi import HTTPException


class TimeClockError(HTTPException):
    status_code = 400
    code = "TIMECLOCK_ERROR"
    message = "요청을 처리할 수 없습니다."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.message)


# Validation
class InvalidPinFormat(TimeClockError):
    code = "INVALID_PIN_FORMAT"
    message = "PIN은 숫자 4자리여야 합니다."


class NameRequired(TimeClockError):
    code = "NAME_REQUIRED"
    message = "이름은 필수입니다."


class InvalidCorrectionRequest(TimeClockError):
    code = "INVALID_CORRECTION_REQUEST"
    message = "새 퇴근 시각을 입력하거나 '정상 확인'을 선택해야 합니다. (둘 중 하나만)"


class InvalidAction(TimeClockError):
    code = "INVALID_ACTION"
    message = "지원하지 않는 작업입니다."


class InvalidReportPeriod(TimeClockError):
    code = "INVALID_REPORT_PERIOD"
    message = "유효하지 않은 조회 기간입니다."


# Not found
class EmployeeNotFound(TimeClockError):
    status_code = 404
    code = "EMPLOYEE_NOT_FOUND"
    message = "직원을 찾을 수 없습니다."


class EntryNotFound(TimeClockError):
    status_code = 404
    code = "ENTRY_NOT_FOUND"
    message = "근무 기록을 찾을 수 없습니다."


# Domain rules
class AlreadyClockedIn(TimeClockError):
    status_code = 409
    code = "ALREADY_CLOCKED_IN"
    message = "이미 출근 처리되었습니다."


class NoActiveClockIn(TimeClockError):
    status_code = 409
    code = "NO_ACTIVE_CLOCK_IN"
    message = "진행 중인 출근 기록이 없습니다."


class EntryStillActive(TimeClockError):
    code = "ENTRY_STILL_ACTIVE"
    message = "아직 퇴근하지 않은 근무 기록은 보정할 수 없습니다."


class ClockOutBeforeClockIn(TimeClockError):
    code = "CLOCK_OUT_BEFORE_CLOCK_IN"
    message = "퇴근 시각은 출근 시각 이후여야 합니다."


class FutureClockOut(TimeClockError):
    code = "FUTURE_CLOCK_OUT"
    message = "퇴근 시각은 미래일 수 없습니다."


class CannotDeleteLastAdmin(TimeClockError):
    code = "CANNOT_DELETE_LAST_ADMIN"
    message = "마지막 관리자 계정은 삭제할 수 없습니다."


class PinAlreadyExists(TimeClockError):
    status_code = 409
    code = "PIN_ALREADY_EXISTS"
    message = "이미 사용 중인 PIN입니다."


class BootstrapUnavailable(TimeClockError):
    status_code = 409
    code = "BOOTSTRAP_UNAVAILABLE"
    message = "이미 직원이 등록되어 있어 초기 관리자를 생성할 수 없습니다."


# Auth
class InvalidCredentials(TimeClockError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    message = "PIN이 올바르지 않습니다."


class AdminPrivilegesRequired(TimeClockError):
    status_code = 403
    code = "ADMIN_PRIVILEGES_REQUIRED"
    message = "관리자 권한이 필요합니다."


# Concurrency / infrastructure
class ConcurrentModification(TimeClockError):
    status_code = 409
    code = "CONCURRENT_MODIFICATION"
    message = "다른 요청에서 먼저 수정되었습니다. 새로고침 후 다시 시도해주세요."


class StorageUnavailable(TimeClockError):
    status_code = 503
    code = "STORAGE_UNAVAILABLE"
    message = "일시적인 저장소 오류입니다. 잠시 후 다시 시도해주세요."

"""Auto Clockout Service 도메인 서비스 레이어입니다.

No-overtime 정책: 월~토 20:00, 일 18:00(기본값)에 진행 중인 모든 근무 기록을 마감하고 관리자 검토 대상으로 표시합니다.
진행 중 기록 조회는 하나의 스냅샷으로 수행하고, 기록별 마감은 각각 독립 트랜잭션으로 처리합니다.
한 건의 실패는 오류 목록에 담기고 나머지 처리를 중단시키지 않습니다.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from sqlalchemy.orm import Session

from timeclock.config import settings
from timeclock.models.employee import Employee
from timeclock.models.time_entry import TimeEntry
from timeclock.schemas.auto_clockout import AutoClockoutResult, ClockedOutEmployee, SelectiveClockoutItem
from timeclock.utils import clock
from timeclock.utils.permissions import require_admin
from timeclock.utils.transaction import run_in_transaction

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일")
UNKNOWN_EMPLOYEE = "알 수 없음"
SELECTIVE_REASON = "관리자 수동 자동퇴근 처리"


def get_closing_time(value: Union[date, datetime]) -> datetime:
    """해당 날짜의 영업 마감 시각을 반환합니다."""
    day = value.date() if isinstance(value, datetime) else value
    if day.weekday() == 6:
        hour, minute = settings.SUNDAY_CLOSING_HOUR, settings.SUNDAY_CLOSING_MINUTE
    else:
        hour, minute = settings.WEEKDAY_CLOSING_HOUR, settings.WEEKDAY_CLOSING_MINUTE
    return datetime(day.year, day.month, day.day, hour, minute)


def should_auto_clockout(now: Optional[datetime] = None) -> bool:
    now = now or clock.now()
    return now >= get_closing_time(now)


def get_next_closing_time(from_time: Optional[datetime] = None) -> datetime:
    from_time = from_time or clock.now()
    today_closing = get_closing_time(from_time)
    if today_closing > from_time:
        return today_closing
    return get_closing_time(from_time.date() + timedelta(days=1))


def format_closing_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def get_auto_clockout_reason(clock_out_time: datetime) -> str:
    weekday = WEEKDAY_NAMES[clock_out_time.weekday()]
    return (
        f"{weekday} {clock_out_time:%H:%M} 영업 마감 자동퇴근 "
        f"- 초과근무 금지 정책(NO OVERTIME)에 따라 마감 시각에 자동 퇴근 처리됨"
    )


def get_schedule_info(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or clock.now()
    today_closing = get_closing_time(now)
    active_count = db.query(TimeEntry).filter(TimeEntry.clock_out.is_(None)).count()
    return {
        "schedule": {
            "monday_to_saturday": format_closing_time(settings.WEEKDAY_CLOSING_HOUR, settings.WEEKDAY_CLOSING_MINUTE),
            "sunday": format_closing_time(settings.SUNDAY_CLOSING_HOUR, settings.SUNDAY_CLOSING_MINUTE),
            "next_clockout_time": get_next_closing_time(now),
        },
        "today": {
            "clockout_time": today_closing,
            "should_clockout": now >= today_closing,
            "time_remaining_seconds": max(0.0, (today_closing - now).total_seconds()),
        },
        "active_employees": active_count,
    }


def _snapshot_active_entries(db: Session) -> List[dict]:
    def _read(session: Session) -> List[dict]:
        rows = (
            session.query(TimeEntry.entry_id, TimeEntry.employee_id, TimeEntry.clock_in, Employee.name)
            .outerjoin(Employee, Employee.employee_id == TimeEntry.employee_id)
            .filter(TimeEntry.clock_out.is_(None))
            .order_by(TimeEntry.clock_in.asc())
            .all()
        )
        return [
            {
                "entry_id": row.entry_id,
                "employee_id": row.employee_id,
                "clock_in": row.clock_in,
                "employee_name": row.name or UNKNOWN_EMPLOYEE,
            }
            for row in rows
        ]

    return run_in_transaction(db, _read)


def _close_if_open(db: Session, entry_id: int, clock_in: datetime, clock_out_time: datetime, values: dict) -> bool:
    """진행 중일 때만 마감합니다. 이미 다른 경로로 마감된 기록이면 False (first-write-wins)."""
    hours = clock.hours_between(clock_in, clock_out_time)

    def _update(session: Session) -> bool:
        updated = (
            session.query(TimeEntry)
            .filter(TimeEntry.entry_id == entry_id, TimeEntry.clock_out.is_(None))
            .update(
                {
                    TimeEntry.clock_out: clock_out_time,
                    TimeEntry.hours_worked: hours,
                    TimeEntry.updated_at: clock.now(),
                    **values,
                },
                synchronize_session=False,
            )
        )
        return updated > 0

    return run_in_transaction(db, _update)


def run_auto_clockout(db: Session, target_time: Optional[datetime] = None, dry_run: bool = False) -> AutoClockoutResult:
    """진행 중인 모든 근무 기록을 target_time으로 마감합니다. dry_run이면 계산만 하고 기록하지 않습니다."""
    target_time = clock.to_local_naive(target_time) or clock.now()
    reason = get_auto_clockout_reason(target_time)
    prefix = "[dry-run] " if dry_run else ""
    result = AutoClockoutResult()

    logger.info("[auto-clockout] %sstarted for %s (no overtime policy)", prefix, target_time.isoformat())

    try:
        active_entries = _snapshot_active_entries(db)
    except Exception as exc:
        result.success = False
        result.errors.append(f"자동퇴근 처리 실패: {exc}")
        logger.error("[auto-clockout] snapshot read failed: %s", exc)
        return result

    logger.info("[auto-clockout] %sfound %d active entries", prefix, len(active_entries))

    for item in active_entries:
        summary = ClockedOutEmployee(
            employee_id=item["employee_id"],
            employee_name=item["employee_name"],
            clock_in=item["clock_in"],
            clock_out=target_time,
            hours_worked=clock.hours_between(item["clock_in"], target_time),
        )
        if target_time <= item["clock_in"]:
            result.errors.append(
                f"직원 {item['employee_id']} 자동퇴근 실패: 마감 시각이 출근 시각({item['clock_in']:%H:%M}) 이전입니다."
            )
            continue
        try:
            if dry_run:
                result.clocked_out_employees.append(summary)
                logger.info("[auto-clockout] [dry-run] would clock out %s (%.2fh)", summary.employee_name, summary.hours_worked)
                continue

            closed = _close_if_open(
                db,
                item["entry_id"],
                item["clock_in"],
                target_time,
                {
                    TimeEntry.is_auto_clock_out: True,
                    TimeEntry.auto_clock_out_reason: reason,
                    TimeEntry.needs_review: True,
                },
            )
            if not closed:
                result.skipped_count += 1
                logger.info("[auto-clockout] entry %s already closed, skipped", item["entry_id"])
                continue

            result.clocked_out_count += 1
            result.clocked_out_employees.append(summary)
            logger.info(
                "[auto-clockout] clocked out %s at %s (%.2fh)",
                summary.employee_name,
                target_time.isoformat(),
                summary.hours_worked,
            )
        except Exception as exc:
            message = f"직원 {item['employee_id']} 자동퇴근 실패: {exc}"
            result.errors.append(message)
            logger.error("[auto-clockout] %s", message)

    if result.errors:
        result.success = False

    logger.info(
        "[auto-clockout] %scompleted. success=%s clocked_out=%d skipped=%d errors=%d",
        prefix,
        result.success,
        result.clocked_out_count,
        result.skipped_count,
        len(result.errors),
    )
    return result


def run_selective_auto_clockout(
    db: Session,
    selections: Iterable[SelectiveClockoutItem],
    admin_id: int,
    now: Optional[datetime] = None,
) -> AutoClockoutResult:
    """관리자가 고른 직원들을 직원별 지정 시각으로 마감합니다. 관리자가 시각을 정했으므로 검토 대상이 아닙니다."""
    selections = list(selections)
    run_in_transaction(db, lambda session: require_admin(session, admin_id))

    result = AutoClockoutResult()
    logger.info("[auto-clockout] selective started for %d employees by admin %s", len(selections), admin_id)

    for item in selections:
        clock_out_time = clock.to_local_naive(item.clock_out_time)
        try:
            entry = (
                db.query(TimeEntry)
                .filter(TimeEntry.employee_id == item.employee_id, TimeEntry.clock_out.is_(None))
                .first()
            )
            if not entry:
                result.errors.append(f"직원 {item.employee_id}의 진행 중인 근무 기록이 없습니다.")
                continue

            employee = db.query(Employee).filter(Employee.employee_id == item.employee_id).first()
            employee_name = employee.name if employee else UNKNOWN_EMPLOYEE
            if clock_out_time <= entry.clock_in:
                result.errors.append(f"{employee_name}: 퇴근 시각은 출근 시각 이후여야 합니다.")
                continue

            entry_id, clock_in = entry.entry_id, entry.clock_in
            closed = _close_if_open(
                db,
                entry_id,
                clock_in,
                clock_out_time,
                {
                    TimeEntry.is_auto_clock_out: True,
                    TimeEntry.auto_clock_out_reason: f"{SELECTIVE_REASON} ({clock_out_time:%Y-%m-%d %H:%M})",
                    TimeEntry.needs_review: False,
                    TimeEntry.admin_corrected: True,
                    TimeEntry.corrected_by: admin_id,
                    TimeEntry.corrected_at: clock.to_local_naive(now) or clock.now(),
                },
            )
            if not closed:
                result.errors.append(f"{employee_name}: 처리 중 다른 요청으로 이미 퇴근 처리되었습니다.")
                continue

            result.clocked_out_count += 1
            result.clocked_out_employees.append(
                ClockedOutEmployee(
                    employee_id=item.employee_id,
                    employee_name=employee_name,
                    clock_in=clock_in,
                    clock_out=clock_out_time,
                    hours_worked=clock.hours_between(clock_in, clock_out_time),
                )
            )
            logger.info("[auto-clockout] manually clocked out %s at %s", employee_name, clock_out_time.isoformat())
        except Exception as exc:
            db.rollback()
            message = f"직원 {item.employee_id} 퇴근 처리 실패: {exc}"
            result.errors.append(message)
            logger.error("[auto-clockout] %s", message)

    # 일부라도 처리되었으면 성공으로 보고하고 오류 목록을 함께 반환한다.
    if result.errors and result.clocked_out_count == 0:
        result.success = False

    logger.info(
        "[auto-clockout] selective completed. success=%s clocked_out=%d errors=%d",
        result.success,
        result.clocked_out_count,
        len(result.errors),
    )
    return result


def check_and_run(db: Session, now: Optional[datetime] = None) -> AutoClockoutResult:
    """마감 시각이 지났을 때만 현재 시각으로 자동퇴근을 실행합니다. 외부 스케줄러가 주기적으로 호출합니다.

    마감 이후에 출근한 기록도 다음 호출에서 그 시각으로 마감됩니다.
    """
    now = now or clock.now()
    if not should_auto_clockout(now):
        logger.info("[auto-clockout] not needed, current time is before closing time")
        return AutoClockoutResult()
    return run_auto_clockout(db, now)


def enforce_no_overtime_now(db: Session, now: Optional[datetime] = None) -> AutoClockoutResult:
    """현재 시각과 무관하게 오늘 마감 시각으로 자동퇴근을 실행합니다."""
    closing_time = get_closing_time(now or clock.now())
    logger.info("[auto-clockout] enforcing no overtime policy at %s", closing_time.isoformat())
    result = run_auto_clockout(db, closing_time)
    if result.clocked_out_count > 0:
        logger.info(
            "[auto-clockout] auto-clocked out %d employees at closing time, all flagged for review",
            result.clocked_out_count,
        )
    return result

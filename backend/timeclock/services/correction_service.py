"""Correction Service 도메인 서비스 레이어입니다. 관리자 보정/정상확인, 일괄 보정, 검토 대기 목록과 직원별 그룹핑을 담당합니다.

보정 시 최초 자동퇴근 시각(original_clock_out)은 한 번만 보존되고, 보정자/보정 시각이 함께 기록됩니다.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from timeclock.config import settings
from timeclock.errors import (
    ClockOutBeforeClockIn,
    EntryNotFound,
    EntryStillActive,
    FutureClockOut,
    InvalidAction,
    InvalidCorrectionRequest,
)
from timeclock.models.employee import Employee
from timeclock.models.time_entry import TimeEntry
from timeclock.utils import clock
from timeclock.utils.permissions import require_admin
from timeclock.utils.transaction import run_in_transaction

logger = logging.getLogger(__name__)

MARK_CORRECT = "mark-correct"
BATCH_CORRECT = "batch-correct"
REVIEW_STATUSES = ("needs-review", "corrected", "auto-clockouts", "all")
DELETED_EMPLOYEE = "(삭제된 직원)"


def _validate_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    if len(notes) > 500:
        raise InvalidCorrectionRequest("관리자 메모는 500자를 초과할 수 없습니다.")
    return notes


def correct_entry(
    db: Session,
    entry_id: int,
    admin_id: int,
    new_clock_out: Optional[datetime] = None,
    notes: Optional[str] = None,
    mark_as_correct: bool = False,
    now: Optional[datetime] = None,
) -> TimeEntry:
    """종료된 근무 기록을 보정하거나 정상으로 확인합니다.

    - mark_as_correct=True, new_clock_out 없음: 퇴근 시각은 그대로 두고 보정 완료로 표시
    - new_clock_out 지정: 출근 이후/현재 이전인지 검증 후 교체, 근무시간 재계산
    두 경우 모두 needs_review를 해제하고 보정자/보정 시각을 기록합니다.
    """
    new_clock_out = clock.to_local_naive(new_clock_out)
    notes = _validate_notes(notes)

    def _correct(session: Session) -> TimeEntry:
        current = clock.to_local_naive(now) or clock.now()
        require_admin(session, admin_id)

        entry = session.query(TimeEntry).filter(TimeEntry.entry_id == entry_id).first()
        if not entry:
            raise EntryNotFound()
        if entry.is_active:
            raise EntryStillActive()

        if mark_as_correct and new_clock_out is None:
            entry.admin_corrected = True
        elif new_clock_out is not None and not mark_as_correct:
            if new_clock_out <= entry.clock_in:
                raise ClockOutBeforeClockIn()
            if new_clock_out > current:
                raise FutureClockOut()
            if entry.original_clock_out is None and entry.is_auto_clock_out:
                entry.original_clock_out = entry.clock_out
            entry.close(new_clock_out)
            entry.admin_corrected = True
        else:
            raise InvalidCorrectionRequest()

        entry.needs_review = False
        entry.corrected_by = admin_id
        entry.corrected_at = current
        if notes is not None:
            entry.admin_notes = notes
        session.flush()
        return entry

    entry = run_in_transaction(db, _correct)
    db.refresh(entry)
    logger.info(
        "[correction] entry %s %s by admin %s",
        entry_id,
        "marked correct" if new_clock_out is None else f"clock_out -> {new_clock_out.isoformat()}",
        admin_id,
    )
    return entry


def batch_correct(
    db: Session,
    action: str,
    entry_ids: List[int],
    admin_id: int,
    clock_out_time: Optional[datetime] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """여러 기록을 한 트랜잭션으로 정상확인/일괄 보정하고, 실제 변경된 건수를 반환합니다.

    진행 중인 기록과, batch-correct에서 출근 시각이 지정 퇴근 시각 이후인 기록은 조용히 제외됩니다.
    """
    if action not in (MARK_CORRECT, BATCH_CORRECT):
        raise InvalidAction()
    if action == BATCH_CORRECT and clock_out_time is None:
        raise InvalidCorrectionRequest("일괄 보정에는 퇴근 시각이 필요합니다.")
    clock_out_time = clock.to_local_naive(clock_out_time)
    notes = _validate_notes(notes)
    ids = list(dict.fromkeys(entry_ids or []))

    def _apply(session: Session) -> int:
        current = clock.to_local_naive(now) or clock.now()
        require_admin(session, admin_id)
        if not ids:
            return 0

        q = session.query(TimeEntry).filter(TimeEntry.entry_id.in_(ids), TimeEntry.clock_out.isnot(None))
        values = {
            TimeEntry.needs_review: False,
            TimeEntry.admin_corrected: True,
            TimeEntry.corrected_by: admin_id,
            TimeEntry.corrected_at: current,
            TimeEntry.updated_at: current,
        }
        if notes:
            values[TimeEntry.admin_notes] = notes

        if action == MARK_CORRECT:
            return q.update(values, synchronize_session=False)

        if clock_out_time > current:
            raise FutureClockOut()
        modified = 0
        for entry in q.filter(TimeEntry.clock_in < clock_out_time).all():
            if entry.original_clock_out is None and entry.is_auto_clock_out:
                entry.original_clock_out = entry.clock_out
            entry.close(clock_out_time)
            for column, value in values.items():
                setattr(entry, column.key, value)
            modified += 1
        session.flush()
        return modified

    modified = run_in_transaction(db, _apply)
    logger.info(
        "[correction] batch %s by admin %s: requested=%d modified=%d",
        action,
        admin_id,
        len(ids),
        modified,
    )
    return modified


def _priority(age_days: float) -> str:
    if age_days >= settings.REVIEW_HIGH_PRIORITY_DAYS:
        return "high"
    if age_days >= settings.REVIEW_MEDIUM_PRIORITY_DAYS:
        return "medium"
    return "low"


def group_by_employee_needing_review(db: Session, employee_id: Optional[int] = None, now: Optional[datetime] = None) -> dict:
    """needs_review 기록을 직원별로 묶고, 가장 오래된 검토 대기 기간으로 우선순위를 매깁니다.

    검토 대기 시작 시각은 기록의 updated_at(자동퇴근으로 플래그된 시점)입니다.
    """
    now = now or clock.now()
    emp = aliased(Employee)
    q = (
        db.query(TimeEntry, emp)
        .outerjoin(emp, emp.employee_id == TimeEntry.employee_id)
        .filter(TimeEntry.needs_review == True)  # noqa: E712
    )
    if employee_id is not None:
        q = q.filter(TimeEntry.employee_id == employee_id)
    rows = q.order_by(TimeEntry.updated_at.asc(), TimeEntry.entry_id.asc()).all()

    groups: dict = {}
    for entry, employee in rows:
        age_days = max(0.0, (now - entry.updated_at).total_seconds() / 86400)
        group = groups.get(entry.employee_id)
        if group is None:
            group = {
                "employee_id": entry.employee_id,
                "employee_name": employee.name if employee else DELETED_EMPLOYEE,
                "is_admin": bool(employee and employee.is_admin),
                "entries": [],
                "total_entries": 0,
                "total_hours": 0.0,
                "oldest_review_days": 0.0,
            }
            groups[entry.employee_id] = group
        group["entries"].append({
            "entry_id": entry.entry_id,
            "clock_in": entry.clock_in,
            "clock_out": entry.clock_out,
            "hours_worked": entry.hours_worked,
            "is_auto_clock_out": entry.is_auto_clock_out,
            "auto_clock_out_reason": entry.auto_clock_out_reason,
            "original_clock_out": entry.original_clock_out,
            "days_since_review": int(age_days),
            "updated_at": entry.updated_at,
        })
        group["total_entries"] += 1
        group["total_hours"] += entry.hours_worked or 0.0
        group["oldest_review_days"] = max(group["oldest_review_days"], age_days)

    employee_groups = list(groups.values())
    for group in employee_groups:
        group["priority"] = _priority(group["oldest_review_days"])
    employee_groups.sort(key=lambda g: (-g["oldest_review_days"], -g["total_entries"]))

    totals = (
        db.query(
            func.count(TimeEntry.entry_id),
            func.count(func.distinct(TimeEntry.employee_id)),
            func.coalesce(func.sum(TimeEntry.hours_worked), 0.0),
        )
        .filter(TimeEntry.needs_review == True)  # noqa: E712
        .one()
    )
    return {
        "employee_groups": employee_groups,
        "stats": {
            "total_needs_review": int(totals[0] or 0),
            "total_employees_with_reviews": int(totals[1] or 0),
            "total_hours_needing_review": float(totals[2] or 0.0),
        },
        "generated_at": now,
    }


def list_review_entries(
    db: Session,
    status: str = "needs-review",
    employee_id: Optional[int] = None,
    period: str = "week",
    limit: int = 50,
    now: Optional[datetime] = None,
) -> dict:
    if status not in REVIEW_STATUSES:
        raise InvalidAction("유효하지 않은 상태 필터입니다.")
    now = now or clock.now()

    emp = aliased(Employee)
    corrector = aliased(Employee)
    q = (
        db.query(TimeEntry, emp.name, corrector.name)
        .outerjoin(emp, emp.employee_id == TimeEntry.employee_id)
        .outerjoin(corrector, corrector.employee_id == TimeEntry.corrected_by)
    )
    if status == "needs-review":
        q = q.filter(TimeEntry.needs_review == True)  # noqa: E712
    elif status == "corrected":
        q = q.filter(TimeEntry.admin_corrected == True)  # noqa: E712
    elif status == "auto-clockouts":
        q = q.filter(TimeEntry.is_auto_clock_out == True)  # noqa: E712
    if employee_id is not None:
        q = q.filter(TimeEntry.employee_id == employee_id)
    # 검토 대기 목록은 기간과 무관하게 전부 보여준다.
    if status != "needs-review":
        since = clock.period_start(period, now)
        if since is not None:
            q = q.filter(TimeEntry.clock_in >= since)

    rows = q.order_by(TimeEntry.clock_in.desc()).limit(limit).all()
    entries = []
    for entry, employee_name, corrector_name in rows:
        item = {column.name: getattr(entry, column.name) for column in TimeEntry.__table__.columns}
        item["employee_name"] = employee_name
        item["corrected_by_name"] = corrector_name
        entries.append(item)

    total_needs_review = db.query(TimeEntry).filter(TimeEntry.needs_review == True).count()  # noqa: E712
    auto_needing_review = (
        db.query(TimeEntry)
        .filter(TimeEntry.is_auto_clock_out == True, TimeEntry.needs_review == True)  # noqa: E712
        .count()
    )
    corrected_today = (
        db.query(TimeEntry)
        .filter(TimeEntry.admin_corrected == True, TimeEntry.corrected_at >= clock.start_of_day(now))  # noqa: E712
        .count()
    )
    return {
        "entries": entries,
        "stats": {
            "total_needs_review": total_needs_review,
            "auto_clockouts_needing_review": auto_needing_review,
            "corrected_today": corrected_today,
            "total_results": len(entries),
        },
    }

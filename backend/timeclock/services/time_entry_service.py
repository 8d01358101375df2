"""Time Entry Service 도메인 서비스 레이어입니다. 출근/퇴근 상태 전이와 '직원당 진행 중 기록 1건' 규칙을 캡슐화합니다."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from timeclock.errors import AlreadyClockedIn, ClockOutBeforeClockIn, EntryNotFound, NoActiveClockIn
from timeclock.models.employee import Employee
from timeclock.models.time_entry import TimeEntry
from timeclock.utils import clock
from timeclock.utils.permissions import get_employee_or_404
from timeclock.utils.transaction import run_in_transaction

logger = logging.getLogger(__name__)


def get_active_entry(db: Session, employee_id: int) -> Optional[TimeEntry]:
    return (
        db.query(TimeEntry)
        .filter(TimeEntry.employee_id == employee_id, TimeEntry.clock_out.is_(None))
        .first()
    )


def clock_in(db: Session, employee_id: int, now: Optional[datetime] = None) -> TimeEntry:
    clock_in_at = clock.to_local_naive(now) or clock.now()

    def _clock_in(session: Session) -> TimeEntry:
        get_employee_or_404(session, employee_id)
        if get_active_entry(session, employee_id):
            raise AlreadyClockedIn()

        entry = TimeEntry(employee_id=employee_id, clock_in=clock_in_at)
        session.add(entry)
        try:
            session.flush()
        except IntegrityError as exc:
            # 동시 출근 요청이 먼저 커밋된 경우 부분 유니크 인덱스에서 걸린다.
            raise AlreadyClockedIn() from exc
        return entry

    entry = run_in_transaction(db, _clock_in)
    db.refresh(entry)
    return entry


def clock_out(db: Session, employee_id: int, now: Optional[datetime] = None) -> TimeEntry:
    clock_out_at = clock.to_local_naive(now) or clock.now()

    def _clock_out(session: Session) -> int:
        get_employee_or_404(session, employee_id)
        entry = get_active_entry(session, employee_id)
        if not entry:
            raise NoActiveClockIn()
        if clock_out_at <= entry.clock_in:
            raise ClockOutBeforeClockIn()

        updated = (
            session.query(TimeEntry)
            .filter(TimeEntry.entry_id == entry.entry_id, TimeEntry.clock_out.is_(None))
            .update(
                {
                    TimeEntry.clock_out: clock_out_at,
                    TimeEntry.hours_worked: clock.hours_between(entry.clock_in, clock_out_at),
                    TimeEntry.updated_at: clock.now(),
                },
                synchronize_session=False,
            )
        )
        if updated == 0:
            raise NoActiveClockIn()
        return entry.entry_id

    entry_id = run_in_transaction(db, _clock_out)
    return get_entry_or_404(db, entry_id)


def get_entry_or_404(db: Session, entry_id: int) -> TimeEntry:
    entry = db.query(TimeEntry).filter(TimeEntry.entry_id == entry_id).first()
    if not entry:
        raise EntryNotFound()
    db.refresh(entry)
    return entry


def get_entry_detail(db: Session, entry_id: int) -> dict:
    entry = get_entry_or_404(db, entry_id)
    names = dict(
        db.query(Employee.employee_id, Employee.name)
        .filter(Employee.employee_id.in_([entry.employee_id, entry.corrected_by or -1]))
        .all()
    )
    return {
        **_entry_fields(entry),
        "employee_name": names.get(entry.employee_id),
        "corrected_by_name": names.get(entry.corrected_by) if entry.corrected_by else None,
    }


def _entry_fields(entry: TimeEntry) -> dict:
    return {column.name: getattr(entry, column.name) for column in TimeEntry.__table__.columns}


def list_time_entries(db: Session, employee_id: Optional[int] = None, period: Optional[str] = None):
    q = db.query(TimeEntry)
    if employee_id is not None:
        q = q.filter(TimeEntry.employee_id == employee_id)
    since = clock.period_start(period)
    if since is not None:
        q = q.filter(TimeEntry.clock_in >= since)
    return q.order_by(TimeEntry.clock_in.desc()).all()


def list_active_employees(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or clock.now()
    emp = aliased(Employee)
    rows = (
        db.query(TimeEntry, emp)
        .outerjoin(emp, emp.employee_id == TimeEntry.employee_id)
        .filter(TimeEntry.clock_out.is_(None))
        .order_by(TimeEntry.clock_in.asc())
        .all()
    )

    active = []
    for entry, employee in rows:
        active.append({
            "entry_id": entry.entry_id,
            "employee_id": entry.employee_id,
            "name": employee.name if employee else None,
            "is_admin": bool(employee and employee.is_admin),
            "clock_in": entry.clock_in,
            "current_hours": max(0.0, clock.hours_between(entry.clock_in, now)),
        })

    hours = [item["current_hours"] for item in active]
    admins = sum(1 for item in active if item["is_admin"])
    return {
        "active_employees": active,
        "stats": {
            "total_active": len(active),
            "active_admins": admins,
            "active_employees": len(active) - admins,
            "longest_shift": max(hours) if hours else 0.0,
            "shortest_shift": min(hours) if hours else 0.0,
            "average_shift_length": sum(hours) / len(hours) if hours else 0.0,
        },
    }

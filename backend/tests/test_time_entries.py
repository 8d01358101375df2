"""출근/퇴근 상태 전이와 직원당 진행 중 기록 1건 규칙을 검증하는 테스트입니다."""

import threading
from datetime import datetime

import pytest

from timeclock.errors import AlreadyClockedIn, ClockOutBeforeClockIn, EmployeeNotFound, NoActiveClockIn
from timeclock.models.time_entry import TimeEntry
from timeclock.services import time_entry_service
from tests.conftest import TestingSession, auth_headers, make_entry


def test_clock_in_then_out_computes_hours(db, seed_employees):
    staff = seed_employees["staff"]
    entry = time_entry_service.clock_in(db, staff.employee_id, now=datetime(2025, 3, 3, 9, 0))
    assert entry.clock_out is None
    assert entry.hours_worked is None
    assert entry.is_auto_clock_out is False
    assert entry.needs_review is False

    closed = time_entry_service.clock_out(db, staff.employee_id, now=datetime(2025, 3, 3, 17, 30))
    assert closed.entry_id == entry.entry_id
    assert closed.clock_out == datetime(2025, 3, 3, 17, 30)
    assert closed.hours_worked == pytest.approx(8.5)


def test_clock_in_twice_rejected(db, seed_employees):
    staff = seed_employees["staff"]
    time_entry_service.clock_in(db, staff.employee_id, now=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(AlreadyClockedIn):
        time_entry_service.clock_in(db, staff.employee_id, now=datetime(2025, 3, 3, 9, 5))
    assert db.query(TimeEntry).filter(TimeEntry.employee_id == staff.employee_id).count() == 1


def test_clock_out_without_active_entry_rejected(db, seed_employees):
    with pytest.raises(NoActiveClockIn):
        time_entry_service.clock_out(db, seed_employees["staff"].employee_id, now=datetime(2025, 3, 3, 18, 0))


def test_clock_out_at_or_before_clock_in_rejected(db, seed_employees):
    staff = seed_employees["staff"]
    time_entry_service.clock_in(db, staff.employee_id, now=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(ClockOutBeforeClockIn):
        time_entry_service.clock_out(db, staff.employee_id, now=datetime(2025, 3, 3, 9, 0))
    assert time_entry_service.get_active_entry(db, staff.employee_id) is not None


def test_clock_in_unknown_employee(db, seed_employees):
    with pytest.raises(EmployeeNotFound):
        time_entry_service.clock_in(db, 9999, now=datetime(2025, 3, 3, 9, 0))


def test_clock_in_again_after_clock_out(db, seed_employees):
    staff = seed_employees["staff"]
    time_entry_service.clock_in(db, staff.employee_id, now=datetime(2025, 3, 3, 9, 0))
    time_entry_service.clock_out(db, staff.employee_id, now=datetime(2025, 3, 3, 12, 0))
    second = time_entry_service.clock_in(db, staff.employee_id, now=datetime(2025, 3, 3, 13, 0))
    assert second.clock_out is None
    assert db.query(TimeEntry).filter(TimeEntry.employee_id == staff.employee_id).count() == 2


def test_concurrent_clock_in_creates_single_open_entry(db, seed_employees):
    employee_id = seed_employees["staff"].employee_id
    workers = 5
    barrier = threading.Barrier(workers)
    outcomes = []
    lock = threading.Lock()

    def worker():
        session = TestingSession()
        try:
            barrier.wait()
            time_entry_service.clock_in(session, employee_id, now=datetime(2025, 3, 3, 9, 0))
            result = "ok"
        except AlreadyClockedIn:
            result = "already"
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("already") == workers - 1
    open_entries = (
        db.query(TimeEntry)
        .filter(TimeEntry.employee_id == employee_id, TimeEntry.clock_out.is_(None))
        .count()
    )
    assert open_entries == 1


def test_open_entry_unique_index_rejects_second_open_row(db, seed_employees):
    from sqlalchemy.exc import IntegrityError

    employee_id = seed_employees["staff"].employee_id
    make_entry(db, employee_id, datetime(2025, 3, 3, 9, 0))
    db.add(TimeEntry(employee_id=employee_id, clock_in=datetime(2025, 3, 3, 10, 0)))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_list_time_entries_by_period(db, seed_employees, freeze_clock):
    freeze_clock(datetime(2025, 3, 5, 12, 0))  # 수요일
    staff = seed_employees["staff"]
    make_entry(db, staff.employee_id, datetime(2025, 2, 20, 9, 0), datetime(2025, 2, 20, 17, 0))
    make_entry(db, staff.employee_id, datetime(2025, 3, 2, 9, 0), datetime(2025, 3, 2, 17, 0))  # 일요일
    make_entry(db, staff.employee_id, datetime(2025, 3, 5, 9, 0), datetime(2025, 3, 5, 11, 0))

    assert len(time_entry_service.list_time_entries(db, staff.employee_id, "all")) == 3
    assert len(time_entry_service.list_time_entries(db, staff.employee_id, "month")) == 2
    assert len(time_entry_service.list_time_entries(db, staff.employee_id, "week")) == 2
    today = time_entry_service.list_time_entries(db, staff.employee_id, "today")
    assert [e.clock_in for e in today] == [datetime(2025, 3, 5, 9, 0)]


def test_active_employees_stats(db, seed_employees):
    make_entry(db, seed_employees["admin"].employee_id, datetime(2025, 3, 3, 8, 0))
    make_entry(db, seed_employees["staff"].employee_id, datetime(2025, 3, 3, 10, 0))

    result = time_entry_service.list_active_employees(db, now=datetime(2025, 3, 3, 12, 0))
    stats = result["stats"]
    assert stats["total_active"] == 2
    assert stats["active_admins"] == 1
    assert stats["active_employees"] == 1
    assert stats["longest_shift"] == pytest.approx(4.0)
    assert stats["shortest_shift"] == pytest.approx(2.0)
    assert stats["average_shift_length"] == pytest.approx(3.0)
    assert [item["name"] for item in result["active_employees"]] == ["관리자", "김직원"]


def test_clock_actions_over_http(client, seed_employees, freeze_clock):
    headers = auth_headers(client, "5678")

    freeze_clock(datetime(2025, 3, 3, 9, 0))
    resp = client.post("/api/timeentries", json={"action": "clockIn"}, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["time_entry"]["clock_out"] is None

    dup = client.post("/api/timeentries", json={"action": "clockIn"}, headers=headers)
    assert dup.status_code == 409
    assert dup.json()["code"] == "ALREADY_CLOCKED_IN"

    active = client.get("/api/timeentries/active", headers=headers)
    assert active.json()["is_clocked_in"] is True

    freeze_clock(datetime(2025, 3, 3, 17, 30))
    out = client.post("/api/timeentries", json={"action": "clockOut"}, headers=headers)
    assert out.status_code == 200
    assert out.json()["time_entry"]["hours_worked"] == pytest.approx(8.5)

    again = client.post("/api/timeentries", json={"action": "clockOut"}, headers=headers)
    assert again.status_code == 409
    assert again.json()["code"] == "NO_ACTIVE_CLOCK_IN"


def test_invalid_clock_action_rejected(client, seed_employees):
    headers = auth_headers(client, "5678")
    resp = client.post("/api/timeentries", json={"action": "lunch"}, headers=headers)
    assert resp.status_code == 422


def test_staff_listing_limited_to_own_entries(client, db, seed_employees):
    make_entry(db, seed_employees["staff"].employee_id, datetime(2025, 3, 3, 9, 0), datetime(2025, 3, 3, 17, 0))
    make_entry(db, seed_employees["staff2"].employee_id, datetime(2025, 3, 3, 9, 0), datetime(2025, 3, 3, 17, 0))

    staff_headers = auth_headers(client, "5678")
    resp = client.get(
        "/api/timeentries",
        params={"employee_id": seed_employees["staff2"].employee_id},
        headers=staff_headers,
    )
    assert resp.status_code == 200
    assert {e["employee_id"] for e in resp.json()} == {seed_employees["staff"].employee_id}

    admin_headers = auth_headers(client, "1234")
    all_resp = client.get("/api/timeentries", headers=admin_headers)
    assert len(all_resp.json()) == 2

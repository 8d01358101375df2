"""일/주/월/연 근무시간 집계 리포트와 요약 통계를 검증하는 테스트입니다."""

from datetime import date, datetime

import pytest

from timeclock.errors import EmployeeNotFound, InvalidReportPeriod
from timeclock.services import report_service
from tests.conftest import auth_headers, make_entry


@pytest.fixture
def worked_year(db, seed_employees):
    staff_id = seed_employees["staff"].employee_id
    spans = [
        (datetime(2025, 2, 3, 9, 0), datetime(2025, 2, 3, 17, 30)),
        (datetime(2025, 3, 3, 9, 0), datetime(2025, 3, 3, 12, 0)),
        (datetime(2025, 3, 3, 13, 0), datetime(2025, 3, 3, 18, 0)),
        (datetime(2025, 3, 8, 10, 0), datetime(2025, 3, 8, 14, 15)),
        (datetime(2025, 3, 31, 9, 0), datetime(2025, 3, 31, 20, 0)),
        (datetime(2024, 12, 31, 9, 0), datetime(2024, 12, 31, 17, 0)),
    ]
    for clock_in, clock_out in spans:
        make_entry(db, staff_id, clock_in, clock_out)
    # 진행 중인 기록은 집계에서 제외
    make_entry(db, staff_id, datetime(2025, 4, 1, 9, 0))
    # 검토 대기 중인 자동퇴근 기록도 집계에 포함
    make_entry(
        db,
        staff_id,
        datetime(2025, 3, 20, 9, 0),
        datetime(2025, 3, 20, 20, 0),
        is_auto_clock_out=True,
        needs_review=True,
    )
    return staff_id


def test_yearly_report_sums_are_consistent(db, worked_year):
    report = report_service.build_report(db, worked_year, 2025)

    expected_total = 8.5 + 3 + 5 + 4.25 + 11 + 11
    day_hours = sum(d.hours for m in report.data.months for w in m.weeks for d in w.days)
    assert day_hours == pytest.approx(expected_total)
    for month in report.data.months:
        assert sum(w.total_hours for w in month.weeks) == pytest.approx(month.total_hours)
        for week in month.weeks:
            assert sum(d.hours for d in week.days) == pytest.approx(week.total_hours)
    assert sum(m.total_hours for m in report.data.months) == pytest.approx(report.data.total_hours)
    assert report.data.total_hours == pytest.approx(expected_total)

    assert [m.month for m in report.data.months] == [2, 3]
    assert report.data.months[1].month_name == "3월"
    assert report.summary.total_entries == 6
    assert report.summary.days_worked == 5
    assert report.summary.average_hours_per_entry == pytest.approx(expected_total / 6)
    assert report.report_period.start_date == date(2025, 1, 1)
    assert report.report_period.end_date == date(2025, 12, 31)


def test_weeks_anchor_to_first_of_month(db, worked_year):
    march = report_service.build_report(db, worked_year, 2025, 3).data.months[0]

    assert [w.week_number for w in march.weeks] == [1, 2, 3, 4, 5]
    assert march.weeks[0].start_date == date(2025, 3, 1)
    assert march.weeks[0].end_date == date(2025, 3, 7)
    assert march.weeks[4].start_date == date(2025, 3, 29)
    assert march.weeks[4].end_date == date(2025, 3, 31)
    assert len(march.weeks[4].days) == 3
    assert march.weeks[0].week_label == "1주차"

    # 3월 3일(월) 두 세션이 같은 날로 합산된다.
    march_3 = march.weeks[0].days[2]
    assert march_3.work_date == date(2025, 3, 3)
    assert march_3.day_of_week == "월요일"
    assert march_3.hours == pytest.approx(8.0)
    assert len(march_3.entries) == 2
    # 3월 8일은 2주차 첫날
    assert march.weeks[1].days[0].hours == pytest.approx(4.25)
    assert march.weeks[0].total_hours == pytest.approx(8.0)


def test_february_has_four_weeks(db, worked_year):
    february = report_service.build_report(db, worked_year, 2025, 2).data.months[0]
    assert len(february.weeks) == 4
    assert february.weeks[-1].end_date == date(2025, 2, 28)


def test_requested_empty_month_is_included(db, worked_year):
    report = report_service.build_report(db, worked_year, 2025, 6)

    assert len(report.data.months) == 1
    assert report.data.months[0].total_hours == 0
    assert len(report.data.months[0].weeks) == 5
    assert report.summary.total_entries == 0
    assert report.summary.average_hours_per_entry == 0
    assert report.summary.days_worked == 0


def test_report_validation(db, worked_year):
    with pytest.raises(InvalidReportPeriod):
        report_service.build_report(db, worked_year, 2025, 13)
    with pytest.raises(EmployeeNotFound):
        report_service.build_report(db, 9999, 2025)


def test_analytics_summary(db, worked_year, seed_employees):
    make_entry(db, seed_employees["staff2"].employee_id, datetime(2025, 3, 3, 9, 0), datetime(2025, 3, 3, 11, 0))

    own = report_service.get_analytics(db, employee_id=worked_year, period="all")
    assert own["total_shifts"] == 7
    assert own["total_hours"] == pytest.approx(round(8.5 + 3 + 5 + 4.25 + 11 + 11 + 8, 1))
    assert len(own["recent_entries"]) == 7

    today = report_service.get_analytics(db, period="today", now=datetime(2025, 3, 3, 21, 0))
    assert today["total_shifts"] == 3
    assert today["total_hours"] == pytest.approx(10.0)
    assert today["average_hours"] == pytest.approx(3.3)


def test_report_endpoint_permissions(client, db, worked_year, seed_employees):
    staff_headers = auth_headers(client, "5678")
    own = client.get("/api/reports/employee", params={"employee_id": worked_year, "year": 2025}, headers=staff_headers)
    assert own.status_code == 200, own.text
    assert own.json()["employee"]["name"] == "김직원"
    assert own.json()["summary"]["total_entries"] == 6

    other = client.get(
        "/api/reports/employee",
        params={"employee_id": seed_employees["staff2"].employee_id, "year": 2025},
        headers=staff_headers,
    )
    assert other.status_code == 403

    admin_headers = auth_headers(client, "1234")
    bad_month = client.get(
        "/api/reports/employee",
        params={"employee_id": worked_year, "year": 2025, "month": 0},
        headers=admin_headers,
    )
    assert bad_month.status_code == 400
    assert bad_month.json()["code"] == "INVALID_REPORT_PERIOD"

    analytics = client.get("/api/analytics", params={"period": "all"}, headers=staff_headers)
    assert analytics.status_code == 200
    assert analytics.json()["total_shifts"] == 7

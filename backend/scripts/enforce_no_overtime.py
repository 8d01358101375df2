"""No-overtime 정책 수동 실행 스크립트.

기본: 현재 시각과 무관하게 오늘 마감 시각으로 진행 중인 모든 근무 기록을 자동퇴근 처리합니다.
--check: 마감 시각이 지났을 때만 현재 시각으로 실행합니다(cron 호출과 동일).
--dry-run: 대상만 출력하고 기록하지 않습니다.
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timeclock.config import settings
from timeclock.database import SessionLocal
from timeclock.services import auto_clockout_service
from timeclock.utils import clock


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--check", action="store_true", help="Run only if closing time has passed")
    parser.add_argument("--dry-run", action="store_true", help="Report affected entries without writing")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    now = clock.now()
    db = SessionLocal()
    try:
        if args.check and not auto_clockout_service.should_auto_clockout(now):
            print(f"Closing time not reached yet (next: {auto_clockout_service.get_next_closing_time(now):%Y-%m-%d %H:%M}).")
            return 0
        # --check는 cron과 같이 현재 시각으로, 기본 실행은 오늘 마감 시각으로 마감한다.
        target_time = now if args.check else auto_clockout_service.get_closing_time(now)
        result = auto_clockout_service.run_auto_clockout(db, target_time, dry_run=args.dry_run)
    finally:
        db.close()

    print("No-overtime enforcement result")
    print(f"  dry_run: {args.dry_run}")
    print(f"  target_time: {target_time:%Y-%m-%d %H:%M}")
    print(f"  success: {result.success}")
    print(f"  clocked_out_count: {result.clocked_out_count}")
    print(f"  skipped_count: {result.skipped_count}")
    for item in result.clocked_out_employees:
        print(f"  - {item.employee_name}: {item.clock_in:%H:%M} -> {item.clock_out:%H:%M} ({item.hours_worked:.2f}h)")
    for error in result.errors:
        print(f"  ! {error}")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())

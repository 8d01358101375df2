"""스케줄러(cron) 전용 자동퇴근 트리거 라우터입니다. Authorization: Bearer <CRON_SECRET> 으로 인증합니다."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timeclock.database import get_db
from timeclock.middleware.auth_middleware import verify_cron_secret
from timeclock.services import auto_clockout_service
from timeclock.utils import clock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.post("/auto-clockout", dependencies=[Depends(verify_cron_secret)])
def cron_auto_clockout(db: Session = Depends(get_db)):
    logger.info("[cron] auto-clockout job started")
    result = auto_clockout_service.check_and_run(db)
    logger.info(
        "[cron] auto-clockout job completed: success=%s clocked_out=%d errors=%d",
        result.success,
        result.clocked_out_count,
        len(result.errors),
    )
    return {
        "success": result.success,
        "message": f"자동퇴근 완료: {result.clocked_out_count}명 퇴근 처리",
        "details": {
            "clocked_out_count": result.clocked_out_count,
            "skipped_count": result.skipped_count,
            "errors": result.errors,
            "clocked_out_employees": [
                {"name": e.employee_name, "hours_worked": round(e.hours_worked, 2)}
                for e in result.clocked_out_employees
            ],
        },
        "timestamp": clock.now(),
    }


@router.get("/auto-clockout")
def cron_health():
    return {
        "service": "auto-clockout-cron",
        "status": "active",
        "timestamp": clock.now(),
    }

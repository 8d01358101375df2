"""영업시간 기준 현재 시각과 시간대 변환 헬퍼입니다.

DB에는 영업 시간대(settings.TIMEZONE, 비어 있으면 서버 로컬)의 naive 벽시계 시각을 저장한다.
서비스 코드는 ``clock.now()``를 통해서만 현재 시각을 얻으므로 테스트에서 교체할 수 있다.
"""

from datetime import datetime, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from timeclock.config import settings


def business_tz() -> Optional[tzinfo]:
    name = (settings.TIMEZONE or "").strip()
    return ZoneInfo(name) if name else None


def now() -> datetime:
    tz = business_tz()
    if tz is None:
        return datetime.now()
    return datetime.now(tz).replace(tzinfo=None)


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """aware datetime을 영업 시간대 naive 시각으로 맞춥니다. naive 값은 그대로 둡니다."""
    if value is None or value.tzinfo is None:
        return value
    tz = business_tz()
    local = value.astimezone(tz) if tz is not None else value.astimezone()
    return local.replace(tzinfo=None)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def period_start(period: Optional[str], reference: Optional[datetime] = None) -> Optional[datetime]:
    """조회 기간(today/week/month/all)의 시작 시각. 주는 일요일에 시작합니다."""
    reference = reference or now()
    if period == "today":
        return start_of_day(reference)
    if period == "week":
        days_since_sunday = (reference.weekday() + 1) % 7
        return start_of_day(reference - timedelta(days=days_since_sunday))
    if period == "month":
        return start_of_day(reference.replace(day=1))
    return None

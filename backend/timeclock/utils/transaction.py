"""트랜잭션 실행과 일시적 오류 재시도(지수 백오프) 헬퍼입니다."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from timeclock.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_MARKERS = (
    "database is locked",
    "database table is locked",
    "deadlock",
    "could not serialize",
    "serialization failure",
    "lock wait timeout",
    "connection reset",
    "connection refused",
    "server closed the connection",
    "timed out",
)


def is_transient_error(exc: BaseException) -> bool:
    if isinstance(exc, (IntegrityError, StaleDataError)):
        return False
    if isinstance(exc, PoolTimeoutError):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if isinstance(exc, DBAPIError):
        text = str(exc).lower()
        return any(marker in text for marker in TRANSIENT_MARKERS)
    return False


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = field(default_factory=lambda: settings.TX_MAX_RETRIES)
    base_delay_ms: int = field(default_factory=lambda: settings.TX_BASE_DELAY_MS)
    max_delay_ms: int = field(default_factory=lambda: settings.TX_MAX_DELAY_MS)
    is_retryable: Callable[[BaseException], bool] = is_transient_error

    def delay_seconds(self, attempt: int) -> float:
        return min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms) / 1000


def with_retry(operation: Callable[[], T], policy: Optional[RetryPolicy] = None) -> T:
    """operation을 실행하고, 일시적 오류면 지수 백오프로 최대 max_retries번 재시도합니다.

    재시도 대상이 아닌 오류는 즉시, 재시도가 모두 소진되면 마지막 오류를 그대로 전파합니다.
    """
    policy = policy or RetryPolicy()
    attempt = 0
    while True:
        try:
            return operation()
        except Exception as exc:
            if attempt >= policy.max_retries or not policy.is_retryable(exc):
                raise
            delay = policy.delay_seconds(attempt)
            logger.warning(
                "[tx] operation failed (attempt %d/%d), retrying in %.0fms: %s",
                attempt + 1,
                policy.max_retries + 1,
                delay * 1000,
                exc,
            )
            time.sleep(delay)
            attempt += 1


def run_in_transaction(db: Session, fn: Callable[[Session], T], policy: Optional[RetryPolicy] = None) -> T:
    """fn(db)를 하나의 트랜잭션으로 실행합니다. 예외 시 롤백하고, 성공 시 커밋합니다."""

    def attempt() -> T:
        try:
            result = fn(db)
            db.commit()
            return result
        except Exception:
            db.rollback()
            raise

    return with_retry(attempt, policy)

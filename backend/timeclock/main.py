"""FastAPI 애플리케이션 진입점. 로깅, 미들웨어, 예외 핸들러, API 라우터를 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from timeclock.config import settings
from timeclock.database import Base, engine
from timeclock.errors import StorageUnavailable, TimeClockError
import timeclock.models  # noqa: F401 - 모델 import로 metadata 등록
from timeclock.routers import (
    auth, bootstrap, employees, time_entries, review, auto_clockout, cron, reports,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="출퇴근 관리 시스템",
    description="직원 출퇴근 기록, 초과근무 금지 자동퇴근, 관리자 보정/검토, 근무시간 리포트",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TimeClockError)
def handle_timeclock_error(request: Request, exc: TimeClockError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "code": exc.code})


@app.exception_handler(DBAPIError)
def handle_storage_error(request: Request, exc: DBAPIError):
    logger.error("[db] storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=StorageUnavailable.status_code,
        content={"detail": StorageUnavailable.message, "code": StorageUnavailable.code},
    )


# Register all routers
app.include_router(auth.router)
app.include_router(bootstrap.router)
app.include_router(employees.router)
app.include_router(review.router)
app.include_router(time_entries.router)
app.include_router(auto_clockout.router)
app.include_router(cron.router)
app.include_router(reports.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "timeclock"}

"""근무 기록(TimeEntry) SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, Float, String, Boolean, DateTime, Index, CheckConstraint, text

from timeclock.database import Base
from timeclock.utils import clock


class TimeEntry(Base):
    __tablename__ = "time_entries"

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    # 직원 삭제 후에도 이력 보존을 위해 FK 제약 없이 id만 참조한다.
    employee_id = Column(Integer, nullable=False)
    clock_in = Column(DateTime, nullable=False)
    clock_out = Column(DateTime, nullable=True)
    hours_worked = Column(Float, nullable=True)

    # auto-clockout / review
    is_auto_clock_out = Column(Boolean, nullable=False, default=False)
    auto_clock_out_reason = Column(String(255), nullable=True)
    needs_review = Column(Boolean, nullable=False, default=False)

    # correction audit
    original_clock_out = Column(DateTime, nullable=True)
    admin_corrected = Column(Boolean, nullable=False, default=False)
    corrected_by = Column(Integer, nullable=True)
    corrected_at = Column(DateTime, nullable=True)
    admin_notes = Column(String(500), nullable=True)

    created_at = Column(DateTime, nullable=False, default=lambda: clock.now())
    updated_at = Column(DateTime, nullable=False, default=lambda: clock.now(), onupdate=lambda: clock.now())

    __table_args__ = (
        # 직원당 진행 중(clock_out IS NULL) 기록은 최대 1건
        Index(
            "uq_time_entries_open_per_employee",
            "employee_id",
            unique=True,
            sqlite_where=text("clock_out IS NULL"),
            postgresql_where=text("clock_out IS NULL"),
        ),
        Index("ix_time_entries_employee_clock_in", "employee_id", "clock_in"),
        Index("ix_time_entries_clock_out", "clock_out"),
        Index("ix_time_entries_needs_review", "needs_review", "clock_in"),
        Index("ix_time_entries_corrected", "admin_corrected", "corrected_at"),
        CheckConstraint(
            "hours_worked IS NULL OR hours_worked >= 0",
            name="ck_time_entries_hours_nonneg",
        ),
    )

    def close(self, clock_out) -> None:
        self.clock_out = clock_out
        self.hours_worked = clock.hours_between(self.clock_in, clock_out)

    @property
    def is_active(self) -> bool:
        return self.clock_out is None

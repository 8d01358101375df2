"""검토/일괄 보정 요청·응답 스키마입니다."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from timeclock.schemas.time_entry import TimeEntryOut


class BatchCorrectionRequest(BaseModel):
    action: Literal["mark-correct", "batch-correct"]
    entry_ids: List[int] = Field(..., min_length=1)
    clock_out_time: Optional[datetime] = None
    admin_notes: Optional[str] = Field(None, max_length=500)


class BatchCorrectionOut(BaseModel):
    success: bool = True
    action: str
    modified_count: int
    message: str


class ReviewEntryOut(TimeEntryOut):
    employee_name: Optional[str] = None
    corrected_by_name: Optional[str] = None


class ReviewStats(BaseModel):
    total_needs_review: int
    auto_clockouts_needing_review: int
    corrected_today: int
    total_results: int


class ReviewListOut(BaseModel):
    entries: List[ReviewEntryOut]
    stats: ReviewStats


class GroupedReviewEntry(BaseModel):
    entry_id: int
    clock_in: datetime
    clock_out: Optional[datetime] = None
    hours_worked: Optional[float] = None
    is_auto_clock_out: bool
    auto_clock_out_reason: Optional[str] = None
    original_clock_out: Optional[datetime] = None
    days_since_review: int
    updated_at: datetime


class EmployeeReviewGroup(BaseModel):
    employee_id: int
    employee_name: str
    is_admin: bool
    entries: List[GroupedReviewEntry]
    total_entries: int
    total_hours: float
    oldest_review_days: float
    priority: Literal["high", "medium", "low"]


class GroupedReviewStats(BaseModel):
    total_needs_review: int
    total_employees_with_reviews: int
    total_hours_needing_review: float


class GroupedReviewOut(BaseModel):
    employee_groups: List[EmployeeReviewGroup]
    stats: GroupedReviewStats
    generated_at: datetime

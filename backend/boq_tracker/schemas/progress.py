import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ActivityStatus(str, Enum):
    not_started = "not_started"
    delayed = "delayed"
    on_track = "on_track"
    ahead = "ahead"
    completed = "completed"


class QuantityTotals(BaseModel):
    planned: float = 0.0
    actual: float = 0.0
    remaining: float = 0.0
    # uncapped sums, kept for data-quality reporting
    planned_raw: float = 0.0
    actual_raw: float = 0.0
    planned_value: float = 0.0
    actual_value: float = 0.0
    actual_days_worked: int = 0
    has_planned: bool = False
    has_actual: bool = False

    @property
    def over_scoped(self) -> bool:
        return self.planned_raw > self.planned or self.actual_raw > self.actual


class ProgressClassification(BaseModel):
    planned_progress_pct: float = 0.0
    actual_progress_pct: float = 0.0
    status: ActivityStatus = ActivityStatus.not_started


class ProductivityPlan(BaseModel):
    natural: float = 0.0
    actual: float = 0.0
    required: float = 0.0
    reported_required: int = 0
    badge: str | None = None


class DerivedActivity(BaseModel):
    project_code: str
    project_full_code: str
    activity_name: str
    zone_label: str = ""

    total_units: float = 0.0
    planned_quantity: float = 0.0
    actual_quantity: float = 0.0
    remaining_quantity: float = 0.0
    planned_quantity_raw: float = 0.0
    actual_quantity_raw: float = 0.0
    over_scoped: bool = False

    rate: float = 0.0
    total_value: float = 0.0
    planned_value: float = 0.0
    earned_value: float = 0.0

    planned_progress_pct: float = 0.0
    actual_progress_pct: float = 0.0
    status: ActivityStatus = ActivityStatus.not_started

    natural_productivity: float = 0.0
    actual_productivity: float = 0.0
    required_productivity: int = 0
    productivity_badge: str | None = None
    remaining_days: int | None = None

    planned_start_date: dt.date | None = None
    planned_end_date: dt.date | None = None
    actual_start_date: dt.date | None = None
    actual_end_date: dt.date | None = None


class ProjectProgress(BaseModel):
    project_full_code: str
    project_name: str = ""
    activities_count: int = 0
    total_value: float = 0.0
    planned_value: float = 0.0
    earned_value: float = 0.0
    planned_progress_pct: float = 0.0
    actual_progress_pct: float = 0.0
    status_counts: dict[str, int] = Field(default_factory=dict)


class ActivityLookAhead(BaseModel):
    activity_name: str
    zone_label: str = ""
    remaining_quantity: float = 0.0
    productivity: float = 0.0
    remaining_work_days: int = 0
    completion_date: dt.date | None = None
    is_completed: bool = False


class ProjectLookAhead(BaseModel):
    project_full_code: str
    project_name: str = ""
    activities: list[ActivityLookAhead] = Field(default_factory=list)
    latest_completion_date: dt.date | None = None
    completion_month: str | None = None
    completion_week: str | None = None


class DeriveRequest(BaseModel):
    activities: list[dict[str, Any]] = Field(default_factory=list)
    kpis: list[dict[str, Any]] = Field(default_factory=list)
    projects: list[dict[str, Any]] = Field(default_factory=list)
    as_of: dt.date | None = None
    today: dt.date | None = None
    rates: dict[str, float] = Field(default_factory=dict)


class IngestErrorOut(BaseModel):
    sheet: str | None
    row_num: int | None
    column: str | None
    message: str


class DeriveResponse(BaseModel):
    rows: list[DerivedActivity]
    projects: list[ProjectProgress]
    errors: list[IngestErrorOut] = Field(default_factory=list)


class LookAheadResponse(BaseModel):
    projects: list[ProjectLookAhead]
    errors: list[IngestErrorOut] = Field(default_factory=list)

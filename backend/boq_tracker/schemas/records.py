import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class InputType(str, Enum):
    planned = "planned"
    actual = "actual"


class MatchMode(str, Enum):
    strict = "strict"
    lenient = "lenient"


class Project(BaseModel):
    project_code: str = ""
    project_full_code: str = ""
    project_sub_code: str | None = None
    project_name: str = ""
    start_date: dt.date | None = None


class BOQActivity(BaseModel):
    project_code: str = ""
    project_full_code: str = ""
    activity_name: str = ""
    zone_label: str = ""
    description: str = ""

    total_units: float = Field(default=0.0, ge=0)
    unit: str | None = None
    rate: float | None = None
    total_value: float = 0.0

    planned_start_date: dt.date | None = None
    deadline: dt.date | None = None
    calendar_duration: float | None = None
    actual_start_date: dt.date | None = None
    actual_end_date: dt.date | None = None

    # untyped source row, only consulted for legacy date columns
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)


class KPIRecord(BaseModel):
    project_code: str = ""
    project_full_code: str = ""
    activity_name: str = ""
    zone_label: str = ""
    description: str = ""

    input_type: InputType
    quantity: float = Field(default=0.0, ge=0)
    value: float | None = None
    rate: float | None = None
    date: dt.date | None = None

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

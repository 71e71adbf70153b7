"""Daily output rates.

natural  - planned quantity spread over the planned duration
actual   - actual quantity per distinct day worked
required - what the remaining quantity needs per remaining day, never
           below natural
"""
from __future__ import annotations

import datetime as dt
import math

from boq_tracker.schemas.progress import ProductivityPlan

DEFAULT_REMAINING_DAYS = 30
COMPLETED_BADGE = "completed"


def resolve_remaining_days(
    remaining: float,
    today: dt.date,
    deadline: dt.date | None = None,
    planned_duration_days: float | None = None,
    calendar_duration: float | None = None,
    default_days: int = DEFAULT_REMAINING_DAYS,
) -> int | None:
    if deadline is not None:
        return max(1, (deadline - today).days)
    if planned_duration_days and planned_duration_days > 0:
        return int(math.ceil(planned_duration_days))
    if calendar_duration and calendar_duration > 0:
        return int(math.ceil(calendar_duration))
    if remaining > 0:
        return default_days
    return None


def _ceil(v: float) -> int:
    # float noise such as 3.0000000004 must not round up to 4
    return int(math.ceil(round(v, 6)))


def plan(
    planned_capped: float,
    actual_capped: float,
    remaining: float,
    total_duration_days: float,
    remaining_days: int | None,
    actual_days_worked: int,
    *,
    total_units: float = 0.0,
) -> ProductivityPlan:
    natural = 0.0
    if total_duration_days and total_duration_days > 0:
        base = planned_capped if planned_capped > 0 else total_units
        natural = base / total_duration_days

    if actual_capped > 0 and actual_days_worked > 0:
        actual = actual_capped / actual_days_worked
    else:
        actual = natural

    if remaining <= 0:
        return ProductivityPlan(natural=natural, actual=actual, required=0.0, reported_required=0, badge=COMPLETED_BADGE)

    pace = remaining / remaining_days if remaining_days else 0.0
    required = max(natural, pace)
    return ProductivityPlan(
        natural=natural,
        actual=actual,
        required=required,
        reported_required=_ceil(max(natural, required)),
    )

from __future__ import annotations

import datetime as dt
import math
from typing import Collection, Iterable

from boq_tracker.schemas.progress import ActivityLookAhead, DerivedActivity, ProjectLookAhead
from boq_tracker.schemas.records import Project

# python weekday(): Friday, Saturday
DEFAULT_WEEKEND_DAYS = (4, 5)


def is_workday(d: dt.date, weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS, holidays: Collection[dt.date] = ()) -> bool:
    return d.weekday() not in weekend_days and d not in holidays


def add_workdays(
    start: dt.date,
    days: int,
    weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS,
    holidays: Collection[dt.date] = (),
) -> dt.date:
    """Date on which the `days`-th working day, counting `start`, falls."""
    if days <= 0:
        return start
    if len(set(weekend_days)) >= 7:
        raise ValueError("weekend_days leaves no working day")
    d = start
    counted = 0
    while True:
        if is_workday(d, weekend_days, holidays):
            counted += 1
            if counted >= days:
                return d
        d += dt.timedelta(days=1)


def activity_lookahead(
    row: DerivedActivity,
    today: dt.date,
    weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS,
    holidays: Collection[dt.date] = (),
) -> ActivityLookAhead:
    is_completed = row.remaining_quantity <= 0 and row.total_units > 0
    productivity = row.actual_productivity if row.actual_productivity > 0 else row.natural_productivity

    work_days = 0
    completion = None
    if not is_completed and productivity > 0 and row.remaining_quantity > 0:
        work_days = int(math.ceil(round(row.remaining_quantity / productivity, 6)))
        completion = add_workdays(today, work_days, weekend_days, holidays)

    return ActivityLookAhead(
        activity_name=row.activity_name,
        zone_label=row.zone_label,
        remaining_quantity=row.remaining_quantity,
        productivity=productivity,
        remaining_work_days=work_days,
        completion_date=completion,
        is_completed=is_completed,
    )


def project_lookahead(
    project_full_code: str,
    rows: Iterable[DerivedActivity],
    today: dt.date,
    *,
    project: Project | None = None,
    weekend_days: Collection[int] = DEFAULT_WEEKEND_DAYS,
    holidays: Collection[dt.date] = (),
) -> ProjectLookAhead:
    items = [activity_lookahead(r, today, weekend_days, holidays) for r in rows]
    dates = [a.completion_date for a in items if a.completion_date is not None]
    latest = max(dates) if dates else None

    month = week = None
    if latest:
        month = f"{latest.year:04d}-{latest.month:02d}"
        iso = latest.isocalendar()
        week = f"{iso[0]:04d}-W{iso[1]:02d}"

    return ProjectLookAhead(
        project_full_code=project_full_code,
        project_name=project.project_name if project else "",
        activities=items,
        latest_completion_date=latest,
        completion_month=month,
        completion_week=week,
    )

from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Iterable, Mapping, Sequence
from zoneinfo import ZoneInfo

import structlog

from boq_tracker.core.config import settings
from boq_tracker.core.logging import logger
from boq_tracker.schemas.progress import ActivityStatus, DerivedActivity, ProjectLookAhead, ProjectProgress
from boq_tracker.schemas.records import BOQActivity, KPIRecord, Project
from boq_tracker.services.engine.dates import (
    find_project,
    inclusive_days,
    resolve_actual_end,
    resolve_actual_start,
    resolve_planned_end,
    resolve_planned_start,
)
from boq_tracker.services.engine.lookahead import project_lookahead
from boq_tracker.services.engine.matching import KpiIndex, activity_codes
from boq_tracker.services.engine.productivity import DEFAULT_REMAINING_DAYS, plan, resolve_remaining_days
from boq_tracker.services.engine.quantities import aggregate, default_cutoff, resolve_activity_rate
from boq_tracker.services.engine.status import STATUS_TOLERANCE_PCT, classify


def local_today() -> dt.date:
    return dt.datetime.now(ZoneInfo(settings.TZ)).date()


def _empty_row(activity: BOQActivity) -> DerivedActivity:
    _, full = activity_codes(activity)
    return DerivedActivity(
        project_code=activity.project_code,
        project_full_code=full,
        activity_name=activity.activity_name,
        zone_label=activity.zone_label,
        total_units=activity.total_units,
        remaining_quantity=activity.total_units,
        total_value=activity.total_value,
    )


def derive_activity(
    activity: BOQActivity,
    kpis: Sequence[KPIRecord] | KpiIndex,
    projects: Sequence[Project] = (),
    *,
    as_of: dt.date | None = None,
    today: dt.date | None = None,
    rates: Mapping[str, float] | None = None,
    tolerance_pct: float = STATUS_TOLERANCE_PCT,
    default_remaining_days: int = DEFAULT_REMAINING_DAYS,
    include_undated: bool = True,
) -> DerivedActivity:
    today = today or local_today()
    as_of = as_of or default_cutoff(today)

    totals = aggregate(activity, kpis, as_of, rates=rates, include_undated=include_undated)
    rate = resolve_activity_rate(activity, rates)
    progress = classify(totals.planned, totals.actual, rate, activity.total_value, tolerance_pct=tolerance_pct)

    planned_start = resolve_planned_start(activity, kpis, projects)
    planned_end = resolve_planned_end(activity, kpis)
    actual_start = resolve_actual_start(activity, kpis)
    actual_end = resolve_actual_end(activity, kpis)

    duration = inclusive_days(planned_start, planned_end) or (activity.calendar_duration or 0)
    remaining_days = resolve_remaining_days(
        totals.remaining,
        today,
        deadline=activity.deadline,
        planned_duration_days=inclusive_days(planned_start, planned_end),
        calendar_duration=activity.calendar_duration,
        default_days=default_remaining_days,
    )
    productivity = plan(
        totals.planned,
        totals.actual,
        totals.remaining,
        duration,
        remaining_days,
        totals.actual_days_worked,
        total_units=activity.total_units,
    )

    # KPI values already follow the value/quantity de-duplication rule
    planned_value = totals.planned_value
    earned = totals.actual_value
    if activity.total_value > 0:
        planned_value = min(planned_value, activity.total_value)
        earned = min(earned, activity.total_value)

    _, full = activity_codes(activity)
    return DerivedActivity(
        project_code=activity.project_code,
        project_full_code=full,
        activity_name=activity.activity_name,
        zone_label=activity.zone_label,
        total_units=activity.total_units,
        planned_quantity=totals.planned,
        actual_quantity=totals.actual,
        remaining_quantity=totals.remaining,
        planned_quantity_raw=totals.planned_raw,
        actual_quantity_raw=totals.actual_raw,
        over_scoped=totals.over_scoped,
        rate=rate,
        total_value=activity.total_value,
        planned_value=planned_value,
        earned_value=earned,
        planned_progress_pct=progress.planned_progress_pct,
        actual_progress_pct=progress.actual_progress_pct,
        status=progress.status,
        natural_productivity=productivity.natural,
        actual_productivity=productivity.actual,
        required_productivity=productivity.reported_required,
        productivity_badge=productivity.badge,
        remaining_days=remaining_days,
        planned_start_date=planned_start,
        planned_end_date=planned_end,
        actual_start_date=actual_start,
        actual_end_date=actual_end,
    )


def derive_all(
    activities: Iterable[BOQActivity],
    kpis: Iterable[KPIRecord],
    projects: Iterable[Project] = (),
    *,
    as_of: dt.date | None = None,
    today: dt.date | None = None,
    rates: Mapping[str, float] | None = None,
) -> list[DerivedActivity]:
    today = today or local_today()
    as_of = as_of or default_cutoff(today, settings.CUTOFF_DAYS_BEFORE_TODAY)
    index = KpiIndex(kpis)
    projects = list(projects)

    rows: list[DerivedActivity] = []
    failed = 0
    with structlog.contextvars.bound_contextvars(as_of=as_of.isoformat(), today=today.isoformat()):
        for activity in activities:
            try:
                row = derive_activity(
                    activity,
                    index,
                    projects,
                    as_of=as_of,
                    today=today,
                    rates=rates,
                    tolerance_pct=settings.STATUS_TOLERANCE_PCT,
                    default_remaining_days=settings.DEFAULT_REMAINING_DAYS,
                    include_undated=settings.INCLUDE_UNDATED_KPIS,
                )
            except Exception as e:
                failed += 1
                logger.exception(
                    "activity_derivation_failed",
                    project_full_code=activity.project_full_code,
                    activity_name=activity.activity_name,
                    error=str(e),
                )
                row = _empty_row(activity)
            if row.over_scoped:
                logger.warning(
                    "quantity_capped",
                    project_full_code=row.project_full_code,
                    activity_name=row.activity_name,
                    zone=row.zone_label,
                    total_units=row.total_units,
                    planned_raw=row.planned_quantity_raw,
                    actual_raw=row.actual_quantity_raw,
                )
            rows.append(row)

        logger.info(
            "derivation_finished",
            activities=len(rows),
            kpis=len(index),
            over_scoped=sum(1 for r in rows if r.over_scoped),
            failed=failed,
        )
    return rows


def _group(rows: Iterable[DerivedActivity]) -> dict[str, list[DerivedActivity]]:
    out: dict[str, list[DerivedActivity]] = {}
    for r in rows:
        out.setdefault(r.project_full_code, []).append(r)
    return out


def _project_for(code: str, projects: Sequence[Project]) -> Project | None:
    return find_project(BOQActivity(project_code=code.split("-")[0], project_full_code=code), projects)


def summarize_projects(rows: Iterable[DerivedActivity], projects: Iterable[Project] = ()) -> list[ProjectProgress]:
    projects = list(projects)
    out = []
    for code, items in _group(rows).items():
        total_value = sum(r.total_value for r in items)
        planned_value = sum(r.planned_value for r in items)
        earned_value = sum(r.earned_value for r in items)
        counts = Counter(r.status.value for r in items)
        project = _project_for(code, projects)
        out.append(
            ProjectProgress(
                project_full_code=code,
                project_name=project.project_name if project else "",
                activities_count=len(items),
                total_value=total_value,
                planned_value=planned_value,
                earned_value=earned_value,
                planned_progress_pct=min(100.0, planned_value / total_value * 100.0) if total_value > 0 else 0.0,
                actual_progress_pct=min(100.0, earned_value / total_value * 100.0) if total_value > 0 else 0.0,
                status_counts={s.value: counts.get(s.value, 0) for s in ActivityStatus},
            )
        )
    return out


def lookahead_all(
    rows: Iterable[DerivedActivity],
    projects: Iterable[Project] = (),
    *,
    today: dt.date | None = None,
) -> list[ProjectLookAhead]:
    today = today or local_today()
    projects = list(projects)
    return [
        project_lookahead(
            code,
            items,
            today,
            project=_project_for(code, projects),
            weekend_days=settings.weekend_days(),
            holidays=settings.holidays(),
        )
        for code, items in _group(rows).items()
    ]

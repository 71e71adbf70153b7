from __future__ import annotations

import datetime as dt
from typing import Mapping, Sequence

from boq_tracker.schemas.progress import QuantityTotals
from boq_tracker.schemas.records import BOQActivity, InputType, KPIRecord, MatchMode
from boq_tracker.services.engine.matching import KpiIndex, matching_kpis

# KPI entries dated after "yesterday" are not committed progress yet
CUTOFF_DAYS_BEFORE_TODAY = 1


def default_cutoff(today: dt.date | None = None, days_before: int = CUTOFF_DAYS_BEFORE_TODAY) -> dt.date:
    today = today or dt.date.today()
    return today - dt.timedelta(days=days_before)


def resolve_activity_rate(activity: BOQActivity, rates: Mapping[str, float] | None = None) -> float:
    if activity.rate and activity.rate > 0:
        return float(activity.rate)
    if rates:
        r = rates.get((activity.activity_name or "").strip().lower())
        if r and r > 0:
            return float(r)
    if activity.total_units > 0 and activity.total_value > 0:
        return activity.total_value / activity.total_units
    return 0.0


def record_value(kpi: KPIRecord, activity: BOQActivity, rates: Mapping[str, float] | None = None) -> float:
    # value == quantity means the quantity was pasted into the value column
    if kpi.value is not None and kpi.value != kpi.quantity:
        return float(kpi.value)
    rate = kpi.rate if kpi.rate and kpi.rate > 0 else resolve_activity_rate(activity, rates)
    return kpi.quantity * rate


def in_cutoff(kpi: KPIRecord, as_of: dt.date, include_undated: bool = True) -> bool:
    if kpi.date is None:
        return include_undated
    return kpi.date <= as_of


def cap(qty: float, total_units: float) -> float:
    return min(qty, total_units) if total_units > 0 else qty


def aggregate(
    activity: BOQActivity,
    kpis: Sequence[KPIRecord] | KpiIndex,
    as_of: dt.date | None = None,
    *,
    rates: Mapping[str, float] | None = None,
    include_undated: bool = True,
) -> QuantityTotals:
    """Sum matched KPI quantities per input type up to `as_of`, capped at scope."""
    as_of = as_of or default_cutoff()
    matched = matching_kpis(activity, kpis, mode=MatchMode.strict)

    sums = {InputType.planned: 0.0, InputType.actual: 0.0}
    values = {InputType.planned: 0.0, InputType.actual: 0.0}
    seen = {InputType.planned: False, InputType.actual: False}
    actual_days: set[dt.date] = set()

    for k in matched:
        if not in_cutoff(k, as_of, include_undated):
            continue
        t = InputType(k.input_type)
        sums[t] += k.quantity
        values[t] += record_value(k, activity, rates)
        seen[t] = True
        if t is InputType.actual and k.date is not None and k.quantity > 0:
            actual_days.add(k.date)

    total = activity.total_units
    planned = cap(sums[InputType.planned], total)
    actual = cap(sums[InputType.actual], total)
    return QuantityTotals(
        planned=planned,
        actual=actual,
        remaining=max(0.0, total - actual),
        planned_raw=sums[InputType.planned],
        actual_raw=sums[InputType.actual],
        planned_value=values[InputType.planned],
        actual_value=values[InputType.actual],
        actual_days_worked=len(actual_days),
        has_planned=seen[InputType.planned],
        has_actual=seen[InputType.actual],
    )

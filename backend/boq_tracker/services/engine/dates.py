"""Date extraction and the planned/actual start/end fallback chains."""
from __future__ import annotations

import datetime as dt
import re
import warnings
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd
from openpyxl.utils.datetime import from_excel

from boq_tracker.schemas.records import BOQActivity, InputType, KPIRecord, MatchMode, Project
from boq_tracker.services.engine.matching import KpiIndex, activity_codes, matching_kpis

_EMPTY = {"", "n/a", "na", "null", "none", "undefined", "nan", "nat", "-", "#div/0!", "#error!"}

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_COMPACT_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_DMY_ABBR_RE = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{2}|\d{4})$")

_MONTHS = {m: i for i, m in enumerate(
    ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"), start=1
)}

# raw columns older exports used before the typed fields existed
LEGACY_PLANNED_START_FIELDS = (
    "Planned Activity Start Date",
    "Planned Start Date",
    "Activity Planned Start Date",
    "Start Date",
)
LEGACY_PLANNED_END_FIELDS = (
    "Deadline",
    "Planned Completion Date",
    "Activity Planned Completion Date",
)
LEGACY_ACTUAL_START_FIELDS = (
    "Actual Start Date",
    "Actual Start",
    "Activity Actual Start Date",
)
LEGACY_ACTUAL_END_FIELDS = (
    "Actual Completion Date",
    "Actual Completion",
    "Activity Actual Completion Date",
)


def _build(year: int, month: int, day: int) -> dt.date | None:
    if not 1900 <= year <= 2100:
        return None
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


def _from_serial(v: float) -> dt.date | None:
    try:
        d = from_excel(v)
    except (ValueError, OverflowError, TypeError):
        return None
    if isinstance(d, dt.datetime):
        d = d.date()
    return d if isinstance(d, dt.date) and 1900 <= d.year <= 2100 else None


def _fallback_parse(s: str) -> dt.date | None:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        ts = pd.to_datetime(s, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    # wall-clock components of the string, tz is not applied
    return _build(ts.year, ts.month, ts.day)


def resolve_date(candidate: Any) -> dt.date | None:
    """Return the calendar date a loosely-typed value denotes, or None.

    Components are read straight out of the string, so
    "2025-04-07T00:00:00Z", "04/07/2025" and "2025-04-07" all give
    2025-04-07 whatever the local timezone is.
    """
    if candidate is None or isinstance(candidate, bool):
        return None
    if isinstance(candidate, dt.datetime):
        if pd.isna(candidate):
            return None
        return candidate.date()
    if isinstance(candidate, dt.date):
        return candidate
    if isinstance(candidate, (int, float)):
        if candidate != candidate or not 20000 < candidate < 100000:
            return None
        return _from_serial(float(candidate))

    s = str(candidate).strip()
    if s.lower() in _EMPTY:
        return None

    m = _ISO_RE.match(s)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _SLASH_RE.match(s)
    if m:
        first, second, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if first > 12:
            # only readable as DD/MM/YYYY
            return _build(year, second, first)
        return _build(year, first, second)

    m = _COMPACT_RE.match(s)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _DMY_ABBR_RE.match(s)
    if m:
        month = _MONTHS.get(m.group(2).lower())
        if not month:
            return None
        year = int(m.group(3))
        if year < 100:
            year += 2000
        return _build(year, month, int(m.group(1)))

    try:
        num = float(s.replace(",", ""))
    except ValueError:
        return _fallback_parse(s)
    return resolve_date(num)


def first_date(record: Mapping[str, Any], names: Iterable[str]) -> dt.date | None:
    """First parseable date among `names`, in order."""
    for n in names:
        d = resolve_date(record.get(n))
        if d is not None:
            return d
    return None


def _kpi_dates(activity: BOQActivity, kpis, input_type: InputType) -> list[dt.date]:
    rows = matching_kpis(activity, kpis, input_type=input_type, mode=MatchMode.strict)
    return sorted(k.date for k in rows if k.date is not None)


def find_project(activity: BOQActivity, projects: Iterable[Project]) -> Project | None:
    code, full = activity_codes(activity)
    by_code = None
    for p in projects:
        p_code = (p.project_code or "").strip().upper()
        p_full = (p.project_full_code or "").strip().upper() or p_code
        if p_full == full:
            return p
        if by_code is None and p_code and p_code == code and "-" not in full:
            by_code = p
    return by_code


def resolve_planned_start(
    activity: BOQActivity,
    kpis: Sequence[KPIRecord] | KpiIndex,
    projects: Iterable[Project] = (),
) -> dt.date | None:
    dates = _kpi_dates(activity, kpis, InputType.planned)
    if dates:
        return dates[0]
    if activity.planned_start_date:
        return activity.planned_start_date
    if activity.deadline and activity.calendar_duration and activity.calendar_duration > 0:
        return activity.deadline - dt.timedelta(days=int(round(activity.calendar_duration)))
    project = find_project(activity, projects)
    if project and project.start_date:
        return project.start_date
    return first_date(activity.raw, LEGACY_PLANNED_START_FIELDS)


def resolve_planned_end(activity: BOQActivity, kpis: Sequence[KPIRecord] | KpiIndex) -> dt.date | None:
    dates = _kpi_dates(activity, kpis, InputType.planned)
    if dates:
        return dates[-1]
    if activity.deadline:
        return activity.deadline
    if activity.planned_start_date and activity.calendar_duration and activity.calendar_duration > 0:
        return activity.planned_start_date + dt.timedelta(days=int(round(activity.calendar_duration)))
    return first_date(activity.raw, LEGACY_PLANNED_END_FIELDS)


def resolve_actual_start(activity: BOQActivity, kpis: Sequence[KPIRecord] | KpiIndex) -> dt.date | None:
    dates = _kpi_dates(activity, kpis, InputType.actual)
    if dates:
        return dates[0]
    if activity.actual_start_date:
        return activity.actual_start_date
    return first_date(activity.raw, LEGACY_ACTUAL_START_FIELDS)


def resolve_actual_end(activity: BOQActivity, kpis: Sequence[KPIRecord] | KpiIndex) -> dt.date | None:
    # no actual end before there is an actual start
    if resolve_actual_start(activity, kpis) is None:
        return None
    dates = _kpi_dates(activity, kpis, InputType.actual)
    if dates:
        return dates[-1]
    if activity.actual_end_date:
        return activity.actual_end_date
    return first_date(activity.raw, LEGACY_ACTUAL_END_FIELDS)


def inclusive_days(start: dt.date | None, end: dt.date | None) -> int:
    if start is None or end is None or end < start:
        return 0
    return (end - start).days + 1

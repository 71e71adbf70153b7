"""Normalizes untyped rows into BOQActivity / KPIRecord / Project.

Exports and manual entry store the same field under different names
("Project Full Code", "project_full_code", "Zone Ref", "Zone #" ...). All
alias resolution happens here, once, so the engine only sees typed records.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from boq_tracker.core.logging import logger
from boq_tracker.schemas.records import BOQActivity, InputType, KPIRecord, Project
from boq_tracker.services.engine.dates import first_date
from boq_tracker.services.etl.utils import norm_str, pick, pick_name, to_float, to_float_nullable
from boq_tracker.services.etl.validators import ValidationError, is_blank_row, is_negative

PROJECT_CODE = ("project_code", "Project Code", "Project Ful Project Code")
PROJECT_SUB_CODE = ("project_sub_code", "Project Sub Code")
PROJECT_FULL_CODE = ("project_full_code", "Project Full Code", "Project Ful Project Code")
PROJECT_NAME = ("project_name", "Project Name", "project_full_name", "Project Full Name")
PROJECT_START = ("start_date", "project_start_date", "Project Start Date", "Start Date")

ACTIVITY_NAME = ("activity_name", "Activity Name", "activity_description", "Activity Description", "Activity / KPI", "Activity")
DESCRIPTION = ("description", "Description", "activity_description", "Activity Description")
ZONE = ("zone_label", "zone", "Zone", "zone_ref", "Zone Ref", "zone_number", "Zone Number", "Zone #")

TOTAL_UNITS = ("total_units", "Total Units", "planned_units", "Planned Units")
UNIT = ("unit", "Unit", "UNIT")
RATE = ("rate", "Rate")
TOTAL_VALUE = ("total_value", "Total Value")
PLANNED_START = (
    "planned_start_date",
    "planned_activity_start_date",
    "activity_planned_start_date",
    "Planned Activity Start Date",
    "Planned Start Date",
    "Activity Planned Start Date",
)
DEADLINE = (
    "deadline",
    "activity_planned_completion_date",
    "Deadline",
    "Planned Completion Date",
    "Activity Planned Completion Date",
)
CALENDAR_DURATION = ("calendar_duration", "Calendar Duration")
ACTUAL_START = ("actual_start_date", "Actual Start Date", "Actual Start", "Activity Actual Start Date")
ACTUAL_END = ("actual_end_date", "Actual Completion Date", "Actual Completion", "Activity Actual Completion Date")

INPUT_TYPE = ("input_type", "Input Type", "TYPE")
QUANTITY = ("quantity", "Quantity", "QUANTITY")
VALUE = ("value", "Value")
KPI_DATE = ("date", "activity_date", "Activity Date", "Date")
TARGET_DATE = ("target_date", "Target Date", "TARGET DATE")
ACTUAL_DATE = ("actual_date", "Actual Date", "ACTUAL DATE")


def _s(record: Mapping[str, Any], names) -> str:
    return norm_str(pick(record, names)) or ""


def _code_part(v: Any) -> str | None:
    # Excel hands numeric sub-codes back as 2.0
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return norm_str(v)


def _codes(record: Mapping[str, Any]) -> tuple[str, str, str | None]:
    code = _s(record, PROJECT_CODE)
    sub = _code_part(pick(record, PROJECT_SUB_CODE))
    full = _s(record, PROJECT_FULL_CODE)
    if not full:
        full = f"{code}-{sub}" if code and sub else code
    if not code and full:
        code = full.split("-")[0].strip()
    return code, full, sub


def project_from_record(record: Mapping[str, Any]) -> Project:
    code, full, sub = _codes(record)
    return Project(
        project_code=code,
        project_full_code=full,
        project_sub_code=sub,
        project_name=_s(record, PROJECT_NAME),
        start_date=first_date(record, PROJECT_START),
    )


def activity_from_record(record: Mapping[str, Any]) -> BOQActivity:
    code, full, _ = _codes(record)
    total_units = to_float(pick(record, TOTAL_UNITS))
    return BOQActivity(
        project_code=code,
        project_full_code=full,
        activity_name=_s(record, ACTIVITY_NAME),
        zone_label=_s(record, ZONE),
        description=_s(record, DESCRIPTION),
        total_units=max(0.0, total_units),
        unit=norm_str(pick(record, UNIT)),
        rate=to_float_nullable(pick(record, RATE)),
        total_value=to_float(pick(record, TOTAL_VALUE)),
        planned_start_date=first_date(record, PLANNED_START),
        deadline=first_date(record, DEADLINE),
        calendar_duration=to_float_nullable(pick(record, CALENDAR_DURATION)),
        actual_start_date=first_date(record, ACTUAL_START),
        actual_end_date=first_date(record, ACTUAL_END),
        raw=dict(record),
    )


def parse_input_type(v: Any) -> InputType | None:
    s = (norm_str(v) or "").lower()
    try:
        return InputType(s)
    except ValueError:
        return None


def kpi_from_record(record: Mapping[str, Any]) -> KPIRecord:
    """Raises ValueError on an unknown input type or a negative quantity."""
    input_type = parse_input_type(pick(record, INPUT_TYPE))
    if input_type is None:
        raise ValueError(f"unknown input type: {pick(record, INPUT_TYPE)!r}")
    quantity = pick(record, QUANTITY)
    if is_negative(quantity):
        raise ValueError(f"negative quantity: {quantity!r}")

    if input_type is InputType.planned:
        date_names = KPI_DATE + TARGET_DATE + ACTUAL_DATE
    else:
        date_names = KPI_DATE + ACTUAL_DATE + TARGET_DATE

    code, full, _ = _codes(record)
    return KPIRecord(
        project_code=code,
        project_full_code=full,
        activity_name=_s(record, ACTIVITY_NAME),
        zone_label=_s(record, ZONE),
        description=_s(record, DESCRIPTION),
        input_type=input_type,
        quantity=to_float(quantity),
        value=to_float_nullable(pick(record, VALUE)),
        rate=to_float_nullable(pick(record, RATE)),
        date=first_date(record, date_names),
        raw=dict(record),
    )


def _ingest(rows: Iterable[Mapping[str, Any]], build, sheet: str | None, first_row: int, column_for):
    out = []
    errors: list[ValidationError] = []
    for i, r in enumerate(rows, start=first_row):
        if is_blank_row(r.values()):
            continue
        try:
            out.append(build(r))
        except (ValueError, PydanticValidationError) as e:
            msg = str(e).splitlines()[0]
            err = ValidationError(msg, sheet=sheet, row_num=i, column=column_for(r, msg))
            errors.append(err)
            logger.warning("ingest_row_rejected", at=err.location, error=msg)
    return out, errors


def _kpi_column(r: Mapping[str, Any], msg: str) -> str | None:
    if msg.startswith("unknown input type"):
        return pick_name(r, INPUT_TYPE) or INPUT_TYPE[0]
    if msg.startswith("negative quantity"):
        return pick_name(r, QUANTITY)
    return None


def ingest_activities(
    rows: Iterable[Mapping[str, Any]], sheet: str | None = None, first_row: int = 1
) -> tuple[list[BOQActivity], list[ValidationError]]:
    return _ingest(rows, activity_from_record, sheet, first_row, lambda r, m: None)


def ingest_kpis(
    rows: Iterable[Mapping[str, Any]], sheet: str | None = None, first_row: int = 1
) -> tuple[list[KPIRecord], list[ValidationError]]:
    return _ingest(rows, kpi_from_record, sheet, first_row, _kpi_column)


def ingest_projects(
    rows: Iterable[Mapping[str, Any]], sheet: str | None = None, first_row: int = 1
) -> tuple[list[Project], list[ValidationError]]:
    return _ingest(rows, project_from_record, sheet, first_row, lambda r, m: None)

import datetime as dt

from boq_tracker.schemas.records import InputType
from boq_tracker.services.etl.ingest import (
    activity_from_record,
    ingest_kpis,
    ingest_projects,
    kpi_from_record,
    parse_input_type,
)
from boq_tracker.services.etl.validators import ValidationError, is_blank_row, is_negative


def test_activity_from_export_headers():
    a = activity_from_record({
        "Project Code": "P5066",
        "Project Sub Code": 2.0,
        "Activity Name": "Excavation",
        "Zone": "Zone 2",
        "Total Units": "1,200",
        "Unit": "m3",
        "Rate": "15",
        "Total Value": 18000,
        "Deadline": "2025-03-31",
        "Calendar Duration": 60,
    })
    assert a.project_code == "P5066"
    assert a.project_full_code == "P5066-2"
    assert a.total_units == 1200
    assert a.rate == 15
    assert a.deadline == dt.date(2025, 3, 31)
    assert a.calendar_duration == 60
    assert a.planned_start_date is None
    assert a.raw["Unit"] == "m3"


def test_activity_from_snake_case_fields():
    a = activity_from_record({
        "project_full_code": "P7000-1",
        "activity_name": "Blockwork",
        "zone_number": "3",
        "total_units": None,
    })
    assert a.project_code == "P7000"
    assert a.project_full_code == "P7000-1"
    assert a.zone_label == "3"
    assert a.total_units == 0
    assert a.rate is None


def test_parse_input_type():
    assert parse_input_type("Planned") is InputType.planned
    assert parse_input_type(" ACTUAL ") is InputType.actual
    assert parse_input_type("forecast") is None
    assert parse_input_type(None) is None


def test_kpi_date_preference_follows_input_type():
    rec = {"Input Type": "Actual", "Quantity": 5, "Target Date": "2025-01-10", "Actual Date": "2025-01-12"}
    assert kpi_from_record(rec).date == dt.date(2025, 1, 12)
    rec["Input Type"] = "Planned"
    assert kpi_from_record(rec).date == dt.date(2025, 1, 10)
    rec["Date"] = "2025-01-01"
    assert kpi_from_record(rec).date == dt.date(2025, 1, 1)


def test_ingest_kpis_reports_bad_rows():
    rows = [
        {"Project Code": "P100", "Activity Name": "Excavation", "Input Type": "Actual", "Quantity": 10, "Date": "2025-01-05"},
        {"Project Code": None, "Activity Name": None, "Input Type": None, "Quantity": None},
        {"Project Code": "P100", "Activity Name": "Excavation", "Input Type": "Forecast", "Quantity": 10},
        {"Project Code": "P100", "Activity Name": "Excavation", "Input Type": "Actual", "Quantity": -3},
    ]
    kpis, errors = ingest_kpis(rows, sheet="KPI", first_row=2)
    assert len(kpis) == 1
    assert kpis[0].quantity == 10
    assert kpis[0].date == dt.date(2025, 1, 5)

    assert [(e.row_num, e.column) for e in errors] == [(4, "Input Type"), (5, "Quantity")]
    assert all(e.sheet == "KPI" for e in errors)
    assert "Forecast" in errors[0].message


def test_ingest_projects():
    rows = [{"Project Code": "P100", "Project Sub Code": "1", "Project Name": "Tower A", "Start Date": "09/01/2024"}]
    projects, errors = ingest_projects(rows)
    assert errors == []
    assert projects[0].project_full_code == "P100-1"
    assert projects[0].project_sub_code == "1"
    assert projects[0].start_date == dt.date(2024, 9, 1)


def test_validation_error_location():
    assert ValidationError("bad", sheet="KPI", row_num=4, column="Quantity").location == "KPI / row 4 / Quantity"
    assert ValidationError("bad").location == "?"
    assert is_blank_row([None, "  ", float("nan")])
    assert not is_blank_row([None, 0])
    assert is_negative("-1,200")
    assert not is_negative("n/a")

import datetime as dt

import pytest

from boq_tracker.schemas.progress import DerivedActivity
from boq_tracker.schemas.records import Project
from boq_tracker.services.engine.lookahead import activity_lookahead, add_workdays, project_lookahead

# 2025-01-02 is a Thursday; Friday and Saturday are the weekend
THU = dt.date(2025, 1, 2)


def _row(name, remaining, actual=0.0, natural=0.0, total=100.0) -> DerivedActivity:
    return DerivedActivity(
        project_code="P100",
        project_full_code="P100-1",
        activity_name=name,
        total_units=total,
        remaining_quantity=remaining,
        actual_productivity=actual,
        natural_productivity=natural,
    )


def test_add_workdays_counts_start_and_skips_weekend():
    assert add_workdays(THU, 0) == THU
    assert add_workdays(THU, 1) == THU
    assert add_workdays(THU, 2) == dt.date(2025, 1, 5)
    assert add_workdays(THU, 3) == dt.date(2025, 1, 6)


def test_add_workdays_skips_holidays():
    assert add_workdays(THU, 2, holidays={dt.date(2025, 1, 5)}) == dt.date(2025, 1, 6)


def test_add_workdays_custom_weekend():
    assert add_workdays(THU, 2, weekend_days=(5, 6)) == dt.date(2025, 1, 3)


def test_add_workdays_needs_a_working_day():
    with pytest.raises(ValueError):
        add_workdays(THU, 3, weekend_days=range(7))


def test_activity_lookahead_uses_actual_rate():
    la = activity_lookahead(_row("Excavation", 10, actual=4, natural=1), THU)
    assert la.productivity == 4
    assert la.remaining_work_days == 3
    assert la.completion_date == dt.date(2025, 1, 6)
    assert not la.is_completed


def test_activity_lookahead_falls_back_to_natural_rate():
    la = activity_lookahead(_row("Blockwork", 10, natural=10), THU)
    assert la.remaining_work_days == 1
    assert la.completion_date == THU


def test_completed_and_unforecastable_activities():
    done = activity_lookahead(_row("Piling", 0), THU)
    assert done.is_completed
    assert done.completion_date is None

    idle = activity_lookahead(_row("Plaster", 50), THU)
    assert not idle.is_completed
    assert idle.completion_date is None
    assert idle.remaining_work_days == 0


def test_project_lookahead_takes_latest_completion():
    rows = [
        _row("Excavation", 10, actual=4),
        _row("Blockwork", 10, natural=10),
        _row("Piling", 0),
    ]
    la = project_lookahead("P100-1", rows, THU, project=Project(project_code="P100", project_name="Tower A"))
    assert la.project_name == "Tower A"
    assert len(la.activities) == 3
    assert la.latest_completion_date == dt.date(2025, 1, 6)
    assert la.completion_month == "2025-01"
    assert la.completion_week == "2025-W02"


def test_project_lookahead_without_forecast():
    la = project_lookahead("P100-1", [_row("Piling", 0)], THU)
    assert la.latest_completion_date is None
    assert la.completion_month is None and la.completion_week is None

import datetime as dt

from boq_tracker.services.engine.productivity import COMPLETED_BADGE, plan, resolve_remaining_days

TODAY = dt.date(2025, 1, 10)


def test_remaining_days_from_deadline():
    assert resolve_remaining_days(60, TODAY, deadline=dt.date(2025, 1, 20)) == 10
    assert resolve_remaining_days(60, TODAY, deadline=dt.date(2025, 1, 1)) == 1
    assert resolve_remaining_days(60, TODAY, deadline=TODAY) == 1


def test_remaining_days_fallbacks():
    assert resolve_remaining_days(60, TODAY, planned_duration_days=15) == 15
    assert resolve_remaining_days(60, TODAY, calendar_duration=7.5) == 8
    assert resolve_remaining_days(60, TODAY) == 30
    assert resolve_remaining_days(60, TODAY, default_days=14) == 14
    assert resolve_remaining_days(0, TODAY) is None


def test_plan_required_rate():
    p = plan(100, 40, 60, 50, 10, 4, total_units=100)
    assert abs(p.natural - 2.0) < 1e-9
    assert abs(p.actual - 10.0) < 1e-9
    assert abs(p.required - 6.0) < 1e-9
    assert p.reported_required == 6
    assert p.badge is None


def test_required_never_below_natural():
    p = plan(100, 40, 60, 10, 100, 4, total_units=100)
    assert abs(p.natural - 10.0) < 1e-9
    assert p.required == p.natural
    assert p.reported_required == 10


def test_reported_required_rounds_up():
    p = plan(0, 0, 10, 0, 3, 0)
    assert p.reported_required == 4


def test_reported_required_ignores_float_noise():
    p = plan(0, 0, 9.0000000001, 0, 3, 0)
    assert p.reported_required == 3


def test_natural_falls_back_to_total_units():
    p = plan(0, 0, 100, 20, 20, 0, total_units=100)
    assert p.natural == 5
    # nothing done yet: actual rate mirrors natural
    assert p.actual == 5


def test_completed_reports_zero():
    p = plan(100, 100, 0, 20, None, 10, total_units=100)
    assert p.required == 0
    assert p.reported_required == 0
    assert p.badge == COMPLETED_BADGE
    assert p.actual == 10


def test_required_floor_holds_across_inputs():
    for remaining in (1, 7.5, 60, 250):
        for remaining_days in (1, 3, 30, 365):
            for duration in (1, 10, 90):
                p = plan(100, 40, remaining, duration, remaining_days, 4, total_units=300)
                assert p.required >= p.natural
                assert p.reported_required >= p.natural

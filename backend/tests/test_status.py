from boq_tracker.schemas.progress import ActivityStatus
from boq_tracker.services.engine.status import classify, progress_pct, status_for


def test_progress_pct():
    assert progress_pct(50, 10, 1000) == 50
    assert progress_pct(500, 10, 1000) == 100
    assert progress_pct(50, 10, 0) == 0
    assert progress_pct(50, 0, 1000) == 0


def test_status_rules_in_order():
    assert status_for(0, 0) == ActivityStatus.not_started
    assert status_for(10, 0) == ActivityStatus.delayed
    assert status_for(40, 100) == ActivityStatus.completed
    assert status_for(100, 100) == ActivityStatus.completed
    assert status_for(0, 30) == ActivityStatus.ahead
    assert status_for(50, 44) == ActivityStatus.delayed
    assert status_for(50, 46) == ActivityStatus.on_track
    assert status_for(50, 55) == ActivityStatus.on_track
    assert status_for(50, 56) == ActivityStatus.ahead


def test_tolerance_is_configurable():
    assert status_for(50, 46, tolerance_pct=2) == ActivityStatus.delayed
    assert status_for(50, 40, tolerance_pct=15) == ActivityStatus.on_track


def test_classify():
    c = classify(100, 40, 10, 1000)
    assert c.planned_progress_pct == 100
    assert c.actual_progress_pct == 40
    assert c.status == ActivityStatus.delayed


def test_band_around_forty_percent():
    assert status_for(40, 0) == ActivityStatus.delayed
    assert status_for(40, 43) == ActivityStatus.on_track
    assert status_for(40, 50) == ActivityStatus.ahead


def test_exact_tolerance_gap_stays_on_track():
    assert classify(7, 2, 1, 100).status == ActivityStatus.on_track
    assert classify(2, 7, 1, 100).status == ActivityStatus.on_track
    for planned in range(6, 100):
        assert classify(planned, planned - 5, 1, 100).status == ActivityStatus.on_track, planned
        assert classify(planned - 5, planned, 1, 100).status == ActivityStatus.on_track, planned

from boq_tracker.schemas.progress import ActivityStatus, ProgressClassification

# +/- band, in percentage points, treated as "on track"
STATUS_TOLERANCE_PCT = 5.0


def progress_pct(qty: float, rate: float, total_value: float) -> float:
    if not total_value or total_value <= 0 or not rate:
        return 0.0
    # 7.000000000000001 must not push a 5-point gap out of the band
    pct = round(qty * rate / total_value * 100.0, 6)
    return max(0.0, min(100.0, pct))


def status_for(planned_pct: float, actual_pct: float, tolerance_pct: float = STATUS_TOLERANCE_PCT) -> ActivityStatus:
    # order matters: first matching rule wins
    if planned_pct > 0 and actual_pct == 0:
        return ActivityStatus.delayed
    if actual_pct == 0:
        return ActivityStatus.not_started
    if actual_pct >= 100 or (planned_pct >= 100 and actual_pct >= planned_pct):
        return ActivityStatus.completed
    gap = round(planned_pct - actual_pct, 6)
    if gap > tolerance_pct:
        return ActivityStatus.delayed
    if -gap > tolerance_pct:
        return ActivityStatus.ahead
    return ActivityStatus.on_track


def classify(
    planned_capped: float,
    actual_capped: float,
    rate: float,
    total_value: float,
    *,
    tolerance_pct: float = STATUS_TOLERANCE_PCT,
) -> ProgressClassification:
    planned_pct = progress_pct(planned_capped, rate, total_value)
    actual_pct = progress_pct(actual_capped, rate, total_value)
    return ProgressClassification(
        planned_progress_pct=planned_pct,
        actual_progress_pct=actual_pct,
        status=status_for(planned_pct, actual_pct, tolerance_pct),
    )

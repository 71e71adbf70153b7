from boq_tracker.services.engine.zones import normalize_zone, extract_zone_number, zone_from_text, zones_match
from boq_tracker.services.engine.matching import MatchKey, KpiIndex, match_key, matches, matching_kpis
from boq_tracker.services.engine.dates import (
    resolve_date,
    resolve_planned_start,
    resolve_planned_end,
    resolve_actual_start,
    resolve_actual_end,
)
from boq_tracker.services.engine.quantities import aggregate, default_cutoff, record_value, resolve_activity_rate
from boq_tracker.services.engine.status import classify, status_for
from boq_tracker.services.engine.productivity import plan, resolve_remaining_days
from boq_tracker.services.engine.lookahead import add_workdays, activity_lookahead, project_lookahead
from boq_tracker.services.engine.derive import derive_activity, derive_all, summarize_projects, lookahead_all

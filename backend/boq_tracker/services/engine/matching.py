"""Decides whether a KPI record belongs to a BOQ activity.

There is no foreign key between the two datasets, so the link is inferred
from project identity, activity name and zone. Matching is binary.
"""
from __future__ import annotations

from typing import Iterable, NamedTuple

from boq_tracker.schemas.records import BOQActivity, KPIRecord, MatchMode
from boq_tracker.services.engine.zones import effective_zone, zones_match


class MatchKey(NamedTuple):
    project: str
    activity: str
    zone: str


def _code(v: str | None) -> str:
    return (v or "").strip().upper()


def _name(v: str | None) -> str:
    return (v or "").strip().lower()


def activity_codes(activity: BOQActivity) -> tuple[str, str]:
    code = _code(activity.project_code)
    full = _code(activity.project_full_code) or code
    return code, full


def kpi_codes(kpi: KPIRecord) -> tuple[str, str]:
    return _code(kpi.project_code), _code(kpi.project_full_code)


def activity_zone(activity: BOQActivity) -> str:
    return effective_zone(activity.zone_label, activity.project_code, activity.description or activity.activity_name)


def kpi_zone(kpi: KPIRecord) -> str:
    return effective_zone(kpi.zone_label, kpi.project_code, kpi.description or kpi.activity_name)


def match_key(record: BOQActivity | KPIRecord) -> MatchKey:
    if isinstance(record, BOQActivity):
        _, full = activity_codes(record)
        zone = activity_zone(record)
    else:
        code, full = kpi_codes(record)
        full = full or code
        zone = kpi_zone(record)
    return MatchKey(full, _name(record.activity_name), zone)


def project_matches(kpi: KPIRecord, activity: BOQActivity, mode: MatchMode = MatchMode.strict) -> bool:
    a_code, a_full = activity_codes(activity)
    k_code, k_full = kpi_codes(kpi)

    if "-" in a_full:
        # Sub-projects share a base code: P5066-12 must never take P5066-2 records.
        if k_full and k_full == a_full:
            return True
        if MatchMode(mode) is MatchMode.lenient:
            kpi_has_sub = "-" in (k_full or k_code)
            return not kpi_has_sub and bool(k_code) and k_code == a_code
        return False

    return (
        (bool(k_code) and bool(a_code) and k_code == a_code)
        or (bool(k_full) and bool(a_full) and k_full == a_full)
        or (bool(k_code) and bool(a_full) and k_code == a_full)
        or (bool(k_full) and bool(a_code) and k_full == a_code)
    )


def name_matches(kpi_name: str | None, activity_name: str | None) -> bool:
    k = _name(kpi_name)
    a = _name(activity_name)
    if not k or not a:
        return False
    return k == a or a in k or k in a


def matches(kpi: KPIRecord, activity: BOQActivity, mode: MatchMode = MatchMode.strict) -> bool:
    if not project_matches(kpi, activity, mode):
        return False
    if not name_matches(kpi.activity_name, activity.activity_name):
        return False
    return zones_match(activity_zone(activity), kpi_zone(kpi))


class KpiIndex:
    """KPI records bucketed by project code for one derivation pass.

    Only prunes candidates: every record that could satisfy
    `project_matches` for an activity shares at least one upper-cased code
    with it. Input order is preserved.
    """

    def __init__(self, kpis: Iterable[KPIRecord]):
        self._kpis = list(kpis)
        self._by_code: dict[str, list[int]] = {}
        for i, k in enumerate(self._kpis):
            for c in set(kpi_codes(k)):
                if c:
                    self._by_code.setdefault(c, []).append(i)

    def __len__(self) -> int:
        return len(self._kpis)

    def candidates(self, activity: BOQActivity) -> list[KPIRecord]:
        idx: set[int] = set()
        for c in set(activity_codes(activity)):
            if c:
                idx.update(self._by_code.get(c, ()))
        return [self._kpis[i] for i in sorted(idx)]


def matching_kpis(
    activity: BOQActivity,
    kpis: Iterable[KPIRecord] | KpiIndex,
    input_type=None,
    mode: MatchMode = MatchMode.strict,
) -> list[KPIRecord]:
    pool = kpis.candidates(activity) if isinstance(kpis, KpiIndex) else kpis
    out = []
    for k in pool:
        if input_type is not None and k.input_type != input_type:
            continue
        if matches(k, activity, mode):
            out.append(k)
    return out

from boq_tracker.schemas.records import BOQActivity, InputType, KPIRecord, MatchMode
from boq_tracker.services.engine.matching import (
    KpiIndex,
    MatchKey,
    match_key,
    matches,
    matching_kpis,
    name_matches,
    project_matches,
)


def _activity(**kw) -> BOQActivity:
    base = dict(project_code="P5066", project_full_code="P5066-2", activity_name="Excavation", zone_label="Zone 2")
    base.update(kw)
    return BOQActivity(**base)


def _kpi(**kw) -> KPIRecord:
    base = dict(
        project_code="P5066",
        project_full_code="P5066-2",
        activity_name="Excavation",
        zone_label="Zone 2",
        input_type=InputType.actual,
        quantity=10,
    )
    base.update(kw)
    return KPIRecord(**base)


def test_sub_projects_never_cross_link():
    a = _activity(project_full_code="P5066-12")
    k = _kpi(project_full_code="P5066-2")
    assert not project_matches(k, a, MatchMode.strict)
    assert not project_matches(k, a, MatchMode.lenient)


def test_lenient_accepts_base_code_without_sub_code():
    a = _activity()
    k = _kpi(project_full_code="")
    assert not project_matches(k, a, MatchMode.strict)
    assert project_matches(k, a, MatchMode.lenient)


def test_plain_project_codes_match_any_combination():
    a = _activity(project_code="P100", project_full_code="")
    assert project_matches(_kpi(project_code="P100", project_full_code=""), a)
    assert project_matches(_kpi(project_code="", project_full_code="p100"), a)
    assert not project_matches(_kpi(project_code="P200", project_full_code="P200"), a)


def test_name_matching_is_containment_either_way():
    assert name_matches("Excavation", "excavation")
    assert name_matches("Excavation works", "Excavation")
    assert name_matches("Excavation", "Bulk excavation")
    assert not name_matches("", "Excavation")
    assert not name_matches("Blockwork", "Excavation")


def test_matches_checks_zone():
    a = _activity()
    assert matches(_kpi(), a)
    assert matches(_kpi(zone_label="P5066 - Zone 2"), a)
    assert not matches(_kpi(zone_label="Zone 12"), a)
    assert not matches(_kpi(zone_label=""), a)


def test_activity_without_zone_takes_every_zone():
    a = _activity(zone_label="")
    assert matches(_kpi(zone_label="Zone 9"), a)


def test_match_key():
    assert match_key(_activity()) == MatchKey("P5066-2", "excavation", "zone 2")
    assert match_key(_kpi(project_full_code="")) == MatchKey("P5066", "excavation", "zone 2")


def test_index_prunes_but_keeps_order():
    kpis = [
        _kpi(quantity=1),
        _kpi(project_code="P7000", project_full_code="P7000-1", quantity=2),
        _kpi(quantity=3, input_type=InputType.planned),
    ]
    index = KpiIndex(kpis)
    assert len(index) == 3
    assert [k.quantity for k in index.candidates(_activity())] == [1, 3]

    got = matching_kpis(_activity(), index, input_type=InputType.actual)
    assert [k.quantity for k in got] == [1]
    assert matching_kpis(_activity(), kpis) == matching_kpis(_activity(), index)

from dataclasses import dataclass, field
from pathlib import Path

from boq_tracker.core.logging import logger
from boq_tracker.schemas.records import BOQActivity, KPIRecord, Project
from boq_tracker.services.etl.parsers.boq import parse_boq
from boq_tracker.services.etl.parsers.kpi import parse_kpi
from boq_tracker.services.etl.parsers.projects import parse_projects
from boq_tracker.services.etl.validators import ValidationError


@dataclass
class WorkbookData:
    activities: list[BOQActivity] = field(default_factory=list)
    kpis: list[KPIRecord] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)


def load_workbook(path: str | Path) -> WorkbookData:
    """Parse the BOQ, KPI and projects sheets of one planning workbook."""
    path = Path(path)
    if not path.exists():
        return WorkbookData(errors=[ValidationError(f"File not found: {path}")])

    logger.info("workbook_import_start", path=str(path))
    activities, e1 = parse_boq(str(path))
    kpis, e2 = parse_kpi(str(path))
    projects, e3 = parse_projects(str(path))

    data = WorkbookData(activities, kpis, projects, e1 + e2 + e3)
    logger.info(
        "workbook_import_finished",
        activities=len(activities),
        kpis=len(kpis),
        projects=len(projects),
        errors=len(data.errors),
    )
    return data

from boq_tracker.schemas.records import Project
from boq_tracker.services.etl.ingest import ingest_projects
from boq_tracker.services.etl.utils import read_sheet_records
from boq_tracker.services.etl.validators import ValidationError

PROJECTS_SHEET = "Planning Database - ProjectsList"


def parse_projects(path: str, sheet_name: str = PROJECTS_SHEET) -> tuple[list[Project], list[ValidationError]]:
    sheet, rows = read_sheet_records(path, sheet_name, "Project")
    if sheet is None:
        return [], [ValidationError(f"Sheet '{sheet_name}' not found", sheet=sheet_name)]
    projects, errors = ingest_projects(rows, sheet=sheet, first_row=2)
    return [p for p in projects if p.project_full_code], errors

from boq_tracker.schemas.records import BOQActivity
from boq_tracker.services.etl.ingest import ingest_activities
from boq_tracker.services.etl.utils import read_sheet_records
from boq_tracker.services.etl.validators import ValidationError

BOQ_SHEET = "Planning Database - BOQ Rates"


def parse_boq(path: str, sheet_name: str = BOQ_SHEET) -> tuple[list[BOQActivity], list[ValidationError]]:
    sheet, rows = read_sheet_records(path, sheet_name, "BOQ")
    if sheet is None:
        return [], [ValidationError(f"Sheet '{sheet_name}' not found", sheet=sheet_name)]

    # header is row 1, data starts on row 2
    activities, errors = ingest_activities(rows, sheet=sheet, first_row=2)
    unnamed = [a for a in activities if not a.activity_name]
    if unnamed:
        errors.append(ValidationError(f"{len(unnamed)} BOQ rows without activity name", sheet=sheet))
    return [a for a in activities if a.activity_name], errors

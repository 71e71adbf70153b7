from boq_tracker.schemas.records import KPIRecord
from boq_tracker.services.etl.ingest import ingest_kpis
from boq_tracker.services.etl.utils import read_sheet_records
from boq_tracker.services.etl.validators import ValidationError

KPI_SHEET = "Planning Database - KPI"


def parse_kpi(path: str, sheet_name: str = KPI_SHEET) -> tuple[list[KPIRecord], list[ValidationError]]:
    sheet, rows = read_sheet_records(path, sheet_name, "KPI")
    if sheet is None:
        return [], [ValidationError(f"Sheet '{sheet_name}' not found", sheet=sheet_name)]

    kpis, errors = ingest_kpis(rows, sheet=sheet, first_row=2)
    undated = sum(1 for k in kpis if k.date is None)
    if undated:
        errors.append(ValidationError(f"{undated} KPI rows without a parseable date", sheet=sheet))
    return kpis, errors

import datetime as dt
import tempfile
from dataclasses import asdict
from pathlib import Path

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from boq_tracker.schemas.progress import DeriveRequest, DeriveResponse, IngestErrorOut, LookAheadResponse
from boq_tracker.services.engine.derive import derive_all, lookahead_all, summarize_projects
from boq_tracker.services.etl.importer import load_workbook
from boq_tracker.services.etl.ingest import ingest_activities, ingest_kpis, ingest_projects
from boq_tracker.services.files import is_xlsx, save_upload

router = APIRouter()


def _errors_out(errors) -> list[IngestErrorOut]:
    return [IngestErrorOut(**asdict(e)) for e in errors]


def _ingest(data: DeriveRequest):
    activities, e1 = ingest_activities(data.activities, sheet="activities")
    kpis, e2 = ingest_kpis(data.kpis, sheet="kpis")
    projects, e3 = ingest_projects(data.projects, sheet="projects")
    return activities, kpis, projects, _errors_out(e1 + e2 + e3)


def _rates(data: DeriveRequest) -> dict[str, float]:
    return {k.strip().lower(): v for k, v in data.rates.items()}


@router.post("/derive", response_model=DeriveResponse)
def derive(data: DeriveRequest):
    activities, kpis, projects, errors = _ingest(data)
    rows = derive_all(activities, kpis, projects, as_of=data.as_of, today=data.today, rates=_rates(data))
    return DeriveResponse(rows=rows, projects=summarize_projects(rows, projects), errors=errors)


@router.post("/derive/workbook", response_model=DeriveResponse)
def derive_workbook(
    file: UploadFile = File(...),
    as_of: dt.date | None = Query(None),
    today: dt.date | None = Query(None),
):
    if not is_xlsx(file.filename):
        raise HTTPException(status_code=400, detail="Only .xlsx supported")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / Path(file.filename).name
        save_upload(file, path)
        data = load_workbook(path)

    rows = derive_all(data.activities, data.kpis, data.projects, as_of=as_of, today=today)
    return DeriveResponse(
        rows=rows,
        projects=summarize_projects(rows, data.projects),
        errors=_errors_out(data.errors),
    )


@router.post("/lookahead", response_model=LookAheadResponse)
def lookahead(data: DeriveRequest):
    activities, kpis, projects, errors = _ingest(data)
    rows = derive_all(activities, kpis, projects, as_of=data.as_of, today=data.today, rates=_rates(data))
    return LookAheadResponse(projects=lookahead_all(rows, projects, today=data.today), errors=errors)

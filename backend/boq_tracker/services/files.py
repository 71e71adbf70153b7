from pathlib import Path
import shutil
from fastapi import UploadFile

def is_xlsx(filename: str | None) -> bool:
    return bool(filename) and filename.lower().endswith(".xlsx")

def save_upload(file: UploadFile, dest_path: Path) -> None:
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    with dest_path.open("wb") as f:
        shutil.copyfileobj(file.file, f)

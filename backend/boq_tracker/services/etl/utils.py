import pandas as pd
from typing import Any, Iterable, Mapping

_BLANK = ("", "nan", "none", "null", "n/a", "-", "\u2014")


def is_nan(v: Any) -> bool:
    return isinstance(v, float) and (v != v)


def norm_str(v: Any) -> str | None:
    if v is None or is_nan(v):
        return None
    s = str(v).strip()
    return s if s else None


def norm_header(v: Any) -> str:
    s = str(v).replace("\n", " ").strip() if v is not None else ""
    return " ".join(s.split())


def to_float_nullable(v: Any) -> float | None:
    if v is None or is_nan(v) or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    # "1,250.50" -> thousands separators are commas in the exports
    s = str(v).strip().replace("\u00a0", "").replace(" ", "").replace(",", "")
    if s.lower() in _BLANK:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def to_float(v: Any, default: float = 0.0) -> float:
    f = to_float_nullable(v)
    return default if f is None else f


def pick(record: Mapping[str, Any], names: Iterable[str]) -> Any:
    """First non-blank value among the alias `names`."""
    for n in names:
        v = record.get(n)
        if v is None or is_nan(v):
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None


def pick_name(record: Mapping[str, Any], names: Iterable[str]) -> str | None:
    """Alias under which `pick` found its value."""
    for n in names:
        v = record.get(n)
        if v is None or is_nan(v) or (isinstance(v, str) and not v.strip()):
            continue
        return n
    return None


def find_sheet(sheet_names: list[str], preferred: str, keyword: str) -> str | None:
    if preferred in sheet_names:
        return preferred
    cand = [s for s in sheet_names if keyword.lower() in s.lower()]
    return cand[0] if cand else None


def read_sheet_records(path: str, preferred: str, keyword: str) -> tuple[str | None, list[dict[str, Any]]]:
    """Rows of the matching sheet as dicts keyed by normalized header, blanks as None."""
    with pd.ExcelFile(path, engine="openpyxl") as xl:
        sheet = find_sheet(list(xl.sheet_names), preferred, keyword)
        if sheet is None:
            return None, []
        df = xl.parse(sheet, header=0)
    df.columns = [norm_header(c) for c in df.columns]
    df = df.astype(object).where(pd.notna(df), None)
    return sheet, df.to_dict("records")

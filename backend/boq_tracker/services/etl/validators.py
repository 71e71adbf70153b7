from dataclasses import dataclass
from typing import Any, Iterable

@dataclass
class ValidationError:
    message: str
    sheet: str | None = None
    row_num: int | None = None
    column: str | None = None

    @property
    def location(self) -> str:
        parts = [self.sheet or "?"]
        if self.row_num is not None:
            parts.append(f"row {self.row_num}")
        if self.column:
            parts.append(self.column)
        return " / ".join(parts)

def is_negative(v: Any) -> bool:
    try:
        return float(str(v).replace(",", "")) < 0
    except (TypeError, ValueError):
        return False

def is_blank_row(values: Iterable[Any]) -> bool:
    for v in values:
        if v is None or (isinstance(v, float) and v != v):
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return False
    return True
